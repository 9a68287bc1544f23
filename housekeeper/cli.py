#!/usr/bin/env python3
"""
cli.py - Entry point for Housekeeper
Goodreads note sync, Cloudflare dynamic DNS and meeting-notes formatting.
"""

try:
    import asyncio
    import sys
    import argparse
    import time
    from pathlib import Path
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    from typing import Optional, Sequence
    import housekeeper as pkg
    from . import logger
    from .config import ConfigError, HousekeeperConfig, load_config, resolve_api_token, resolve_config_path
    from .ddns.cloudflare_client import CloudflareDNSClient
    from .ddns.updater import UpdateDNSOptions, update_dns_record
    from .goodreads.library_export import read_library_export
    from .goodreads.sync_service import sync_library
    from .meeting_notes import format_meeting_notes
except ImportError as e:
    print(f"Error: Missing required dependency: {e}")
    print("Please install required dependencies: pip install -e .")
    sys.exit(1)

console = Console()
_CLI_SESSION_START_MONOTONIC = time.monotonic()


def _ui_info(message: str) -> None:
    console.print(f"[cyan][INFO][/cyan] {escape(message)}")


def _ui_warn(message: str) -> None:
    console.print(f"[yellow][WARNING][/yellow] {escape(message)}")


def _ui_error(message: str) -> None:
    console.print(f"[red][ERROR][/red] {escape(message)}")


def _reset_cli_session_timer() -> None:
    global _CLI_SESSION_START_MONOTONIC
    _CLI_SESSION_START_MONOTONIC = time.monotonic()


def _format_elapsed_runtime(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3_600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3_600:.1f}h"


def _ui_goodbye_with_elapsed() -> None:
    elapsed = max(0.0, time.monotonic() - _CLI_SESSION_START_MONOTONIC)
    _ui_info(f"Goodbye! Elapsed {_format_elapsed_runtime(elapsed)}")


def redact_api_key(key: str) -> str:
    """Redact API key showing first 2 and last 2 characters"""
    if not key:
        return ""
    if len(key) <= 4:
        return "****"
    return f"{key[:2]}....{key[-2:]}"


def display_config_table(config: HousekeeperConfig) -> None:
    """Display current configuration status"""
    if config.config_path:
        _ui_info(f"✓ Read configuration file \"{config.config_path}\"... ok!")
    else:
        _ui_info("No configuration file found; using defaults.")

    table = Table(title="Housekeeper configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    token = resolve_api_token(config)
    table.add_row("Cloudflare API token", f"✓ Configured = {redact_api_key(token)}" if token else "✗ Not set")
    for label, value in (
        ("Cloudflare zone id", config.cloudflare.zone_id),
        ("Cloudflare record id", config.cloudflare.record_id),
        ("Cloudflare domain", config.cloudflare.domain),
        ("Goodreads export", str(config.goodreads.csv_path)),
        ("Vault path", str(config.goodreads.vault_path or "")),
        ("Shelves", ", ".join(config.goodreads.shelves) or "all"),
    ):
        table.add_row(label, value or "✗ Not set")
    console.print(table)


def _run_goodreads(args: argparse.Namespace, config: HousekeeperConfig) -> int:
    csv_path = Path(args.csv).expanduser() if args.csv else config.goodreads.csv_path
    vault_raw = args.vault or config.goodreads.vault_path
    if not vault_raw:
        _ui_error("A vault path is required (--vault or [goodreads].vault_path)")
        return 1
    vault_path = Path(vault_raw).expanduser()

    books = read_library_export(csv_path)
    _ui_info(f"Read {len(books)} book(s) from {csv_path}")
    report = sync_library(
        books,
        vault_path,
        dry_run=args.dry_run,
        create_missing=args.create_missing or config.goodreads.create_missing,
        shelves=args.shelf or config.goodreads.shelves,
    )
    _ui_info(report.summary())
    return 0


def _run_ddns(args: argparse.Namespace, config: HousekeeperConfig) -> int:
    token = resolve_api_token(config)
    if not token:
        _ui_error("CF_API_TOKEN environment variable (or [cloudflare].api_token) is required")
        return 1

    cloudflare = config.cloudflare
    zone_id = args.zone_id or cloudflare.zone_id
    record_id = args.record_id or cloudflare.record_id
    if not zone_id or not record_id:
        _ui_error("--zone-id and --record-id are required")
        return 1

    options = UpdateDNSOptions(
        zone_id=zone_id,
        record_id=record_id,
        domain=args.domain or cloudflare.domain or None,
        debug=args.debug,
        ttl=cloudflare.ttl,
        proxied=cloudflare.proxied,
    )

    async def _update():
        async with CloudflareDNSClient(token) as client:
            return await update_dns_record(client, options, client.public_ip)

    result = asyncio.run(_update())
    _ui_info(f"DNS record {result.record_name or record_id}: {result.status}")
    return 0


def _run_meeting_notes(args: argparse.Namespace, _config: HousekeeperConfig) -> int:
    if args.input and args.input != "-":
        text = Path(args.input).expanduser().read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()
    print(format_meeting_notes(text))
    return 0


def _run_show_config(_args: argparse.Namespace, config: HousekeeperConfig) -> int:
    display_config_table(config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="housekeeper", description="Small personal-automation utilities")
    parser.add_argument("-c", "--config", metavar="PATH", help="Path to config.toml (file or directory)")
    parser.add_argument("--log-file", metavar="PATH", help="Also write log output to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {pkg.__version__}")
    subparsers = parser.add_subparsers(dest="command")

    goodreads = subparsers.add_parser("goodreads", help="Sync a Goodreads export into vault note frontmatter")
    for args, kwargs in (
        (("--csv",), {"metavar": "PATH", "help": "Goodreads library export CSV"}),
        (("--vault",), {"metavar": "DIR", "help": "Directory holding the book notes"}),
        (("--dry-run",), {"action": "store_true", "help": "Report changes without writing notes"}),
        (("--create-missing",), {"action": "store_true", "help": "Create notes for books without one"}),
        (("--shelf",), {"action": "append", "metavar": "NAME", "help": "Only sync this exclusive shelf (repeatable)"}),
    ):
        goodreads.add_argument(*args, **kwargs)
    goodreads.set_defaults(handler=_run_goodreads)

    ddns = subparsers.add_parser("ddns", help="Point a Cloudflare A record at the current public IP")
    for args, kwargs in (
        (("-z", "--zone-id"), {"metavar": "ZONE_ID", "help": "Cloudflare Zone ID"}),
        (("-r", "--record-id"), {"metavar": "RECORD_ID", "help": "DNS Record ID to update"}),
        (("-d", "--domain"), {"metavar": "DOMAIN", "help": "Domain name (default: keep the record's name)"}),
        (("--debug",), {"action": "store_true", "help": "Show current status without making changes"}),
    ):
        ddns.add_argument(*args, **kwargs)
    ddns.set_defaults(handler=_run_ddns)

    notes = subparsers.add_parser("meeting-notes", help="Format a meeting summary as nested bullets")
    notes.add_argument("input", nargs="?", help="Input file (default: stdin)")
    notes.set_defaults(handler=_run_meeting_notes)

    show_config = subparsers.add_parser("config", help="Show the resolved configuration")
    show_config.set_defaults(handler=_run_show_config)
    return parser


def show_help(parser: argparse.ArgumentParser) -> None:
    print(f"HOUSEKEEPER v{getattr(pkg, '__version__', '0.0.0')} - Small personal-automation utilities")
    print()
    parser.print_help()


def main(argv: Optional[Sequence[str]] = None):
    """Entry point"""
    _reset_cli_session_timer()
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "handler", None):
        show_help(parser)
        sys.exit(0)

    run_log: Optional[logger.HousekeeperLogger] = None
    try:
        config_path, explicit = resolve_config_path(args.config)
        config = load_config(config_path, required=explicit)

        run_log = logger.HousekeeperLogger(
            log_file=Path(args.log_file).expanduser() if args.log_file else None,
            debug=args.verbose,
        )
        logger.set_logger(run_log)
        exit_code = args.handler(args, config)
    except KeyboardInterrupt:
        _ui_goodbye_with_elapsed()
        exit_code = 0
    except ConfigError as e:
        _ui_error(str(e))
        exit_code = 1
    except Exception as e:
        _ui_error(f"Fatal error: {e}")
        exit_code = 1
    finally:
        if run_log is not None:
            run_log.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
