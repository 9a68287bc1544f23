"""
config.py - Configuration model for Housekeeper
"""

import os
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

CF_API_TOKEN_ENV = "CF_API_TOKEN"


class ConfigError(Exception):
    """Configuration file is missing or malformed."""


class GoodreadsConfig(BaseModel):
    csv_path: Path = Path("goodreads_library_export.csv")
    vault_path: Optional[Path] = None
    create_missing: bool = Field(
        default=False,
        description="Create a note for books that have no matching file in the vault",
    )
    shelves: List[str] = Field(
        default_factory=list,
        description="Only sync books on these exclusive shelves (empty = all shelves)",
    )


class CloudflareConfig(BaseModel):
    api_token: str = ""
    zone_id: str = ""
    record_id: str = ""
    domain: str = ""
    ttl: int = 120
    proxied: bool = False


class HousekeeperConfig(BaseModel):
    goodreads: GoodreadsConfig = Field(default_factory=GoodreadsConfig)
    cloudflare: CloudflareConfig = Field(default_factory=CloudflareConfig)
    config_path: Optional[Path] = None


def resolve_config_path(args_config: Optional[str], cwd: Optional[Path] = None) -> tuple[Path, bool]:
    """Return the config path and whether the user asked for it explicitly."""
    if args_config:
        p = Path(args_config).expanduser()
        if p.is_dir():
            p = p / "config.toml"
        return p, True
    return (cwd or Path.cwd()) / "config.toml", False


def load_config(config_path: Path, required: bool = True) -> HousekeeperConfig:
    """Load configuration from TOML file"""

    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return HousekeeperConfig()

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)

        return HousekeeperConfig(
            goodreads=GoodreadsConfig(**config_data.get("goodreads", {})),
            cloudflare=CloudflareConfig(**config_data.get("cloudflare", {})),
            config_path=config_path,
        )
    except (tomllib.TOMLDecodeError, ValidationError, TypeError) as e:
        raise ConfigError(f"Error loading configuration {config_path}: {e}") from e


def resolve_api_token(config: HousekeeperConfig, environ: Optional[dict] = None) -> str:
    """Environment token wins over the config file."""
    env = os.environ if environ is None else environ
    return (env.get(CF_API_TOKEN_ENV) or config.cloudflare.api_token or "").strip()
