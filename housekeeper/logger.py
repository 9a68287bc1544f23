"""
Minimal logging context for Housekeeper.
Single place to control all output: screen + file, with flush.
"""
import json
import os
import sys
import re
from pathlib import Path
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.text import Text

# Leading tags and the style applied to them on screen.
_PREFIX_STYLES: tuple[tuple[str, str], ...] = (
    ("[INFO]", "cyan"),
    ("[WARNING]", "yellow"),
    ("[ERROR]", "red"),
    ("[DEBUG]", "grey50"),
)

# Per-book outcome keywords highlighted anywhere in the line.
_OUTCOME_STYLES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bNOT FOUND\b"), "red"),
    (re.compile(r"\b(?:UPDATED|CREATED)\b"), "green"),
    (re.compile(r"\bUNCHANGED\b"), "grey50"),
    (re.compile(r"\bSKIPPED\b"), "yellow"),
)


class HousekeeperLogger:
    """Minimal logger: print to screen + file, always flush"""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False):
        self.log_file = log_file
        self._file_handle = None
        self._start_time = datetime.now()
        self.debug_mode = debug
        self._console = Console(stderr=True, highlight=False)
        self._status_width = 0

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_file, 'w', buffering=1, encoding='utf-8')  # Line buffered, UTF-8

        from housekeeper.__version__ import __version__

        welcome = f"({self._start_time.strftime('%H:%M:%S')}  Started Housekeeper {__version__})"
        self.log(welcome)

    def log(self, msg: str, prefix: str = ""):
        """Log to screen and file"""
        output = f"{prefix}{msg}" if prefix else msg

        self.clear_status()
        self._console.print(self._screen_text(output))

        if self._file_handle:
            self._file_handle.write(output + "\n")
            self._file_handle.flush()
            os.fsync(self._file_handle.fileno())

    def status(self, msg: str):
        """Overwrite the current screen line; never written to the log file."""
        width = max(self._status_width, len(msg))
        print(f"\r{msg.ljust(width)}", end="", file=sys.stderr, flush=True)
        self._status_width = width

    def clear_status(self):
        if not self._status_width:
            return
        print("\r" + " " * self._status_width + "\r", end="", file=sys.stderr, flush=True)
        self._status_width = 0

    def _screen_text(self, line: str) -> Text:
        # Text is built from the plain line so literal brackets never parse as markup.
        text = Text(line)
        stripped = line.lstrip()
        offset = len(line) - len(stripped)
        for tag, style in _PREFIX_STYLES:
            if stripped.startswith(tag):
                text.stylize(style, offset, offset + len(tag))
                break
        for pattern, style in _OUTCOME_STYLES:
            for match in pattern.finditer(line):
                text.stylize(style, match.start(), match.end())
        return text

    def info(self, msg: str):
        """Info message"""
        self.log(msg)

    def warning(self, msg: str):
        """Warning message"""
        self.log(msg, "[WARNING] ")

    def error(self, msg: str):
        """Error message"""
        self.log(msg, "[ERROR] ")

    def debug(self, msg: str):
        """Debug message (only shown in debug mode)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(msg, f"[DEBUG] [{timestamp}] ")

    def api_retry(self, service: str, attempt: int, max_attempts: int, delay: float):
        """Log API retry"""
        self.log(f"{service} request failed. Retrying in {delay}s... (attempt {attempt}/{max_attempts})", "[WARNING] ")

    def api_failed(self, service: str, max_attempts: int):
        """Log API failure"""
        self.log(f"{service} not responding after {max_attempts} attempts. Aborting.", "[ERROR] ")

    def api_request(self, method: str, url: str, params: Optional[dict] = None):
        """Log API request (debug mode only)"""
        if self.debug_mode:
            self.debug(f"API Request: {method} {url}")
            if params:
                self.debug(f"  Params: {json.dumps(params, indent=2)}")

    def api_response(self, status: int, data: object, elapsed_ms: float):
        """Log API response (debug mode only)"""
        if self.debug_mode:
            self.debug(f"API Response ({elapsed_ms:.0f}ms): Status {status}")
            if data:
                # Truncate large responses
                data_str = json.dumps(data, indent=2) if not isinstance(data, str) else data
                if len(data_str) > 5000:
                    data_str = data_str[:5000] + "\n  ... (truncated)"
                self.debug(f"  Data: {data_str}")

    def close(self):
        """Close file handle with goodbye message"""
        if self._file_handle:
            end_time = datetime.now()
            elapsed = end_time - self._start_time
            goodbye = f"({end_time.strftime('%H:%M:%S')}  Ended session, elapsed {elapsed.total_seconds():.1f}s)"
            self.log(goodbye)
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Global instance (set by the CLI)
_logger: Optional[HousekeeperLogger] = None

def set_logger(logger: HousekeeperLogger):
    """Set global logger instance"""
    global _logger
    _logger = logger

def get_logger() -> HousekeeperLogger:
    """Get global logger instance"""
    global _logger
    if _logger is None:
        # Fallback: create screen-only logger
        _logger = HousekeeperLogger()
    return _logger

# Convenience functions
def warning(msg: str):
    get_logger().warning(msg)
