"""
Centralized Logger with Rich Console
====================================
Static logger facade used by every component outside the execution core.

Usage:
    from autotrade.shared.system.logging import Logger

    Logger.info("[BATCH] Executing 3 trades")
    Logger.success("[TRADE] Swap confirmed")
    Logger.warning("Something concerning")
    Logger.error("Something broke")
    Logger.section("Starting Batch")
"""

import os
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.text import Text

from config.settings import Settings

# Per-run session log file
_run_id = datetime.now().strftime("%Y%m%d_%H%M%S")

file_logger = logging.getLogger("AutoTrade")
file_logger.setLevel(logging.DEBUG)

_console = Console()


def _attach_file_handler() -> None:
    """Attach the rotating per-run file handler once."""
    if file_logger.handlers:
        return
    os.makedirs(Settings.LOG_DIR, exist_ok=True)
    log_file = os.path.join(Settings.LOG_DIR, f"autotrade_{_run_id}.log")
    handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    handler.setFormatter(formatter)
    file_logger.addHandler(handler)


# =============================================================================
# SOURCE ICONS (for visual scanning)
# =============================================================================

SOURCE_ICONS = {
    "SYSTEM": "🛸",
    "BATCH": "📋",
    "TRADE": "💰",
    "RETRY": "🔁",
    "SWAP": "🔄",
    "JUPITER": "🪐",
    "WALLET": "👛",
    "DB": "📦",
}

# Level colors for Rich
LEVEL_STYLES = {
    "INFO": "cyan",
    "SUCCESS": "green bold",
    "WARNING": "yellow",
    "ERROR": "red bold",
    "DEBUG": "dim",
    "SECTION": "magenta bold",
}


# =============================================================================
# LOGGER CLASS
# =============================================================================

class Logger:
    """
    Centralized logger with Rich console output.

    - Color-coded console output
    - File logging with rotation
    - Source-based icon prefixes ("[TRADE] ..." -> 💰)
    """

    @staticmethod
    def _timestamp() -> str:
        """High-precision timestamp (HH:MM:SS.ms)."""
        now = datetime.now()
        return f"{now.strftime('%H:%M:%S')}.{now.microsecond // 1000:03d}"

    @staticmethod
    def _parse_source(message: str) -> tuple:
        """Extract [SOURCE] tag from message if present."""
        stripped = message.strip()
        if stripped.startswith("[") and "]" in stripped:
            tag_end = stripped.index("]")
            source = stripped[1:tag_end].upper()
            if 0 < len(source) < 15:
                return source, stripped[tag_end + 1:].strip()
        return "SYSTEM", message

    @staticmethod
    def _format_console(level: str, message: str, source: str) -> None:
        """Output to console with Rich formatting."""
        if Settings.SILENT_MODE:
            return

        ts = Logger._timestamp()
        icon = SOURCE_ICONS.get(source.upper(), "")
        msg_with_icon = f"{icon} {message}" if icon else message

        style = LEVEL_STYLES.get(level, "white")
        line = Text()
        line.append(f"{ts} ", style="dim")
        line.append(f"| {level[:8].ljust(8)} ", style=style)
        line.append(f"| {source[:10].ljust(10)} | ", style="dim")
        line.append(msg_with_icon)
        _console.print(line)

    @staticmethod
    def _log_to_file(level: str, message: str, source: str = "") -> None:
        """Write to file logger."""
        _attach_file_handler()
        full_msg = f"[{source}] {message}" if source else message
        file_logger.log(getattr(logging, level, logging.INFO), full_msg)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @staticmethod
    def info(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("INFO", msg, source)
        Logger._log_to_file("INFO", msg, source)

    @staticmethod
    def success(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("SUCCESS", msg, source)
        Logger._log_to_file("INFO", f"✅ {msg}", source)

    @staticmethod
    def warning(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("WARNING", msg, source)
        Logger._log_to_file("WARNING", msg, source)

    @staticmethod
    def error(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("ERROR", msg, source)
        Logger._log_to_file("ERROR", msg, source)

    @staticmethod
    def debug(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._log_to_file("DEBUG", msg, source)

    @staticmethod
    def section(title: str) -> None:
        """Print a section header."""
        if not Settings.SILENT_MODE:
            _console.print()
            _console.rule(f"[bold magenta]{title}[/]", style="dim")
        Logger._log_to_file("INFO", f"=== {title} ===", "SYSTEM")

