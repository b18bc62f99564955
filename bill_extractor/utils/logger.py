"""
Logging for the bill extractor.

All modules log under the ``bill_extractor`` namespace. Console output
goes to stderr because the CLI prints its JSON results on stdout.

Usage:
    from bill_extractor.utils.logger import setup_logger_from_config, get_logger

    setup_logger_from_config()          # once, at startup
    logger = get_logger(__name__)
    logger.info("Extracting bill fields...")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional, Union

try:
    import colorama
    from colorama import Fore, Style
    colorama.init()
    COLORAMA_AVAILABLE = True
except ImportError:
    COLORAMA_AVAILABLE = False


ROOT_LOGGER_NAME = "bill_extractor"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# RotatingFileHandler arguments used when none are configured.
DEFAULT_ROTATION = {"max_bytes": 10 * 1024 * 1024, "backup_count": 5}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors each line by level."""

    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    } if COLORAMA_AVAILABLE else {}
    RESET = Style.RESET_ALL if COLORAMA_AVAILABLE else ''

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, '')
        return f"{color}{super().format(record)}{self.RESET}"


def setup_logger(
    level: Union[str, int] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    rotation: Optional[Dict[str, int]] = None,
    colorize: bool = True
) -> logging.Logger:
    """
    Configure the ``bill_extractor`` logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Level name or number, e.g. "DEBUG".
        log_file: Also log to this file, rotating it by size.
        rotation: "max_bytes" and "backup_count" for the log file.
        colorize: Color console lines when colorama is installed.

    Returns:
        The configured namespace logger.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    root_logger.handlers.clear()
    root_logger.propagate = False

    formatter_class = ColoredFormatter if colorize and COLORAMA_AVAILABLE else logging.Formatter
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        settings = {**DEFAULT_ROTATION, **(rotation or {})}
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=settings["max_bytes"],
            backupCount=settings["backup_count"],
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging initialized")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``bill_extractor`` namespace."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config(level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging from the ``logging`` section of the settings.

    Args:
        level: Overrides ``logging.level``, e.g. for --debug or --quiet.

    Returns:
        The configured namespace logger.
    """
    try:
        from config import get_config

        log_file = None
        if get_config("logging.file.enabled", False):
            log_file = get_config("logging.file.path")

        return setup_logger(
            level=level or get_config("logging.level", "INFO"),
            log_file=log_file,
            rotation={
                key: get_config(f"logging.file.{key}", default)
                for key, default in DEFAULT_ROTATION.items()
            },
            colorize=get_config("logging.console.colorize", True)
        )
    except Exception as e:
        print(f"Warning: Could not load logging config, using defaults: {e}", file=sys.stderr)
        return setup_logger(level=level or "INFO")
