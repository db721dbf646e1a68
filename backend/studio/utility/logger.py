"""Shared logging configuration with colored console output and file support."""

import logging
from logging import Logger
from typing import Iterable, Optional

from studio.utility.path_finder import Finder


# ANSI color codes for terminal
LEVEL_COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
}
RESET_COLOR = "\033[0m"

# Per-request chatter from the genai transport and image plugin loading
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "PIL")


class ColorFormatter(logging.Formatter):
    """
    Formatter that colors the level name.
    Only affects console output (handlers using this formatter).
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with a colorized level name for console output."""
        padded_level = f"{record.levelname + ':':<9}"
        color = LEVEL_COLORS.get(record.levelname, "")
        record.colored_levelname = (
            f"{color}{padded_level}{RESET_COLOR}" if color else padded_level
        )
        return super().format(record)


class AppLogger:
    """
    Central logging helper.

    Usage:
        from studio.utility.logger import AppLogger

        # In the app factory (once)
        AppLogger.init(level=logging.INFO)

        # In any module
        logger = AppLogger.get_logger(__name__)
        logger.info("Hello")
    """

    _configured: bool = False

    @classmethod
    def init(
        cls,
        level: int = logging.INFO,
        log_to_file: bool = False,
        filename: str = "studio_server.log",
        quiet: Iterable[str] = NOISY_LOGGERS,
    ) -> None:
        """
        Initialize root logger with colored console handler and optional file handler.
        Safe to call multiple times – only configures once.
        """
        if cls._configured:
            return

        cls._configured = True
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        for name in quiet:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(
            ColorFormatter("%(colored_levelname)s %(name)s | %(message)s")
        )
        root_logger.addHandler(console_handler)

        # File handler only keeps warnings and above, no colors
        if log_to_file:
            logs_dir = Finder().get_directory("logs")
            file_handler = logging.FileHandler(logs_dir / filename, encoding="utf-8")
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-8s | %(name)s | "
                    "%(filename)s:%(lineno)d | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(file_handler)

    @staticmethod
    def get_logger(name: Optional[str] = None) -> Logger:
        """
        Get a named logger. Call this in any module instead of logging.getLogger().
        """
        return logging.getLogger(name if name is not None else __name__)
