"""
BurnSwap Logging System
=======================

A unified, thread-safe logging utility for BurnSwap. This module integrates
with the standard Python `logging` library and the `rich` library to provide
structured, safe, and visually distinct logging outputs.

Usage:
    >>> from burnswap.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Swap engine deployed")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_MAX_FILE_SIZE,
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_FILE_OUTPUT,
)


PROJECT_ROOT = Path(__file__).parent.parent
LOG_FILE_PATH = PROJECT_ROOT / "logs" / "burnswap.log"


class LogManager:
    """
    Manages logging configuration via the Singleton pattern.

    Ensures the logging subsystem is initialized exactly once, with a 'Rich'
    console handler and an optional rotating file handler.

    Attributes:
        _instance (LogManager): The singleton instance.
        _lock (threading.Lock): Thread lock for atomic initialization.
    """

    _instance: Optional["LogManager"] = None
    _lock: threading.Lock = threading.Lock()


    def __new__(cls) -> "LogManager":
        """Creates or returns the existing singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance


    def __init__(self) -> None:
        if self._initialized:
            return
        self._configured = False
        self._initialized = True


    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        file_output: Optional[bool] = None,
        force: bool = False,
    ) -> None:
        """
        Configures the root logger with console and file handlers.

        Args:
            log_level (Optional[str]): Logging level (DEBUG, INFO, etc.). Defaults to env var.
            log_file (Optional[Path]): Path to log file. Defaults to `logs/burnswap.log`.
            console_output (bool): Enable console logging. Defaults to True.
            file_output (Optional[bool]): Enable rotating file logging. Defaults to env var.
            force (bool): Replace an existing configuration. Defaults to False.
        """
        with self._lock:
            if self._configured and not force:
                return

            level_str = log_level or LOG_LEVEL
            numeric_level = getattr(logging, str(level_str).upper(), logging.INFO)

            root_logger = logging.getLogger()
            root_logger.setLevel(numeric_level)
            root_logger.handlers.clear()

            # UTC keeps trade logs comparable across hosts
            formatter = TerminalSafeFormatter(fmt=str(LOG_FORMAT), datefmt=f"{LOG_DATE_FORMAT} UTC")
            formatter.converter = time.gmtime

            if console_output:
                if LOG_CONSOLE_HIGHLIGHTING:
                    burnswap_theme = Theme(
                        {
                            "burnswap.address":         "cyan",
                            "burnswap.amount":          "bold white",
                            "burnswap.arrow":           "bold yellow",
                            "burnswap.event":           "bold magenta",
                            "burnswap.level_critical":  "bold red reverse",
                            "burnswap.level_debug":     "bold dim",
                            "burnswap.level_error":     "bold red",
                            "burnswap.level_info":      "bold green",
                            "burnswap.level_warning":   "bold yellow",
                            "burnswap.logger_name":     "magenta",
                            "burnswap.tag":             "bold magenta",
                            "burnswap.timestamp":       "bold cyan",
                        }
                    )

                    console = Console(theme=burnswap_theme, highlight=False)

                    rich_handler = RichHandler(
                        console=console,
                        highlighter=BurnSwapLogHighlighter(),
                        keywords=[],
                        rich_tracebacks=True,
                        omit_repeated_times=False,
                        show_path=False,
                        show_time=False,
                        show_level=False,
                        markup=False,
                    )
                    rich_handler.setLevel(numeric_level)
                    rich_handler.setFormatter(formatter)
                    root_logger.addHandler(rich_handler)
                else:
                    console_handler = logging.StreamHandler(sys.stdout)
                    console_handler.setLevel(numeric_level)
                    console_handler.setFormatter(formatter)
                    root_logger.addHandler(console_handler)

            if file_output is None:
                file_output = bool(LOG_FILE_OUTPUT)

            if file_output:
                log_file_path = log_file or LOG_FILE_PATH
                log_file_path.parent.mkdir(parents=True, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=str(log_file_path),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                )
                file_handler.setLevel(numeric_level)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)

            self._configured = True


    def get_logger(self, name: str) -> logging.Logger:
        """
        Retrieves a logger for a specific module, configuring on first use.

        Args:
            name (str): The name of the logger (typically `__name__`).
        """
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


class TerminalSafeFormatter(logging.Formatter):
    """
    A formatter that strips ANSI escape sequences and non-printable control
    characters, so that user-supplied strings (token names, addresses)
    cannot manipulate the terminal or forge log lines (CWE-117).
    """

    _ansi_escape_re = re.compile(
        r"\x1b\[[0-?]*[ -/]*[@-~]"
        r"|\x1b[@-Z\\-_]"
    )
    # Control chars (0x00-0x1F) excluding Tab and Newline
    _control_chars_re = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
    _carriage_return_re = re.compile(r"\r")


    @classmethod
    def sanitize(cls, text: str) -> str:
        """Removes potentially dangerous characters from the provided text."""
        if not text:
            return text
        text = cls._ansi_escape_re.sub("", text)
        text = cls._carriage_return_re.sub("", text)
        text = cls._control_chars_re.sub("", text)
        return text


    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class BurnSwapLogHighlighter(RegexHighlighter):
    """Regex-based coloring for trade and admin log lines."""

    base_style = "burnswap."
    highlights = [
        r"(?P<arrow>(\-\->)|(<\-\-)|(→))",
        r"(?P<address>\b0x[0-9a-fA-F]{40}\b)",
        r"(?P<amount>(?<=[=\s])\d+(?=\s|$|,))",
        r"(?P<event>\b(TradeExecuted|FeeCollected|CreatorWalletChanged|Paused|Unpaused|ApprovalsRecovered)\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"\-\s+\w+\s+-\s+(?P<logger_name>[\w.]+)(?=\s-\s)",
        r"(?P<level_warning>\bWARNING\b)",
        r"(?P<tag>\[.*?\])",
        r"(?P<timestamp>^(.*?)UTC)",
    ]


_manager = LogManager()

def get_logger(name: str) -> logging.Logger:
    """
    Public accessor of the logging system.
    Delegates to the Singleton LogManager, ensuring configuration is applied.
    """
    return _manager.get_logger(name)


def configure_logging(
    log_level: Optional[str] = None,
    console_output: bool = True,
    file_output: Optional[bool] = None,
    log_file: Optional[Path] = None,
) -> None:
    """(Re)configure the logging system, e.g. from the CLI's --log-level."""
    _manager.configure(
        log_level=log_level,
        log_file=log_file,
        console_output=console_output,
        file_output=file_output,
        force=True,
    )
