import logging
import re
import sys
from datetime import date
from pathlib import Path

from colorama import Fore, Style, just_fix_windows_console

from cipherbox.shared.config import DEFAULT_CONFIG_PATH, load_config

CONSOLE_FORMAT = (
    f"{Style.BRIGHT}%(levelname)-10s "
    f"{Style.DIM}%(name)-35s "
    f"%(module)s.%(funcName)-25s "
    f"{Style.RESET_ALL}%(message)s"
)
FILE_FORMAT = re.sub(r"\x1b\[[0-9;]*m", "", "%(asctime)s - " + CONSOLE_FORMAT)

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.MAGENTA,
}


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno, Fore.WHITE)
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def logging_settings() -> tuple[int, str | None]:
    """Level and log directory from config.toml, or console-only INFO without one."""
    if not DEFAULT_CONFIG_PATH.exists():
        return logging.INFO, None

    config = load_config()
    return config.logging.level, config.paths.logs


class Logger:
    def __init__(self, name, log_dir=None, level=None):
        default_level, default_dir = logging_settings()
        log_dir = log_dir or default_dir

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level or default_level)

        # Module-level loggers are built once per name
        if self.logger.handlers:
            return

        just_fix_windows_console()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColorFormatter(CONSOLE_FORMAT))
        self.logger.addHandler(console_handler)

        if log_dir is None:
            return

        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(log_dir) / f"{date.today()}.log")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        self.logger.addHandler(file_handler)

    def get_logger(self):
        return self.logger
