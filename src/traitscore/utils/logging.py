# utils/logging.py
import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from traitscore.config.resolvers import default_log_dir

LOGGER_NAME = "traitscore"

def setup_logging(
    log_dir: Optional[str] = None,
    console: bool = True,
    level: str = "INFO",
    quiet_console: bool = False,
    console_level: Optional[str] = None,
) -> Tuple[logging.Logger, logging.Logger]:
    """
    Setup logging with file and optional console handlers.

    Args:
        log_dir: Directory for log files (defaults to the per-user log dir)
        console: Whether to enable console logging
        level: Logger level for the ``traitscore`` hierarchy
        quiet_console: If True, only errors reach the console
        console_level: Separate level for console (defaults to level)

    Returns:
        The package logger and the ``traitscore.summary`` logger.
    """
    name = LOGGER_NAME
    if log_dir is None:
        log_dir = str(default_log_dir())

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = str(Path(log_dir) / f"{name}_{ts}.log")

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.FileHandler",
                "formatter": "plain",
                "filename": log_path,
                "encoding": "utf-8",
                "mode": "w",
                "level": "DEBUG",   # capture everything in file
            }
        },
        "loggers": {
            name: {
                "level": level,
                "handlers": ["file"],
                "propagate": False,
            },
        },
        "root": {"handlers": []},  # keep root empty
    }

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    logger = logging.getLogger(name)
    console_formatter = logging.Formatter("{levelname:<7} {message}", style="{")

    # Summary logger: run results, always at INFO
    summary_logger = logging.getLogger(f"{name}.summary")
    summary_logger.setLevel(logging.INFO)
    summary_logger.propagate = False
    for handler in list(summary_logger.handlers):
        summary_logger.removeHandler(handler)
        handler.close()

    fh_summary = logging.FileHandler(log_path, encoding="utf-8", mode="a")
    fh_summary.setLevel(logging.INFO)
    fh_summary.setFormatter(logging.Formatter("{asctime} SUMMARY - {message}", style="{"))
    summary_logger.addHandler(fh_summary)

    if console:
        console_handler = logging.StreamHandler()
        if quiet_console:
            console_handler.setLevel(logging.ERROR)
        else:
            console_handler.setLevel(getattr(logging, (console_level or level).upper()))
        console_handler.setFormatter(console_formatter)
        if not quiet_console:
            logger.addHandler(console_handler)
        summary_logger.addHandler(console_handler)

    logger.info("Logging initialised. File: %s", log_path)
    return logger, summary_logger
