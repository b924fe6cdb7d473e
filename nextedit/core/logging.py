"""Central logging configuration."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path

LOG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "nextedit" / "logs"
LOG_FILE = LOG_DIR / "nextedit.log"

_PACKAGE_LOGGER = "nextedit"


def configure_logging(level: int | str = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    """Attach console and rotating file handlers to the package logger once."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    target = log_file or LOG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(target, maxBytes=512_000, backupCount=5)
    file_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    return logger
