"""
Logging setup shared by the whole portal.
Logs to the console and to a rotating file under LOG_DIR.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

_configured = False


def configure_logging(level='INFO', log_dir='logs'):
    """Attach console and rotating file handlers to the root logger once."""
    global _configured
    if _configured:
        return
    _configured = True

    level = level.upper()
    os.makedirs(log_dir, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    # last 10 x 5MB files are kept
    file_handler = RotatingFileHandler(
        filename=os.path.join(log_dir, "portal.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)
    root.addHandler(file_handler)


def get_logger(name):
    """Get a named logger. Call this at the top of every module."""
    return logging.getLogger(name)
