import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from installer_core.constants import LOGGER_NAME, LOG_FILE_NAME

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 2


def _console_handler(console_level: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, console_level.upper(), logging.WARNING))
    handler.setFormatter(logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s'))
    # Messages the rich display already printed only go to the file
    handler.addFilter(lambda record: not getattr(record, "displayed", False))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(str(log_file), maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    return handler


def configure_logging(log_dir_path: str, console_level: str) -> logging.Logger:
    """
    Sets up the installer logger: everything goes to ``installation.log`` in
    ``log_dir_path``, records at ``console_level`` and above to stderr.

    When the log file cannot be opened (a root-owned file left by an earlier
    sudo run, a read-only working directory) the logger stays console-only.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    logger.addHandler(_console_handler(console_level))

    log_file = Path(log_dir_path) / LOG_FILE_NAME
    file_handler: Optional[logging.Handler] = None
    try:
        file_handler = _file_handler(log_file)
    except OSError as e:
        logger.warning(f"Cannot write the log file {log_file} ({e}), logging to the console only")
    if file_handler is not None:
        logger.addHandler(file_handler)
    return logger
