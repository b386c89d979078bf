"""File logging setup shared by every module logger."""

from logging import Logger, getLogger
from logging.handlers import RotatingFileHandler

from pythonjsonlogger.json import JsonFormatter

from charity_cms.configs.settings import settings

MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def _attach_file_handler(logger: Logger) -> None:
    log_file = settings.LOG_FILE.resolve()
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == str(log_file):
            return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)


def file_logger(logger: Logger) -> Logger:
    """
    Configure a module logger and route it to the JSON log file.

    The rotating file handler lives on the top-level package logger, so
    every module logger shares one file through propagation.

    Args:
        logger: Module logger, usually `getLogger(__name__)`.

    Returns:
        The same logger, so the call can wrap `getLogger` inline.
    """
    logger.setLevel(settings.LOG_LEVEL)
    if settings.LOG_TO_FILE:
        _attach_file_handler(getLogger(logger.name.partition(".")[0]))
    return logger
