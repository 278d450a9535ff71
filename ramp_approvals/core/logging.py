import sys

from loguru import logger

from .config import settings


def setup_logging(level: str | None = None, json_logs: bool | None = None):
    """
    Configure the loguru sink for the service and return the logger.

    Keyword arguments passed to logger calls land in ``record["extra"]`` and
    are rendered after the message (or serialized when LOG_JSON is set).
    """
    level = (level or settings.log_level).upper()
    serialize = settings.log_json if json_logs is None else json_logs

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        serialize=serialize,
        backtrace=False,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "{name}:{function} - <level>{message}</level> {extra}"
        ),
    )
    return logger
