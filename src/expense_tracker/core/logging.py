"""Logging setup for the API process."""

import logging
import sys

from expense_tracker.api.middleware.logging import JSONLogFormatter, filter_pii
from expense_tracker.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class PIIFilteringFormatter(logging.Formatter):
    """Plain-text formatter that masks PII in the rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        return filter_pii(super().format(record))


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once.

    Args:
        settings: Application settings (log level and format)
    """
    root_logger = logging.getLogger()
    if any(getattr(h, "_expense_tracker", False) for h in root_logger.handlers):
        return

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if settings.log_json:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(PIIFilteringFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._expense_tracker = True

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    # SQL echo goes through this logger; keep it quiet unless asked for.
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
