"""Root logger setup shared by every entry point."""

import logging

from lightbnb.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger so all lightbnb.* loggers write to stderr."""
    logging.basicConfig(
        level=level or settings.log_level,
        format=settings.log_format,
    )
    # SQL echo goes through sqlalchemy.engine; keep it quiet unless asked for.
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
