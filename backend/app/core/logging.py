import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    # basicConfig leaves an already configured root logger alone.
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
