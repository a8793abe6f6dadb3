"""Central logging setup, called once when the app starts."""
import logging
import os
from logging.handlers import RotatingFileHandler

from incident_hub.core.config import Settings

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(module)s:%(lineno)d | %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def init_logging(settings: Settings) -> logging.Logger:
    level = getattr(logging, (settings.log_level or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    logger = logging.getLogger("incident_hub")
    logger.setLevel(level)
    logger.propagate = False

    # idempotent: uvicorn --reload and tests import the app more than once
    if logger.handlers:
        return logger

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        log_path = os.path.join(settings.log_dir, "incident_hub.log")
        file_handler = RotatingFileHandler(
            log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized (level=%s)", logging.getLevelName(level))
    return logger
