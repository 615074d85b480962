import logging

from libraryhub.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def setup_logging() -> logging.Logger:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure root once
    logging.basicConfig(level=level, format=LOG_FORMAT)

    logger = logging.getLogger("libraryhub")
    logger.setLevel(level)
    return logger

def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("libraryhub")
    return base.getChild(name) if name else base
