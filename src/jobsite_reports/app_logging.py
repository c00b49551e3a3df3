"""Logging configuration helpers."""

import logging

LOGGER_NAME = "jobsite_reports"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Client libraries log every request at INFO; photo fetches during report
# rendering would drown out job events.
_QUIET_LOGGERS = ("httpx", "httpcore", "urllib3")


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
