"""
Centralized logging configuration.

configure_logging() sets up the root handler once; later calls only
adjust the level. Noisy third-party loggers are capped at WARNING.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

# Suppress verbose third-party library logs
_SUPPRESSED_LOGGERS = [
    'uvicorn.access',
    'httpx',
]


def configure_logging(level: str = "INFO"):
    """Configure root logger from a level name"""
    root = logging.getLogger()
    if not any(getattr(h, '_notes_search', False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._notes_search = True
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for logger_name in _SUPPRESSED_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
