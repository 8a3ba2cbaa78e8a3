"""
Shared helpers.
"""
import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    The root ``authzkit`` logger is configured once from ``AUTHZKIT_LOG_LEVEL``
    (default INFO) unless the host application already configured logging.

    Usage:
        from authzkit.utils import get_logger

        log = get_logger(__name__)
        log.info("Defined permission %s", name)
    """
    root = logging.getLogger("authzkit")
    if not root.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(os.environ.get("AUTHZKIT_LOG_LEVEL", "INFO").upper())
    return logging.getLogger(name)
