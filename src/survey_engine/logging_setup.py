"""Central logging configuration.

Library modules only create `logging.getLogger(__name__)` loggers; an
application (or the demo script) calls configure_logging() once to attach a
stdout handler to the root logger.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO") -> bool:
    """Configure application-wide logging once.

    If the root logger already has handlers, return False without touching
    them so repeated calls do not duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return False
    dictConfig(_dict_config(level))
    return True
