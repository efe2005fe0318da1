from __future__ import annotations

import logging
from logging.config import dictConfig

from uniplan.core.config import Settings


def configure_logging(settings: Settings) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "loggers": {
                "uniplan": {"handlers": ["console"], "level": settings.log_level, "propagate": True},
            },
        }
    )
    logging.getLogger("uniplan").debug("Logging configured at %s", settings.log_level)
