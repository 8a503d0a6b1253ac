#!/usr/bin/env python3

import logging
import logging.config
from pythonjsonlogger import jsonlogger

from .config import converter_config


def setup_logging(level: str = None):
    """Setup JSON logging configuration"""
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stderr"
            }
        },
        "loggers": {
            "formatbridge": {
                "handlers": ["console"],
                "level": level or converter_config.LOG_LEVEL,
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)
