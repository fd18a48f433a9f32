import logging
import logging.config
from pathlib import Path
from exam_portal.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config() -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout"
        }
    }
    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "filename": settings.LOG_FILE,
            "maxBytes": 10485760,
            "backupCount": 5
        }

    handler_names = list(handlers)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT
            }
        },
        "handlers": handlers,
        "root": {
            "level": settings.LOG_LEVEL,
            "handlers": handler_names
        },
        "loggers": {
            "exam_portal": {
                "level": settings.LOG_LEVEL,
                "handlers": handler_names,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging():
    logging.config.dictConfig(build_logging_config())
