"""Logging setup for the API process."""

import logging.config


def configure_logging(level: str = "INFO") -> None:
    """Install a single console handler on the root logger.

    Uvicorn's own loggers are left alone so access logs keep their format.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "[%(asctime)s %(levelname)s] %(name)s: %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )
