from __future__ import annotations

import logging

PACKAGE_LOGGER = "worksphere_admin"


def configure_logging(level: str = "INFO") -> None:
    """Set the level for the package logger tree.

    Uvicorn installs the handlers; child loggers under ``worksphere_admin.*``
    inherit the level set here.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    logger.propagate = True
