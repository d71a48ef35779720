from __future__ import annotations

import logging


def configure_app_logging(level: str = "INFO") -> None:
    """
    Minimal logging configuration for this repo.

    Notes:
    - stdlib logging; uvicorn already installs handlers.
    - Set `APP_LOG_LEVEL=DEBUG` to see every ACL decision and roles cache miss.
    """

    normalized = level.upper()
    logging.getLogger("app").setLevel(normalized)
    logging.getLogger("app").propagate = True
