from __future__ import annotations

from copy import deepcopy
from typing import Any

from uvicorn.config import LOGGING_CONFIG

WEB_LOGGER_NAME = "rubysplit.web"


def build_uvicorn_log_config(level: str = "info") -> dict[str, Any]:
    """
    Uvicorn's default logging config plus a ``rubysplit.web`` logger that
    shares uvicorn's default handler, so parse summaries show up next to the
    access log.
    """
    config = deepcopy(LOGGING_CONFIG)
    loggers = config.setdefault("loggers", {})
    loggers[WEB_LOGGER_NAME] = {
        "handlers": ["default"],
        "level": level.upper(),
        "propagate": False,
    }
    return config
