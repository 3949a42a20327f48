from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from . import __version__
from .chunks import serialize_chunks
from .config import OUTPUT_FORMATS, Settings
from .logging_utils import WEB_LOGGER_NAME
from .render import render
from .scan import parse_furigana

logger = logging.getLogger(WEB_LOGGER_NAME)

# "table" only makes sense on a terminal.
WEB_OUTPUT_FORMATS = tuple(fmt for fmt in OUTPUT_FORMATS if fmt != "table")


@dataclass(slots=True)
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    settings: Settings = field(default_factory=Settings)
    max_length: int = 100_000


def _payload_brackets(payload: dict[str, object], default: tuple[str, str]) -> tuple[str, str]:
    value = payload.get("brackets")
    if value is None:
        return default
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(item, str) and item for item in value)
    ):
        raise HTTPException(status_code=400, detail="brackets must be a list of two non-empty strings.")
    return value[0], value[1]


def create_app(config: WebConfig) -> FastAPI:
    app = FastAPI(title="rubysplit")
    app.state.config = config

    @app.get("/api/health")
    def api_health() -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    @app.post("/api/parse")
    def api_parse(payload: dict[str, object] = Body(...)) -> JSONResponse:
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload.")
        text = payload.get("text")
        if not isinstance(text, str):
            raise HTTPException(status_code=400, detail="text is required.")
        if len(text) > config.max_length:
            raise HTTPException(
                status_code=413,
                detail=f"text exceeds {config.max_length} characters.",
            )
        brackets = _payload_brackets(payload, config.settings.brackets)
        output_format = payload.get("format")
        if output_format is not None and output_format not in WEB_OUTPUT_FORMATS:
            raise HTTPException(
                status_code=400,
                detail=f"format must be one of {', '.join(WEB_OUTPUT_FORMATS)}.",
            )
        separator = payload.get("separator")
        if separator is None:
            separator = config.settings.separator
        if not isinstance(separator, str):
            raise HTTPException(status_code=400, detail="separator must be a string.")

        chunks = parse_furigana(text, brackets)
        rendered = None
        if output_format is not None:
            rendered = render(chunks, output_format, brackets, separator)
        logger.debug("parsed %d characters into %d chunks", len(text), len(chunks))
        return JSONResponse({"chunks": serialize_chunks(chunks), "rendered": rendered})

    return app
