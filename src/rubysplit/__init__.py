from __future__ import annotations

from importlib import metadata
from pathlib import Path

import tomllib


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover - defensive
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("rubysplit")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


from .aligner import align, set_debug_logging
from .chunks import Chunk, Reading, Text, deserialize_chunks, serialize_chunks
from .render import (
    ruby_html_to_chunks,
    to_base_text,
    to_bracket_notation,
    to_reading_text,
    to_ruby_html,
)
from .scan import DEFAULT_BRACKETS, parse_furigana

__all__ = [
    "__version__",
    "Chunk",
    "Text",
    "Reading",
    "DEFAULT_BRACKETS",
    "parse_furigana",
    "align",
    "set_debug_logging",
    "serialize_chunks",
    "deserialize_chunks",
    "to_bracket_notation",
    "to_ruby_html",
    "to_reading_text",
    "to_base_text",
    "ruby_html_to_chunks",
]
