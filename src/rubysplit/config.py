from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from .scan import DEFAULT_BRACKETS

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "OUTPUT_FORMATS",
    "BracketPairError",
    "Settings",
    "SettingsError",
    "load_settings",
    "parse_bracket_pair",
    "resolve_config_path",
]

CONFIG_FILENAME = "rubysplit.json"
CONFIG_ENV_VAR = "RUBYSPLIT_CONFIG"
OUTPUT_FORMATS = ("json", "table", "brackets", "html", "reading", "base")


class SettingsError(ValueError):
    """Raised when a settings file cannot be used."""


class BracketPairError(ValueError):
    """Raised when a bracket pair cannot be split into an opening and closing bracket."""


@dataclass
class Settings:
    brackets: tuple[str, str] = field(default=DEFAULT_BRACKETS)
    output_format: str = "json"
    separator: str = ""

    def with_overrides(
        self,
        *,
        brackets: tuple[str, str] | None = None,
        output_format: str | None = None,
        separator: str | None = None,
    ) -> "Settings":
        updated = self
        if brackets is not None:
            updated = replace(updated, brackets=brackets)
        if output_format is not None:
            updated = replace(updated, output_format=output_format)
        if separator is not None:
            updated = replace(updated, separator=separator)
        return updated


def parse_bracket_pair(value: str) -> tuple[str, str]:
    """
    Accept ``"[]"`` or ``"<< >>"``: two characters, or two
    whitespace-separated tokens.
    """
    parts = value.split()
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) == 1 and len(parts[0]) == 2:
        return parts[0][0], parts[0][1]
    raise BracketPairError(f"Expected an opening and a closing bracket, got {value!r}.")


def resolve_config_path(explicit: Path | None = None, cwd: Path | None = None) -> Path | None:
    if explicit is not None:
        return explicit.expanduser()
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    return None


def load_settings(path: Path | None = None) -> Settings:
    config_path = resolve_config_path(path)
    if config_path is None:
        return Settings()
    if not config_path.exists():
        if path is not None or os.environ.get(CONFIG_ENV_VAR):
            raise SettingsError(f"Settings file not found: {config_path}")
        return Settings()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SettingsError(f"Failed to parse settings file: {config_path}") from exc
    if not isinstance(raw, dict):
        raise SettingsError(f"{config_path.name} must contain a JSON object.")

    settings = Settings()
    brackets = raw.get("brackets")
    if brackets is not None:
        if (
            not isinstance(brackets, list)
            or len(brackets) != 2
            or not all(isinstance(item, str) and item for item in brackets)
        ):
            raise SettingsError(f"{config_path.name}: 'brackets' must be a list of two non-empty strings.")
        settings = settings.with_overrides(brackets=(brackets[0], brackets[1]))
    output_format = raw.get("format")
    if output_format is not None:
        if output_format not in OUTPUT_FORMATS:
            raise SettingsError(
                f"{config_path.name}: 'format' must be one of {', '.join(OUTPUT_FORMATS)}."
            )
        settings = settings.with_overrides(output_format=output_format)
    separator = raw.get("separator")
    if separator is not None:
        if not isinstance(separator, str):
            raise SettingsError(f"{config_path.name}: 'separator' must be a string.")
        settings = settings.with_overrides(separator=separator)
    return settings
