from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Iterator

from .aligner import align
from .chars import HIRAGANA_CLASS, KANJI_CLASS
from .chunks import Chunk, Reading, Text, merge_text_chunks

__all__ = [
    "DEFAULT_BRACKETS",
    "RESERVED_CHARS",
    "Match",
    "escape_bracket",
    "build_pattern",
    "iter_matches",
    "repair_chunk",
    "parse_furigana",
]

DEFAULT_BRACKETS: tuple[str, str] = ("（", "）")

# Characters escaped when they are used as brackets.
RESERVED_CHARS = "()[]\\/+{}*."


@dataclass(frozen=True)
class Match:
    kanji_run: str
    reading: str
    start: int
    end: int


def escape_bracket(bracket: str) -> str:
    return "".join(f"\\{ch}" if ch in RESERVED_CHARS else ch for ch in bracket)


@lru_cache(maxsize=64)
def build_pattern(open_bracket: str, close_bracket: str) -> re.Pattern[str]:
    return re.compile(
        f"([{KANJI_CLASS}]+[{KANJI_CLASS}{HIRAGANA_CLASS}]*)"
        f"{escape_bracket(open_bracket)}"
        f"([{HIRAGANA_CLASS}]+)"
        f"{escape_bracket(close_bracket)}",
        re.IGNORECASE,
    )


def iter_matches(text: str, brackets: tuple[str, str] = DEFAULT_BRACKETS) -> Iterator[Match]:
    pattern = build_pattern(brackets[0], brackets[1])
    for m in pattern.finditer(text):
        yield Match(kanji_run=m.group(1), reading=m.group(2), start=m.start(), end=m.end())


def repair_chunk(chunk: Chunk, brackets: tuple[str, str] = DEFAULT_BRACKETS) -> Chunk | None:
    """
    Turn a half-filled reading into text.

    A reading without kanji is an annotation the aligner could not attach, so
    it goes back into the text inside its brackets. A kanji without reading
    is kept as plain text. Empty pairs vanish.
    """
    if not isinstance(chunk, Reading) or not chunk.is_degenerate:
        return chunk
    if not chunk.kanji and not chunk.furigana:
        return None
    if not chunk.kanji:
        return Text(f"{brackets[0]}{chunk.furigana}{brackets[1]}")
    return Text(chunk.kanji)


def _scan(text: str, brackets: tuple[str, str]) -> Iterable[Chunk]:
    last_end = 0
    for match in iter_matches(text, brackets):
        if match.start > last_end:
            yield Text(text[last_end : match.start])
        yield from align(match.kanji_run, match.reading)
        last_end = match.end
    yield Text(text[last_end:])


def parse_furigana(text: str, brackets: tuple[str, str] = DEFAULT_BRACKETS) -> list[Chunk]:
    """
    Parse furigana written inline after its kanji, e.g. ``食べる（たべる）``.

    Returns text and reading chunks in document order. Annotations that do
    not fit the kanji-then-hiragana shape stay in the text untouched;
    annotations that cannot be aligned come back as bracketed text.
    """
    brackets = (brackets[0], brackets[1])
    repaired: list[Chunk] = []
    for chunk in _scan(text, brackets):
        fixed = repair_chunk(chunk, brackets)
        if fixed is None:
            continue
        if isinstance(fixed, Text) and not fixed.text.strip():
            continue
        repaired.append(fixed)
    return merge_text_chunks(repaired)
