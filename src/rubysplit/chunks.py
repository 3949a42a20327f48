from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Union

__all__ = [
    "Text",
    "Reading",
    "Chunk",
    "merge_text_chunks",
    "serialize_chunks",
    "deserialize_chunks",
]


@dataclass(frozen=True)
class Text:
    """Literal run of characters that carries no annotation."""

    text: str


@dataclass(frozen=True)
class Reading:
    """
    A kanji fragment paired with the furigana that belongs to it.

    Both sides are non-empty in a finished parse. The aligner may emit a pair
    with an empty side while it works; ``parse_furigana`` repairs those before
    returning.
    """

    kanji: str
    furigana: str

    @property
    def is_degenerate(self) -> bool:
        return not self.kanji or not self.furigana


Chunk = Union[Text, Reading]


def merge_text_chunks(chunks: Iterable[Chunk]) -> list[Chunk]:
    merged: list[Chunk] = []
    for chunk in chunks:
        if isinstance(chunk, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(merged[-1].text + chunk.text)
        else:
            merged.append(chunk)
    return merged


def serialize_chunks(chunks: Iterable[Chunk]) -> list[dict[str, object]]:
    payload: list[dict[str, object]] = []
    for chunk in chunks:
        if isinstance(chunk, Reading):
            payload.append({"type": "reading", "kanji": chunk.kanji, "furigana": chunk.furigana})
        else:
            payload.append({"type": "text", "text": chunk.text})
    return payload


def deserialize_chunks(data: Iterable[Mapping[str, object]]) -> list[Chunk]:
    chunks: list[Chunk] = []
    for entry in data:
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type")
        if kind == "reading":
            kanji = entry.get("kanji")
            furigana = entry.get("furigana")
            if not isinstance(kanji, str) or not isinstance(furigana, str):
                continue
            chunks.append(Reading(kanji=kanji, furigana=furigana))
        elif kind == "text":
            text = entry.get("text")
            if not isinstance(text, str):
                continue
            chunks.append(Text(text))
    return chunks
