from __future__ import annotations

import json
from typing import Iterable

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag  # type: ignore

from .chunks import Chunk, Reading, Text, merge_text_chunks, serialize_chunks
from .scan import DEFAULT_BRACKETS

__all__ = [
    "FORMATTERS",
    "to_bracket_notation",
    "to_ruby_html",
    "to_reading_text",
    "to_base_text",
    "ruby_html_to_chunks",
    "render",
]

ANKI_BRACKETS: tuple[str, str] = ("[", "]")


def to_bracket_notation(
    chunks: Iterable[Chunk],
    brackets: tuple[str, str] = ANKI_BRACKETS,
    separator: str = "",
) -> str:
    """
    Render chunks as ``食[た]べる``.

    ``separator`` goes in front of every reading that has something before
    it; Anki-style notes use a single space so ``繰[く]り 返[かえ]す`` keeps the
    second base from swallowing the preceding kana.
    """
    parts: list[str] = []
    for chunk in chunks:
        if isinstance(chunk, Reading):
            if parts and separator:
                parts.append(separator)
            parts.append(f"{chunk.kanji}{brackets[0]}{chunk.furigana}{brackets[1]}")
        else:
            parts.append(chunk.text)
    return "".join(parts)


def to_ruby_html(chunks: Iterable[Chunk], brackets: tuple[str, str] = DEFAULT_BRACKETS) -> str:
    soup = BeautifulSoup("", "html.parser")
    for chunk in chunks:
        if isinstance(chunk, Text):
            soup.append(NavigableString(chunk.text))
            continue
        ruby = soup.new_tag("ruby")
        ruby.append(NavigableString(chunk.kanji))
        rp_open = soup.new_tag("rp")
        rp_open.string = brackets[0]
        rt = soup.new_tag("rt")
        rt.string = chunk.furigana
        rp_close = soup.new_tag("rp")
        rp_close.string = brackets[1]
        ruby.append(rp_open)
        ruby.append(rt)
        ruby.append(rp_close)
        soup.append(ruby)
    return str(soup)


def to_reading_text(chunks: Iterable[Chunk]) -> str:
    return "".join(chunk.furigana if isinstance(chunk, Reading) else chunk.text for chunk in chunks)


def to_base_text(chunks: Iterable[Chunk]) -> str:
    return "".join(chunk.kanji if isinstance(chunk, Reading) else chunk.text for chunk in chunks)


def _ruby_bases(ruby: Tag) -> list[str]:
    """
    Base segments of a <ruby>, ignoring <rt>/<rp>. Supports legacy and <rb>.
    """
    rbs = ruby.find_all("rb", recursive=False)
    if rbs:
        return ["".join(rb.stripped_strings) for rb in rbs]
    parts = []
    for child in ruby.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag) and child.name not in ("rt", "rp"):
            parts.append("".join(child.stripped_strings))
    return ["".join(parts).strip()]


def _ruby_readings(ruby: Tag) -> list[str]:
    return ["".join(rt.stripped_strings) for rt in ruby.find_all("rt", recursive=False)]


def _ruby_chunks(ruby: Tag) -> list[Chunk]:
    bases = _ruby_bases(ruby)
    readings = _ruby_readings(ruby)
    if len(bases) != len(readings):
        # Group ruby: one reading spans every base segment.
        bases = ["".join(bases)]
        readings = ["".join(readings)]
    chunks: list[Chunk] = []
    for base, reading in zip(bases, readings):
        if not base:
            continue
        if reading:
            chunks.append(Reading(kanji=base, furigana=reading))
        else:
            chunks.append(Text(base))
    return chunks


def _walk(node: Tag, out: list[Chunk]) -> None:
    for child in node.children:
        if isinstance(child, (Comment, Doctype)):
            continue
        if isinstance(child, NavigableString):
            out.append(Text(str(child)))
        elif isinstance(child, Tag):
            if child.name == "ruby":
                out.extend(_ruby_chunks(child))
            elif child.name in ("rt", "rp"):
                continue
            elif child.name == "br":
                out.append(Text("\n"))
            else:
                _walk(child, out)


def ruby_html_to_chunks(html: str) -> list[Chunk]:
    """Read ``<ruby>`` markup back into chunks; other tags contribute their text."""
    soup = BeautifulSoup(html, "html.parser")
    out: list[Chunk] = []
    _walk(soup, out)
    return [chunk for chunk in merge_text_chunks(out) if not (isinstance(chunk, Text) and not chunk.text)]


def _render_json(chunks: list[Chunk], brackets: tuple[str, str], separator: str) -> str:
    return json.dumps(serialize_chunks(chunks), ensure_ascii=False, indent=2)


def _render_brackets(chunks: list[Chunk], brackets: tuple[str, str], separator: str) -> str:
    return to_bracket_notation(chunks, ANKI_BRACKETS, separator)


def _render_html(chunks: list[Chunk], brackets: tuple[str, str], separator: str) -> str:
    return to_ruby_html(chunks, brackets)


def _render_reading(chunks: list[Chunk], brackets: tuple[str, str], separator: str) -> str:
    return to_reading_text(chunks)


def _render_base(chunks: list[Chunk], brackets: tuple[str, str], separator: str) -> str:
    return to_base_text(chunks)


FORMATTERS = {
    "json": _render_json,
    "brackets": _render_brackets,
    "html": _render_html,
    "reading": _render_reading,
    "base": _render_base,
}


def render(
    chunks: list[Chunk],
    output_format: str,
    brackets: tuple[str, str] = DEFAULT_BRACKETS,
    separator: str = "",
) -> str:
    try:
        formatter = FORMATTERS[output_format]
    except KeyError:
        raise ValueError(f"Unknown output format: {output_format}") from None
    return formatter(chunks, brackets, separator)
