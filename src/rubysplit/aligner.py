from __future__ import annotations

from .chars import I_SOUNDS, is_hiragana, is_kanji
from .chunks import Chunk, Reading, Text

__all__ = ["align", "set_debug_logging"]

_DEBUG_LOG = False


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def _debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[rubysplit debug] {message}")


def align(kanji_run: str, reading: str) -> list[Chunk]:
    """
    Split one annotated run into the smallest kanji/furigana pairs.

    Both strings are walked from the end. Kana shared verbatim by the run and
    its reading (okurigana) anchor the alignment, so whatever the reading
    holds between two anchors belongs to the kanji in between. A run such as
    繰り返す has a kana inside it; when the kana ahead of a kanji is one of the
    i-sounds and also appears in the reading, the reading is cut at the nearest
    occurrence of that sound and a new fragment starts.

    The result is in left-to-right order. It may contain a ``Reading`` with an
    empty side when the reading could not be attributed; callers that want a
    clean result go through ``parse_furigana``.
    """
    reading_pos = len(reading)
    run_pos = len(kanji_run)

    # Buffers are filled back to front and reversed when flushed.
    literal: list[str] = []
    furigana: list[str] = []
    kanji: list[str] = []
    out: list[Chunk] = []

    def flush_literal() -> None:
        if literal:
            out.append(Text("".join(reversed(literal))))
            literal.clear()

    def flush_fragment() -> None:
        out.append(Reading(kanji="".join(reversed(kanji)), furigana="".join(reversed(furigana))))
        kanji.clear()
        furigana.clear()

    while reading_pos > 0:
        hira = reading[reading_pos - 1]
        kana = kanji_run[run_pos - 1] if run_pos > 0 else ""
        reading_pos -= 1
        if run_pos > 0:
            run_pos -= 1

        if hira == kana:
            literal.append(hira)
        elif is_kanji(kana):
            flush_literal()
            furigana.append(hira)
            kanji.append(kana)

            next_char = kanji_run[run_pos - 1] if run_pos > 0 else ""
            if is_kanji(next_char):
                continue
            boundary = reading.rfind(next_char, 0, reading_pos) if next_char in I_SOUNDS else -1
            if boundary < 0:
                _debug_log(f"end of sequence before {next_char or '<start>'!r} in {kanji_run!r}")
                break
            furigana.extend(reversed(reading[boundary + 1 : reading_pos]))
            reading_pos = boundary + 1
            _debug_log(
                f"compound boundary at {next_char!r}: "
                f"{''.join(reversed(kanji))}={''.join(reversed(furigana))}"
            )
            flush_fragment()
        elif is_hiragana(kana):
            # Partial furigana: keep the kana as literal and retry the reading
            # character against the next run character.
            literal.append(kana)
            reading_pos += 1
        else:
            reading_pos += 1
            if kana:
                run_pos += 1
            _debug_log(f"cannot align {kana or '<start>'!r} in {kanji_run!r}")
            break

    if reading_pos > 0:
        furigana.extend(reversed(reading[:reading_pos]))
    flush_literal()
    flush_fragment()

    if run_pos > 0:
        out.append(Text(kanji_run[:run_pos]))

    out.reverse()
    return out
