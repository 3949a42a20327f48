from __future__ import annotations

__all__ = [
    "KANJI_START",
    "KANJI_END",
    "HIRAGANA_START",
    "HIRAGANA_END",
    "I_SOUNDS",
    "KANJI_CLASS",
    "HIRAGANA_CLASS",
    "is_kanji",
    "is_hiragana",
]

# CJK Unified Ideographs as used for ruby bases.
KANJI_START = 0x4E00
KANJI_END = 0x9FAF

# Hiragana letters, ぁ through ゖ.
HIRAGANA_START = 0x3041
HIRAGANA_END = 0x3096

# Kana that can close the first verb of a compound (繰り返す, 取り扱う).
I_SOUNDS = frozenset("いきぎしじちぢみひびぴにり")

# Regex character-class bodies for the same ranges.
KANJI_CLASS = f"{chr(KANJI_START)}-{chr(KANJI_END)}"
HIRAGANA_CLASS = f"{chr(HIRAGANA_START)}-{chr(HIRAGANA_END)}"


def _in_range(ch: str | None, start: int, end: int) -> bool:
    if not ch:
        return False
    return start <= ord(ch[0]) <= end


def is_kanji(ch: str | None) -> bool:
    return _in_range(ch, KANJI_START, KANJI_END)


def is_hiragana(ch: str | None) -> bool:
    return _in_range(ch, HIRAGANA_START, HIRAGANA_END)
