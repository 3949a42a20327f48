from __future__ import annotations

import json

import pytest

from rubysplit.chunks import Reading, Text, serialize_chunks
from rubysplit.config import OUTPUT_FORMATS
from rubysplit.render import (
    FORMATTERS,
    render,
    ruby_html_to_chunks,
    to_base_text,
    to_bracket_notation,
    to_reading_text,
    to_ruby_html,
)
from rubysplit.scan import parse_furigana


def test_bracket_notation_with_anki_separator() -> None:
    chunks = parse_furigana("繰り返す（くりかえす）")
    assert to_bracket_notation(chunks) == "繰[く]り返[かえ]す"
    assert to_bracket_notation(chunks, separator=" ") == "繰[く]り 返[かえ]す"


def test_ruby_html_markup() -> None:
    html = to_ruby_html([Reading("食", "た"), Text("べる<>")])
    assert html == "<ruby>食<rp>（</rp><rt>た</rt><rp>）</rp></ruby>べる&lt;&gt;"


def test_reading_and_base_text() -> None:
    chunks = parse_furigana("今日は（きょうは）晴れ")
    assert to_reading_text(chunks) == "きょうは晴れ"
    assert to_base_text(chunks) == "今日は晴れ"


def test_ruby_html_to_chunks_legacy_markup() -> None:
    html = "<p><ruby>漢字<rt>かんじ</rt></ruby>を書く</p>"
    assert ruby_html_to_chunks(html) == [Reading("漢字", "かんじ"), Text("を書く")]


def test_ruby_html_to_chunks_pairs_rb_segments() -> None:
    html = "<ruby><rb>漢</rb><rb>字</rb><rt>かん</rt><rt>じ</rt></ruby>"
    assert ruby_html_to_chunks(html) == [Reading("漢", "かん"), Reading("字", "じ")]


def test_ruby_html_to_chunks_group_ruby_with_uneven_segments() -> None:
    html = "<ruby><rb>明</rb><rb>日</rb><rt>あした</rt></ruby>"
    assert ruby_html_to_chunks(html) == [Reading("明日", "あした")]


def test_ruby_html_to_chunks_reads_back_rendered_html() -> None:
    chunks = parse_furigana("繰り返す（くりかえす）")
    assert ruby_html_to_chunks(to_ruby_html(chunks)) == chunks


def test_ruby_html_to_chunks_handles_breaks_and_comments() -> None:
    html = "<div>雨<!-- note --><br/><ruby>雪<rt></rt></ruby>だ</div>"
    assert ruby_html_to_chunks(html) == [Text("雨\n雪だ")]


def test_render_json_matches_serialized_chunks() -> None:
    chunks = parse_furigana("食べる（たべる）")
    assert json.loads(render(chunks, "json")) == serialize_chunks(chunks)


def test_render_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        render([Text("あ")], "yaml")


def test_every_file_format_has_a_formatter() -> None:
    assert set(FORMATTERS) == set(OUTPUT_FORMATS) - {"table"}


@pytest.mark.parametrize(
    "output_format, expected",
    [
        ("brackets", "繰[く]り 返[かえ]す"),
        ("html", "<ruby>繰<rp>【</rp><rt>く</rt><rp>】</rp></ruby>り<ruby>返<rp>【</rp><rt>かえ</rt><rp>】</rp></ruby>す"),
        ("reading", "くりかえす"),
        ("base", "繰り返す"),
    ],
)
def test_render_passes_brackets_and_separator_where_used(output_format: str, expected: str) -> None:
    chunks = parse_furigana("繰り返す【くりかえす】", ("【", "】"))
    assert render(chunks, output_format, ("【", "】"), " ") == expected
