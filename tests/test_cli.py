from __future__ import annotations

import io
import json

import pytest

import rubysplit.aligner as aligner_module
import rubysplit.cli as cli
from rubysplit.config import CONFIG_ENV_VAR
from rubysplit.logging_utils import WEB_LOGGER_NAME


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(aligner_module, "_DEBUG_LOG", False)


def test_reads_stdin_and_prints_json(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("食べる（たべる）"))

    exit_code = cli.main([])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"type": "reading", "kanji": "食", "furigana": "た"},
        {"type": "text", "text": "べる"},
    ]


def test_file_input_with_bracket_output(tmp_path, capsys) -> None:
    source = tmp_path / "verbs.txt"
    source.write_text("繰り返す（くりかえす）", encoding="utf-8")

    exit_code = cli.main(["-f", "brackets", "-s", " ", str(source)])

    assert exit_code == 0
    assert capsys.readouterr().out == "繰[く]り 返[かえ]す\n"


def test_custom_brackets_flag(tmp_path, capsys) -> None:
    source = tmp_path / "anki.txt"
    source.write_text("食べる[たべる]", encoding="utf-8")

    cli.main(["--brackets", "[]", "--format", "reading", str(source)])

    assert capsys.readouterr().out == "たべる\n"


def test_settings_file_supplies_defaults(tmp_path, capsys) -> None:
    (tmp_path / "rubysplit.json").write_text(json.dumps({"format": "base"}), encoding="utf-8")
    source = tmp_path / "line.txt"
    source.write_text("今日は（きょうは）晴れ", encoding="utf-8")

    cli.main([str(source)])

    assert capsys.readouterr().out == "今日は晴れ\n"


def test_html_input(tmp_path, capsys) -> None:
    source = tmp_path / "page.html"
    source.write_text("<p><ruby>漢字<rt>かんじ</rt></ruby>を書く</p>", encoding="utf-8")

    cli.main(["--html", "-f", "brackets", str(source)])

    assert capsys.readouterr().out == "漢字[かんじ]を書く\n"


def test_table_output_lists_chunks(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("食べる（たべる）"))

    cli.main(["-f", "table"])

    output = capsys.readouterr().out
    assert "reading" in output
    assert "食" in output
    assert "べる" in output


def test_debug_flag_prints_alignment_steps(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("繰り返す（くりかえす）"))

    cli.main(["--debug", "-f", "reading"])

    output = capsys.readouterr().out
    assert "[rubysplit debug]" in output
    assert output.endswith("くりかえす\n")


def test_invalid_brackets_exit_with_message(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--brackets", "[[["])
    assert excinfo.value.code == 2
    assert "opening and a closing bracket" in capsys.readouterr().err


def test_missing_input_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.main([str(tmp_path / "missing.txt")])


def test_web_subcommand_runs_uvicorn(monkeypatch, capsys) -> None:
    calls: dict[str, object] = {}

    def _fake_run(app, host, port, log_level, log_config):
        calls["app"] = app
        calls["host"] = host
        calls["port"] = port
        calls["log_level"] = log_level
        calls["log_config"] = log_config

    monkeypatch.setattr(cli.uvicorn, "run", _fake_run)

    exit_code = cli.main(["web", "--port", "9123", "--brackets", "[]", "--max-length", "50"])

    assert exit_code == 0
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 9123
    assert calls["log_level"] == "info"
    assert WEB_LOGGER_NAME in calls["log_config"]["loggers"]
    config = calls["app"].state.config
    assert config.settings.brackets == ("[", "]")
    assert config.max_length == 50
    assert "Serving rubysplit" in capsys.readouterr().out
