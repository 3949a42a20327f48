from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .aligner import set_debug_logging
from .chunks import Chunk, Reading
from .config import (
    OUTPUT_FORMATS,
    BracketPairError,
    Settings,
    SettingsError,
    load_settings,
    parse_bracket_pair,
)
from .logging_utils import build_uvicorn_log_config
from .render import render, ruby_html_to_chunks
from .scan import parse_furigana
from .web import WebConfig, create_app


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"rubysplit {__version__}",
    )


def _add_settings_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-b",
        "--brackets",
        help="Bracket pair around readings, e.g. '[]' or '<< >>' (default: （）).",
    )
    parser.add_argument(
        "--config",
        help="Path to a rubysplit.json settings file (default: ./rubysplit.json or $RUBYSPLIT_CONFIG).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print alignment decisions while parsing.",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Split inline furigana such as 食べる（たべる） into per-kanji readings. Use `rubysplit web` for the HTTP API.",
    )
    _add_version_flag(ap)
    ap.add_argument(
        "inputs",
        nargs="*",
        default=["-"],
        help="Text files to parse; '-' reads stdin (default).",
    )
    _add_settings_flags(ap)
    ap.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json, or the settings file value).",
    )
    ap.add_argument(
        "-s",
        "--separator",
        help="Text placed before each reading in 'brackets' output, e.g. ' ' for Anki notes.",
    )
    ap.add_argument(
        "--html",
        action="store_true",
        help="Treat input as HTML with <ruby> markup instead of bracketed text.",
    )
    return ap


def build_web_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rubysplit web",
        description="Serve the furigana parser over HTTP.",
    )
    _add_version_flag(ap)
    ap.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1).")
    ap.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000).")
    ap.add_argument(
        "--max-length",
        type=int,
        default=100_000,
        help="Reject texts longer than this many characters (default: 100000).",
    )
    _add_settings_flags(ap)
    return ap


def _resolve_settings(args: argparse.Namespace) -> Settings:
    config_path = Path(args.config) if getattr(args, "config", None) else None
    settings = load_settings(config_path)
    brackets = parse_bracket_pair(args.brackets) if getattr(args, "brackets", None) else None
    return settings.with_overrides(
        brackets=brackets,
        output_format=getattr(args, "format", None),
        separator=getattr(args, "separator", None),
    )


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    path = Path(name)
    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")
    return path.read_text(encoding="utf-8")


def _chunk_table(chunks: list[Chunk], title: str | None = None) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("kind")
    table.add_column("text")
    table.add_column("reading")
    for index, chunk in enumerate(chunks, start=1):
        if isinstance(chunk, Reading):
            table.add_row(str(index), "reading", escape(chunk.kanji), escape(chunk.furigana))
        else:
            table.add_row(str(index), "text", escape(chunk.text), "")
    return table


def _run_parse(args: argparse.Namespace) -> int:
    settings = _resolve_settings(args)
    set_debug_logging(bool(getattr(args, "debug", False)))
    console = Console()
    for name in args.inputs:
        text = _read_input(name)
        if args.html:
            chunks = ruby_html_to_chunks(text)
        else:
            chunks = parse_furigana(text, settings.brackets)
        if settings.output_format == "table":
            console.print(_chunk_table(chunks, title=None if name == "-" else name))
            continue
        print(render(chunks, settings.output_format, settings.brackets, settings.separator))
    return 0


def _run_web(args: argparse.Namespace) -> None:
    settings = _resolve_settings(args)
    set_debug_logging(bool(getattr(args, "debug", False)))
    config = WebConfig(
        host=args.host,
        port=args.port,
        settings=settings,
        max_length=args.max_length,
    )
    app = create_app(config)
    print(f"Serving rubysplit on http://{config.host}:{config.port}/api/parse")
    print("Press Ctrl+C to stop.\n")
    log_level = "debug" if args.debug else "info"
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=log_level,
        log_config=build_uvicorn_log_config(log_level),
    )


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        if argv and argv[0] == "web":
            web_parser = build_web_parser()
            web_args = web_parser.parse_args(argv[1:])
            _run_web(web_args)
            return 0

        parser = build_parser()
        args = parser.parse_args(argv)
        return _run_parse(args)
    except (SettingsError, BracketPairError) as exc:
        Console(stderr=True).print(f"error: {exc}", style="red", markup=False)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    raise SystemExit(main())
