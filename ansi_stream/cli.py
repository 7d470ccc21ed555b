"""Command line front end: convert ANSI output to HTML/JSON, or run the server."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from typing import Iterator, Optional, TextIO

from ansi_stream.html import HtmlTransformer
from ansi_stream.parser import Parser
from ansi_stream.settings import PLACEHOLDER_TOKEN, load_settings

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ansi-stream", description="Convert ANSI SGR escapes to styled output")
    parser.add_argument("--log-level", default="", help="Override ANSI_STREAM_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Convert a file or stdin")
    convert.add_argument("file", nargs="?", default="-", help="Input file ('-' for stdin)")
    convert.add_argument("--format", choices=("html", "json"), default="html")
    convert.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="Characters read per push")
    convert.add_argument("--encoding", default="utf-8")

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="", help="Override ANSI_STREAM_HOST")
    serve.add_argument("--port", type=int, default=0, help="Override ANSI_STREAM_PORT")
    return parser.parse_args(argv)


def read_chunks(stream: TextIO, size: int) -> Iterator[str]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


def convert(stream: TextIO, out: TextIO, fmt: str, chunk_size: int) -> None:
    if fmt == "html":
        transformer = HtmlTransformer()
        out.write('<pre class="ansi">')
        for chunk in read_chunks(stream, chunk_size):
            out.write("".join(transformer.push(chunk)))
        out.write("</pre>\n")
        return

    parser = Parser()
    for chunk in read_chunks(stream, chunk_size):
        for styled in parser.push(chunk):
            out.write(json.dumps(styled.to_dict(), separators=(",", ":")) + "\n")


def _convert(args: argparse.Namespace) -> int:
    chunk_size = max(1, args.chunk_size)
    if args.file == "-":
        stream = io.TextIOWrapper(sys.stdin.buffer, encoding=args.encoding, errors="replace", newline="")
        convert(stream, sys.stdout, args.format, chunk_size)
        return 0
    try:
        with open(args.file, encoding=args.encoding, errors="replace", newline="") as stream:
            convert(stream, sys.stdout, args.format, chunk_size)
    except OSError as exc:
        print(f"ansi-stream: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1
    return 0


def _serve(args: argparse.Namespace) -> int:
    settings = load_settings()
    if settings.token == PLACEHOLDER_TOKEN:
        print(
            "FATAL: ANSI_STREAM_TOKEN is set to 'changeme'.\n"
            "Generate a secure token:  python3 -c \"import secrets; print(secrets.token_urlsafe(32))\"\n"
            "Then set it:  export ANSI_STREAM_TOKEN=<your-token>",
            file=sys.stderr,
        )
        return 1
    if not settings.auth_enabled:
        logger.warning("ANSI_STREAM_TOKEN is empty; the service accepts unauthenticated requests")

    import uvicorn

    from ansi_stream.main import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    level = (args.log_level or load_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.command == "convert":
        return _convert(args)
    return _serve(args)


if __name__ == "__main__":
    raise SystemExit(main())
