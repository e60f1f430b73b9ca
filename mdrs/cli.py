"""Command-line front door for mdrs.

Parses CLI options, loads the markdown document from a file or stdin,
applies config overrides, and dispatches into the pager runtime.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from . import __version__
from .config import config_path, init_config, load_config
from .runtime import run_pager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdrs",
        description="View markdown in a terminal pager with search.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Markdown file. Reads stdin when omitted.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--init-config", action="store_true", help="Write the default config file and exit.")
    parser.add_argument("--config-path", action="store_true", help="Print the config file location and exit.")
    parser.add_argument("--style", default=None, help="Pygments style for code blocks (overrides config).")
    parser.add_argument("--nopager", action="store_true", help="Print rendered output without interactive paging.")
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=None,
        help="Render width for --nopager output (default: terminal width).",
    )
    parser.add_argument("--case-sensitive", action="store_true", help="Start with case-sensitive search.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write debug logging to PATH.")
    return parser


def read_document(path: Path) -> str:
    """Read a markdown file as text; undecodable bytes are replaced."""
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if path.is_dir():
        raise SystemExit(f"Not a file: {path}")
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc.strerror or exc}") from exc


def read_stdin_document() -> str:
    if sys.stdin.isatty():
        raise SystemExit("No input: pass a markdown file or pipe markdown on stdin.")
    try:
        return sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SystemExit(f"Cannot read stdin: {exc}") from exc


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the pager."""
    args = build_parser().parse_args(argv)

    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG, format=LOG_FORMAT)

    if args.config_path:
        print(config_path())
        return
    if args.init_config:
        path, created = init_config()
        print(f"{'Wrote' if created else 'Config already exists at'} {path}")
        return

    if args.path is not None:
        path = Path(args.path)
        document = read_document(path)
        name = path.name
    else:
        document = read_stdin_document()
        name = "stdin"

    config = load_config()
    overrides: dict[str, object] = {}
    if args.style:
        overrides["style"] = args.style
    if args.case_sensitive:
        overrides["case_sensitive"] = True
    if overrides:
        config = dataclasses.replace(config, **overrides)
    logger.debug("viewing %s (%d chars), style=%s", name, len(document), config.style)

    run_pager(document, name, config, nopager=args.nopager, width=args.width)


if __name__ == "__main__":
    main()
