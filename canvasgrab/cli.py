"""CLI entry point for canvasgrab."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from canvasgrab.capture import CaptureOptions
from canvasgrab.chrome import find_chrome
from canvasgrab.providers import detect_provider
from canvasgrab.providers.bookwalker import DEFAULT_URL
from canvasgrab.readiness import DEFAULT_TIMEOUT
from canvasgrab.viewport import SETTLE_MODES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvasgrab",
        description=(
            "Capture full-resolution page images from canvas-rendered "
            "document viewers (BookWalker, etc.)."
        ),
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=DEFAULT_URL,
        help="URL of the document viewer page (default: a BookWalker sample)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=".",
        help=(
            "Output directory for image_<N>.png files and the final.png "
            "screenshot (default: current directory)."
        ),
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Seconds to wait for each page to appear and load (default: {DEFAULT_TIMEOUT:g}).",
    )
    parser.add_argument(
        "--settle",
        choices=SETTLE_MODES,
        default="poll",
        help=(
            "How to wait for the canvas to re-render after a viewport change: "
            "poll its size until stable, or sleep a fixed delay (default: poll)."
        ),
    )
    parser.add_argument(
        "--settle-delay",
        type=float,
        default=1.0,
        help="Seconds to sleep per viewport change with --settle fixed (default: 1).",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless.",
    )
    parser.add_argument(
        "--chrome",
        action="store_true",
        help="Use the system Google Chrome instead of Playwright's Chromium.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    provider_cls = detect_provider(args.url)
    if provider_cls is None:
        print(f"Error: no provider can handle URL: {args.url}", file=sys.stderr)
        sys.exit(1)

    chrome = None
    if args.chrome:
        chrome = find_chrome()
        if chrome is None:
            print("Error: could not find Google Chrome on this system.", file=sys.stderr)
            sys.exit(1)

    options = CaptureOptions(
        output_dir=Path(args.output),
        timeout=args.timeout,
        settle=args.settle,
        settle_delay=args.settle_delay,
    )
    result = provider_cls().fetch(
        args.url, options, headless=not args.headed, chrome=chrome,
    )
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
