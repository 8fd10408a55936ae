"""Command line entry point: print the font catalog of a URL as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from font_grabber.acquisition import BROWSER, STATIC, make_acquirer
from font_grabber.catalog import detect_fonts


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="font-grabber", description="List the fonts a web page declares, loads, or renders")
    ap.add_argument("url", help="Page URL (https://...) to inspect")
    ap.add_argument(
        "--browser",
        dest="acquisition",
        action="store_const",
        const=BROWSER,
        default=STATIC,
        help="Render the page in headless Chromium to read computed fonts",
    )
    ap.add_argument("--timeout", type=float, default=None, help="Page load timeout in seconds")
    ap.add_argument("-o", "--output", help="Write the JSON catalog to this file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    url = args.url.strip()
    if url and not url.startswith("http"):
        url = f"https://{url}"

    try:
        catalog = detect_fonts(url, make_acquirer(args.acquisition, args.timeout))
    except Exception as exc:
        print(f"Failed to detect fonts: {exc}", file=sys.stderr)
        return 1

    report = json.dumps({"fonts": catalog.to_dict()}, indent=2)
    if args.output:
        Path(args.output).write_text(report + "\n", encoding="utf-8")
        print(f"Catalog written to {args.output}")
    else:
        print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
