"""CLI entrypoint: extract records from a URL, an HTML file or stdin."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config, load_config, load_field_specs
from .errors import XtractError
from .fields import FieldSpec
from .scraper import Scraper
from .url_utils import is_locator

logger = logging.getLogger(__name__)

FORMATS = ("json", "csv", "xlsx")


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract structured records from HTML with CSS selectors")
    parser.add_argument("--config", default="xtract.yaml", help="Path to config yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    extract_p = sub.add_parser("extract", help="Extract records from a document")
    extract_p.add_argument("input", help="URL, path to an HTML file, or - for stdin")
    extract_p.add_argument("--field", action="append", dest="fields", metavar="SELECTOR", help="CSS selector of a text field (repeatable)")
    extract_p.add_argument("--all", action="store_true", help="Extract every aligned row instead of the first match")
    extract_p.add_argument("--format", choices=FORMATS, default=None, help="Output format (default from config)")
    extract_p.add_argument("--output", type=Path, default=None, help="Output file; required for csv and xlsx")
    extract_p.add_argument("--quiet", action="store_true", help="Do not echo diagnostics")
    return parser


def _read_input(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    if is_locator(value):
        return value
    path = Path(value)
    if path.is_file():
        return path.read_text(encoding="utf-8")
    return value


def _field_specs(config: Config, selectors: Optional[List[str]]) -> List[FieldSpec]:
    if selectors:
        return [FieldSpec(selector) for selector in selectors]
    return load_field_specs(config)


def _run_extract(config: Config, args: argparse.Namespace) -> int:
    specs = _field_specs(config, args.fields)
    if not specs:
        logger.error("No fields given; pass --field or set extraction.fields in the config")
        return 2
    fmt = args.format or config.export.default_format
    if fmt in ("csv", "xlsx") and args.output is None:
        logger.error("--output is required for %s output", fmt)
        return 2
    if args.quiet:
        config.logging.verbose = False

    with Scraper(specs, config=config) as scraper:
        source = _read_input(args.input)
        if args.all:
            result = scraper.extract_many(source)
        else:
            record = scraper.extract_one(source)
            result = None if record is None else [record]
        if result is None:
            logger.error("Nothing extracted from %s", args.input)
            return 1
        if fmt == "csv":
            scraper.save_csv(args.output)
        elif fmt == "xlsx":
            scraper.save_excel(args.output)
        elif args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(scraper.json_data(), encoding="utf-8")
        else:
            print(scraper.json_data())
        logger.info("Extracted %d record(s)", len(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)
    logging.basicConfig(level=config.logging.level.upper(), format="%(levelname)s %(message)s")
    try:
        if args.command == "extract":
            return _run_extract(config, args)
    except XtractError as exc:
        logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
