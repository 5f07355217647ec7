from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
from pathlib import Path

import yaml

from .date_parsing import format_date_iso
from .layout import LAYOUT_MODES, filter_records, layout, row_count
from .load_records import RecordValidationError, load_records
from .parse_text import parse
from .render_rows import rows_to_dicts, to_render_rows
from .view_window import quarter_of, view_window

logger = logging.getLogger(__name__)


def _quarter(value: str) -> int:
    try:
        quarter = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid quarter '{value}', expected 1-4") from exc
    if quarter not in (1, 2, 3, 4):
        raise argparse.ArgumentTypeError(f"invalid quarter '{value}', expected 1-4")
    return quarter


def _build_parser() -> argparse.ArgumentParser:
    today = dt.date.today()
    parser = argparse.ArgumentParser(
        prog="timeline-planner",
        description="Parse project date ranges and lay them out on a calendar timeline",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse",
        help="Recognise named date ranges in free text",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parse_cmd.add_argument("text", help="Text to parse; use '-' to read stdin")
    parse_cmd.add_argument("--year", type=int, default=today.year, help="Year for ranges written without one")

    layout_cmd = subparsers.add_parser(
        "layout",
        help="Assign timeline rows to records from a YAML file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    layout_cmd.add_argument("records", help="Path to records YAML")
    layout_cmd.add_argument("--year", type=int, default=today.year, help="Year to display")
    layout_cmd.add_argument("--view", choices=["year", "quarter"], default="year", help="Zoom level")
    layout_cmd.add_argument(
        "--quarter", type=_quarter, default=quarter_of(today), help="Quarter shown by the quarter view"
    )
    layout_cmd.add_argument(
        "--hidden-months", type=int, default=0, help="Months hidden from the left edge of the year view"
    )
    layout_cmd.add_argument("--mode", choices=list(LAYOUT_MODES), default="autoSort", help="Row assignment mode")
    layout_cmd.add_argument("--filter", dest="query", default="", help="Only show records matching this text")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _run_parse(args: argparse.Namespace) -> int:
    text = sys.stdin.read() if args.text == "-" else args.text
    segments = parse(text, args.year)
    if not segments:
        print("Error: no date ranges recognised", file=sys.stderr)
        return 1

    payload = [
        {
            "name": segment.name,
            "start_date": format_date_iso(segment.start_date),
            "end_date": format_date_iso(segment.end_date),
        }
        for segment in segments
    ]
    yaml.safe_dump(payload, sys.stdout, sort_keys=False, allow_unicode=True)
    return 0


def _run_layout(args: argparse.Namespace) -> int:
    records_path = Path(args.records)
    try:
        records = load_records(str(records_path))
    except (yaml.YAMLError, RecordValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError:
        print(f"Error: records file not found: {records_path}", file=sys.stderr)
        return 1

    window = view_window(args.view, args.year, args.quarter, args.hidden_months)
    visible = filter_records(records, args.query)
    assignments = layout(visible, window, args.mode)
    logger.info(
        f"{len(assignments)} of {len(records)} records visible between "
        f"{window.start} and {window.end} in {row_count(assignments)} rows"
    )

    yaml.safe_dump(rows_to_dicts(to_render_rows(assignments)), sys.stdout, sort_keys=False, allow_unicode=True)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "parse":
            return _run_parse(args)
        return _run_layout(args)
    except Exception as exc:  # Unexpected
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
