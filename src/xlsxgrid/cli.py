from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .api import DEFAULT_SHEET_PART, open_sheet
from .errors import XlsxGridError
from .model import SheetOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print the cells of one .xlsx worksheet as tab-separated rows")
    parser.add_argument("input", type=Path, help="Input .xlsx file")
    parser.add_argument(
        "--part",
        default=DEFAULT_SHEET_PART,
        help=f"Worksheet part inside the package (default: {DEFAULT_SHEET_PART})",
    )
    parser.add_argument(
        "--expand-merged",
        action="store_true",
        help="Repeat the value of a merged range in every cell it covers",
    )
    parser.add_argument("--skip-hyperlinks", action="store_true", help="Do not resolve hyperlinks")
    parser.add_argument("--max-rows", type=int, default=None, help="Stop after this many rows")
    parser.add_argument("--offset", type=int, default=0, help="Skip this many rows first")
    parser.add_argument(
        "--pad-cells",
        action="store_true",
        help="Emit empty fields for columns that have no cell element",
    )
    parser.add_argument("--html", action="store_true", help="Prefer HTML-rendered rich text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    options = SheetOptions(
        expand_merged_ranges=args.expand_merged,
        skip_hyperlinks=args.skip_hyperlinks,
        pad_cells=args.pad_cells,
        offset=args.offset,
        max_rows=args.max_rows,
        prefer_html=args.html,
    )
    try:
        sheet = open_sheet(args.input, args.part, options=options)
        if options.expand_merged_ranges:
            rows = _table_rows(sheet)
        else:
            rows = ([cell.formatted_value if cell else "" for cell in row] for row in sheet.each_row())
        for fields in rows:
            print("\t".join(fields))
    except XlsxGridError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _table_rows(sheet):
    # same <row> window as each_row; merged copies are read from the cell table
    if sheet.first_row is None:
        return
    first_col = 1 if sheet.options.pad_cells else sheet.first_column
    for streamed in sheet.each_row(pad_cells=False):
        if not streamed:
            yield []
            continue
        row = streamed[0].coordinate.row
        fields = []
        for col in range(first_col, sheet.last_column + 1):
            cell = sheet.cell_at((row, col))
            fields.append(cell.formatted_value if cell else "")
        yield fields


if __name__ == "__main__":
    raise SystemExit(main())
