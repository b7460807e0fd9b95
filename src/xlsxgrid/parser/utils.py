from __future__ import annotations

import re
from typing import Iterable

from ..errors import ParseError
from ..model import Coordinate, RangeRef

CELL_RE = re.compile(r"^\$?([A-Z]+)\$?(\d+)$")
RANGE_RE = re.compile(r"^\$?([A-Z]+)\$?(\d+):\$?([A-Z]+)\$?(\d+)$")


def local_name(tag: str) -> str:
    if "}" in tag:
        return tag.rsplit("}", 1)[1]
    return tag


def col_to_index(col: str) -> int:
    value = 0
    for char in col.upper():
        value = value * 26 + (ord(char) - 64)
    return value


def index_to_col(index: int) -> str:
    if index < 1:
        raise ValueError("Column index must be >= 1")
    result: list[str] = []
    value = index
    while value > 0:
        value, rem = divmod(value - 1, 26)
        result.append(chr(65 + rem))
    return "".join(reversed(result))


def coord_to_rowcol(coord: str) -> tuple[int, int]:
    match = CELL_RE.match(coord)
    if not match:
        raise ParseError(f"Invalid coordinate: {coord!r}")
    col = col_to_index(match.group(1))
    row = int(match.group(2))
    if row < 1:
        raise ParseError(f"Invalid coordinate: {coord!r}")
    return row, col


def rowcol_to_coord(row: int, col: int) -> str:
    if row < 1 or col < 1:
        raise ValueError("row/col must be >= 1")
    return f"{index_to_col(col)}{row}"


def coordinate_from_ref(ref: str) -> Coordinate:
    row, col = coord_to_rowcol(ref)
    return Coordinate(row, col)


def coordinate_to_ref(coordinate: Coordinate) -> str:
    return rowcol_to_coord(coordinate.row, coordinate.column)


def parse_range_ref(ref: str) -> RangeRef:
    normalized = ref.strip().replace("$", "")
    range_match = RANGE_RE.match(normalized)
    if range_match:
        sc = col_to_index(range_match.group(1))
        sr = int(range_match.group(2))
        ec = col_to_index(range_match.group(3))
        er = int(range_match.group(4))
        return RangeRef(
            ref=normalized,
            start_row=min(sr, er),
            start_col=min(sc, ec),
            end_row=max(sr, er),
            end_col=max(sc, ec),
        )

    row, col = coord_to_rowcol(normalized)
    return RangeRef(ref=normalized, start_row=row, start_col=col, end_row=row, end_col=col)


def iter_cells_in_range(rng: RangeRef) -> Iterable[Coordinate]:
    for row in range(rng.start_row, rng.end_row + 1):
        for col in range(rng.start_col, rng.end_col + 1):
            yield Coordinate(row, col)


def rels_path_for(part_path: str) -> str:
    parent, file_name = part_path.rsplit("/", 1)
    return f"{parent}/_rels/{file_name}.rels"
