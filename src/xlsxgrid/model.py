from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .parser.numfmt import format_number, format_temporal

CellKind = Literal["empty", "string", "boolean", "number", "date", "time", "datetime"]


@dataclass(slots=True)
class SheetOptions:
    expand_merged_ranges: bool = False
    skip_hyperlinks: bool = False
    pad_cells: bool = False
    offset: int = 0
    max_rows: int | None = None
    prefer_html: bool = False


@dataclass(slots=True, frozen=True, order=True)
class Coordinate:
    row: int
    column: int

    def to_tuple(self) -> tuple[int, int]:
        return (self.row, self.column)


@dataclass(slots=True)
class RangeRef:
    ref: str
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @property
    def top_left(self) -> Coordinate:
        return Coordinate(self.start_row, self.start_col)

    @property
    def bottom_right(self) -> Coordinate:
        return Coordinate(self.end_row, self.end_col)


@dataclass(slots=True, frozen=True)
class Cell:
    """One decoded worksheet cell.

    ``content`` is the text stored in the document and ``value`` is what it
    means: for shared strings the content is the table index, for booleans
    it is ``"0"``/``"1"``. ``number_format`` is only set on number, date,
    time and datetime cells.
    """

    kind: CellKind
    coordinate: Coordinate
    content: str | None = None
    value: Any = None
    formula: str | None = None
    style: int = 0
    hyperlink: str | None = None
    number_format: str | None = None

    @classmethod
    def empty(cls, coordinate: Coordinate) -> Cell:
        return cls(kind="empty", coordinate=coordinate)

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"

    @property
    def has_formula(self) -> bool:
        return self.formula is not None

    @property
    def is_link(self) -> bool:
        return self.hyperlink is not None

    @property
    def formatted_value(self) -> str:
        if self.kind == "empty" or self.value is None:
            return ""
        if self.kind == "boolean":
            return "TRUE" if self.value else "FALSE"
        if self.kind == "string":
            return self.value
        if self.kind == "number":
            return format_number(self.value, self.number_format or "")
        return format_temporal(self.kind, self.value)
