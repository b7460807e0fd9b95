from __future__ import annotations

import logging
from typing import Any, Iterator, Union
from xml.etree import ElementTree as ET

from .model import Cell, Coordinate, RangeRef, SheetOptions
from .package import (
    RelationshipLookup,
    SharedStringLookup,
    StyleFormatLookup,
    WorkbookContext,
)
from .parser.cells import cell_coordinate, resolve_cell
from .parser.hyperlinks import extract_hyperlinks
from .parser.merges import expand_merged_ranges, read_merged_ranges
from .parser.streaming import SheetSource, iter_rows, read_dimension
from .parser.utils import coordinate_from_ref, local_name

logger = logging.getLogger(__name__)

CellKey = Union[Coordinate, tuple[int, int], str]


def _as_coordinate(key: CellKey) -> Coordinate:
    if isinstance(key, Coordinate):
        return key
    if isinstance(key, str):
        return coordinate_from_ref(key)
    row, col = key
    return Coordinate(row, col)


class Sheet:
    """Cell grid of one worksheet part.

    Every derived view (cell table, hyperlinks, dimension, extents) is
    computed on first access and kept for the life of the object. The
    lookups passed in are shared, read-only workbook tables.
    """

    def __init__(
        self,
        source: SheetSource,
        *,
        shared_strings: SharedStringLookup,
        styles: StyleFormatLookup,
        relationships: RelationshipLookup | None = None,
        workbook: WorkbookContext | None = None,
        options: SheetOptions | None = None,
        name: str = "",
    ) -> None:
        self.source = source
        self.name = name
        self.shared_strings = shared_strings
        self.styles = styles
        self.relationships = relationships
        self.workbook = workbook or WorkbookContext()
        self.options = options or SheetOptions()

        self._cells: dict[Coordinate, Cell] | None = None
        self._present_cells: dict[Coordinate, Cell] | None = None
        self._hyperlinks: dict[Coordinate, str] | None = None
        self._merged_ranges: list[RangeRef] | None = None
        self._dimensions: str | None = None
        self._dimensions_read = False
        self._first_row: int | None = None
        self._last_row: int | None = None
        self._first_column: int | None = None
        self._last_column: int | None = None

    def __repr__(self) -> str:
        return f"<Sheet name={self.name!r}>"

    @property
    def cells(self) -> dict[Coordinate, Cell]:
        if self._cells is None:
            self._cells = self._extract_cells()
        return self._cells

    @property
    def present_cells(self) -> dict[Coordinate, Cell]:
        if self._present_cells is None:
            self._present_cells = {key: cell for key, cell in self.cells.items() if not cell.is_empty}
        return self._present_cells

    @property
    def hyperlinks(self) -> dict[Coordinate, str]:
        if self._hyperlinks is None:
            self._hyperlinks = extract_hyperlinks(self.source, self.relationships)
        return self._hyperlinks

    @property
    def merged_ranges(self) -> list[RangeRef]:
        if self._merged_ranges is None:
            self._merged_ranges = read_merged_ranges(self.source)
        return self._merged_ranges

    @property
    def dimensions(self) -> str | None:
        """Declared used range, e.g. ``"A1:D20"``; an upper bound only."""
        if not self._dimensions_read:
            self._dimensions = read_dimension(self.source)
            self._dimensions_read = True
        return self._dimensions

    @property
    def first_row(self) -> int | None:
        if self._first_row is None and self.present_cells:
            self._first_row = min(key.row for key in self.present_cells)
        return self._first_row

    @property
    def last_row(self) -> int | None:
        if self._last_row is None and self.present_cells:
            self._last_row = max(key.row for key in self.present_cells)
        return self._last_row

    @property
    def first_column(self) -> int | None:
        if self._first_column is None and self.present_cells:
            self._first_column = min(key.column for key in self.present_cells)
        return self._first_column

    @property
    def last_column(self) -> int | None:
        if self._last_column is None and self.present_cells:
            self._last_column = max(key.column for key in self.present_cells)
        return self._last_column

    def cell_at(self, key: CellKey) -> Cell | None:
        return self.cells.get(_as_coordinate(key))

    def hyperlink_at(self, key: CellKey) -> str | None:
        return self.hyperlinks.get(_as_coordinate(key))

    def format_for(self, key: CellKey) -> str | None:
        cell = self.cell_at(key)
        if cell is None:
            return None
        return self.styles.format_for(cell.style)

    def row(self, row_number: int) -> list[Any]:
        if self.first_column is None or self.last_column is None:
            return []
        return [
            self._value_at(Coordinate(row_number, col))
            for col in range(self.first_column, self.last_column + 1)
        ]

    def column(self, col_number: int) -> list[Any]:
        if self.first_row is None or self.last_row is None:
            return []
        return [
            self._value_at(Coordinate(row, col_number))
            for row in range(self.first_row, self.last_row + 1)
        ]

    def each_row(
        self,
        *,
        max_rows: int | None = None,
        offset: int | None = None,
        pad_cells: bool | None = None,
    ) -> Iterator[list[Cell | None]]:
        """Stream rows in document order without building the cell table.

        ``offset`` rows are skipped first, then at most ``max_rows`` rows are
        yielded. With ``pad_cells`` the list index of a cell is its column
        number minus one; columns without a cell element become ``None``.
        """
        max_rows = self.options.max_rows if max_rows is None else max_rows
        offset = self.options.offset if offset is None else offset
        pad_cells = self.options.pad_cells if pad_cells is None else pad_cells

        rows = iter_rows(self.source)
        try:
            for row_count, row_elem in enumerate(rows):
                if max_rows is not None and row_count >= offset + max_rows:
                    break
                if row_count < offset:
                    continue
                yield self._cells_for_row(row_elem, pad_cells)
        finally:
            rows.close()

    def _value_at(self, coordinate: Coordinate) -> Any:
        cell = self.cells.get(coordinate)
        return cell.value if cell is not None else None

    def _cells_for_row(self, row_elem: ET.Element, pad_cells: bool) -> list[Cell | None]:
        cells: list[Cell | None] = []
        last_column = 0
        for cell_elem in row_elem:
            if local_name(cell_elem.tag) != "c":
                continue
            cell = self._resolve(cell_elem)
            if pad_cells:
                cells.extend([None] * (cell.coordinate.column - 1 - last_column))
            cells.append(cell)
            last_column = cell.coordinate.column
        return cells

    def _resolve(self, cell_elem: ET.Element) -> Cell:
        hyperlink = None
        if not self.options.skip_hyperlinks:
            hyperlink = self.hyperlinks.get(cell_coordinate(cell_elem))
        return resolve_cell(
            cell_elem,
            shared_strings=self.shared_strings,
            styles=self.styles,
            workbook=self.workbook,
            hyperlink=hyperlink,
        )

    def _extract_cells(self) -> dict[Coordinate, Cell]:
        extracted: dict[Coordinate, Cell] = {}
        for row_elem in iter_rows(self.source):
            for cell_elem in row_elem:
                if local_name(cell_elem.tag) != "c":
                    continue
                cell = self._resolve(cell_elem)
                extracted[cell.coordinate] = cell

        if self.options.expand_merged_ranges:
            expand_merged_ranges(extracted, self.merged_ranges)

        logger.debug("Extracted %d cells from %s", len(extracted), self.name or "worksheet")
        return extracted
