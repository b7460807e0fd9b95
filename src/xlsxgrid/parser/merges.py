from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from ..model import Cell, Coordinate, RangeRef
from .streaming import SheetSource, iter_elements
from .utils import iter_cells_in_range, parse_range_ref

logger = logging.getLogger(__name__)


def read_merged_ranges(source: SheetSource) -> list[RangeRef]:
    merges: list[RangeRef] = []
    for merge in iter_elements(source, "mergeCell"):
        ref = merge.attrib.get("ref")
        if not ref:
            continue
        merges.append(parse_range_ref(ref))
    return merges


def expand_merged_ranges(cells: dict[Coordinate, Cell], ranges: Iterable[RangeRef]) -> None:
    """Copy each range's top-left cell into the rest of the range, in place.

    The top-left cell itself is never touched, so running this twice over the
    same table changes nothing. Ranges whose top-left cell is absent are
    skipped.
    """
    for rng in ranges:
        source = cells.get(rng.top_left)
        if source is None:
            logger.debug("Merged range %s has no anchor cell", rng.ref)
            continue
        for coordinate in iter_cells_in_range(rng):
            if coordinate == rng.top_left:
                continue
            cells[coordinate] = replace(source, coordinate=coordinate)
