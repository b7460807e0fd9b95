"""Turn one ``<c>`` element into a typed :class:`~xlsxgrid.model.Cell`.

The stored text of a numeric cell can mean a plain number, a date, a time or
a datetime; which one depends on the number format of the cell's style. Once
the format is known to be in the date family, the split is decided from the
number alone:

* below 1.0 is a time of day,
* more than 1e-6 away from a whole day is a datetime,
* anything else is a date.

Custom formats can be misclassified by this rule (a whole-number value under
a datetime format comes back as a date). The format is not consulted again.
"""

from __future__ import annotations

import logging
import math
from datetime import time, timedelta
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from ..errors import ParseError
from ..model import Cell, Coordinate
from .numfmt import ERROR_VALUES, is_date_format
from .utils import coordinate_from_ref, local_name

if TYPE_CHECKING:
    from ..package import SharedStringLookup, StyleFormatLookup, WorkbookContext

logger = logging.getLogger(__name__)

DATETIME_EPSILON = 1e-6
SECONDS_PER_DAY = 86400


def resolve_cell(
    elem: ET.Element,
    *,
    shared_strings: SharedStringLookup,
    styles: StyleFormatLookup,
    workbook: WorkbookContext,
    hyperlink: str | None = None,
) -> Cell:
    coordinate = cell_coordinate(elem)
    children = list(elem)
    if not children:
        return Cell.empty(coordinate)

    style = _style_id(elem.attrib.get("s"), coordinate)
    formula: str | None = None
    value_elem: ET.Element | None = None

    for child in children:
        tag = local_name(child.tag)
        if tag == "is":
            text = _inline_text(child)
            if text:
                return Cell(
                    kind="string",
                    coordinate=coordinate,
                    content=text,
                    value=text,
                    formula=formula,
                    style=style,
                    hyperlink=hyperlink,
                )
        elif tag == "f":
            formula = child.text or ""
        elif tag == "v":
            value_elem = child

    if value_elem is None:
        return Cell.empty(coordinate)

    content = value_elem.text or ""
    cell_type = elem.attrib.get("t")

    if cell_type == "s":
        return _shared_string_cell(content, coordinate, formula, style, hyperlink, shared_strings)
    if cell_type == "b":
        return Cell(
            kind="boolean",
            coordinate=coordinate,
            content=content,
            value=content.strip() == "1",
            formula=formula,
            style=style,
            hyperlink=hyperlink,
        )
    if cell_type == "str":
        return Cell(
            kind="string",
            coordinate=coordinate,
            content=content,
            value=content,
            formula=formula,
            style=style,
            hyperlink=hyperlink,
        )

    fmt = styles.format_for(style)
    if is_date_format(fmt):
        return _temporal_cell(content, coordinate, formula, fmt, style, hyperlink, workbook)
    return Cell(
        kind="number",
        coordinate=coordinate,
        content=content,
        value=coerce_number(content, fmt),
        formula=formula,
        style=style,
        hyperlink=hyperlink,
        number_format=fmt,
    )


def cell_coordinate(elem: ET.Element) -> Coordinate:
    ref = elem.attrib.get("r")
    if not ref:
        raise ParseError("Cell element has no reference")
    return coordinate_from_ref(ref)


def coerce_number(content: str, fmt: str) -> int | float | str:
    raw = content.strip()
    if raw in ERROR_VALUES:
        return raw
    try:
        if "%" in fmt or ".0" in fmt or "." in raw or "e" in raw.lower():
            return float(raw)
        return int(raw, 10)
    except ValueError:
        logger.debug("Non-numeric content %r read as 0", content)
        return 0


def classify_day_count(count: float) -> str:
    if count < 1.0:
        return "time"
    if abs(count - round(count)) > DATETIME_EPSILON:
        return "datetime"
    return "date"


def _day_count(content: str) -> float:
    try:
        count = float(content)
    except ValueError:
        logger.debug("Non-numeric date content %r read as 0", content)
        return 0.0
    if not math.isfinite(count):
        logger.debug("Non-finite date content %r read as 0", content)
        return 0.0
    return count


def _temporal_cell(content, coordinate, formula, fmt, style, hyperlink, workbook) -> Cell:
    count = _day_count(content)
    kind = classify_day_count(count)
    try:
        if kind == "time":
            seconds = round(count * SECONDS_PER_DAY) % SECONDS_PER_DAY
            hours, remainder = divmod(seconds, 3600)
            value = time(hours, *divmod(remainder, 60))
        elif kind == "datetime":
            value = workbook.base_timestamp + timedelta(seconds=round(count * SECONDS_PER_DAY))
        else:
            value = workbook.base_date + timedelta(days=round(count))
    except OverflowError:
        logger.debug("Day count %r at %s is outside the date range, read as number", content, coordinate)
        return Cell(
            kind="number",
            coordinate=coordinate,
            content=content,
            value=coerce_number(content, fmt),
            formula=formula,
            style=style,
            hyperlink=hyperlink,
            number_format=fmt,
        )

    return Cell(
        kind=kind,
        coordinate=coordinate,
        content=content,
        value=value,
        formula=formula,
        style=style,
        hyperlink=hyperlink,
        number_format=fmt,
    )


def _shared_string_cell(content, coordinate, formula, style, hyperlink, shared_strings) -> Cell:
    try:
        index = int(content)
    except ValueError:
        logger.debug("Shared string index %r at %s read as 0", content, coordinate)
        index = 0

    try:
        if shared_strings.is_html(index):
            text = shared_strings.get_html(index)
        else:
            text = shared_strings.get(index)
    except (IndexError, KeyError):
        logger.debug("Shared string %d not found for %s", index, coordinate)
        return Cell.empty(coordinate)

    return Cell(
        kind="string",
        coordinate=coordinate,
        content=content,
        value=text,
        formula=formula,
        style=style,
        hyperlink=hyperlink,
    )


def _style_id(raw: str | None, coordinate: Coordinate) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.debug("Unparseable style id %r at %s, using 0", raw, coordinate)
        return 0


def _inline_text(inline: ET.Element) -> str:
    parts: list[str] = []
    for child in inline:
        tag = local_name(child.tag)
        if tag == "t":
            parts.append(child.text or "")
        elif tag == "r":
            for run_child in child:
                if local_name(run_child.tag) == "t":
                    parts.append(run_child.text or "")
    return "".join(parts)
