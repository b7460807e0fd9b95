from __future__ import annotations

import logging
from pathlib import Path
from typing import IO
from zipfile import ZipFile

from .errors import PackageError
from .model import SheetOptions
from .package import Relationships, SharedStrings, StyleFormats, WorkbookContext
from .parser.utils import rels_path_for
from .sheet import Sheet

logger = logging.getLogger(__name__)

DEFAULT_SHEET_PART = "xl/worksheets/sheet1.xml"


def open_sheet(
    path: str | Path,
    part: str = DEFAULT_SHEET_PART,
    *,
    options: SheetOptions | None = None,
) -> Sheet:
    """Open one worksheet part of an .xlsx file.

    The workbook tables are read eagerly; the worksheet itself is reopened
    from the archive every time the sheet needs to scan it.
    """
    source_path = Path(path)
    opts = options or SheetOptions()
    part = part.lstrip("/")

    with ZipFile(source_path) as zip_file:
        names = set(zip_file.namelist())
        if part not in names:
            raise PackageError(f"Worksheet part not found: {part}")

        shared_strings = (
            SharedStrings.from_xml(zip_file.read("xl/sharedStrings.xml"), prefer_html=opts.prefer_html)
            if "xl/sharedStrings.xml" in names
            else SharedStrings(prefer_html=opts.prefer_html)
        )
        styles = StyleFormats.from_xml(zip_file.read("xl/styles.xml")) if "xl/styles.xml" in names else StyleFormats()
        workbook = (
            WorkbookContext.from_xml(zip_file.read("xl/workbook.xml"))
            if "xl/workbook.xml" in names
            else WorkbookContext()
        )
        rels_path = rels_path_for(part)
        relationships = Relationships.from_xml(zip_file.read(rels_path)) if rels_path in names else Relationships()

    logger.debug("Opened %s from %s", part, source_path)

    def open_part() -> IO[bytes]:
        zip_file = ZipFile(source_path)
        try:
            return _ArchiveMember(zip_file, zip_file.open(part))
        except Exception:
            zip_file.close()
            raise

    return Sheet(
        open_part,
        shared_strings=shared_strings,
        styles=styles,
        relationships=relationships,
        workbook=workbook,
        options=opts,
        name=part,
    )


class _ArchiveMember:
    """Member stream that also closes its archive."""

    def __init__(self, zip_file: ZipFile, stream: IO[bytes]) -> None:
        self._zip_file = zip_file
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        return self._stream.read(size)

    def close(self) -> None:
        self._stream.close()
        self._zip_file.close()
