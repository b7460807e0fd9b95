from .api import open_sheet
from .errors import PackageError, ParseError, XlsxGridError
from .model import Cell, Coordinate, RangeRef, SheetOptions
from .package import Relationships, SharedStrings, StyleFormats, WorkbookContext
from .sheet import Sheet

__all__ = [
    "Cell",
    "Coordinate",
    "PackageError",
    "ParseError",
    "RangeRef",
    "Relationships",
    "SharedStrings",
    "Sheet",
    "SheetOptions",
    "StyleFormats",
    "WorkbookContext",
    "XlsxGridError",
    "open_sheet",
]
