"""Exceptions raised by xlsxgrid."""


class XlsxGridError(Exception):
    """Base exception for all xlsxgrid errors."""

    pass


class ParseError(XlsxGridError, ValueError):
    """Raised when a cell reference or the worksheet markup cannot be parsed."""

    pass


class PackageError(XlsxGridError):
    """Raised when a required part is missing from the .xlsx package."""

    pass
