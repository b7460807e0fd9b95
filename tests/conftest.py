from __future__ import annotations

from pathlib import Path

import pytest

from xlsxgrid.package import Relationships, SharedStrings, StyleFormats, WorkbookContext

from tests.helpers import build_xlsx


@pytest.fixture()
def shared_strings() -> SharedStrings:
    return SharedStrings(plain=["Hello", "World"], html=["Hello", "World"])


@pytest.fixture()
def styles() -> StyleFormats:
    return StyleFormats(
        formats={
            0: "General",
            1: "m/d/yyyy",
            2: "h:mm:ss",
            3: "m/d/yyyy h:mm",
            4: "0.00",
            5: "0%",
            6: "#,##0.00",
        }
    )


@pytest.fixture()
def relationships() -> Relationships:
    return Relationships(targets={"rId1": "https://example.com/", "rId2": "https://example.org/docs"})


@pytest.fixture()
def workbook() -> WorkbookContext:
    return WorkbookContext()


@pytest.fixture()
def sample_xlsx(tmp_path: Path) -> Path:
    return build_xlsx(tmp_path / "sample.xlsx")
