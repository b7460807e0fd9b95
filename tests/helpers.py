from __future__ import annotations

from pathlib import Path
from xml.etree import ElementTree as ET
from zipfile import ZipFile

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


def parse_cell(snippet: str) -> ET.Element:
    wrapper = ET.fromstring(f'<sheetData xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">{snippet}</sheetData>')
    return wrapper[0]


def worksheet_xml(
    rows: str,
    *,
    dimension: str | None = None,
    merges: tuple[str, ...] = (),
    hyperlinks: str = "",
) -> str:
    parts = [HEADER, f'<worksheet xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">']
    if dimension:
        parts.append(f'<dimension ref="{dimension}"/>')
    parts.append(f"<sheetData>{rows}</sheetData>")
    if merges:
        parts.append(f'<mergeCells count="{len(merges)}">')
        parts.extend(f'<mergeCell ref="{ref}"/>' for ref in merges)
        parts.append("</mergeCells>")
    if hyperlinks:
        parts.append(f"<hyperlinks>{hyperlinks}</hyperlinks>")
    parts.append("</worksheet>")
    return "".join(parts)


SAMPLE_ROWS = (
    '<row r="1">'
    '<c r="A1" t="s"><v>0</v></c>'
    '<c r="B1" t="s"><v>1</v></c>'
    '<c r="C1" t="s"><v>2</v></c>'
    '<c r="D1" t="inlineStr"><is><t>Notes</t></is></c>'
    "</row>"
    '<row r="2">'
    '<c r="A2" t="s"><v>3</v></c>'
    '<c r="B2" s="1"><v>44927</v></c>'
    '<c r="C2"><v>42</v></c>'
    '<c r="D2" t="b"><v>1</v></c>'
    '<c r="E2"><f>C2*2</f><v>84</v></c>'
    "</row>"
    '<row r="3">'
    '<c r="A3" t="str"><f>UPPER(A2)</f><v>ALICE</v></c>'
    '<c r="B3" s="2"><v>0.5</v></c>'
    '<c r="C3" s="3"><v>44927.25</v></c>'
    '<c r="D3" t="b"><v>0</v></c>'
    "</row>"
    '<row r="4">'
    '<c r="A4" t="s"><v>4</v></c>'
    '<c r="C4" t="s"><v>5</v></c>'
    '<c r="D4" s="4"><v>1.5</v></c>'
    "</row>"
    '<row r="5">'
    '<c r="A5"/>'
    '<c r="E5"><v>3.5</v></c>'
    "</row>"
)

SAMPLE_HYPERLINKS = (
    '<hyperlink ref="C4" r:id="rId1"/>'
    '<hyperlink ref="D4" location="Sheet2!A1" display="internal"/>'
    '<hyperlink ref="E5" r:id="rId9"/>'
)

SHARED_STRINGS_XML = (
    HEADER + f'<sst xmlns="{SPREADSHEET_NS}" count="6" uniqueCount="6">'
    "<si><t>Name</t></si>"
    "<si><t>Joined</t></si>"
    '<si><r><rPr><b/></rPr><t>Bold</t></r><r><t xml:space="preserve"> plain</t></r></si>'
    "<si><t>Alice</t></si>"
    "<si><t>Merged</t></si>"
    "<si><t>Site</t></si>"
    "</sst>"
)

STYLES_XML = (
    HEADER + f'<styleSheet xmlns="{SPREADSHEET_NS}">'
    '<numFmts count="1"><numFmt numFmtId="164" formatCode="yyyy-mm-dd hh:mm"/></numFmts>'
    '<cellXfs count="5">'
    '<xf numFmtId="0"/>'
    '<xf numFmtId="14"/>'
    '<xf numFmtId="21"/>'
    '<xf numFmtId="164"/>'
    '<xf numFmtId="2"/>'
    "</cellXfs>"
    "</styleSheet>"
)

WORKBOOK_XML = (
    HEADER + f'<workbook xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">'
    '<workbookPr date1904="{date1904}"/>'
    '<sheets><sheet name="Data" sheetId="1" r:id="rId1"/></sheets>'
    "</workbook>"
)

SHEET_RELS_XML = (
    HEADER + f'<Relationships xmlns="{PACKAGE_REL_NS}">'
    '<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"'
    ' Target="https://example.com/" TargetMode="External"/>'
    "</Relationships>"
)


def sample_worksheet() -> str:
    return worksheet_xml(
        SAMPLE_ROWS,
        dimension="A1:E5",
        merges=("A4:B5",),
        hyperlinks=SAMPLE_HYPERLINKS,
    )


def build_xlsx(path: Path, *, worksheet: str | None = None, date1904: bool = False) -> Path:
    with ZipFile(path, "w") as zf:
        zf.writestr("xl/workbook.xml", WORKBOOK_XML.replace("{date1904}", "1" if date1904 else "0"))
        zf.writestr("xl/styles.xml", STYLES_XML)
        zf.writestr("xl/sharedStrings.xml", SHARED_STRINGS_XML)
        zf.writestr("xl/worksheets/sheet1.xml", worksheet or sample_worksheet())
        zf.writestr("xl/worksheets/_rels/sheet1.xml.rels", SHEET_RELS_XML)
    return path


def ground_truth_counts(path: Path, part: str = "xl/worksheets/sheet1.xml") -> dict[str, int]:
    with ZipFile(path) as zf:
        root = ET.fromstring(zf.read(part))
    return {
        "cell_count": len(root.findall(f".//{{{SPREADSHEET_NS}}}c")),
        "row_count": len(root.findall(f".//{{{SPREADSHEET_NS}}}row")),
        "merge_count": len(root.findall(f".//{{{SPREADSHEET_NS}}}mergeCell")),
        "formula_count": len(root.findall(f".//{{{SPREADSHEET_NS}}}f")),
    }
