SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

NS = {
    "a": SPREADSHEET_NS,
    "r": DOCUMENT_REL_NS,
}

REL_ID_ATTR = f"{{{DOCUMENT_REL_NS}}}id"
