"""Workbook-level lookups consumed by the worksheet decoder.

The decoder only depends on the three protocols below. The concrete classes
are small readers for the matching package parts; each is built once per
workbook and never changes afterwards, so any number of sheets may share
them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from html import escape as html_escape
from typing import Protocol
from xml.etree import ElementTree as ET

from .parser.namespaces import NS, PACKAGE_REL_NS, SPREADSHEET_NS
from .parser.numfmt import BUILTIN_NUMFMTS
from .parser.utils import local_name

logger = logging.getLogger(__name__)

BASE_DATE_1900 = date(1899, 12, 30)
BASE_DATE_1904 = date(1904, 1, 1)


class SharedStringLookup(Protocol):
    def get(self, index: int) -> str: ...

    def is_html(self, index: int) -> bool: ...

    def get_html(self, index: int) -> str: ...


class StyleFormatLookup(Protocol):
    def format_for(self, style_id: int) -> str: ...


class RelationshipLookup(Protocol):
    def target(self, rid: str) -> str | None: ...


@dataclass(slots=True, frozen=True)
class WorkbookContext:
    base_date: date = BASE_DATE_1900
    base_timestamp: datetime = datetime(1899, 12, 30)

    @classmethod
    def for_epoch(cls, date1904: bool) -> WorkbookContext:
        base = BASE_DATE_1904 if date1904 else BASE_DATE_1900
        return cls(base_date=base, base_timestamp=datetime(base.year, base.month, base.day))

    @classmethod
    def from_xml(cls, payload: bytes | str) -> WorkbookContext:
        root = ET.fromstring(payload)
        props = root.find("a:workbookPr", NS)
        flag = props.attrib.get("date1904", "") if props is not None else ""
        return cls.for_epoch(flag.lower() in {"1", "true"})


@dataclass(slots=True)
class SharedStrings:
    plain: list[str] = field(default_factory=list)
    html: list[str] = field(default_factory=list)
    prefer_html: bool = False

    @classmethod
    def from_xml(cls, payload: bytes | str, *, prefer_html: bool = False) -> SharedStrings:
        root = ET.fromstring(payload)
        plain: list[str] = []
        html: list[str] = []
        for si in root.findall(f"{{{SPREADSHEET_NS}}}si"):
            text, rendered = _decode_string_item(si)
            plain.append(text)
            html.append(rendered)
        logger.debug("Loaded %d shared strings", len(plain))
        return cls(plain=plain, html=html, prefer_html=prefer_html)

    def get(self, index: int) -> str:
        if index < 0:
            raise IndexError(index)
        return self.plain[index]

    def is_html(self, index: int) -> bool:
        if not self.prefer_html or not 0 <= index < len(self.html):
            return False
        return any(tag in self.html[index] for tag in ("<b>", "<i>", "<u>", "<sup>", "<sub>"))

    def get_html(self, index: int) -> str:
        if index < 0:
            raise IndexError(index)
        return self.html[index]


def _decode_string_item(si: ET.Element) -> tuple[str, str]:
    direct = si.find(f"{{{SPREADSHEET_NS}}}t")
    if direct is not None:
        text = direct.text or ""
        return text, html_escape(text, quote=False)

    texts: list[str] = []
    rendered: list[str] = []
    for run in si.findall(f"{{{SPREADSHEET_NS}}}r"):
        run_text = run.findtext(f"{{{SPREADSHEET_NS}}}t", default="")
        texts.append(run_text)
        rendered.append(_render_run(run, run_text))
    return "".join(texts), "".join(rendered)


def _render_run(run: ET.Element, text: str) -> str:
    out = html_escape(text, quote=False)
    props = run.find("a:rPr", NS)
    if props is None:
        return out
    for child in props:
        tag = local_name(child.tag)
        if tag in {"b", "i", "u"} and child.attrib.get("val", "1") not in {"0", "false"}:
            out = f"<{tag}>{out}</{tag}>"
        elif tag == "vertAlign":
            align = child.attrib.get("val")
            if align == "superscript":
                out = f"<sup>{out}</sup>"
            elif align == "subscript":
                out = f"<sub>{out}</sub>"
    return out


@dataclass(slots=True)
class StyleFormats:
    formats: dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_xml(cls, payload: bytes | str) -> StyleFormats:
        root = ET.fromstring(payload)
        custom_numfmts = _parse_custom_numfmts(root)
        formats: dict[int, str] = {}
        for idx, xf in enumerate(root.findall("a:cellXfs/a:xf", NS)):
            try:
                num_fmt_id = int(xf.attrib.get("numFmtId", "0"))
            except ValueError:
                num_fmt_id = 0
            formats[idx] = custom_numfmts.get(num_fmt_id) or BUILTIN_NUMFMTS.get(num_fmt_id, "General")
        return cls(formats=formats)

    def format_for(self, style_id: int) -> str:
        return self.formats.get(style_id) or self.formats.get(0) or "General"


def _parse_custom_numfmts(styles_root: ET.Element) -> dict[int, str]:
    result: dict[int, str] = {}
    for num_fmt in styles_root.findall("a:numFmts/a:numFmt", NS):
        raw_id = num_fmt.attrib.get("numFmtId")
        code = num_fmt.attrib.get("formatCode")
        if raw_id is None or code is None:
            continue
        try:
            fmt_id = int(raw_id)
        except ValueError:
            continue
        result[fmt_id] = code
    return result


@dataclass(slots=True)
class Relationships:
    targets: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_xml(cls, payload: bytes | str) -> Relationships:
        root = ET.fromstring(payload)
        targets: dict[str, str] = {}
        for rel in root.findall(f"{{{PACKAGE_REL_NS}}}Relationship"):
            rel_id = rel.attrib.get("Id")
            target = rel.attrib.get("Target")
            if rel_id and target:
                targets[rel_id] = target
        return cls(targets=targets)

    def target(self, rid: str) -> str | None:
        return self.targets.get(rid)
