"""Number-format helpers: built-in format ids, date detection and display.

Formats are only used to tell plain numbers apart from the date/time family
and to render a readable value. This is not a full implementation of the
format-code language.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time

BUILTIN_NUMFMTS: dict[int, str] = {
    0: "General",
    1: "0",
    2: "0.00",
    3: "#,##0",
    4: "#,##0.00",
    9: "0%",
    10: "0.00%",
    11: "0.00E+00",
    12: "# ?/?",
    13: "# ??/??",
    14: "m/d/yyyy",
    15: "d-mmm-yy",
    16: "d-mmm",
    17: "mmm-yy",
    18: "h:mm AM/PM",
    19: "h:mm:ss AM/PM",
    20: "h:mm",
    21: "h:mm:ss",
    22: "m/d/yyyy h:mm",
    27: 'yyyy"年"m"月"',
    28: 'm"月"d"日"',
    29: 'm"月"d"日"',
    30: "m-d-yy",
    31: 'yyyy"年"m"月"d"日"',
    32: 'h"時"mm"分"',
    33: 'h"時"mm"分"ss"秒"',
    34: 'yyyy"年"m"月"',
    35: 'm"月"d"日"',
    36: 'yyyy"年"m"月"',
    37: "#,##0 ;(#,##0)",
    38: "#,##0 ;[Red](#,##0)",
    39: "#,##0.00;(#,##0.00)",
    40: "#,##0.00;[Red](#,##0.00)",
    45: "mm:ss",
    46: "[h]:mm:ss",
    47: "mmss.0",
    48: "##0.0E+0",
    49: "@",
    50: 'yyyy"年"m"月"',
    51: 'm"月"d"日"',
    52: 'yyyy"年"m"月"',
    53: 'm"月"d"日"',
    54: 'm"月"d"日"',
    55: 'yyyy"年"m"月"',
    56: 'm"月"d"日"',
    57: 'yyyy"年"m"月"',
    58: 'm"月"d"日"',
}

ERROR_VALUES = frozenset({"#N/A", "#REF!", "#NAME?", "#DIV/0!", "#NULL!", "#VALUE!", "#NUM!"})

_DATE_TOKEN_RE = re.compile(r"[ymdhs]|am/pm|a/p", re.IGNORECASE)
_BRACKET_RE = re.compile(r"\[([^\]]*)\]")
_ELAPSED_RE = re.compile(r"^(?:h+|m+|s+)$", re.IGNORECASE)

_TEMPORAL_PATTERNS = {
    "date": "%Y-%m-%d",
    "time": "%H:%M:%S",
    "datetime": "%Y-%m-%d %H:%M:%S",
}


def _strip_literals(fmt: str) -> str:
    out: list[str] = []
    in_quote = False
    escaped = False
    for ch in fmt:
        if escaped:
            escaped = False
            continue
        if ch == '"':
            in_quote = not in_quote
            continue
        if in_quote:
            continue
        if ch == "\\":
            escaped = True
            continue
        out.append(ch)
    # [Red], [$-409] and friends carry no digits; [h], [mm], [ss] are elapsed time
    return _BRACKET_RE.sub(lambda m: m.group(1) if _ELAPSED_RE.match(m.group(1)) else "", "".join(out))


def is_date_format(fmt: str | None) -> bool:
    if not fmt or fmt.lower() == "general":
        return False
    primary = _strip_literals(fmt.split(";")[0])
    if "#" in primary or "@" in primary:
        return False
    return bool(_DATE_TOKEN_RE.search(primary))


def format_number(number: int | float | str, fmt: str) -> str:
    if isinstance(number, str):
        return number
    if not fmt or fmt.lower() == "general":
        return _normalize_general_number(number)

    primary = fmt.split(";")[0]
    if "%" in primary:
        return _format_percent(number, primary)
    if "E+" in primary.upper():
        return _normalize_general_number(number)
    if any(token in primary for token in ("0", "#")):
        return _format_decimal(number, primary)
    return _normalize_general_number(number)


def format_temporal(kind: str, value: date | time | datetime) -> str:
    return value.strftime(_TEMPORAL_PATTERNS[kind])


def _normalize_general_number(number: int | float) -> str:
    if not math.isfinite(number):
        return repr(float(number))
    if abs(number - round(number)) < 1e-11:
        return str(int(round(number)))
    return repr(float(number))


def _format_percent(number: int | float, fmt: str) -> str:
    decimals = 0
    if "." in fmt:
        after = fmt.split(".", 1)[1]
        decimals = sum(1 for ch in after if ch in {"0", "#"})
    value = number * 100
    return f"{value:.{decimals}f}%"


def _format_decimal(number: int | float, fmt: str) -> str:
    use_grouping = "," in fmt.split(".", 1)[0]
    decimals = 0
    if "." in fmt:
        after = fmt.split(".", 1)[1]
        decimals = sum(1 for ch in after if ch in {"0", "#"})

    if use_grouping:
        return f"{number:,.{decimals}f}"
    return f"{number:.{decimals}f}"
