"""Display text for cells whose number format renders a date."""

# Module responsibilities:
# - Render date/datetime values through their Excel number format the way a
#   spreadsheet would display them (e.g. ``yyyy/m/d`` -> ``2024/3/15``).
# - Return None when no formatted representation applies so callers can fall
#   back to the raw value.

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import List, Optional

from openpyxl.styles.numbers import BUILTIN_FORMATS, is_date_format

from sheetmerge.config import DEFAULT_DATE_FORMAT
from sheetmerge.services.merge.models import Cell

# Built-in format 14 follows the reader's locale, so it is shown through the
# configured short date format instead of openpyxl's US rendering.
SHORT_DATE_FORMAT = BUILTIN_FORMATS[14]

_TOKEN_RE = re.compile(
    r'"[^"]*"|\\.|\[[^\]]*\]|am/pm|a/p|yyyy|yy|mmmmm|mmmm|mmm|mm|m|dddd|ddd|dd|d|hh|h|ss|s|.',
    re.IGNORECASE,
)


def _is_minute(tokens: List[str], index: int) -> bool:
    """``m``/``mm`` means minutes right after an hour or right before seconds."""

    for prev in reversed(tokens[:index]):
        low = prev.lower()
        if low in {"h", "hh"}:
            return True
        if low[:1] in {"y", "m", "d", "s"}:
            break
    for nxt in tokens[index + 1 :]:
        low = nxt.lower()
        if low in {"s", "ss"}:
            return True
        if low[:1] in {"y", "m", "d", "h"}:
            break
    return False


def render_date(value: date, number_format: str) -> str:
    """Render ``value`` using the first section of an Excel date format."""

    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    section = number_format.split(";")[0]
    tokens = _TOKEN_RE.findall(section)
    twelve_hour = any(tok.lower() in {"am/pm", "a/p"} for tok in tokens)

    parts: List[str] = []
    for idx, tok in enumerate(tokens):
        low = tok.lower()
        if tok.startswith('"'):
            parts.append(tok[1:-1])
        elif tok.startswith("\\"):
            parts.append(tok[1:])
        elif tok.startswith("["):
            continue
        elif low == "yyyy":
            parts.append(f"{value.year:04d}")
        elif low == "yy":
            parts.append(f"{value.year % 100:02d}")
        elif low in {"m", "mm"} and _is_minute(tokens, idx):
            parts.append(f"{value.minute:02d}" if low == "mm" else str(value.minute))
        elif low == "mmmmm":
            parts.append(calendar.month_name[value.month][0])
        elif low == "mmmm":
            parts.append(calendar.month_name[value.month])
        elif low == "mmm":
            parts.append(calendar.month_abbr[value.month])
        elif low == "mm":
            parts.append(f"{value.month:02d}")
        elif low == "m":
            parts.append(str(value.month))
        elif low == "dddd":
            parts.append(calendar.day_name[value.weekday()])
        elif low == "ddd":
            parts.append(calendar.day_abbr[value.weekday()])
        elif low == "dd":
            parts.append(f"{value.day:02d}")
        elif low == "d":
            parts.append(str(value.day))
        elif low in {"h", "hh"}:
            hour = value.hour % 12 or 12 if twelve_hour else value.hour
            parts.append(f"{hour:02d}" if low == "hh" else str(hour))
        elif low in {"s", "ss"}:
            parts.append(f"{value.second:02d}" if low == "ss" else str(value.second))
        elif low == "am/pm":
            parts.append("AM" if value.hour < 12 else "PM")
        elif low == "a/p":
            parts.append("A" if value.hour < 12 else "P")
        else:
            parts.append(tok)
    return "".join(parts)


def format_cell(cell: Cell, short_date_format: str = DEFAULT_DATE_FORMAT) -> Optional[str]:
    """Return the formatted display text of ``cell`` or None.

    Cells in the built-in short date format render through
    ``short_date_format``; other date formats render as written.
    """

    if not isinstance(cell.value, (date, datetime)):
        return None
    if cell.number_format == SHORT_DATE_FORMAT:
        return render_date(cell.value, short_date_format)
    if is_date_format(cell.number_format):
        return render_date(cell.value, cell.number_format)
    return None


__all__ = ["SHORT_DATE_FORMAT", "format_cell", "render_date"]
