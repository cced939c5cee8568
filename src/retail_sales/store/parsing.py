"""Value parsers for loading sales rows.

Every parser returns ``None`` for a null value (see ``is_null``) and raises
``ValueError`` when a non-null value cannot be converted. The table store
turns those ``ValueError`` into ``SchemaError`` with row/column context.

Key utilities:
- Text normalization: strip invisible characters, remove accents, snake_case
- Number parsing: US/EU thousand separators, currency symbols
- Date and time-of-day parsing with a small set of accepted formats

Examples:
    >>> to_float("1,234.50")
    1234.5
    >>> to_date("2022-11-05")
    Timestamp('2022-11-05 00:00:00')
    >>> to_time("18:30")
    datetime.timedelta(seconds=66600)
    >>> to_snake("Price Per Unit")
    'price_per_unit'
"""

from __future__ import annotations

import math
import re
import unicodedata
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

import numpy as np
import pandas as pd

from retail_sales.store.schema import GENDERS

NBSP = "\u00a0"  # Non-breaking space
NNBSP = "\u202f"  # Narrow non-breaking space
ZW = "".join(chr(c) for c in (0x200B, 0x200C, 0x200D, 0xFEFF))

NULL_TOKENS = frozenset({"", "null", "none", "nan", "na", "n/a", "nat"})

_CURRENCY_RE = re.compile(r"[^\d,.\-\(\)\s]")

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y")
TIME_FORMATS = ("%H:%M:%S", "%H:%M:%S.%f", "%H:%M", "%I:%M:%S %p", "%I:%M %p")

# Whole days representable by the table's datetime64[ns] column
FIRST_DAY = pd.Timestamp.min.ceil("D").date()
LAST_DAY = pd.Timestamp.max.floor("D").date()

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)

_GENDER_ALIASES = {"m": "Male", "f": "Female"}


def strip_invisibles(x: Any) -> Optional[str]:
    """Remove invisible whitespace characters and collapse spaces.

    Examples:
        >>> strip_invisibles("  Clothing  ")
        'Clothing'
    """
    if x is None or (isinstance(x, float) and pd.isna(x)):
        return None
    s = str(x)
    s = s.replace("\r", "").replace("\t", " ").replace(NBSP, " ").replace(NNBSP, " ")
    s = re.sub(r"[%s]" % re.escape(ZW), "", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def is_null(x: Any) -> bool:
    """Return True for None, NaN/NaT/NA and the textual null tokens."""
    if x is None or x is pd.NA or x is pd.NaT:
        return True
    if isinstance(x, float) and math.isnan(x):
        return True
    if isinstance(x, np.floating) and np.isnan(x):
        return True
    if isinstance(x, np.datetime64) and np.isnat(x):
        return True
    if isinstance(x, str):
        return (strip_invisibles(x) or "").lower() in NULL_TOKENS
    return False


def remove_accents(s: str) -> str:
    """Remove accents and diacritics from a string."""
    return "".join(c for c in unicodedata.normalize("NFD", s) if unicodedata.category(c) != "Mn")


def to_snake(s: str) -> str:
    """Convert a header to snake_case.

    Examples:
        >>> to_snake("Sale Date")
        'sale_date'
        >>> to_snake("transactions_id")
        'transactions_id'
    """
    s0 = strip_invisibles(s) or ""
    s1 = remove_accents(s0)
    # camelCase -> camel_Case before lowering
    s1 = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", s1).lower()
    s1 = re.sub(r"[^\w\s]", " ", s1)
    s1 = re.sub(r"\s+", "_", s1).strip("_")
    return s1


def to_float(x: Any) -> Optional[float]:
    """Parse a decimal amount.

    Accepts plain numbers, US ('1,234.56') and EU ('1.234,56') separators,
    currency symbols and negatives in parentheses.

    Raises:
        ValueError: If the value is not null and cannot be parsed.
    """
    if is_null(x):
        return None
    if isinstance(x, bool):
        raise ValueError(f"not a number: {x!r}")
    if isinstance(x, (int, float, np.integer, np.floating)):
        v = float(x)
        if math.isinf(v):
            raise ValueError(f"not a finite number: {x!r}")
        return v

    s = strip_invisibles(x) or ""
    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg, s = True, s[1:-1].strip()
    s = re.sub(r"\s+", "", _CURRENCY_RE.sub("", s))
    if not s or not re.search(r"\d", s):
        raise ValueError(f"not a number: {x!r}")

    if re.fullmatch(r"-?\d{1,3}(?:\.\d{3})+,\d+", s):
        s = s.replace(".", "").replace(",", ".")
    elif re.fullmatch(r"-?\d{1,3}(?:,\d{3})+(?:\.\d+)?", s):
        s = s.replace(",", "")
    elif "," in s and "." not in s:
        s = s.replace(",", ".")

    try:
        v = float(s)
    except ValueError:
        raise ValueError(f"not a number: {x!r}") from None
    if not math.isfinite(v):
        raise ValueError(f"not a finite number: {x!r}")
    return -v if neg else v


def to_int(x: Any) -> Optional[int]:
    """Parse an integer; integral floats such as '25.0' are accepted.

    Raises:
        ValueError: If the value is not null, is not a whole number, or
            does not fit in 64 bits.
    """
    if is_null(x):
        return None
    s = strip_invisibles(x) if isinstance(x, str) else None
    if isinstance(x, (int, np.integer)) and not isinstance(x, bool):
        v = int(x)
    elif s is not None and re.fullmatch(r"[+-]?\d+", s):
        v = int(s)
    else:
        f = to_float(x)
        if f is None:
            return None
        if not f.is_integer():
            raise ValueError(f"not a whole number: {x!r}")
        v = int(f)
    if not INT64_MIN <= v <= INT64_MAX:
        raise ValueError(f"integer out of 64-bit range: {x!r}")
    return v


def _checked_day(value: date, raw: Any) -> pd.Timestamp:
    day = value.date() if isinstance(value, datetime) else value
    if not FIRST_DAY <= day <= LAST_DAY:
        raise ValueError(f"date out of range {FIRST_DAY}..{LAST_DAY}: {raw!r}")
    return pd.Timestamp(day)


def to_date(x: Any) -> Optional[pd.Timestamp]:
    """Parse a calendar date into a midnight Timestamp.

    Tries the formats in ``DATE_FORMATS`` (ISO first, then day-first and
    month-first slash formats), then ISO date-times such as
    '2022-11-05 10:15:00'. Relative words ('today', 'now') and partial
    dates ('2022') are not dates.

    Raises:
        ValueError: If the value is not null and is not a date within
            ``FIRST_DAY``..``LAST_DAY``.
    """
    if is_null(x):
        return None
    if isinstance(x, np.datetime64):
        x = pd.Timestamp(x)
    if isinstance(x, (datetime, date)):
        return _checked_day(x, x)
    s = strip_invisibles(x) or ""
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(s, fmt)
        except ValueError:
            continue
        return _checked_day(parsed, x)
    if len(s) > 10 and s[10] in " T":
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            pass
        else:
            return _checked_day(parsed, x)
    raise ValueError(f"not a date: {x!r}")


def to_time(x: Any) -> Optional[timedelta]:
    """Parse a time of day into the offset since midnight.

    Raises:
        ValueError: If the value is not null, not a time, or not within a day.
    """
    if is_null(x):
        return None
    if isinstance(x, time):
        return timedelta(
            hours=x.hour, minutes=x.minute, seconds=x.second, microseconds=x.microsecond
        )
    if isinstance(x, timedelta):
        if not timedelta(0) <= x < timedelta(days=1):
            raise ValueError(f"time of day out of range: {x!r}")
        return timedelta(seconds=x.total_seconds())
    s = strip_invisibles(x) or ""
    for fmt in TIME_FORMATS:
        try:
            t = datetime.strptime(s.upper(), fmt).time()
        except ValueError:
            continue
        return to_time(t)
    raise ValueError(f"not a time of day: {x!r}")


def to_text(x: Any) -> Optional[str]:
    """Normalize a free-text value; blank becomes None."""
    if is_null(x):
        return None
    return strip_invisibles(x) or None


def to_gender(x: Any) -> Optional[str]:
    """Parse gender into one of ``GENDERS``, case-insensitively.

    Raises:
        ValueError: If the value is not null and not a known gender.
    """
    s = to_text(x)
    if s is None:
        return None
    low = s.lower()
    if low in _GENDER_ALIASES:
        return _GENDER_ALIASES[low]
    for g in GENDERS:
        if g.lower() == low:
            return g
    raise ValueError(f"unknown gender: {x!r}")
