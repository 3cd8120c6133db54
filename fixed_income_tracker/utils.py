from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

import pandas as pd

from . import config

Number = Union[Decimal, int, float, str]

NS_PER_DAY = 24 * 60 * 60 * 1_000_000_000


def to_decimal(value) -> Optional[Decimal]:
    """
    Convert form or store input to Decimal.

    - None and blank strings give None.
    - Floats go through str() so 0.1 stays 0.1.
    - Text may use a decimal comma ("12,5") and dot thousands ("1.234,56").
      Dots are read as thousands separators only when a comma is present:
      "1.000" is one, "1.000,00" is one thousand. Rates such as "10.650"
      would otherwise be misread.

    Raises ValueError for anything that is not a finite number.
    """
    if value is None:
        return None

    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, int):
        out = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite number: {value!r}")
        out = Decimal(str(value))
    else:
        text = str(value).strip().replace(" ", "")
        if not text:
            return None
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            out = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc

    if not out.is_finite():
        raise ValueError(f"Non-finite number: {value!r}")
    return out


def to_timestamp(value) -> Optional[pd.Timestamp]:
    """
    Parse a date-like value into a naive pd.Timestamp.
    Timezone-aware inputs are converted to UTC first.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Not a date: {value!r}") from exc

    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def elapsed_days(start: pd.Timestamp, end: pd.Timestamp) -> int:
    """
    Whole calendar days between two instants, order-insensitive.

    The absolute difference is rounded UP, so any sub-day gap counts as one day.
    """
    delta = abs(pd.Timestamp(end) - pd.Timestamp(start))
    return -(-delta.value // NS_PER_DAY)


def elapsed_years(start: pd.Timestamp, end: pd.Timestamp) -> Decimal:
    """Elapsed days over a fixed 365-day year (no leap-year adjustment)."""
    return Decimal(elapsed_days(start, end)) / Decimal(config.DAYS_PER_YEAR)


def round_currency(value: Number) -> Decimal:
    """Round to cents, half-up. Only used at display boundaries."""
    return to_decimal(value).quantize(config.CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def format_currency(value: Number) -> str:
    """Local currency display, e.g. 1234.5 -> 'R$ 1.234,50'."""
    amount = round_currency(value)
    body = f"{abs(amount):,.2f}".translate(
        str.maketrans({",": config.THOUSANDS_SEPARATOR, ".": config.DECIMAL_SEPARATOR})
    )
    sign = "-" if amount < 0 else ""
    return f"{sign}{config.CURRENCY_SYMBOL} {body}"


def format_percentage(value: Number, places: int = 1) -> str:
    return f"{float(value):.{places}f}%"


def format_date(value) -> str:
    ts = to_timestamp(value)
    if ts is None:
        return ""
    return ts.strftime(config.DATE_FORMAT_DISPLAY)
