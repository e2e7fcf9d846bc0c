"""
Format detection and field normalization for bank-statement CSVs.

- detect_csv_format: classify a header row as wise / revolut / generic
- normalize_date: day-month-year and ISO dates -> YYYY-MM-DD
- parse_amount: locale-formatted amount -> whole-unit integer
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from .errors import FieldParseError, InvalidAmountError, InvalidNumberError
from .models import CsvFormat
from .rules import REVOLUT_SIGNATURE, WISE_SIGNATURE

_DMY = re.compile(r"^([0-9]{1,2})[/-]([0-9]{1,2})[/-]([0-9]{4})")
_YMD = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}")
_ISO = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})T")

_SEPARATORS = re.compile(r"[,\s]")
# Leading numeric prefix, as a lenient float parser reads it ("100USD" -> 100).
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def detect_csv_format(headers: Iterable[str]) -> CsvFormat:
    normalized = {h.strip().lower() for h in headers}

    if WISE_SIGNATURE in normalized:
        return CsvFormat.WISE
    if REVOLUT_SIGNATURE <= normalized:
        return CsvFormat.REVOLUT
    return CsvFormat.GENERIC


def normalize_date(raw: str) -> str:
    """
    Normalize a date string to YYYY-MM-DD.

    Dashed or slashed dates that do not start with a four-digit year are read
    as day-month-year. Strings matching no known pattern are returned
    unchanged; rejecting them is up to the caller.
    """
    m = _DMY.match(raw)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    if _YMD.match(raw):
        return raw[:10]

    m = _ISO.match(raw)
    if m:
        return m.group(1)

    return raw


def _parse_float(raw: str, error: type[FieldParseError]) -> float:
    cleaned = _SEPARATORS.sub("", raw)
    m = _NUMBER_PREFIX.match(cleaned)
    if not m:
        raise error(raw)
    value = float(m.group(0))
    if not math.isfinite(value):
        raise error(raw)
    return value


def parse_amount(raw: str) -> int:
    """
    Parse an amount string into a whole-unit integer.

    Commas and whitespace are stripped before parsing. Halves round up
    (1500.5 -> 1501, -2.5 -> -2). Raises InvalidAmountError carrying the
    original string when nothing numeric can be read.
    """
    value = _parse_float(raw, InvalidAmountError)
    whole = math.floor(value)
    # value - whole is exact for any float
    return whole + (1 if value - whole >= 0.5 else 0)


def parse_decimal(raw: Optional[str]) -> Optional[float]:
    """Parse optional numeric metadata; blank means absent."""
    if raw is None or not raw.strip():
        return None
    return _parse_float(raw, InvalidNumberError)
