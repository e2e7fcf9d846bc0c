"""Bank-statement CSV import: dialect detection and transaction normalization."""

from .models import CsvFormat, ParsedTransaction
from .parsers import detect_csv_format, normalize_date, parse_amount
from .rows import parse_rows, validate_row

__all__ = [
    "CsvFormat",
    "ParsedTransaction",
    "detect_csv_format",
    "normalize_date",
    "parse_amount",
    "parse_rows",
    "validate_row",
]
