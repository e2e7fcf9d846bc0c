"""
CSV reading for uploaded bank statements.

Responsibilities:
- encoding detection + decoding to text
- delimiter detection
- header normalization onto each dialect's column names
- row length enforcement
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .logging_setup import get_logger
from .models import CsvFormat, RawRow, ReportItem
from .parsers import detect_csv_format
from .rules import (
    DEFAULT_DELIMITER,
    GENERIC_HEADER_ALIASES,
    ROW_SCHEMAS,
    SNIFF_DELIMITERS,
    SNIFF_SAMPLE_SIZE,
)

logger = get_logger(__name__)


def decode_csv_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is dropped rather than kept as part of the first header.
    - If decode fails, fall back to UTF-8, then to replacement characters.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
        decode_fallback = True

    if decode_fallback:
        logger.warning("encoding %s failed, decoded as %s", detected, decode_used)

    newlines_changed = "\r" in text
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "newlines_changed": newlines_changed,
    }
    return text, report


def sniff_delimiter(text: str) -> Tuple[str, bool]:
    """Return ``(delimiter, sniffed)``; comma when sniffing fails."""
    try:
        dialect = csv.Sniffer().sniff(text[:SNIFF_SAMPLE_SIZE], delimiters=SNIFF_DELIMITERS)
    except csv.Error:
        return DEFAULT_DELIMITER, False
    return dialect.delimiter, True


def normalize_headers(headers: List[str]) -> Tuple[List[str], CsvFormat]:
    """
    Trim header cells and key them the way the detected dialect expects.

    Wise and Revolut headers are matched case-insensitively onto the
    dialect's column names ("transferwise id" -> "TransferWise ID"); unknown
    columns are kept trimmed. Generic headers are lower-cased and aliased.
    """
    trimmed = [h.strip() for h in headers]
    fmt = detect_csv_format(trimmed)
    if fmt is CsvFormat.GENERIC:
        return [GENERIC_HEADER_ALIASES.get(h.lower(), h.lower()) for h in trimmed], fmt

    schema = ROW_SCHEMAS[fmt]
    known = [column for column, _ in schema.fields] + list(schema.optional)
    canonical = {column.lower(): column for column in known}
    return [canonical.get(h.lower(), h) for h in trimmed], fmt


@dataclass
class CsvTable:
    headers: List[str]
    format: CsvFormat
    rows: List[RawRow] = field(default_factory=list)
    # 1-based data-row number of each entry in ``rows``
    row_numbers: List[int] = field(default_factory=list)
    warnings: List[ReportItem] = field(default_factory=list)
    errors: List[ReportItem] = field(default_factory=list)

    @property
    def rows_seen(self) -> int:
        return len(self.rows) + len(self.errors)


def read_csv(text: str, delimiter: str = DEFAULT_DELIMITER, max_rows: Optional[int] = None) -> CsvTable:
    """
    Split CSV text into a header row and raw data rows.

    Blank lines are skipped. Short rows are padded with empty cells and
    reported as warnings; long rows are reported as errors and left out.
    Raises ``ValueError`` when there is no header or once more than
    ``max_rows`` data rows are seen.
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)

    header_row = next(reader, None)
    if header_row is None or not any(c.strip() for c in header_row):
        raise ValueError("CSV has no header row")

    headers, fmt = normalize_headers(header_row)
    table = CsvTable(headers=headers, format=fmt)
    width = len(headers)
    row_number = 0

    for cells in reader:
        if not any(c.strip() for c in cells):
            continue
        row_number += 1
        if max_rows is not None and row_number > max_rows:
            raise ValueError(f"CSV has more than {max_rows} data rows")

        if len(cells) > width:
            table.errors.append(ReportItem(
                row=row_number,
                issue="row_too_long",
                value=str(len(cells)),
                action=f"expected_{width}",
            ))
            continue

        if len(cells) < width:
            table.warnings.append(ReportItem(
                row=row_number,
                issue="row_too_short",
                value=str(len(cells)),
                action=f"padded_to_{width}",
            ))
            cells = cells + [""] * (width - len(cells))

        table.rows.append(dict(zip(headers, (c.strip() for c in cells))))
        table.row_numbers.append(row_number)

    return table
