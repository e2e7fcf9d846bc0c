"""
Import orchestration: bytes in, canonical transactions plus a report out.

Nothing here is persisted; the caller decides what to do with rejected rows.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import ApiError, ErrorCode
from .logging_setup import get_logger
from .models import ImportReport, ImportResponse, ReportSummary
from .reader import decode_csv_bytes, read_csv, sniff_delimiter
from .rows import parse_rows

logger = get_logger(__name__)


def import_csv_bytes(raw: bytes, max_rows: Optional[int] = None) -> ImportResponse:
    text, encoding = decode_csv_bytes(raw)
    delimiter, sniffed = sniff_delimiter(text)

    try:
        table = read_csv(text, delimiter=delimiter, max_rows=max_rows)
    except ValueError as e:
        raise ApiError(ErrorCode.CSV_PARSE_ERROR, str(e), 422) from e

    fmt, transactions, row_errors = parse_rows(
        table.headers,
        table.rows,
        fmt=table.format,
        row_numbers=table.row_numbers,
    )

    errors = sorted(table.errors + row_errors, key=lambda item: item.row or 0)
    normalizations: Dict[str, Any] = {
        "encoding": encoding,
        "delimiter": {"detected": delimiter, "sniffed": sniffed},
    }

    logger.info(
        "import finished: format=%s rows=%d imported=%d errors=%d",
        fmt.value,
        table.rows_seen,
        len(transactions),
        len(errors),
    )

    return ImportResponse(
        format=fmt,
        transactions=transactions,
        report=ImportReport(
            summary=ReportSummary(
                rows=table.rows_seen,
                imported=len(transactions),
                warnings=len(table.warnings),
                errors=len(errors),
            ),
            normalizations=normalizations,
            warnings=table.warnings,
            errors=errors,
        ),
    )
