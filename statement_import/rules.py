"""
Deterministic import rules.

Dialect signatures, per-dialect row shapes and upload limits live here so the
parsing code never hard-codes column names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .models import CsvFormat

SNIFF_DELIMITERS = [",", ";", "\t", "|"]
SNIFF_SAMPLE_SIZE = 4096
DEFAULT_DELIMITER = ","

# Detection signatures, compared against trimmed, lower-cased headers.
WISE_SIGNATURE = "transferwise id"
REVOLUT_SIGNATURE = frozenset({"date", "description", "amount", "currency", "balance"})


@dataclass(frozen=True)
class RowSchema:
    """Structural shape of one dialect's data row.

    ``fields`` lists ``(column, allow_empty)`` pairs in the order they are
    checked. ``optional`` columns may be absent altogether.
    """

    fields: Tuple[Tuple[str, bool], ...]
    optional: Tuple[str, ...] = ()


ROW_SCHEMAS: Dict[CsvFormat, RowSchema] = {
    CsvFormat.WISE: RowSchema(
        fields=(
            ("TransferWise ID", True),
            ("Date", False),
            ("Amount", False),
            ("Currency", False),
            ("Description", True),
        ),
        optional=(
            "Payment Reference",
            "Running Balance",
            "Exchange From",
            "Exchange To",
            "Exchange Rate",
            "Payer Name",
            "Payee Name",
            "Total fees",
        ),
    ),
    CsvFormat.REVOLUT: RowSchema(
        fields=(
            ("Date", False),
            ("Description", False),
            ("Amount", False),
            ("Currency", False),
        ),
        optional=("Balance",),
    ),
    CsvFormat.GENERIC: RowSchema(
        fields=(
            ("date", False),
            ("description", False),
            ("amount", False),
        ),
    ),
}

# Generic exports carry lower-cased keys; common Japanese bank headers map onto them.
GENERIC_HEADER_ALIASES: Dict[str, str] = {
    "日付": "date",
    "摘要": "description",
    "金額": "amount",
}

# Upload limits
MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_CSV_TYPES = ("text/csv", "application/vnd.ms-excel")
MAX_ROWS_PER_IMPORT = 1000
