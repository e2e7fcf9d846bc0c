"""
Row validation and per-dialect mapping to ParsedTransaction.

A row either becomes a complete ParsedTransaction or is rejected with one
report item; one bad row never stops the rest of the file.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from .errors import FieldParseError, RowValidationError
from .logging_setup import get_logger
from .models import CsvFormat, ParsedTransaction, RawRow, ReportItem
from .parsers import detect_csv_format, normalize_date, parse_amount, parse_decimal
from .rules import ROW_SCHEMAS

logger = get_logger(__name__)


def validate_row(fmt: CsvFormat, row: RawRow) -> None:
    """Raise RowValidationError for the first missing or empty required column."""
    for column, allow_empty in ROW_SCHEMAS[fmt].fields:
        if column not in row or row[column] is None:
            raise RowValidationError(column, "missing_column")
        if not allow_empty and row[column] == "":
            raise RowValidationError(column, "empty_value")


def _text(row: RawRow, column: str) -> Optional[str]:
    value = row.get(column)
    return value if value else None


def _parsed(row: RawRow, column: str, parse: Callable[[Any], Any]) -> Any:
    try:
        return parse(row.get(column))
    except FieldParseError as e:
        e.column = column
        raise


def _base_fields(row: RawRow, date: str, description: str, amount: str) -> Dict[str, Any]:
    return {
        "date": normalize_date(row[date]),
        "description": row[description],
        "amount": _parsed(row, amount, parse_amount),
    }


def to_transaction(fmt: CsvFormat, row: RawRow) -> ParsedTransaction:
    """Normalize a structurally valid row. Amounts are never currency-converted."""
    if fmt is CsvFormat.WISE:
        fields = _base_fields(row, "Date", "Description", "Amount")
        fields.update(
            original_amount=_parsed(row, "Amount", parse_decimal),
            original_currency=row["Currency"],
            exchange_rate=_parsed(row, "Exchange Rate", parse_decimal),
            fees=_parsed(row, "Total fees", parse_decimal),
            payee_name=_text(row, "Payee Name"),
            reference=_text(row, "Payment Reference"),
        )
    elif fmt is CsvFormat.REVOLUT:
        fields = _base_fields(row, "Date", "Description", "Amount")
        fields.update(
            original_amount=_parsed(row, "Amount", parse_decimal),
            original_currency=row["Currency"],
        )
    else:
        fields = _base_fields(row, "date", "description", "amount")

    return ParsedTransaction(**fields)


def _date_column(fmt: CsvFormat) -> str:
    return "date" if fmt is CsvFormat.GENERIC else "Date"


def parse_row(fmt: CsvFormat, row: RawRow, row_number: int) -> Tuple[Optional[ParsedTransaction], Optional[ReportItem]]:
    try:
        validate_row(fmt, row)
        return to_transaction(fmt, row), None
    except RowValidationError as e:
        return None, ReportItem(
            row=row_number,
            column=e.column,
            issue=e.issue,
            value=None,
            action="row_skipped",
        )
    except FieldParseError as e:
        return None, ReportItem(
            row=row_number,
            column=e.column,
            issue=e.issue,
            value=e.raw,
            action="row_skipped",
        )
    except ValidationError:
        column = _date_column(fmt)
        return None, ReportItem(
            row=row_number,
            column=column,
            issue="invalid_date",
            value=row.get(column),
            action="row_skipped",
        )


def parse_rows(
    headers: Sequence[str],
    rows: Sequence[RawRow],
    fmt: Optional[CsvFormat] = None,
    row_numbers: Optional[Sequence[int]] = None,
) -> Tuple[CsvFormat, List[ParsedTransaction], List[ReportItem]]:
    """
    Detect the dialect once, then validate and normalize every row.

    Row numbers in the returned report items are 1-based data rows (the header
    is not counted) unless ``row_numbers`` supplies them. Transactions keep input order.
    """
    if fmt is None:
        fmt = detect_csv_format(headers)

    transactions: List[ParsedTransaction] = []
    errors: List[ReportItem] = []

    if row_numbers is None:
        row_numbers = range(1, len(rows) + 1)

    for row_number, row in zip(row_numbers, rows):
        tx, err = parse_row(fmt, row, row_number)
        if err is not None:
            logger.debug("row %d rejected: %s (%s)", err.row, err.issue, err.column)
            errors.append(err)
        else:
            transactions.append(tx)

    logger.info(
        "parsed %s rows: %d imported, %d rejected",
        fmt.value,
        len(transactions),
        len(errors),
    )
    return fmt, transactions, errors
