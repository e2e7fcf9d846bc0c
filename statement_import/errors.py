"""
Error types for the import pipeline and the HTTP surface.

Domain errors (``InvalidAmountError``, ``InvalidNumberError``,
``RowValidationError``) describe a single rejected row and are collected into
the import report. ``ApiError`` rejects a whole request and is rendered by the
exception handlers registered in ``statement_import.main``.
"""

from __future__ import annotations

from typing import Optional


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CSV_PARSE_ERROR = "CSV_PARSE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 500):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class FieldParseError(ValueError):
    issue = "invalid_value"
    label = "value"

    def __init__(self, raw: str, column: Optional[str] = None):
        super().__init__(f"Invalid {self.label}: {raw}")
        self.raw = raw
        self.column = column


class InvalidAmountError(FieldParseError):
    """Raised when an amount string does not parse to a finite number."""

    issue = "invalid_amount"
    label = "amount"


class InvalidNumberError(FieldParseError):
    """Raised for unparsable optional numeric metadata (rates, fees)."""

    issue = "invalid_number"
    label = "number"


class RowValidationError(ValueError):
    """A required column is absent from a row or holds an empty value."""

    def __init__(self, column: str, issue: str):
        super().__init__(f"{issue}: {column}")
        self.column = column
        self.issue = issue
