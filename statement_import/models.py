from __future__ import annotations

import re
from datetime import date as _date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CANONICAL_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

# One CSV data row keyed by header, as read from the file.
RawRow = Mapping[str, Optional[str]]


class CsvFormat(str, Enum):
    WISE = "wise"
    REVOLUT = "revolut"
    GENERIC = "generic"


class ParsedTransaction(BaseModel):
    """Canonical, dialect-independent transaction produced by an import."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    date: str = Field(examples=["2025-01-15"])
    description: str
    amount: int
    original_amount: Optional[float] = None
    original_currency: Optional[str] = None
    exchange_rate: Optional[float] = None
    fees: Optional[float] = None
    payee_name: Optional[str] = None
    reference: Optional[str] = None

    @field_validator("date")
    @classmethod
    def canonical_date(cls, v: str) -> str:
        if not _CANONICAL_DATE.match(v):
            raise ValueError(f"not a YYYY-MM-DD date: {v}")
        _date.fromisoformat(v)
        return v


class ReportSummary(BaseModel):
    rows: int = 0
    imported: int = 0
    warnings: int = 0
    errors: int = 0


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ImportReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)


class ImportResponse(BaseModel):
    format: CsvFormat
    transactions: List[ParsedTransaction] = Field(default_factory=list)
    report: ImportReport


class DetectRequest(BaseModel):
    headers: List[str]


class DetectResponse(BaseModel):
    format: CsvFormat


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: str


class HealthResponse(BaseModel):
    ok: bool = True
