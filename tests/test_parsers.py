import pytest

from statement_import.errors import InvalidAmountError, InvalidNumberError
from statement_import.models import CsvFormat
from statement_import.parsers import detect_csv_format, normalize_date, parse_amount, parse_decimal


def test_detect_wise():
    headers = ["TransferWise ID", "Date", "Amount", "Currency", "Description"]
    assert detect_csv_format(headers) is CsvFormat.WISE


def test_detect_revolut():
    headers = ["Date", "Description", "Amount", "Currency", "Balance"]
    assert detect_csv_format(headers) is CsvFormat.REVOLUT


def test_detect_falls_back_to_generic():
    assert detect_csv_format(["日付", "摘要", "金額"]) is CsvFormat.GENERIC


def test_detect_ignores_surrounding_whitespace():
    assert detect_csv_format([" TransferWise ID ", "Date", "Amount"]) is CsvFormat.WISE


def test_detect_ignores_case_and_order():
    headers = ["balance", "CURRENCY", "amount", "description", "date"]
    assert detect_csv_format(headers) is CsvFormat.REVOLUT


def test_wise_signature_wins_over_revolut_columns():
    headers = ["Date", "Description", "Amount", "Currency", "Balance", "TransferWise ID"]
    assert detect_csv_format(headers) is CsvFormat.WISE


@pytest.mark.parametrize(
    "headers",
    [
        [],
        ["Date", "Description", "Amount", "Currency"],
        ["date", "description", "amount"],
        ["TransferWise"],
    ],
)
def test_detect_never_raises_on_unknown_headers(headers):
    assert detect_csv_format(headers) is CsvFormat.GENERIC


def test_detect_accepts_any_iterable():
    assert detect_csv_format(h for h in ["TransferWise ID"]) is CsvFormat.WISE


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("15-01-2025", "2025-01-15"),
        ("15/01/2025", "2025-01-15"),
        ("5-1-2025", "2025-01-05"),
        ("05/1/2025", "2025-01-05"),
        ("2025-01-15", "2025-01-15"),
        ("2025-01-15 10:30:00", "2025-01-15"),
        ("2025-01-15T10:30:00Z", "2025-01-15"),
        ("31-12-2024 23:59", "2024-12-31"),
    ],
)
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


def test_normalize_date_reads_day_first():
    # 03/04/2025 is the 3rd of April, never March 4th
    assert normalize_date("03/04/2025") == "2025-04-03"


@pytest.mark.parametrize("raw", ["Jan 15, 2025", "2025/01/15", "15.01.2025", ""])
def test_normalize_date_passes_unknown_through(raw):
    assert normalize_date(raw) == raw


def test_normalize_date_is_idempotent():
    once = normalize_date("7/3/2025")
    assert normalize_date(once) == once


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5000", 5000),
        ("1,500", 1500),
        ("-3000", -3000),
        ("1500.7", 1501),
        (" 5000 ", 5000),
        ("1 234 567", 1234567),
        ("-1,500.2", -1500),
        ("+42", 42),
        ("0.49", 0),
        ("4503599627370497", 4503599627370497),
        ("-4503599627370497", -4503599627370497),
        ("0.49999999999999994", 0),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_amount_rounds_halves_up():
    assert parse_amount("1500.5") == 1501
    assert parse_amount("-2.5") == -2


def test_parse_amount_returns_int():
    assert type(parse_amount("12.0")) is int


def test_parse_amount_is_idempotent():
    assert parse_amount(str(parse_amount("1,234.6"))) == 1235


@pytest.mark.parametrize("raw", ["abc", "", "   ", "-", ",", "1e999"])
def test_parse_amount_rejects(raw):
    with pytest.raises(InvalidAmountError) as excinfo:
        parse_amount(raw)
    assert excinfo.value.raw == raw
    assert "Invalid amount" in str(excinfo.value)


def test_parse_amount_error_names_input():
    with pytest.raises(ValueError, match="Invalid amount: abc"):
        parse_amount("abc")


def test_parse_amount_reads_leading_number():
    assert parse_amount("100 USD") == 100


def test_parse_decimal():
    assert parse_decimal("1,234.56") == pytest.approx(1234.56)
    assert parse_decimal("") is None
    assert parse_decimal(None) is None
    with pytest.raises(InvalidNumberError):
        parse_decimal("n/a")


def test_parse_amount_keeps_large_integers():
    raw = str(2**53 - 1)
    assert parse_amount(raw) == 2**53 - 1
    assert parse_amount(str(parse_amount(raw))) == 2**53 - 1
