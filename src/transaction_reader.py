import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType

COLUMNS = ["type", "client", "tx", "amount"]
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionParseError(ValueError):
    """A row that cannot be turned into a Transaction. Aborts the run."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Lazily parse a CSV stream with a `type, client, tx, amount` header.

    Columns are bound by name, so their order in the header is free.
    Whitespace around header names and fields is ignored. Every row must
    carry all four fields; an absent amount is an empty trailing field.
    Raises TransactionParseError on the first malformed row.
    """
    reader = csv.DictReader(stream)
    if reader.fieldnames is None:
        return

    header = [name.strip().lower() for name in reader.fieldnames]
    if sorted(header) != sorted(COLUMNS):
        raise TransactionParseError(reader.line_num, f"expected header {', '.join(COLUMNS)}, got {', '.join(header)}")
    reader.fieldnames = header

    for row in reader:
        yield parse_csv_row(row, reader.line_num)


def parse_csv_row(row: Dict[Optional[str], object], line_number: int) -> Transaction:
    """Parse one DictReader row into a Transaction."""
    field_count = sum(1 for k, v in row.items() if k is not None and v is not None) + len(row.get(None, []))
    if field_count != len(COLUMNS):
        raise TransactionParseError(line_number, f"expected {len(COLUMNS)} fields, got {field_count}")

    normalized = {k: v.strip() for k, v in row.items()}

    transaction_type_str = normalized["type"].lower()
    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError as e:
        raise TransactionParseError(line_number, f"unknown transaction type {normalized['type']!r}") from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=_parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number),
        transaction_id=_parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID, line_number),
        amount=_parse_amount(normalized["amount"], line_number),
    )


def _parse_id(value: str, column: str, maximum: int, line_number: int) -> int:
    try:
        parsed = int(value)
    except ValueError as e:
        raise TransactionParseError(line_number, f"{column} must be an unsigned integer, got {value!r}") from e
    if not 0 <= parsed <= maximum:
        raise TransactionParseError(line_number, f"{column} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str, line_number: int) -> Optional[Decimal]:
    # An empty amount is "absent"; the engine decides what that means.
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise TransactionParseError(line_number, f"amount must be a decimal number, got {value!r}") from e
    if not amount.is_finite():
        raise TransactionParseError(line_number, f"amount must be a finite number, got {value!r}")
    return amount

