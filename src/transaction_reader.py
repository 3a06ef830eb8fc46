import csv
import logging
import re
from decimal import Decimal
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# ASCII digits only: int() and Decimal() would also take "1_0", "+1", "NaN" or "1e3"
ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_REQUIRED = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class RecordParseError(ValueError):
    """A record could not be decoded. Fatal for the whole run."""

    def __init__(self, line_number: int, reason: str):
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Yield transactions from a CSV file one at a time, in file order."""
    with open(filepath, "r", newline="") as f:
        yield from parse_transactions(f)


def parse_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Yield transactions from an open CSV stream.
    Expects a header row naming type, client, tx and amount columns.
    Raises RecordParseError on the first malformed row.
    """
    reader = csv.DictReader(stream)
    try:
        fieldnames = reader.fieldnames
    except csv.Error as e:
        logger.error(f"Failed to read header: {e}")
        raise RecordParseError(reader.line_num, str(e)) from e
    if fieldnames is None:
        return

    header = [name.strip() for name in fieldnames]
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        logger.error(f"Header is missing required columns: {missing}")
        raise RecordParseError(1, f"missing required columns {missing}")

    for row in _read_rows(reader):
        if not any((value or "").strip() for key, value in row.items() if key is not None):
            continue
        yield parse_row(row, reader.line_num)


def _read_rows(reader: csv.DictReader) -> Iterator[Dict[Optional[str], Optional[str]]]:
    """Iterate rows, turning csv module errors (bad quoting, oversized fields) into RecordParseError."""
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.error(f"Failed to read row at line {reader.line_num}: {e}")
            raise RecordParseError(reader.line_num, str(e)) from e
        yield row


def parse_row(row: Dict[Optional[str], Optional[str]], line_number: int) -> Transaction:
    """Parse CSV row into Transaction."""
    # Extra trailing fields land under the None key and are ignored.
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        transaction_type = TransactionType(normalized["type"])
        client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID)

        amount = None
        if transaction_type in AMOUNT_REQUIRED:
            amount = _parse_amount(normalized.get("amount", ""))
    except (KeyError, ValueError) as e:
        logger.error(f"Failed to parse row {row} at line {line_number}: {e}")
        raise RecordParseError(line_number, str(e)) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, column: str, maximum: int) -> int:
    if not value:
        raise ValueError(f"missing {column}")
    if not ID_PATTERN.fullmatch(value):
        raise ValueError(f"{column} {value!r} is not an unsigned integer")
    parsed = int(value)
    if parsed > maximum:
        raise ValueError(f"{column} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Decimal:
    if not value:
        raise ValueError("missing amount")
    if not AMOUNT_PATTERN.fullmatch(value):
        raise ValueError(f"amount {value!r} is not a decimal number")
    return Decimal(value)
