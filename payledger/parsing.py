"""
parsing.py - Comma-separated transaction source

Turns rows of the form

    type, client, tx, amount
    deposit, 1, 1, 1.0
    dispute, 1, 1,

into ClientTransaction values. Surrounding whitespace is ignored, blank
lines are skipped and an optional leading header row (first field `type`)
is dropped. Quoting is not supported: a quote character is part of the
field. Rows are read lazily, one at a time.
"""

from __future__ import annotations
from typing import Iterator, Optional, Sequence, TextIO, Tuple
import csv

from .amount import Amount
from .core import (
    AmountOutOfRange, SourceReadError, TransactionKind, TransactionParseError,
    is_client_id, is_transaction_id,
)
from .transaction import ClientTransaction, make_record

HEADER_TOKEN = "type"

_KINDS_BY_TOKEN = {kind.value: kind for kind in TransactionKind}


def _field(fields: Sequence[str], index: int) -> Optional[str]:
    if index >= len(fields):
        return None
    value = fields[index].strip()
    return value or None


def _parse_int(token: str) -> Optional[int]:
    # int() accepts "1_000" and "+1"; ids must be plain digits
    if not token.isascii() or not token.isdigit():
        return None
    return int(token)


def parse_amount(token: str) -> Amount:
    """
    Parse an amount token for a deposit or withdrawal.

    Raises:
        TransactionParseError: If the token is not a finite, representable,
            non-negative decimal
    """
    try:
        amount = Amount.from_decimal(token)
    except AmountOutOfRange:
        raise TransactionParseError(f"Invalid amount {token!r}") from None
    if amount.is_negative():
        raise TransactionParseError(f"Invalid amount {token!r}: must not be negative")
    return amount


def parse_record(fields: Sequence[str], line_no: Optional[int] = None) -> ClientTransaction:
    """
    Parse one row of fields into a ClientTransaction.

    Args:
        fields: Row fields in order type, client, tx[, amount]; extra
            trailing fields are ignored
        line_no: Line number to attach to errors

    Returns:
        The parsed ClientTransaction

    Raises:
        TransactionParseError: If any field is missing or invalid
    """
    try:
        return _parse_fields(fields)
    except TransactionParseError as e:
        if line_no is None:
            raise
        raise e.at_line(line_no) from None


def _parse_fields(fields: Sequence[str]) -> ClientTransaction:
    tx_type = _field(fields, 0)
    if tx_type is None:
        raise TransactionParseError("Missing transaction type")
    kind = _KINDS_BY_TOKEN.get(tx_type)
    if kind is None:
        raise TransactionParseError(f"Invalid transaction type {tx_type!r}")

    client_token = _field(fields, 1)
    if client_token is None:
        raise TransactionParseError("Missing client id")
    client = _parse_int(client_token)
    if not is_client_id(client):
        raise TransactionParseError(f"Invalid client id {client_token!r}")

    tx_token = _field(fields, 2)
    if tx_token is None:
        raise TransactionParseError("Missing transaction id")
    tx_id = _parse_int(tx_token)
    if not is_transaction_id(tx_id):
        raise TransactionParseError(f"Invalid transaction id {tx_token!r}")

    amount = None
    if kind.carries_amount:
        amount_token = _field(fields, 3)
        if amount_token is None:
            raise TransactionParseError("Missing amount")
        amount = parse_amount(amount_token)

    return ClientTransaction(client, make_record(kind, tx_id, amount))


def parse_line(line: str, line_no: Optional[int] = None) -> ClientTransaction:
    """Parse a single comma-separated line."""
    return parse_record(line.rstrip("\r\n").split(","), line_no)


def _is_blank(fields: Sequence[str]) -> bool:
    return not any(f.strip() for f in fields)


def _is_header(fields: Sequence[str]) -> bool:
    return _field(fields, 0) == HEADER_TOKEN


def read_transactions(source: TextIO) -> Iterator[Tuple[int, ClientTransaction]]:
    """
    Lazily parse transactions from a text stream.

    Args:
        source: Open text stream (open with newline="" for files)

    Yields:
        (line_no, ClientTransaction) with 1-based physical line numbers

    Raises:
        TransactionParseError: On the first malformed row
        SourceReadError: If reading from the stream fails
    """
    # Fields are split on commas only; quote characters are kept as data
    reader = csv.reader(source, quoting=csv.QUOTE_NONE)
    seen_row = False
    while True:
        # Physical line the next row starts on
        line_no = reader.line_num + 1
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise TransactionParseError(f"Malformed row: {e}", line_no) from e
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(str(e), line_no) from e

        if _is_blank(fields):
            continue
        if not seen_row:
            seen_row = True
            if _is_header(fields):
                continue
        yield line_no, parse_record(fields, line_no)


def open_source(path: str) -> TextIO:
    """
    Open a transaction file for reading.

    Raises:
        SourceReadError: If the file cannot be opened
    """
    try:
        return open(path, "r", encoding="utf-8", newline="")
    except OSError as e:
        raise SourceReadError(f"Unable to open {path!r}: {e.strerror or e}") from e
