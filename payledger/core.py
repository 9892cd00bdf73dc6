"""
Core constants, enums and exceptions for the payments ledger.

This module provides the foundations every other module builds on:
1. Constants: fixed-point scale, identifier bounds, amount bounds
2. Type aliases: ClientId, TransactionId
3. Enums: TransactionKind, ChangeKind, ExecuteResult
4. Exceptions: LedgerError and the per-transaction error taxonomy

Nothing in this module holds state.
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .amount import Amount


# ============================================================================
# CONSTANTS
# ============================================================================

# Number of fractional digits carried by every Amount.
AMOUNT_SCALE = 4

# Sub-units per whole unit (10 ** AMOUNT_SCALE).
AMOUNT_MULTIPLIER = 10 ** AMOUNT_SCALE

# Amounts are backed by a signed 64-bit scaled integer.
AMOUNT_MIN_SCALED = -(2 ** 63)
AMOUNT_MAX_SCALED = 2 ** 63 - 1

# Client ids are u16, transaction ids are u32.
CLIENT_ID_MIN = 0
CLIENT_ID_MAX = 2 ** 16 - 1
TRANSACTION_ID_MIN = 0
TRANSACTION_ID_MAX = 2 ** 32 - 1

# Column names of the account report.
REPORT_FIELDS = ("client", "available", "held", "total", "locked")


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Identifier of a client account. Accounts are created on first reference.
ClientId = int

# Identifier of a transaction, assigned by the upstream source.
TransactionId = int


def is_client_id(value: object) -> bool:
    """Return True if value is an int inside the client id range."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and CLIENT_ID_MIN <= value <= CLIENT_ID_MAX
    )


def is_transaction_id(value: object) -> bool:
    """Return True if value is an int inside the transaction id range."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and TRANSACTION_ID_MIN <= value <= TRANSACTION_ID_MAX
    )


# ============================================================================
# ENUMS
# ============================================================================

class TransactionKind(Enum):
    """
    The five transaction types, valued by their textual token.

    The token is what appears in the first column of the input.
    """
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        """True for kinds that move money directly (deposit, withdrawal)."""
        return self in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)


class ChangeKind(Enum):
    """Kind of a balance change kept in an account's history."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class ExecuteResult(Enum):
    """
    Outcome of AccountLedger.execute().

    APPLIED: The transaction passed its preconditions and mutated the account.
    REJECTED: The transaction failed a precondition; nothing was mutated.
    """
    APPLIED = "applied"
    REJECTED = "rejected"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class AmountOutOfRange(LedgerError, ValueError):
    """Raised when a value cannot be represented as a fixed-point Amount."""
    pass


class TransactionError(LedgerError):
    """
    Base class for per-transaction failures.

    A TransactionError never aborts a run. The account it was raised for
    is guaranteed to be unchanged.

    Attributes:
        tx_id: Id of the transaction that was rejected
    """

    def __init__(self, tx_id: TransactionId, message: str):
        super().__init__(message)
        self.tx_id = tx_id


class DuplicateTransactionId(TransactionError):
    """Raised when a deposit or withdrawal reuses a transaction id."""

    def __init__(self, tx_id: TransactionId):
        super().__init__(tx_id, f"Transaction id {tx_id} has already been used")


class AccountFrozen(TransactionError):
    """Raised when a withdrawal is attempted on a charged-back account."""

    def __init__(self, tx_id: TransactionId):
        super().__init__(tx_id, f"Account is frozen, withdrawal {tx_id} refused")


class InsufficientFunds(TransactionError):
    """
    Raised when a withdrawal exceeds the available balance.

    Attributes:
        current: Available balance at the time of the attempt
        requested: Amount the withdrawal asked for
    """

    def __init__(self, tx_id: TransactionId, current: Amount, requested: Amount):
        super().__init__(
            tx_id,
            f"Attempted to withdraw {requested} from an account with {current} available",
        )
        self.current = current
        self.requested = requested


class InvalidDispute(TransactionError):
    """Raised when a dispute references a missing, non-deposit or already disputed id."""

    def __init__(self, tx_id: TransactionId, detail: str = "does not exist or cannot be disputed"):
        super().__init__(tx_id, f"The transaction with id {tx_id} {detail}")
        self.detail = detail


class UndisputedResolution(TransactionError):
    """Raised when a resolve references an id that is not under dispute."""

    def __init__(self, tx_id: TransactionId):
        super().__init__(tx_id, f"Cannot resolve transaction {tx_id}: it is not under dispute")


class UndisputedChargeback(TransactionError):
    """Raised when a chargeback references an id that is not under dispute."""

    def __init__(self, tx_id: TransactionId):
        super().__init__(tx_id, f"Cannot charge back transaction {tx_id}: it is not under dispute")


class TransactionParseError(LedgerError):
    """
    Raised when an input row cannot be turned into a transaction.

    Attributes:
        reason: What was wrong with the row
        line_no: 1-based line number in the source, if known
    """

    def __init__(self, reason: str, line_no: Optional[int] = None):
        self.reason = reason
        self.line_no = line_no
        if line_no is None:
            super().__init__(reason)
        else:
            super().__init__(f"Invalid transaction on line {line_no}: {reason}")

    def at_line(self, line_no: int) -> TransactionParseError:
        """Return a copy of this error bound to a line number."""
        return TransactionParseError(self.reason, line_no)


class SourceReadError(LedgerError):
    """
    Raised when the transaction source cannot be opened or read.

    Attributes:
        line_no: Line being read when the failure happened, if any
    """

    def __init__(self, message: str, line_no: Optional[int] = None):
        self.line_no = line_no
        if line_no is not None:
            message = f"Error reading line {line_no}: {message}"
        super().__init__(message)
