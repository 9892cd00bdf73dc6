"""
transaction.py - Typed transaction records

Five immutable record types describe everything that can happen to an
account. Records are created by the parser (or directly in code) and
consumed by Account.apply().

    Deposit(tx_id, amount)      credit available funds
    Withdrawal(tx_id, amount)   debit available funds
    Dispute(tx_id)              hold the funds of a prior deposit
    Resolve(tx_id)              release a disputed hold
    Chargeback(tx_id)           remove a disputed hold and freeze the account

All records validate their fields in __post_init__.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from .amount import Amount
from .core import (
    ClientId, TransactionId, TransactionKind, ChangeKind,
    is_client_id, is_transaction_id,
)


def _validate_tx_id(tx_id: TransactionId) -> None:
    if not is_transaction_id(tx_id):
        raise ValueError(f"Transaction id must be a u32 integer, got {tx_id!r}")


def _validate_amount(amount: Amount) -> None:
    if not isinstance(amount, Amount):
        raise ValueError(f"Transaction amount must be Amount, got {type(amount)}")
    if amount.is_negative():
        raise ValueError(f"Transaction amount must not be negative, got {amount}")


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Deposit:
    """Credit `amount` to the account's available funds."""
    tx_id: TransactionId
    amount: Amount

    def __post_init__(self):
        _validate_tx_id(self.tx_id)
        _validate_amount(self.amount)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.DEPOSIT


@dataclass(frozen=True, slots=True)
class Withdrawal:
    """Debit `amount` from the account's available funds."""
    tx_id: TransactionId
    amount: Amount

    def __post_init__(self):
        _validate_tx_id(self.tx_id)
        _validate_amount(self.amount)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.WITHDRAWAL


@dataclass(frozen=True, slots=True)
class Dispute:
    """Open a dispute against the deposit with id `tx_id`."""
    tx_id: TransactionId

    def __post_init__(self):
        _validate_tx_id(self.tx_id)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.DISPUTE


@dataclass(frozen=True, slots=True)
class Resolve:
    """Close the dispute on `tx_id`, releasing the held funds back to available."""
    tx_id: TransactionId

    def __post_init__(self):
        _validate_tx_id(self.tx_id)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.RESOLVE


@dataclass(frozen=True, slots=True)
class Chargeback:
    """Close the dispute on `tx_id` by reversing it; freezes the account."""
    tx_id: TransactionId

    def __post_init__(self):
        _validate_tx_id(self.tx_id)

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.CHARGEBACK


TransactionRecord = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

RECORD_TYPES = (Deposit, Withdrawal, Dispute, Resolve, Chargeback)


# ============================================================================
# CLIENT TRANSACTION / HISTORY ENTRY
# ============================================================================

@dataclass(frozen=True, slots=True)
class ClientTransaction:
    """
    A transaction record paired with the client it applies to.

    Attributes:
        client: Client id (u16) owning the target account
        tx: The transaction record
    """
    client: ClientId
    tx: TransactionRecord

    def __post_init__(self):
        if not is_client_id(self.client):
            raise ValueError(f"Client id must be a u16 integer, got {self.client!r}")
        if not isinstance(self.tx, RECORD_TYPES):
            raise ValueError(f"Unsupported transaction record: {self.tx!r}")

    def __repr__(self) -> str:
        return f"ClientTransaction(client={self.client}, {self.tx!r})"


@dataclass(frozen=True, slots=True)
class BalanceChange:
    """
    A deposit or withdrawal as remembered in an account's history.

    Disputes, resolutions and chargebacks look the original amount up here.
    """
    kind: ChangeKind
    amount: Amount

    @property
    def is_deposit(self) -> bool:
        return self.kind is ChangeKind.DEPOSIT


def make_record(kind: TransactionKind, tx_id: TransactionId, amount: Optional[Amount] = None) -> TransactionRecord:
    """
    Build the record for a transaction kind.

    Args:
        kind: Which record to build
        tx_id: Transaction id
        amount: Required for deposits and withdrawals, ignored otherwise

    Raises:
        ValueError: If the fields are invalid or a required amount is missing
    """
    if kind is TransactionKind.DEPOSIT:
        return Deposit(tx_id, amount)
    if kind is TransactionKind.WITHDRAWAL:
        return Withdrawal(tx_id, amount)
    if kind is TransactionKind.DISPUTE:
        return Dispute(tx_id)
    if kind is TransactionKind.RESOLVE:
        return Resolve(tx_id)
    if kind is TransactionKind.CHARGEBACK:
        return Chargeback(tx_id)
    raise ValueError(f"Unknown transaction kind: {kind!r}")
