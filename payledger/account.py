"""
account.py - Per-client account state machine

An Account holds one client's balances together with the history needed to
settle disputes. Its only mutating entry point is apply(), which either
applies a transaction completely or raises a TransactionError and leaves
the account untouched.

Transitions:
    Deposit(id, amt)     available += amt, remember id
    Withdrawal(id, amt)  available -= amt, remember id (not when frozen)
    Dispute(id)          move the deposit's amount from available to held
    Resolve(id)          move it back from held to available
    Chargeback(id)       drop it from held, forget id, freeze the account
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Set

from .amount import Amount, ZERO
from .core import (
    ClientId, TransactionId, ChangeKind,
    AccountFrozen, DuplicateTransactionId, InsufficientFunds, InvalidDispute,
    UndisputedChargeback, UndisputedResolution,
)
from .transaction import (
    BalanceChange, Chargeback, Deposit, Dispute, Resolve, TransactionRecord, Withdrawal,
)


@dataclass(frozen=True, slots=True)
class AccountSummary:
    """
    Externally reported state of one account.

    Attributes:
        client: Client id
        available: Funds available for withdrawal
        held: Funds held by open disputes
        total: available + held
        frozen: True once a chargeback has occurred
    """
    client: ClientId
    available: Amount
    held: Amount
    total: Amount
    frozen: bool


class Account:
    """
    A single client's balance, holds, frozen flag and dispute bookkeeping.

    Fields are exposed through read-only properties; the only way to change
    an account is apply().

    Thread Safety:
        Not thread-safe. Transactions for one client must be applied in
        arrival order from a single thread.

    Example:
        account = Account()
        account.apply(Deposit(1, Amount.from_decimal("100")))
        account.apply(Dispute(1))
        account.held  # Amount(100)
    """

    __slots__ = ("_available", "_held", "_frozen", "_history", "_disputed")

    def __init__(self):
        self._available: Amount = ZERO
        self._held: Amount = ZERO
        self._frozen: bool = False
        self._history: Dict[TransactionId, BalanceChange] = {}
        self._disputed: Set[TransactionId] = set()

    # ========================================================================
    # READ-ONLY STATE
    # ========================================================================

    @property
    def available(self) -> Amount:
        """Funds usable for withdrawal."""
        return self._available

    @property
    def held(self) -> Amount:
        """Funds locked by open disputes."""
        return self._held

    @property
    def total(self) -> Amount:
        """available + held."""
        return self._available + self._held

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def history(self) -> Dict[TransactionId, BalanceChange]:
        """Copy of the deposit/withdrawal history, keyed by transaction id."""
        return dict(self._history)

    @property
    def disputed(self) -> FrozenSet[TransactionId]:
        """Ids currently under an open dispute."""
        return frozenset(self._disputed)

    def has_transaction(self, tx_id: TransactionId) -> bool:
        return tx_id in self._history

    def is_disputed(self, tx_id: TransactionId) -> bool:
        return tx_id in self._disputed

    def summary(self, client: ClientId) -> AccountSummary:
        return AccountSummary(
            client=client,
            available=self._available,
            held=self._held,
            total=self.total,
            frozen=self._frozen,
        )

    # ========================================================================
    # STATE MACHINE
    # ========================================================================

    def apply(self, record: TransactionRecord) -> None:
        """
        Apply one transaction record to this account.

        All preconditions are checked before anything is mutated, so a
        failed transaction leaves the account exactly as it was.

        Args:
            record: Deposit, Withdrawal, Dispute, Resolve or Chargeback

        Raises:
            DuplicateTransactionId: Deposit/withdrawal id already in history
            AccountFrozen: Withdrawal on a frozen account
            InsufficientFunds: Withdrawal larger than the available balance
            InvalidDispute: Dispute on a missing, non-deposit or disputed id
            UndisputedResolution: Resolve on an id not under dispute
            UndisputedChargeback: Chargeback on an id not under dispute
            TypeError: If record is not a transaction record
        """
        match record:
            case Deposit(tx_id=tx_id, amount=amount):
                self._deposit(tx_id, amount)
            case Withdrawal(tx_id=tx_id, amount=amount):
                self._withdraw(tx_id, amount)
            case Dispute(tx_id=tx_id):
                self._dispute(tx_id)
            case Resolve(tx_id=tx_id):
                self._resolve(tx_id)
            case Chargeback(tx_id=tx_id):
                self._chargeback(tx_id)
            case _:
                raise TypeError(f"Not a transaction record: {record!r}")

    def _deposit(self, tx_id: TransactionId, amount: Amount) -> None:
        if tx_id in self._history:
            raise DuplicateTransactionId(tx_id)
        # Deposits are accepted on frozen accounts
        self._available = self._available + amount
        self._history[tx_id] = BalanceChange(ChangeKind.DEPOSIT, amount)

    def _withdraw(self, tx_id: TransactionId, amount: Amount) -> None:
        if tx_id in self._history:
            raise DuplicateTransactionId(tx_id)
        if self._frozen:
            raise AccountFrozen(tx_id)
        if self._available < amount:
            raise InsufficientFunds(tx_id, current=self._available, requested=amount)
        self._available = self._available - amount
        self._history[tx_id] = BalanceChange(ChangeKind.WITHDRAWAL, amount)

    def _dispute(self, tx_id: TransactionId) -> None:
        change = self._history.get(tx_id)
        if change is None:
            raise InvalidDispute(tx_id, "does not exist")
        if not change.is_deposit:
            raise InvalidDispute(tx_id, "is not a deposit and cannot be disputed")
        if tx_id in self._disputed:
            raise InvalidDispute(tx_id, "is already under dispute")
        # Both sides are computed before either is stored
        new_available = self._available - change.amount
        new_held = self._held + change.amount
        self._available = new_available
        self._held = new_held
        self._disputed.add(tx_id)

    def _disputed_amount(self, tx_id: TransactionId) -> Optional[Amount]:
        if tx_id not in self._disputed:
            return None
        # Only deposits can enter _disputed, and they stay in history while disputed
        return self._history[tx_id].amount

    def _resolve(self, tx_id: TransactionId) -> None:
        amount = self._disputed_amount(tx_id)
        if amount is None:
            raise UndisputedResolution(tx_id)
        new_available = self._available + amount
        new_held = self._held - amount
        self._available = new_available
        self._held = new_held
        self._disputed.discard(tx_id)

    def _chargeback(self, tx_id: TransactionId) -> None:
        amount = self._disputed_amount(tx_id)
        if amount is None:
            raise UndisputedChargeback(tx_id)
        self._held = self._held - amount
        self._frozen = True
        self._disputed.discard(tx_id)
        # Forget the id so it can be neither disputed nor charged back again
        del self._history[tx_id]

    # ========================================================================
    # COPYING
    # ========================================================================

    def copy(self) -> Account:
        """Return an independent copy of this account."""
        cloned = Account.__new__(Account)
        cloned._available = self._available
        cloned._held = self._held
        cloned._frozen = self._frozen
        cloned._history = dict(self._history)
        cloned._disputed = set(self._disputed)
        return cloned

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return (
            self._available == other._available
            and self._held == other._held
            and self._frozen == other._frozen
            and self._history == other._history
            and self._disputed == other._disputed
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Account(available={self._available}, held={self._held}, "
            f"total={self.total}, frozen={self._frozen}, "
            f"open_disputes={len(self._disputed)})"
        )
