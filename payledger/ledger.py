"""
ledger.py - Registry of client accounts

AccountLedger maps client ids to Accounts and routes every incoming
transaction to the right one. It is the only object a driver needs to hold:
there is no module-level registry.

Key responsibilities:
    - Creates an Account lazily the first time a client id is referenced
    - Delegates each transaction to Account.apply() and propagates its errors
    - Keeps an audit trail of applied transactions and of rejections
    - Provides clone() and replay() for state reconstruction
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Tuple
import logging

from .account import Account, AccountSummary
from .amount import Amount, ZERO
from .core import (
    ClientId, ExecuteResult, LedgerError, TransactionError, is_client_id,
)
from .transaction import ClientTransaction, TransactionRecord

log = logging.getLogger(__name__)


class AccountLedger:
    """
    Collection of client accounts with a single transaction entry point.

    Accounts are created on first reference and never removed. Iteration
    order is unspecified (it follows first reference); use summaries() for
    output sorted by client id.

    Thread Safety:
        Not thread-safe. Each thread should maintain its own AccountLedger.

    Example:
        ledger = AccountLedger()
        ledger.apply(1, Deposit(1, Amount.from_decimal("100.0")))
        ledger.apply(1, Dispute(1))
        ledger[1].held  # Amount(100)
    """

    def __init__(self, name: str = "main", verbose: bool = False, keep_log: bool = True):
        """
        Create an empty ledger.

        Args:
            name: Identifier used in log messages
            verbose: Log every applied transaction at DEBUG level
            keep_log: Record applied and rejected transactions in
                transaction_log and rejections. Without it memory is bounded
                by account state alone, and replay() is unavailable.
        """
        self.name = name
        self.verbose = verbose
        self.keep_log = keep_log
        self._accounts: Dict[ClientId, Account] = {}
        self.transaction_log: List[ClientTransaction] = []
        self.rejections: List[Tuple[ClientTransaction, TransactionError]] = []

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    def get(self, client_id: ClientId) -> Optional[Account]:
        """
        Look up an account without creating it.

        Returns:
            The Account, or None if the client has never been referenced
        """
        return self._accounts.get(client_id)

    def __getitem__(self, client_id: ClientId) -> Account:
        try:
            return self._accounts[client_id]
        except KeyError:
            raise KeyError(f"No account for client id {client_id}") from None

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Tuple[ClientId, Account]]:
        return iter(self.items())

    def items(self) -> List[Tuple[ClientId, Account]]:
        """(client_id, Account) pairs in first-reference order."""
        return list(self._accounts.items())

    def client_ids(self) -> List[ClientId]:
        """All referenced client ids, ascending."""
        return sorted(self._accounts)

    def summaries(self) -> List[AccountSummary]:
        """Reported state of every account, sorted by client id ascending."""
        return [self._accounts[cid].summary(cid) for cid in self.client_ids()]

    def total_available(self) -> Amount:
        """Sum of available funds across all accounts."""
        total = ZERO
        for cid in self.client_ids():
            total = total + self._accounts[cid].available
        return total

    def total_held(self) -> Amount:
        """Sum of held funds across all accounts."""
        total = ZERO
        for cid in self.client_ids():
            total = total + self._accounts[cid].held
        return total

    # ========================================================================
    # TRANSACTIONS (Mutating)
    # ========================================================================

    def _account_for(self, client_id: ClientId) -> Account:
        account = self._accounts.get(client_id)
        if account is None:
            account = Account()
            self._accounts[client_id] = account
        return account

    def apply(self, client_id: ClientId, record: TransactionRecord) -> None:
        """
        Apply a transaction to a client's account, creating it if needed.

        The account is created before the transaction is attempted, so a
        client whose first transaction fails still shows up with zero
        balances.

        Args:
            client_id: Client owning the account
            record: Transaction record to apply

        Raises:
            TransactionError: Propagated unchanged from Account.apply()
            ValueError: If client_id is not a valid u16 client id
        """
        if not is_client_id(client_id):
            raise ValueError(f"Client id must be a u16 integer, got {client_id!r}")
        self._account_for(client_id).apply(record)
        if self.keep_log:
            self.transaction_log.append(ClientTransaction(client_id, record))
        if self.verbose:
            log.debug("%s: applied %r for client %s", self.name, record, client_id)

    def transact(self, client_tx: ClientTransaction) -> None:
        """Apply a parsed ClientTransaction. Same semantics as apply()."""
        self.apply(client_tx.client, client_tx.tx)

    def execute(self, client_tx: ClientTransaction) -> ExecuteResult:
        """
        Apply a transaction without raising on precondition failures.

        Rejections are logged and, with keep_log, recorded in
        self.rejections; the ledger and all accounts stay exactly as they
        were.

        Returns:
            ExecuteResult.APPLIED if the transaction took effect
            ExecuteResult.REJECTED if it failed a precondition
        """
        try:
            self.transact(client_tx)
        except TransactionError as e:
            if self.keep_log:
                self.rejections.append((client_tx, e.with_traceback(None)))
            log.warning(
                "%s: rejected %s tx %s for client %s: %s",
                self.name, client_tx.tx.kind.value, e.tx_id, client_tx.client, e,
            )
            return ExecuteResult.REJECTED
        return ExecuteResult.APPLIED

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> AccountLedger:
        """
        Create a deep copy of this ledger.

        Accounts, the transaction log and the rejection list are copied;
        changes to the clone never affect the original.
        """
        cloned = AccountLedger(self.name, verbose=self.verbose, keep_log=self.keep_log)
        cloned._accounts = {cid: account.copy() for cid, account in self._accounts.items()}
        cloned.transaction_log = list(self.transaction_log)
        cloned.rejections = list(self.rejections)
        return cloned

    def replay(self) -> AccountLedger:
        """
        Build a new ledger by re-applying the transaction log in order.

        Only applied transactions are logged, so the replay applies every
        one of them again; accounts referenced solely by rejected
        transactions are recreated empty to match the original.

        Returns:
            New AccountLedger whose accounts equal this ledger's accounts

        Raises:
            LedgerError: If the ledger was created with keep_log=False
            TransactionError: If the log cannot be replayed (corrupted log)
        """
        if not self.keep_log:
            raise LedgerError(f"{self.name}: cannot replay without a transaction log")
        replayed = AccountLedger(f"{self.name}_replayed", verbose=self.verbose)
        for client_tx in self.transaction_log:
            replayed.transact(client_tx)
        for client_tx, _ in self.rejections:
            replayed._account_for(client_tx.client)
        return replayed

    def state_equals(self, other: AccountLedger) -> bool:
        """True if both ledgers hold the same clients with equal accounts."""
        return self._accounts == other._accounts

    def __repr__(self) -> str:
        return (
            f"AccountLedger({self.name!r}, accounts={len(self._accounts)}, "
            f"applied={len(self.transaction_log)}, rejected={len(self.rejections)})"
        )
