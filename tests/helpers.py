"""
helpers.py - Plain helper functions shared by the test suites

Kept outside conftest.py so hypothesis tests can import them directly
instead of depending on function-scoped fixtures.
"""

from decimal import Decimal
from typing import Iterable, Tuple, Union

from hypothesis import strategies as st

from payledger import (
    AccountLedger, Amount, ClientTransaction,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
)


def amt(value: Union[str, int, Decimal]) -> Amount:
    """Shorthand for Amount.from_decimal()."""
    return Amount.from_decimal(value)


def deposit(client: int, tx_id: int, value) -> ClientTransaction:
    return ClientTransaction(client, Deposit(tx_id, amt(value)))


def withdrawal(client: int, tx_id: int, value) -> ClientTransaction:
    return ClientTransaction(client, Withdrawal(tx_id, amt(value)))


def dispute(client: int, tx_id: int) -> ClientTransaction:
    return ClientTransaction(client, Dispute(tx_id))


def resolve(client: int, tx_id: int) -> ClientTransaction:
    return ClientTransaction(client, Resolve(tx_id))


def chargeback(client: int, tx_id: int) -> ClientTransaction:
    return ClientTransaction(client, Chargeback(tx_id))


def run_all(ledger: AccountLedger, transactions: Iterable[ClientTransaction]) -> list:
    """Execute every transaction and return the ExecuteResults in order."""
    return [ledger.execute(tx) for tx in transactions]


def account_state(ledger: AccountLedger, client: int) -> Tuple[Amount, Amount, bool]:
    """(available, held, frozen) for a client."""
    account = ledger[client]
    return account.available, account.held, account.frozen


# ============================================================================
# HYPOTHESIS STRATEGIES
# ============================================================================

# Small id ranges force duplicate ids and disputes that reference real deposits
SMALL_CLIENTS = st.integers(min_value=1, max_value=3)
SMALL_TX_IDS = st.integers(min_value=1, max_value=6)
SCALED_AMOUNTS = st.integers(min_value=0, max_value=10_000_000)

@st.composite
def client_transactions(draw, clients=SMALL_CLIENTS, tx_ids=SMALL_TX_IDS):
    """Arbitrary ClientTransaction over a small id space."""
    client = draw(clients)
    tx_id = draw(tx_ids)
    record_type = draw(st.sampled_from([Deposit, Withdrawal, Dispute, Resolve, Chargeback]))
    if record_type in (Deposit, Withdrawal):
        record = record_type(tx_id, Amount.from_scaled(draw(SCALED_AMOUNTS)))
    else:
        record = record_type(tx_id)
    return ClientTransaction(client, record)

def transaction_streams(min_size=0, max_size=40, **kwargs):
    return st.lists(client_transactions(**kwargs), min_size=min_size, max_size=max_size)
