"""
payledger - Client Payments Ledger

Applies deposits, withdrawals, disputes, resolutions and chargebacks to
per-client accounts using exact fixed-point money.

Usage:
    from payledger import AccountLedger, Amount, Deposit, Withdrawal, Dispute

    ledger = AccountLedger()
    ledger.apply(1, Deposit(1, Amount.from_decimal("100.0")))
    ledger.apply(1, Withdrawal(2, Amount.from_decimal("40.0")))
    ledger.apply(1, Dispute(1))

    account = ledger[1]
    account.available   # Amount(-40)
    account.held        # Amount(100)

    # Non-raising variant for stream processing
    result = ledger.execute(ClientTransaction(1, Withdrawal(3, Amount.from_decimal("1"))))
    # ExecuteResult.REJECTED (insufficient funds)
"""

# Core types
from .core import (
    AMOUNT_SCALE,
    CLIENT_ID_MAX,
    TRANSACTION_ID_MAX,
    REPORT_FIELDS,
    ClientId,
    TransactionId,
    TransactionKind,
    ChangeKind,
    ExecuteResult,
    LedgerError,
    AmountOutOfRange,
    TransactionError,
    DuplicateTransactionId,
    AccountFrozen,
    InsufficientFunds,
    InvalidDispute,
    UndisputedResolution,
    UndisputedChargeback,
    TransactionParseError,
    SourceReadError,
)

# Money
from .amount import Amount, ZERO

# Transaction records
from .transaction import (
    Deposit,
    Withdrawal,
    Dispute,
    Resolve,
    Chargeback,
    TransactionRecord,
    ClientTransaction,
    BalanceChange,
    make_record,
)

# Accounts
from .account import Account, AccountSummary
from .ledger import AccountLedger

# I/O boundary
from .parsing import parse_amount, parse_line, parse_record, read_transactions, open_source
from .report import write_report, format_report, summary_row

__all__ = [
    # Core
    'AMOUNT_SCALE', 'CLIENT_ID_MAX', 'TRANSACTION_ID_MAX', 'REPORT_FIELDS',
    'ClientId', 'TransactionId', 'TransactionKind', 'ChangeKind', 'ExecuteResult',
    'LedgerError', 'AmountOutOfRange', 'TransactionError',
    'DuplicateTransactionId', 'AccountFrozen', 'InsufficientFunds', 'InvalidDispute',
    'UndisputedResolution', 'UndisputedChargeback',
    'TransactionParseError', 'SourceReadError',
    # Money
    'Amount', 'ZERO',
    # Records
    'Deposit', 'Withdrawal', 'Dispute', 'Resolve', 'Chargeback',
    'TransactionRecord', 'ClientTransaction', 'BalanceChange', 'make_record',
    # Accounts
    'Account', 'AccountSummary', 'AccountLedger',
    # I/O
    'parse_amount', 'parse_line', 'parse_record', 'read_transactions', 'open_source',
    'write_report', 'format_report', 'summary_row',
]

__version__ = '1.0.0'
