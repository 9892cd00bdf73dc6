"""
conftest.py - Shared pytest fixtures for payledger tests

Provides:
- Fresh accounts and ledgers
- A ledger pre-loaded with a few funded clients
- CSV input files written to a temporary directory
- Logger isolation between tests
"""

import logging
import os

import pytest

from payledger import Account, AccountLedger
from payledger.logger_config import LOGGER_NAME

from tests.helpers import amt, deposit


FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")


# =============================================================================
# LOGGING ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# =============================================================================
# ACCOUNTS AND LEDGERS
# =============================================================================

@pytest.fixture
def account():
    """An empty account."""
    return Account()


@pytest.fixture
def funded_account():
    """An account holding 100 from deposit tx 1."""
    acc = Account()
    acc.apply(deposit(1, 1, "100").tx)
    return acc


@pytest.fixture
def ledger():
    """An empty ledger."""
    return AccountLedger("test")


@pytest.fixture
def funded_ledger():
    """
    Ledger with three funded clients:
        client 1: deposit tx 1 = 100
        client 2: deposit tx 2 = 50.5
        client 3: deposit tx 3 = 0.0001
    """
    ledger = AccountLedger("funded")
    for tx in (deposit(1, 1, "100"), deposit(2, 2, "50.5"), deposit(3, 3, "0.0001")):
        ledger.transact(tx)
    return ledger


# =============================================================================
# CSV INPUT
# =============================================================================

@pytest.fixture
def fixture_path():
    """Return the absolute path of a file under tests/fixtures."""
    def _path(name: str) -> str:
        return os.path.join(FIXTURES_DIR, name)
    return _path


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file in tmp_path and return its path."""
    def _write(text: str, name: str = "transactions.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def hundred():
    return amt("100")
