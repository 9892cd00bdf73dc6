"""
test_scenarios.py - End-to-end transaction scenarios

Each scenario drives an AccountLedger through a realistic sequence and
checks the final reported state.
"""

import pytest

from payledger import (
    AccountLedger, ExecuteResult, ZERO,
    AccountFrozen, InsufficientFunds, InvalidDispute, UndisputedChargeback,
    format_report, read_transactions, open_source,
)

from tests.helpers import (
    amt, deposit, withdrawal, dispute, resolve, chargeback, run_all, account_state,
)


class TestDisputeLifecycles:

    def test_dispute_then_resolve(self):
        """deposit 100 -> dispute -> resolve leaves 100 available, nothing held."""
        ledger = AccountLedger()
        results = run_all(ledger, [deposit(1, 1, "100.0"), dispute(1, 1), resolve(1, 1)])
        assert results == [ExecuteResult.APPLIED] * 3
        assert account_state(ledger, 1) == (amt("100"), ZERO, False)

        # Follow-up deposit, then a withdrawal the account cannot cover
        assert ledger.execute(deposit(1, 2, "50.0")) is ExecuteResult.APPLIED
        assert ledger.execute(withdrawal(1, 3, "160.0")) is ExecuteResult.REJECTED
        _, error = ledger.rejections[-1]
        assert isinstance(error, InsufficientFunds)
        assert error.current == amt("150")
        assert ledger[1].available == amt("150")

    def test_dispute_then_chargeback(self):
        """deposit 100 -> dispute -> chargeback freezes the account at zero."""
        ledger = AccountLedger()
        run_all(ledger, [deposit(2, 10, "100.0"), dispute(2, 10), chargeback(2, 10)])
        assert account_state(ledger, 2) == (ZERO, ZERO, True)

        # Deposits still land on a frozen account, withdrawals do not
        assert ledger.execute(deposit(2, 11, "5.0")) is ExecuteResult.APPLIED
        assert ledger.execute(withdrawal(2, 12, "1.0")) is ExecuteResult.REJECTED
        assert isinstance(ledger.rejections[-1][1], AccountFrozen)
        assert account_state(ledger, 2) == (amt("5"), ZERO, True)

    def test_chargeback_is_terminal_for_the_id(self):
        ledger = AccountLedger()
        run_all(ledger, [
            deposit(1, 1, "40"),
            deposit(1, 2, "60"),
            dispute(1, 1),
            chargeback(1, 1),
            chargeback(1, 1),
            dispute(1, 1),
        ])
        errors = [type(e) for _, e in ledger.rejections]
        assert errors == [UndisputedChargeback, InvalidDispute]
        assert account_state(ledger, 1) == (amt("60"), ZERO, True)

    def test_interleaved_clients_do_not_interfere(self):
        ledger = AccountLedger()
        run_all(ledger, [
            deposit(1, 1, "10"),
            deposit(2, 2, "20"),
            dispute(1, 1),
            withdrawal(2, 3, "5"),
            dispute(2, 2),
            resolve(1, 1),
            chargeback(2, 2),
        ])
        assert account_state(ledger, 1) == (amt("10"), ZERO, False)
        assert account_state(ledger, 2) == (amt("-5"), ZERO, True)
        assert ledger[2].total == amt("-5")

    def test_multiple_open_disputes(self):
        ledger = AccountLedger()
        run_all(ledger, [
            deposit(1, 1, "1.1"),
            deposit(1, 2, "2.2"),
            deposit(1, 3, "3.3"),
            dispute(1, 1),
            dispute(1, 3),
        ])
        assert ledger[1].held == amt("4.4")
        assert ledger[1].available == amt("2.2")
        ledger.transact(resolve(1, 3))
        ledger.transact(chargeback(1, 1))
        assert account_state(ledger, 1) == (amt("5.5"), ZERO, True)


class TestFixtureFile:

    def test_fixture_file_report(self, fixture_path):
        ledger = AccountLedger("fixture")
        with open_source(fixture_path("transactions.csv")) as source:
            for _, client_tx in read_transactions(source):
                ledger.execute(client_tx)

        with open(fixture_path("expected_accounts.csv"), encoding="utf-8") as fh:
            expected = fh.read()
        assert format_report(ledger) == expected
        assert len(ledger.rejections) == 3
        assert ledger.replay().state_equals(ledger)

    def test_float_drift_free_totals(self):
        """Ten deposits of 0.1 sum to exactly 1."""
        ledger = AccountLedger()
        run_all(ledger, [deposit(1, i, "0.1") for i in range(10)])
        assert ledger[1].total == amt("1")
        assert format_report(ledger).splitlines()[1] == "1,1,0,1,false"


@pytest.mark.parametrize("amount", ["0", "0.0001", "922337203685477.5807"])
def test_extreme_amounts_round_trip_through_account(amount):
    ledger = AccountLedger()
    ledger.transact(deposit(1, 1, amount))
    ledger.transact(withdrawal(1, 2, amount))
    assert ledger[1].total == ZERO
