"""
cli.py - Command-line driver

    payledger transactions.csv > accounts.csv

Reads transactions from INPUT, applies them in order, and writes the final
state of every account to stdout. Rejected transactions are logged to
stderr and do not stop processing. An unreadable input or a malformed line
stops the run with exit status 1, as does a balance that overflows the
amount range.
"""

from __future__ import annotations
from typing import List, Optional, TextIO, Tuple
import argparse
import logging
import sys

from .core import AmountOutOfRange, ExecuteResult, SourceReadError, TransactionParseError
from .ledger import AccountLedger
from .logger_config import LOG_LEVEL_ENV, setup_logging, default_level
from .parsing import open_source, read_transactions
from .report import write_report

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payledger",
        description="Apply a CSV stream of client transactions and print final account balances.",
    )
    parser.add_argument("input", help="path to the transactions CSV file")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log every applied transaction (implies --log-level DEBUG)",
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
        help="stderr log level (default: $PAYLEDGER_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", default=None, help="also log to this file, rotated daily")
    return parser


def process_transaction_source(source: TextIO, ledger: AccountLedger) -> Tuple[int, int]:
    """
    Apply every transaction read from source to ledger.

    Returns:
        (applied, rejected) transaction counts

    Raises:
        TransactionParseError: On a malformed line
        SourceReadError: If reading fails
    """
    applied = rejected = 0
    for line_no, client_tx in read_transactions(source):
        if ledger.execute(client_tx) is ExecuteResult.APPLIED:
            applied += 1
        else:
            rejected += 1
            log.info("Transaction on line %d was not applied", line_no)
    return applied, rejected


def main(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = "DEBUG" if args.verbose else (args.log_level or default_level())
    if level not in LOG_LEVELS:
        parser.error(
            f"invalid {LOG_LEVEL_ENV} value {level!r} (choose from {', '.join(LOG_LEVELS)})"
        )
    setup_logging(level, args.log_file)
    stdout = stdout if stdout is not None else sys.stdout

    # Audit trail off: memory is bounded by account state
    ledger = AccountLedger(verbose=args.verbose, keep_log=False)
    try:
        with open_source(args.input) as source:
            applied, rejected = process_transaction_source(source, ledger)
    except (SourceReadError, TransactionParseError, AmountOutOfRange) as e:
        log.error("%s", e)
        return EXIT_FAILURE

    log.info(
        "Processed %d transactions (%d rejected) across %d accounts",
        applied + rejected, rejected, len(ledger),
    )
    write_report(ledger, stdout)
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
