"""
report.py - Account state output

Renders every account in a ledger as comma-separated rows:

    client,available,held,total,locked
    1,1.5,0,1.5,false
    2,2,0,2,false

Rows are sorted by client id so the output is deterministic.
"""

from __future__ import annotations
from typing import List, TextIO
import csv
import io

from .account import AccountSummary
from .core import REPORT_FIELDS
from .ledger import AccountLedger


def summary_row(summary: AccountSummary) -> List[str]:
    """Format one AccountSummary as report fields."""
    return [
        str(summary.client),
        str(summary.available),
        str(summary.held),
        str(summary.total),
        "true" if summary.frozen else "false",
    ]


def write_report(ledger: AccountLedger, stream: TextIO) -> int:
    """
    Write the account report for a ledger.

    Args:
        ledger: Ledger whose accounts to report
        stream: Text stream to write to

    Returns:
        Number of account rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_FIELDS)
    rows = 0
    for summary in ledger.summaries():
        writer.writerow(summary_row(summary))
        rows += 1
    return rows


def format_report(ledger: AccountLedger) -> str:
    """Return the account report as a string."""
    buffer = io.StringIO()
    write_report(ledger, buffer)
    return buffer.getvalue()
