"""
Ledger report: one row per transaction, one column per account and budget.

build_report() is pure; render_report() writes an aligned plain-text table:

    Date        Description    Amount  |  Checking  |  Unallocated     Rent
    2021-07-01  Salary       2500.00€  |  2500.00€  |     1700.00€  800.00€
    Total                    2500.00€  |  2500.00€  |     1700.00€  800.00€
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TextIO

from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.transactions import TransactionSequence
from budget_kernel.domain.values import DEFAULT_CURRENCY_SYMBOL, Amount


@dataclass(frozen=True)
class ReportRow:
    date: date
    description: str
    amount: Amount
    accounts: tuple[Amount | None, ...]
    budgets: tuple[Amount | None, ...]


@dataclass(frozen=True)
class LedgerReport:
    """Tabular view of a transaction sequence, with a totals row."""

    account_names: tuple[str, ...]
    budget_names: tuple[str, ...]
    rows: tuple[ReportRow, ...]
    total: Amount
    account_totals: tuple[Amount, ...]
    budget_totals: tuple[Amount, ...]


def _cells(entries: LedgerEntries, names: tuple[str, ...]) -> tuple[Amount | None, ...]:
    return tuple(entries.amount_for(name) for name in names)


def build_report(transactions: TransactionSequence) -> LedgerReport:
    """Build the report in sequence order; columns in order of first appearance."""
    account_names = tuple(transactions.account_names())
    budget_names = tuple(transactions.budget_names())

    rows = tuple(
        ReportRow(
            date=t.date,
            description=t.description,
            amount=t.amount,
            accounts=_cells(t.accounts, account_names),
            budgets=_cells(t.budgets, budget_names),
        )
        for t in transactions
    )

    return LedgerReport(
        account_names=account_names,
        budget_names=budget_names,
        rows=rows,
        total=transactions.total(),
        account_totals=tuple(transactions.account_total(n) for n in account_names),
        budget_totals=tuple(transactions.budget_total(n) for n in budget_names),
    )


def render_report(
    report: LedgerReport,
    stream: TextIO,
    *,
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> None:
    """Write the report as an aligned plain-text table."""

    def fmt(amount: Amount | None) -> str:
        return "" if amount is None else amount.format(symbol)

    header = ["Date", "Description", "Amount", *report.account_names, *report.budget_names]
    lines = [header]
    for row in report.rows:
        lines.append([
            row.date.isoformat(),
            row.description,
            fmt(row.amount),
            *(fmt(a) for a in row.accounts),
            *(fmt(a) for a in row.budgets),
        ])
    lines.append([
        "Total",
        "",
        fmt(report.total),
        *(fmt(a) for a in report.account_totals),
        *(fmt(a) for a in report.budget_totals),
    ])

    widths = [max(len(line[i]) for line in lines) for i in range(len(header))]
    # Group separators before the first account and first budget column
    separators = {3, 3 + len(report.account_names)}

    for line in lines:
        parts = []
        for i, cell in enumerate(line):
            if i in separators and i < len(header):
                parts.append("|")
            # Amount columns are right-aligned
            parts.append(cell.rjust(widths[i]) if i >= 2 else cell.ljust(widths[i]))
        stream.write("  ".join(parts).rstrip() + "\n")
