"""
Transactions -- Dated ledger events and their chronological sequence.

Responsibility:
    Transaction is one dated financial event with a total Amount and two
    breakdowns: by budget and by bank account. TransactionSequence is the
    date-ordered collection the allocation engine and the report consume.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants relied upon (not enforced at construction):
    - A transaction's budget breakdown sums to its amount. Loading
      collaborators check this; ``unbalanced()`` reports violations.
    - The sequence is sorted ascending by date, ties in arrival order.
      ``sort_by_date()`` establishes this once, before allocation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date as Date
from pathlib import PurePath

from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.values import Amount


@dataclass
class Transaction:
    """
    One dated financial event.

    Mutated in place only by the allocation engine, which moves money
    between entries of ``budgets`` and never changes ``amount``.

    ``source`` is the file the transaction was loaded from, relative to the
    store directory, so that storing it again keeps the directory layout.
    It plays no part in equality.
    """

    date: Date
    description: str
    amount: Amount
    budgets: LedgerEntries = field(default_factory=LedgerEntries)
    accounts: LedgerEntries = field(default_factory=LedgerEntries)
    source: PurePath | None = field(default=None, repr=False, compare=False)

    def is_balanced(self) -> bool:
        """True if the budget breakdown sums to the transaction amount."""
        return self.budgets.total() == self.amount


class TransactionSequence:
    """
    Ordered list of transactions with aggregate queries.

    Aggregates are read-only. Names absent from a transaction count as zero.
    """

    __slots__ = ("_transactions",)

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._transactions: list[Transaction] = list(transactions)

    @classmethod
    def sorted_by_date(cls, transactions: Iterable[Transaction]) -> TransactionSequence:
        """Build a sequence stably sorted by date (ties keep arrival order)."""
        sequence = cls(transactions)
        sequence.sort_by_date()
        return sequence

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __getitem__(self, index: int) -> Transaction:
        return self._transactions[index]

    def __repr__(self) -> str:
        return f"TransactionSequence({len(self._transactions)} transactions)"

    def append(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)

    def sort_by_date(self) -> None:
        self._transactions.sort(key=lambda t: t.date)

    def total(self) -> Amount:
        """Sum of every transaction's amount."""
        return sum((t.amount for t in self._transactions), Amount.zero())

    def budget_total(self, name: str) -> Amount:
        """Sum of the ``name`` budget entry across all transactions."""
        total = Amount.zero()
        for transaction in self._transactions:
            amount = transaction.budgets.amount_for(name)
            if amount is not None:
                total += amount
        return total

    def account_total(self, name: str) -> Amount:
        """Sum of the ``name`` account entry across all transactions."""
        total = Amount.zero()
        for transaction in self._transactions:
            amount = transaction.accounts.amount_for(name)
            if amount is not None:
                total += amount
        return total

    def budget_names(self) -> list[str]:
        """Budget names in order of first appearance."""
        return _collect_names(t.budgets for t in self._transactions)

    def account_names(self) -> list[str]:
        """Account names in order of first appearance."""
        return _collect_names(t.accounts for t in self._transactions)

    def unbalanced(self) -> list[Transaction]:
        """Transactions whose budget breakdown does not sum to their amount."""
        return [t for t in self._transactions if not t.is_balanced()]


def _collect_names(breakdowns: Iterable[LedgerEntries]) -> list[str]:
    seen: dict[str, None] = {}
    for entries in breakdowns:
        for name in entries:
            seen.setdefault(name, None)
    return list(seen)
