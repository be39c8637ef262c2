"""
Entries -- Insertion-ordered name -> Amount mapping.

Responsibility:
    LedgerEntries holds a transaction's breakdown by budget (or by bank
    account). Insertion order is meaningful: it is the display order of a
    breakdown, and for budget targets it is the allocation priority.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Depends only on values.Amount.

Invariants enforced:
    - Names are unique within one mapping.
    - transfer() keeps the sum of all entries unchanged (exact integer
      arithmetic, no rounding).

Failure modes:
    - EntryNotFoundError when transfer() names a source with no entry.
    - TypeError when a non-Amount value is inserted.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from budget_kernel.domain.values import Amount
from budget_kernel.exceptions import EntryNotFoundError


class LedgerEntries(Mapping[str, Amount]):
    """
    Ordered mapping from budget/account name to Amount.

    Reading goes through the Mapping protocol (``entries["Rent"]``,
    ``entries.items()``); the only mutators are insert() and transfer().
    Overwriting an existing name keeps its original position.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Amount] | Iterable[tuple[str, Amount]] = ()):
        self._entries: dict[str, Amount] = {}
        items = entries.items() if isinstance(entries, Mapping) else entries
        for name, amount in items:
            self.insert(name, amount)

    def __getitem__(self, name: str) -> Amount:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name!r}: {amount}" for name, amount in self._entries.items())
        return f"LedgerEntries({{{inner}}})"

    def insert(self, name: str, amount: Amount) -> LedgerEntries:
        """Insert or overwrite an entry. Returns self for chaining."""
        if not isinstance(amount, Amount):
            raise TypeError(f"Entry {name!r} must be an Amount, got {type(amount).__name__}")
        self._entries[name] = amount
        return self

    def amount_for(self, name: str) -> Amount | None:
        """The entry for ``name``, or None if there is none."""
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def total(self) -> Amount:
        return sum(self._entries.values(), Amount.zero())

    def transfer(self, amount: Amount, from_name: str, to_name: str) -> None:
        """
        Move ``amount`` from one entry to another.

        Preconditions:
            - ``from_name`` has an entry.
        Postconditions:
            - ``from_name`` decreased and ``to_name`` increased by exactly
              ``amount``; ``to_name`` is appended at zero first if absent.
            - total() is unchanged.
        Raises:
            EntryNotFoundError: If ``from_name`` has no entry.
        """
        if from_name not in self._entries:
            raise EntryNotFoundError(from_name)
        self._entries[from_name] = self._entries[from_name] - amount
        self._entries[to_name] = self._entries.get(to_name, Amount.zero()) + amount

    def copy(self) -> LedgerEntries:
        return LedgerEntries(self._entries)
