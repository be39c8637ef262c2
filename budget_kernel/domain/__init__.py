"""
Pure domain layer of the budget kernel: value objects and the ledger model.

No I/O, no logging configuration, no clock access.
"""

from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.transactions import Transaction, TransactionSequence
from budget_kernel.domain.values import DEFAULT_CURRENCY_SYMBOL, Amount

__all__ = [
    "Amount",
    "DEFAULT_CURRENCY_SYMBOL",
    "LedgerEntries",
    "Transaction",
    "TransactionSequence",
]
