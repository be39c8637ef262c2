"""
Pytest fixtures for the budget ledger test suite.

Provides:
- Structured logging setup and capture
- Ledger factories (amounts, transactions, budget configurations)
"""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from budget_config.schema import BudgetConfig, BudgetTarget
from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.transactions import Transaction, TransactionSequence
from budget_kernel.domain.values import Amount
from budget_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

UNALLOCATED = "Unallocated"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture budget_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            allocate(transactions, config)
            logs = captured_logs()
            assert any(r["message"] == "budget_allocation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("budget_kernel")
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Ledger factories
# =============================================================================


def make_transaction(
    budgets: dict[str, int] | None = None,
    *,
    amount: int | None = None,
    day: date = date(2021, 7, 18),
    description: str = "A transaction",
    accounts: dict[str, int] | None = None,
) -> Transaction:
    """
    Build a transaction from minor-unit budget entries.

    The amount defaults to the sum of the budget entries, i.e. balanced.
    """
    budgets = budgets or {}
    if amount is None:
        amount = sum(budgets.values())
    return Transaction(
        date=day,
        description=description,
        amount=Amount(amount),
        budgets=LedgerEntries((name, Amount(v)) for name, v in budgets.items()),
        accounts=LedgerEntries((name, Amount(v)) for name, v in (accounts or {}).items()),
    )


def make_config(*targets: tuple[str, int], unallocated: str = UNALLOCATED) -> BudgetConfig:
    """``make_config(("A", 100_00), ("B", 50_00))``"""
    return BudgetConfig(
        unallocated=unallocated,
        targets=tuple(BudgetTarget(name, Amount(monthly)) for name, monthly in targets),
    )


@pytest.fixture
def transaction_factory():
    """Factory fixture wrapping make_transaction."""
    return make_transaction


@pytest.fixture
def config_factory():
    """Factory fixture wrapping make_config."""
    return make_config


@pytest.fixture
def two_target_config() -> BudgetConfig:
    """Targets A at 100.00/month and B at 50.00/month, A first."""
    return make_config(("A", 100_00), ("B", 50_00))


@pytest.fixture
def empty_sequence() -> TransactionSequence:
    return TransactionSequence()
