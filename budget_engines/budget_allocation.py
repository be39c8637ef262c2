"""
Module: budget_engines.budget_allocation
Responsibility:
    Distribute each transaction's unallocated money into a prioritized set
    of target budgets, so that every target's cumulative total tracks its
    configured monthly rate as closely as possible.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only budget_kernel (domain values, exceptions, logging) and
    budget_config.schema.

Algorithm:
    Running totals start at each target's current total across the whole
    sequence, so money allocated by an earlier run is never moved again.
    Transactions are processed oldest first. While a transaction still
    holds a positive unallocated amount:

        months_filled = floor(running_total / monthly_rate)   per target
        pick the target with the fewest months filled (earliest wins ties)
        missing = monthly_rate * (months_filled + 1) - running_total
        transfer min(missing, unallocated) to that target

    ``missing`` is always >= 1 minor unit because the floor keeps
    running_total below the next quota, so every transfer strictly shrinks
    the unallocated amount and each transaction terminates.

Invariants enforced:
    - Conservation: a transaction's budget breakdown sums to the same
      amount before and after allocation; only transfers are applied.
    - Fixed point: running the engine twice with the same configuration
      performs no transfers the second time.
    - Priority: among equally-behind targets the earliest configured wins.

Preconditions (documented, not checked):
    - The sequence is sorted ascending by date. On an unsorted sequence the
      engine still terminates but fills budgets in the wrong order.

Failure modes:
    - InvalidMonthlyRateError for a target rate <= 0.
    - DuplicateBudgetTargetError for a target name configured twice.
    - UnallocatedTargetError for a target named like the unallocated pool.
    All are raised before any transaction is touched.

Usage:
    from budget_engines.budget_allocation import BudgetAllocationEngine

    engine = BudgetAllocationEngine()
    summary = engine.allocate(transactions=transactions, config=config.budgets)
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from budget_config.schema import BudgetConfig
from budget_engines.tracer import traced_engine
from budget_kernel.domain.transactions import Transaction, TransactionSequence
from budget_kernel.domain.values import Amount
from budget_kernel.exceptions import (
    DuplicateBudgetTargetError,
    InvalidMonthlyRateError,
    UnallocatedTargetError,
)
from budget_kernel.logging_config import get_logger

logger = get_logger("engines.budget_allocation")


@dataclass(frozen=True)
class AllocationLine:
    """Money moved into one target during a run."""

    target_name: str
    allocated: Amount


@dataclass(frozen=True)
class AllocationSummary:
    """
    What an allocation run did.

    Contract:
        Informational only; the mutated sequence is the real output.
    Guarantees:
        - One line per configured target, in configuration order.
    """

    lines: tuple[AllocationLine, ...]
    transfer_count: int
    transactions_touched: int

    @property
    def total_allocated(self) -> Amount:
        return sum((line.allocated for line in self.lines), Amount.zero())

    def allocated_to(self, target_name: str) -> Amount:
        for line in self.lines:
            if line.target_name == target_name:
                return line.allocated
        return Amount.zero()


class BudgetAllocationEngine:
    """
    Water-filling allocation of unallocated money into monthly-rate targets.

    Contract:
        Mutates the given TransactionSequence in place; no I/O.
    Non-goals:
        - Does not sort the sequence; callers load it sorted.
        - Does not persist anything.
    """

    @traced_engine("budget_allocation", "1.0", fingerprint_fields=("config",))
    def allocate(
        self,
        *,
        transactions: TransactionSequence,
        config: BudgetConfig,
    ) -> AllocationSummary:
        """
        Allocate every transaction's unallocated pool into the targets.

        Args:
            transactions: Date-sorted sequence, mutated in place.
            config: Unallocated pool name and ordered targets.

        Returns:
            AllocationSummary of the money moved.
        """
        t0 = time.monotonic()
        logger.info("budget_allocation_started", extra={
            "unallocated": config.unallocated,
            "target_count": len(config.targets),
            "transaction_count": len(transactions),
        })

        if not config.targets:
            logger.warning("budget_allocation_no_targets", extra={
                "unallocated": config.unallocated,
            })
            return AllocationSummary(lines=(), transfer_count=0, transactions_touched=0)

        self._validate(config)

        rates = {target.name: target.monthly for target in config.targets}
        running = {name: transactions.budget_total(name) for name in rates}
        moved = {name: Amount.zero() for name in rates}

        transfer_count = 0
        transactions_touched = 0
        for transaction in transactions:
            transfers = self._allocate_transaction(
                transaction, config.unallocated, rates, running, moved,
            )
            transfer_count += transfers
            if transfers:
                transactions_touched += 1

        summary = AllocationSummary(
            lines=tuple(AllocationLine(name, amount) for name, amount in moved.items()),
            transfer_count=transfer_count,
            transactions_touched=transactions_touched,
        )

        logger.info("budget_allocation_completed", extra={
            "total_allocated": summary.total_allocated.to_decimal_string(),
            "transfer_count": transfer_count,
            "transactions_touched": transactions_touched,
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return summary

    def _validate(self, config: BudgetConfig) -> None:
        """Reject targets that would stall or loop forever."""
        seen: set[str] = set()
        for target in config.targets:
            if target.name == config.unallocated:
                logger.error("budget_target_is_unallocated_pool", extra={
                    "target_name": target.name,
                })
                raise UnallocatedTargetError(target.name)
            if target.name in seen:
                logger.error("budget_target_duplicate", extra={
                    "target_name": target.name,
                })
                raise DuplicateBudgetTargetError(target.name)
            if not target.monthly.is_positive:
                logger.error("budget_target_invalid_rate", extra={
                    "target_name": target.name,
                    "monthly": target.monthly.to_decimal_string(),
                })
                raise InvalidMonthlyRateError(
                    target.name, target.monthly.to_decimal_string()
                )
            seen.add(target.name)

    def _allocate_transaction(
        self,
        transaction: Transaction,
        pool: str,
        rates: dict[str, Amount],
        running: dict[str, Amount],
        moved: dict[str, Amount],
    ) -> int:
        """Drain one transaction's pool into the targets; returns the transfer count."""
        budgets = transaction.budgets
        total_before = budgets.total()
        transfers = 0

        while True:
            unallocated = budgets.amount_for(pool)
            if unallocated is None or not unallocated.is_positive:
                break

            # min() keeps the first of equal keys, i.e. configuration order
            name = min(rates, key=lambda n: running[n] // rates[n])
            months_filled = running[name] // rates[name]
            missing = rates[name] * (months_filled + 1) - running[name]
            amount = min(missing, unallocated)

            budgets.transfer(amount, pool, name)
            running[name] = running[name] + amount
            moved[name] = moved[name] + amount
            transfers += 1

            logger.debug("budget_transfer", extra={
                "date": transaction.date,
                "target_name": name,
                "amount": amount.to_decimal_string(),
                "months_filled": months_filled,
                "running_total": running[name].to_decimal_string(),
            })

        # INVARIANT: conservation -- transfers never change the breakdown sum
        assert budgets.total() == total_before, (
            f"Budget conservation violated on {transaction.date}: "
            f"{budgets.total()} != {total_before}"
        )
        return transfers


def allocate(transactions: TransactionSequence, config: BudgetConfig) -> AllocationSummary:
    """Convenience wrapper around BudgetAllocationEngine().allocate()."""
    return BudgetAllocationEngine().allocate(transactions=transactions, config=config)
