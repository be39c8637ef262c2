"""
Budget configuration schema.

The canonical data model for configuration. YAML files are parsed into
these types by the loader; the allocation engine and the CLI consume them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from budget_kernel.domain.values import DEFAULT_CURRENCY_SYMBOL, Amount


@dataclass(frozen=True)
class BudgetTarget:
    """A budget the unallocated pool is distributed into, at a monthly rate."""

    name: str
    monthly: Amount


@dataclass(frozen=True)
class BudgetConfig:
    """
    The unallocated pool and the ordered list of targets.

    Target order is priority order: when two targets are equally far
    behind, the earlier one is filled first.
    """

    unallocated: str
    targets: tuple[BudgetTarget, ...] = ()

    def target_names(self) -> list[str]:
        return [t.name for t in self.targets]


@dataclass(frozen=True)
class LedgerConfig:
    """Top-level configuration: where transactions live and how to budget them."""

    transactions_path: Path
    budgets: BudgetConfig
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
