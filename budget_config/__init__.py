"""
Budget configuration: schema dataclasses and the YAML loader.

    from budget_config import load_config

    config = load_config("budget.yaml")
    config.budgets.targets  # ordered BudgetTarget tuple
"""

from budget_config.loader import load_config, parse_amount
from budget_config.schema import BudgetConfig, BudgetTarget, LedgerConfig

__all__ = [
    "BudgetConfig",
    "BudgetTarget",
    "LedgerConfig",
    "load_config",
    "parse_amount",
]
