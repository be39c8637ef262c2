"""
Configuration Loader (``budget_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the frozen
dataclasses of ``budget_config.schema``. Also provides ``parse_amount``,
the single rule for reading amounts out of YAML, shared with the
transaction store.

Invariants enforced
-------------------
* Missing required keys and unknown keys raise ``ConfigFileError``; there
  are no silent defaults for required fields.
* YAML integers are minor units (``80000`` is 800.00); strings are decimal
  major units (``"800.00"``).
* Monthly rates are NOT validated here. The allocation engine rejects
  non-positive rates before it runs, and a configuration may be loaded
  for reporting alone.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad amount  -> ``ConfigFileError`` naming the key, chained to the
  ``ValueError`` from ``parse_amount``.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from budget_config.schema import BudgetConfig, BudgetTarget, LedgerConfig
from budget_kernel.domain.values import DEFAULT_CURRENCY_SYMBOL, Amount
from budget_kernel.exceptions import ConfigFileError
from budget_kernel.logging_config import get_logger

logger = get_logger("config.loader")

_TOP_LEVEL_KEYS = frozenset({"money", "budgets"})
_MONEY_KEYS = frozenset({"path", "currency_symbol"})
_BUDGETS_KEYS = frozenset({"unallocated", "targets"})
_TARGET_KEYS = frozenset({"name", "monthly"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_amount(value: Any) -> Amount:
    """
    Parse an amount from YAML.

    ``int`` values are minor units, ``str`` and ``Decimal`` values are
    major units with at most two decimals.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse amount from {value!r}")
    if isinstance(value, int):
        return Amount(value)
    if isinstance(value, str):
        return Amount.parse(value)
    if isinstance(value, Decimal):
        return Amount.from_decimal(value)
    raise ValueError(f"Cannot parse amount from {value!r}")


def _check_keys(data: Any, allowed: frozenset[str], where: str, path: Path) -> None:
    if not isinstance(data, dict):
        raise ConfigFileError(str(path), f"{where} must be a mapping")
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigFileError(str(path), f"unknown keys in {where}: {', '.join(unknown)}")


def _require(data: dict[str, Any], key: str, where: str, path: Path) -> Any:
    if key not in data:
        raise ConfigFileError(str(path), f"missing {where}.{key}")
    return data[key]


def _require_str(data: dict[str, Any], key: str, where: str, path: Path) -> str:
    value = _require(data, key, where, path)
    if not isinstance(value, str) or not value:
        raise ConfigFileError(str(path), f"{where}.{key} must be a non-empty string")
    return value


def parse_budgets(data: dict[str, Any], path: Path) -> BudgetConfig:
    """Parse the ``budgets`` section into a BudgetConfig."""
    _check_keys(data, _BUDGETS_KEYS, "budgets", path)
    unallocated = _require_str(data, "unallocated", "budgets", path)

    targets = []
    for i, raw in enumerate(data.get("targets") or []):
        where = f"budgets.targets[{i}]"
        _check_keys(raw, _TARGET_KEYS, where, path)
        name = _require_str(raw, "name", where, path)
        try:
            monthly = parse_amount(_require(raw, "monthly", where, path))
        except ValueError as e:
            raise ConfigFileError(str(path), f"{where}.monthly: {e}") from e
        targets.append(BudgetTarget(name=name, monthly=monthly))

    return BudgetConfig(unallocated=unallocated, targets=tuple(targets))


def parse_config(data: dict[str, Any], path: Path) -> LedgerConfig:
    """
    Parse a full configuration document.

    The transactions path is resolved relative to the configuration file.
    """
    _check_keys(data, _TOP_LEVEL_KEYS, "configuration", path)
    money = _require(data, "money", "configuration", path)
    _check_keys(money, _MONEY_KEYS, "money", path)
    budgets = parse_budgets(_require(data, "budgets", "configuration", path), path)

    transactions_path = Path(_require_str(money, "path", "money", path))
    if not transactions_path.is_absolute():
        transactions_path = path.parent / transactions_path

    return LedgerConfig(
        transactions_path=transactions_path,
        budgets=budgets,
        currency_symbol=str(money.get("currency_symbol", DEFAULT_CURRENCY_SYMBOL)),
    )


def load_config(path: Path | str) -> LedgerConfig:
    """Load and parse the configuration file at ``path``."""
    path = Path(path)
    config = parse_config(load_yaml_file(path), path)
    logger.info("config_loaded", extra={
        "path": str(path),
        "transactions_path": str(config.transactions_path),
        "unallocated": config.budgets.unallocated,
        "target_count": len(config.budgets.targets),
    })
    return config
