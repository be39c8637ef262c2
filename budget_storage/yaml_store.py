"""
YAML transaction store.

One file per transaction, named ``YYYY-MM-DD_<n>.yaml``:

    date: 2021-07-18
    description: Salary
    amount: "2500.00"
    accounts:
      Checking: "2500.00"
    budgets:
      Unallocated: "2500.00"

Loading walks a directory recursively, reads files in sorted path order
(the arrival order that breaks same-date ties) and returns a sequence
stably sorted by date. Unknown keys are rejected so that a load/store
round trip never drops data. Storing writes each loaded transaction back
to the file it came from, so folders such as ``money/2021/`` survive.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from budget_config.loader import load_yaml_file, parse_amount
from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.transactions import Transaction, TransactionSequence
from budget_kernel.exceptions import TransactionFormatError
from budget_kernel.logging_config import get_logger

logger = get_logger("storage.yaml_store")

_REQUIRED_KEYS = ("date", "description", "amount")
_OPTIONAL_KEYS = ("accounts", "budgets")


def _parse_date(value: Any, path: Path) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise TransactionFormatError(str(path), f"invalid date {value!r}") from e
    raise TransactionFormatError(str(path), f"invalid date {value!r}")


def _parse_description(value: Any) -> str:
    # an empty `description:` is YAML null
    return "" if value is None else str(value)


def _parse_entries(value: Any, key: str, path: Path) -> LedgerEntries:
    if value is None:
        return LedgerEntries()
    if not isinstance(value, dict):
        raise TransactionFormatError(str(path), f"{key} must be a mapping")
    entries = LedgerEntries()
    for name, raw in value.items():
        try:
            entries.insert(str(name), parse_amount(raw))
        except ValueError as e:
            raise TransactionFormatError(str(path), f"{key}.{name}: {e}") from e
    return entries


def parse_transaction(data: Any, path: Path) -> Transaction:
    """Parse one transaction document."""
    if not isinstance(data, dict):
        raise TransactionFormatError(str(path), "document must be a mapping")

    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise TransactionFormatError(str(path), f"missing keys: {', '.join(missing)}")
    unknown = sorted(set(data) - set(_REQUIRED_KEYS) - set(_OPTIONAL_KEYS))
    if unknown:
        raise TransactionFormatError(str(path), f"unknown keys: {', '.join(unknown)}")

    try:
        amount = parse_amount(data["amount"])
    except ValueError as e:
        raise TransactionFormatError(str(path), f"amount: {e}") from e

    return Transaction(
        date=_parse_date(data["date"], path),
        description=_parse_description(data["description"]),
        amount=amount,
        accounts=_parse_entries(data.get("accounts"), "accounts", path),
        budgets=_parse_entries(data.get("budgets"), "budgets", path),
    )


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    """Serializable form; empty breakdowns are omitted."""
    data: dict[str, Any] = {
        "date": transaction.date,
        "description": transaction.description,
        "amount": transaction.amount.to_decimal_string(),
    }
    if transaction.accounts:
        data["accounts"] = {
            name: amount.to_decimal_string() for name, amount in transaction.accounts.items()
        }
    if transaction.budgets:
        data["budgets"] = {
            name: amount.to_decimal_string() for name, amount in transaction.budgets.items()
        }
    return data


def load_transactions(directory: Path | str) -> TransactionSequence:
    """
    Load every ``*.yaml`` transaction file under ``directory``.

    Each transaction remembers its file (relative to ``directory``) in
    ``Transaction.source``.

    Raises:
        TransactionFormatError: if a file does not match the schema.
        yaml.YAMLError: if a file contains invalid YAML.
    """
    directory = Path(directory)
    paths = sorted(p for p in directory.rglob("*.yaml") if p.is_file())
    transactions = []
    for path in paths:
        transaction = parse_transaction(load_yaml_file(path), path)
        transaction.source = path.relative_to(directory)
        transactions.append(transaction)
    sequence = TransactionSequence.sorted_by_date(transactions)

    logger.info("transactions_loaded", extra={
        "path": str(directory),
        "transaction_count": len(sequence),
    })
    return sequence


def _free_path(folder: Path, day: date) -> Path:
    i = 0
    while True:
        path = folder / f"{day.isoformat()}_{i}.yaml"
        if not path.exists():
            return path
        i += 1


def _target_path(root: Path, transaction: Transaction) -> Path:
    """The transaction's source file if it is free, else a dated name beside it."""
    if transaction.source is None or transaction.source.is_absolute():
        return _free_path(root, transaction.date)
    preferred = root / transaction.source
    if not preferred.exists():
        return preferred
    return _free_path(preferred.parent, transaction.date)


def _write(root: Path, transaction: Transaction) -> Path:
    path = _target_path(root, transaction)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                transaction_to_dict(transaction), f,
                sort_keys=False, allow_unicode=True,
            )
    except Exception:
        path.unlink(missing_ok=True)
        raise
    return path


def _prune_empty_folders(directory: Path, folders: set[Path]) -> None:
    for folder in sorted(folders, key=lambda p: len(p.parts), reverse=True):
        while folder != directory and folder.is_dir() and not any(folder.iterdir()):
            folder.rmdir()
            folder = folder.parent


def _replace_all(transactions: TransactionSequence, directory: Path) -> tuple[list[Path], int]:
    """
    Stage the new files in a sibling folder, then swap them in.

    Nothing under ``directory`` is touched until every file has been
    written, so a failed write leaves the stored ledger as it was.
    """
    staging = Path(tempfile.mkdtemp(prefix=f".{directory.name}-", dir=directory.parent))
    try:
        staged = [_write(staging, t).relative_to(staging) for t in transactions]

        old = sorted(directory.rglob("*.yaml"))
        for path in old:
            path.unlink()

        written = []
        for relative in staged:
            final = directory / relative
            final.parent.mkdir(parents=True, exist_ok=True)
            os.replace(staging / relative, final)
            written.append(final)
        _prune_empty_folders(directory, {p.parent for p in old})
    finally:
        shutil.rmtree(staging, ignore_errors=True)
    return written, len(old)


def store_transactions(
    transactions: TransactionSequence,
    directory: Path | str,
    *,
    replace: bool = False,
) -> list[Path]:
    """
    Write one file per transaction into ``directory``.

    A transaction loaded from the store goes back to its source file (or
    a dated name in the same folder if that file is taken); a new one gets
    the first free ``YYYY-MM-DD_<n>.yaml`` name at the top level.

    With ``replace=True`` the directory afterwards holds exactly the given
    sequence: files of transactions no longer present are removed, along
    with folders left empty. Returns the written paths in sequence order.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    if replace:
        written, removed = _replace_all(transactions, directory)
    else:
        written = [_write(directory, t) for t in transactions]
        removed = 0

    for transaction, path in zip(transactions, written):
        transaction.source = path.relative_to(directory)

    logger.info("transactions_stored", extra={
        "path": str(directory),
        "transaction_count": len(written),
        "removed_count": removed,
    })
    return written
