"""Transaction persistence: YAML files, one per transaction."""

from budget_storage.yaml_store import load_transactions, store_transactions

__all__ = ["load_transactions", "store_transactions"]
