"""
Module: budget_engines
Responsibility:
    Package entrypoint re-exporting the calculation engines.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import budget_kernel and budget_config.schema.
    MUST NOT import budget_storage, budget_services or scripts.

Usage:
    from budget_engines import BudgetAllocationEngine, allocate
"""

from budget_engines.budget_allocation import (
    AllocationLine,
    AllocationSummary,
    BudgetAllocationEngine,
    allocate,
)
from budget_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "AllocationLine",
    "AllocationSummary",
    "BudgetAllocationEngine",
    "allocate",
    "compute_input_fingerprint",
    "traced_engine",
]
