"""
Typed Exception Hierarchy for the Budget Ledger.

Every error has a typed exception class (catch by type, not message), a
``code`` class attribute (machine-readable) and structured attributes
carrying the data that caused it.

    BudgetLedgerError (base)
    |
    +-- LedgerError
    |   +-- EntryNotFoundError
    |
    +-- BudgetConfigError
    |   +-- InvalidMonthlyRateError
    |   +-- DuplicateBudgetTargetError
    |   +-- UnallocatedTargetError
    |   +-- ConfigFileError
    |
    +-- StorageError
        +-- TransactionFormatError

Category  | Code                     | When Raised
----------|--------------------------|------------------------------------------
Ledger    | ENTRY_NOT_FOUND          | Transfer from a name with no entry
----------|--------------------------|------------------------------------------
Config    | INVALID_MONTHLY_RATE     | Target monthly rate is zero or negative
          | DUPLICATE_BUDGET_TARGET  | Same target name configured twice
          | UNALLOCATED_TARGET       | Target named like the unallocated pool
          | CONFIG_FILE_INVALID      | Missing/unknown keys in a config file
----------|--------------------------|------------------------------------------
Storage   | TRANSACTION_FORMAT       | Transaction file has missing/unknown keys

Handling pattern:

    try:
        engine.allocate(transactions=transactions, config=config)
    except InvalidMonthlyRateError as e:
        print(f"Fix the rate of {e.target_name}: {e.monthly}")
    except BudgetConfigError as e:
        print(f"Configuration rejected: {e.code}")
"""


class BudgetLedgerError(Exception):
    """
    Base exception for all budget ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BUDGET_LEDGER_ERROR"


# Ledger entry exceptions


class LedgerError(BudgetLedgerError):
    """Base exception for ledger entry errors."""

    code: str = "LEDGER_ERROR"


class EntryNotFoundError(LedgerError):
    """
    A transfer named a source entry that does not exist.

    This is a caller contract violation: the allocation engine only
    transfers after it has seen a positive balance on the source.
    """

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No ledger entry named {name!r}")


# Budget configuration exceptions


class BudgetConfigError(BudgetLedgerError):
    """Base exception for budget configuration errors."""

    code: str = "BUDGET_CONFIG_ERROR"


class InvalidMonthlyRateError(BudgetConfigError):
    """
    A budget target has a monthly rate that is zero or negative.

    Such a target can never be filled to its next month, so allocation
    would not make progress.
    """

    code: str = "INVALID_MONTHLY_RATE"

    def __init__(self, target_name: str, monthly: str):
        self.target_name = target_name
        self.monthly = monthly
        super().__init__(
            f"Budget target {target_name!r} has non-positive monthly rate {monthly}"
        )


class DuplicateBudgetTargetError(BudgetConfigError):
    """The same budget target name is configured more than once."""

    code: str = "DUPLICATE_BUDGET_TARGET"

    def __init__(self, target_name: str):
        self.target_name = target_name
        super().__init__(f"Budget target {target_name!r} is configured twice")


class UnallocatedTargetError(BudgetConfigError):
    """A budget target shares its name with the unallocated pool."""

    code: str = "UNALLOCATED_TARGET"

    def __init__(self, target_name: str):
        self.target_name = target_name
        super().__init__(
            f"Budget target {target_name!r} is also the unallocated pool"
        )


class ConfigFileError(BudgetConfigError):
    """A configuration file is missing required keys or has unknown ones."""

    code: str = "CONFIG_FILE_INVALID"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


# Storage exceptions


class StorageError(BudgetLedgerError):
    """Base exception for transaction storage errors."""

    code: str = "STORAGE_ERROR"


class TransactionFormatError(StorageError):
    """
    A stored transaction does not match the transaction file schema.

    Unknown keys are rejected rather than dropped, so that loading and
    storing a file never silently loses data.
    """

    code: str = "TRANSACTION_FORMAT"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid transaction file {path}: {reason}")
