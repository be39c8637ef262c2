"""
Budget Kernel

The ledger data model shared by every other package:
- Amount, an exact minor-unit monetary value
- LedgerEntries, the insertion-ordered name -> Amount mapping
- Transaction and TransactionSequence
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
