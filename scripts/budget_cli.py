#!/usr/bin/env python3
"""
Budget ledger command line.

    budget-ledger --config budget.yaml report
    budget-ledger --config budget.yaml allocate [--dry-run]
    budget-ledger --config budget.yaml check

Exit status: 0 on success, 1 when ``check`` finds unbalanced transactions,
2 when the configuration or the stored transactions are rejected.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO
from uuid import uuid4

from budget_config.loader import load_config
from budget_config.schema import LedgerConfig
from budget_engines.budget_allocation import BudgetAllocationEngine
from budget_kernel.exceptions import BudgetLedgerError
from budget_kernel.logging_config import LogContext, configure_logging, get_logger
from budget_services.report import build_report, render_report
from budget_storage.yaml_store import load_transactions, store_transactions

logger = get_logger("cli")


def cmd_report(config: LedgerConfig, args: argparse.Namespace, out: TextIO) -> int:
    transactions = load_transactions(config.transactions_path)
    render_report(build_report(transactions), out, symbol=config.currency_symbol)
    return 0


def cmd_allocate(config: LedgerConfig, args: argparse.Namespace, out: TextIO) -> int:
    transactions = load_transactions(config.transactions_path)
    summary = BudgetAllocationEngine().allocate(
        transactions=transactions, config=config.budgets,
    )

    for line in summary.lines:
        out.write(f"{line.target_name}: +{line.allocated.format(config.currency_symbol)}\n")
    out.write(
        f"Allocated {summary.total_allocated.format(config.currency_symbol)} "
        f"in {summary.transfer_count} transfers across "
        f"{summary.transactions_touched} transactions\n"
    )

    if args.dry_run:
        out.write("Dry run, nothing stored\n")
    elif summary.transfer_count:
        store_transactions(transactions, config.transactions_path, replace=True)
    return 0


def cmd_check(config: LedgerConfig, args: argparse.Namespace, out: TextIO) -> int:
    transactions = load_transactions(config.transactions_path)
    unbalanced = transactions.unbalanced()
    for t in unbalanced:
        out.write(
            f"{t.date.isoformat()} {t.description}: amount "
            f"{t.amount.format(config.currency_symbol)} != budgets "
            f"{t.budgets.total().format(config.currency_symbol)}\n"
        )
    if unbalanced:
        return 1
    out.write(f"All {len(transactions)} transactions balanced\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budget-ledger",
        description="Personal ledger with automatic budget allocation",
    )
    parser.add_argument(
        "--config", default="budget.yaml",
        help="Path to the YAML configuration file (default: budget.yaml)",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level written to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Show all transactions by account and budget")
    report.set_defaults(handler=cmd_report)

    alloc = sub.add_parser("allocate", help="Distribute unallocated money into budgets")
    alloc.add_argument(
        "--dry-run", action="store_true",
        help="Show what would be allocated without storing it",
    )
    alloc.set_defaults(handler=cmd_allocate)

    check = sub.add_parser("check", help="List transactions whose budgets do not sum up")
    check.set_defaults(handler=cmd_check)

    return parser


def main(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout
    configure_logging(level=getattr(logging, args.log_level))

    with LogContext.bind(run_id=uuid4().hex, config_path=args.config, command=args.command):
        try:
            config = load_config(args.config)
            return args.handler(config, args, out)
        except BudgetLedgerError as exc:
            logger.error("command_failed", exc_info=True)
            print(f"error [{exc.code}]: {exc}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    sys.exit(main())
