"""
Tests for the ledger report builder and renderer.
"""

from datetime import date
from io import StringIO

from budget_kernel.domain.transactions import TransactionSequence
from budget_kernel.domain.values import Amount
from budget_services.report import build_report, render_report


def _sequence(transaction_factory) -> TransactionSequence:
    return TransactionSequence([
        transaction_factory(
            {"Unallocated": 2000_00, "Rent": 500_00},
            day=date(2021, 7, 1),
            description="Salary",
            accounts={"Checking": 2500_00},
        ),
        transaction_factory(
            {"Food": -42_10},
            day=date(2021, 7, 3),
            description="Groceries",
            accounts={"Cash": -42_10},
        ),
    ])


class TestBuildReport:
    """Tests for the report model."""

    def test_columns_in_first_appearance_order(self, transaction_factory):
        report = build_report(_sequence(transaction_factory))

        assert report.account_names == ("Checking", "Cash")
        assert report.budget_names == ("Unallocated", "Rent", "Food")

    def test_absent_entries_are_none(self, transaction_factory):
        report = build_report(_sequence(transaction_factory))

        groceries = report.rows[1]
        assert groceries.accounts == (None, Amount(-42_10))
        assert groceries.budgets == (None, None, Amount(-42_10))

    def test_totals(self, transaction_factory):
        report = build_report(_sequence(transaction_factory))

        assert report.total == Amount(2457_90)
        assert report.account_totals == (Amount(2500_00), Amount(-42_10))
        assert report.budget_totals == (Amount(2000_00), Amount(500_00), Amount(-42_10))

    def test_empty_sequence(self, empty_sequence):
        report = build_report(empty_sequence)

        assert report.rows == ()
        assert report.total == Amount.zero()


class TestRenderReport:
    """Tests for the plain-text rendering."""

    def test_renders_header_rows_and_totals(self, transaction_factory):
        out = StringIO()
        render_report(build_report(_sequence(transaction_factory)), out)

        lines = out.getvalue().splitlines()
        assert len(lines) == 4
        assert lines[0].startswith("Date")
        for name in ("Checking", "Cash", "Unallocated", "Rent", "Food"):
            assert name in lines[0]
        assert lines[1].startswith("2021-07-01  Salary")
        assert "-42.10€" in lines[2]
        assert lines[3].startswith("Total")
        assert "2457.90€" in lines[3]

    def test_columns_are_aligned(self, transaction_factory):
        out = StringIO()
        render_report(build_report(_sequence(transaction_factory)), out)

        lines = out.getvalue().splitlines()
        separator_positions = {line.index("|") for line in lines}
        assert len(separator_positions) == 1

    def test_custom_symbol(self, transaction_factory):
        out = StringIO()
        render_report(build_report(_sequence(transaction_factory)), out, symbol="$")

        assert "2500.00$" in out.getvalue()
        assert "€" not in out.getvalue()
