"""
Unit tests for Transaction and TransactionSequence aggregates.
"""

from datetime import date

from budget_kernel.domain.transactions import TransactionSequence
from budget_kernel.domain.values import Amount


class TestTransaction:
    """Tests for the Transaction record."""

    def test_balanced(self, transaction_factory):
        transaction = transaction_factory({"Unallocated": 60_00, "Rent": 40_00})
        assert transaction.amount == Amount(100_00)
        assert transaction.is_balanced()

    def test_unbalanced(self, transaction_factory):
        transaction = transaction_factory({"Unallocated": 60_00}, amount=100_00)
        assert not transaction.is_balanced()

    def test_breakdowns_default_empty(self, transaction_factory):
        transaction = transaction_factory()
        assert len(transaction.budgets) == 0
        assert len(transaction.accounts) == 0


class TestTransactionSequence:
    """Tests for ordering and aggregate queries."""

    def test_total(self, transaction_factory):
        sequence = TransactionSequence([
            transaction_factory({"A": 100_00}),
            transaction_factory({"A": -30_00}),
        ])
        assert sequence.total() == Amount(70_00)

    def test_total_of_empty_sequence(self, empty_sequence):
        assert empty_sequence.total() == Amount.zero()

    def test_budget_total_treats_absence_as_zero(self, transaction_factory):
        sequence = TransactionSequence([
            transaction_factory({"A": 10_00}),
            transaction_factory({"B": 5_00}),
            transaction_factory({"A": 2_50, "B": 1_00}),
        ])
        assert sequence.budget_total("A") == Amount(12_50)
        assert sequence.budget_total("B") == Amount(6_00)
        assert sequence.budget_total("C") == Amount.zero()

    def test_account_total(self, transaction_factory):
        sequence = TransactionSequence([
            transaction_factory({"A": 10_00}, accounts={"Checking": 10_00}),
            transaction_factory({"A": -4_00}, accounts={"Checking": -4_00}),
        ])
        assert sequence.account_total("Checking") == Amount(6_00)
        assert sequence.account_total("A") == Amount.zero()

    def test_names_in_first_appearance_order(self, transaction_factory):
        sequence = TransactionSequence([
            transaction_factory({"B": 1, "A": 1}, accounts={"Cash": 2}),
            transaction_factory({"C": 1, "A": 1}, accounts={"Bank": 2}),
        ])
        assert sequence.budget_names() == ["B", "A", "C"]
        assert sequence.account_names() == ["Cash", "Bank"]

    def test_sorted_by_date_is_stable(self, transaction_factory):
        late = transaction_factory(day=date(2021, 8, 1), description="late")
        first_tie = transaction_factory(day=date(2021, 7, 1), description="first")
        second_tie = transaction_factory(day=date(2021, 7, 1), description="second")

        sequence = TransactionSequence.sorted_by_date([late, first_tie, second_tie])

        assert [t.description for t in sequence] == ["first", "second", "late"]

    def test_unbalanced(self, transaction_factory):
        good = transaction_factory({"A": 1_00})
        bad = transaction_factory({"A": 1_00}, amount=2_00)
        sequence = TransactionSequence([good, bad])
        assert sequence.unbalanced() == [bad]

    def test_container_protocol(self, transaction_factory):
        sequence = TransactionSequence()
        transaction = transaction_factory()
        sequence.append(transaction)
        assert len(sequence) == 1
        assert sequence[0] is transaction
        assert list(sequence) == [transaction]

    def test_aggregates_do_not_mutate(self, transaction_factory):
        transaction = transaction_factory({"A": 1_00})
        sequence = TransactionSequence([transaction])
        sequence.budget_total("A")
        sequence.budget_total("Z")
        assert transaction.budgets.names() == ["A"]
