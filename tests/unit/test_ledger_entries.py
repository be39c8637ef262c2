"""
Unit tests for LedgerEntries, the ordered name -> Amount mapping.
"""

import pytest

from budget_kernel.domain.entries import LedgerEntries
from budget_kernel.domain.values import Amount
from budget_kernel.exceptions import EntryNotFoundError


class TestInsertAndLookup:
    """Tests for insert-or-overwrite, lookup and ordering."""

    def test_amount_for_present(self):
        entries = LedgerEntries().insert("Rent", Amount(800_00))
        assert entries.amount_for("Rent") == Amount(800_00)

    def test_amount_for_absent_is_none(self):
        assert LedgerEntries().amount_for("Rent") is None

    def test_insertion_order_preserved(self):
        entries = (
            LedgerEntries()
            .insert("Zeta", Amount(1))
            .insert("Alpha", Amount(2))
            .insert("Mid", Amount(3))
        )
        assert entries.names() == ["Zeta", "Alpha", "Mid"]
        assert list(entries) == ["Zeta", "Alpha", "Mid"]

    def test_overwrite_keeps_position(self):
        entries = LedgerEntries().insert("A", Amount(1)).insert("B", Amount(2))
        entries.insert("A", Amount(10))
        assert entries.names() == ["A", "B"]
        assert entries["A"] == Amount(10)
        assert len(entries) == 2

    def test_insert_rejects_non_amount(self):
        with pytest.raises(TypeError):
            LedgerEntries().insert("A", 100)

    def test_construct_from_mapping(self):
        entries = LedgerEntries({"A": Amount(1), "B": Amount(2)})
        assert entries.names() == ["A", "B"]

    def test_total(self):
        entries = LedgerEntries({"A": Amount(100), "B": Amount(-30)})
        assert entries.total() == Amount(70)

    def test_total_of_empty_is_zero(self):
        assert LedgerEntries().total() == Amount.zero()

    def test_copy_is_independent(self):
        entries = LedgerEntries({"A": Amount(1)})
        copied = entries.copy()
        copied.insert("A", Amount(5))
        assert entries["A"] == Amount(1)


class TestTransfer:
    """Tests for transfer between entries."""

    def test_transfer_existing_entries(self):
        entries = LedgerEntries({"Unallocated": Amount(100_00), "Rent": Amount(0)})
        entries.transfer(Amount(40_00), "Unallocated", "Rent")
        assert entries["Unallocated"] == Amount(60_00)
        assert entries["Rent"] == Amount(40_00)

    def test_transfer_creates_destination_at_end(self):
        entries = LedgerEntries({"Unallocated": Amount(100_00)})
        entries.transfer(Amount(25_00), "Unallocated", "Food")
        assert entries.names() == ["Unallocated", "Food"]
        assert entries["Food"] == Amount(25_00)

    def test_transfer_keeps_total(self):
        entries = LedgerEntries({"Unallocated": Amount(100_01), "A": Amount(-3)})
        before = entries.total()
        entries.transfer(Amount(33_33), "Unallocated", "A")
        entries.transfer(Amount(1), "A", "B")
        assert entries.total() == before

    def test_transfer_may_go_negative(self):
        entries = LedgerEntries({"A": Amount(10)})
        entries.transfer(Amount(30), "A", "B")
        assert entries["A"] == Amount(-20)

    def test_transfer_from_absent_entry_raises(self):
        entries = LedgerEntries({"A": Amount(10)})
        with pytest.raises(EntryNotFoundError) as exc_info:
            entries.transfer(Amount(1), "Missing", "A")
        assert exc_info.value.name == "Missing"
        assert exc_info.value.code == "ENTRY_NOT_FOUND"
        assert entries["A"] == Amount(10)


class TestMappingProtocol:
    """LedgerEntries behaves as a read-only Mapping."""

    def test_equality_with_same_entries(self):
        assert LedgerEntries({"A": Amount(1)}) == LedgerEntries({"A": Amount(1)})

    def test_items(self):
        entries = LedgerEntries({"A": Amount(1), "B": Amount(2)})
        assert list(entries.items()) == [("A", Amount(1)), ("B", Amount(2))]

    def test_missing_key_raises_key_error(self):
        with pytest.raises(KeyError):
            LedgerEntries()["A"]

    def test_empty_is_falsy(self):
        assert not LedgerEntries()
