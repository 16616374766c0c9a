"""
Test suite for deposit registry module

Tests the one-active-deposit rule and the empty record semantics.
"""

import pytest

from token_ledger.deposits import DepositRegistry, DepositRecord, EMPTY_DEPOSIT
from token_ledger.errors import DuplicateDeposit, InvalidAmount, NoDeposit


class TestDepositRecord:
    """Test deposit record values"""

    def test_empty_record(self):
        """Test that the default record means no deposit"""
        record = DepositRecord()

        assert record == EMPTY_DEPOSIT
        assert record.amount == 0
        assert record.timestamp == 0
        assert not record.exists

    def test_to_dict(self):
        record = DepositRecord(amount=500, timestamp=1700000000, exists=True)
        assert record.to_dict() == {"amount": 500, "timestamp": 1700000000, "exists": True}


class TestDepositRegistry:
    """Test deposit lifecycle"""

    def setup_method(self):
        self.registry = DepositRegistry()

    def test_open_deposit(self):
        """Test opening a deposit"""
        record = self.registry.open("alice", 500, 1000)

        assert self.registry.has("alice")
        assert record == DepositRecord(amount=500, timestamp=1000, exists=True)
        assert self.registry.get("alice") == record
        assert self.registry.total() == 500
        assert self.registry.active() == ["alice"]

    def test_duplicate_deposit(self):
        """Test that a second open deposit is rejected, not overwritten"""
        self.registry.open("alice", 500, 1000)

        with pytest.raises(DuplicateDeposit):
            self.registry.open("alice", 200, 2000)

        assert self.registry.get("alice").amount == 500
        assert self.registry.get("alice").timestamp == 1000

    def test_open_requires_positive_amount(self):
        with pytest.raises(InvalidAmount):
            self.registry.open("alice", 0, 1000)
        assert not self.registry.has("alice")

    def test_close_deposit(self):
        """Test that closing returns the record and clears it"""
        self.registry.open("alice", 500, 1000)

        record = self.registry.close("alice")

        assert record.amount == 500
        assert not self.registry.has("alice")
        assert self.registry.get("alice") == EMPTY_DEPOSIT
        assert self.registry.total() == 0

    def test_close_without_deposit(self):
        with pytest.raises(NoDeposit):
            self.registry.close("alice")

    def test_reopen_after_close(self):
        """Test that an account can deposit again after withdrawing"""
        self.registry.open("alice", 500, 1000)
        self.registry.close("alice")

        record = self.registry.open("alice", 300, 5000)
        assert record.amount == 300
        assert record.timestamp == 5000

    def test_rollback_reinstates_records(self):
        """Test that rollback undoes opens and closes made since begin()"""
        self.registry.open("alice", 500, 1000)
        self.registry.begin()

        self.registry.close("alice")
        self.registry.open("alice", 20, 3000)
        self.registry.open("bob", 10, 1000)
        assert self.registry.total() == 30
        self.registry.rollback()

        assert self.registry.get("alice") == DepositRecord(amount=500, timestamp=1000, exists=True)
        assert not self.registry.has("bob")
        assert self.registry.total() == 500
        assert self.registry.recount() == 500

    def test_commit_keeps_records(self):
        self.registry.begin()
        self.registry.open("alice", 500, 1000)
        self.registry.commit()
        self.registry.rollback()

        assert self.registry.has("alice")
        assert self.registry.total() == 500
