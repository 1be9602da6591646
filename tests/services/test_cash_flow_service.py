"""Tests for CashFlowService (cash ledger and daily infaq)."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from sis_finance.exceptions import (
    CashLedgerEntryNotFoundError,
    DailyInfaqNotFoundError,
    ValidationError,
)
from sis_finance.models import CashFlowType


class TestCashLedger:

    def test_add_defaults_date_to_today(self, cash_flow_service, deterministic_clock, clerk):
        entry = cash_flow_service.add_cash_ledger_entry(
            "Koperasi", "Pinjaman renovasi", "Income", Decimal("10000000"), "Hutang",
            created_by=clerk.id,
        )

        assert entry.date == deterministic_clock.today()
        assert entry.type == CashFlowType.INCOME
        assert entry.category == "Hutang"
        assert entry.created_by == clerk.id

    def test_explicit_date_kept(self, cash_flow_service):
        entry = cash_flow_service.add_cash_ledger_entry(
            "Toko ATK", "Kertas", "Expense", Decimal("250000"), "Operasional",
            entry_date=date(2024, 12, 30),
        )
        assert entry.date == date(2024, 12, 30)

    def test_bad_type_rejected(self, cash_flow_service):
        with pytest.raises(ValidationError) as exc_info:
            cash_flow_service.add_cash_ledger_entry(
                "X", "Y", "Transfer", Decimal("1"), "Lain"
            )
        assert exc_info.value.field == "type"

    def test_listing_latest_date_first(self, cash_flow_service):
        cash_flow_service.add_cash_ledger_entry(
            "A", "old", "Income", Decimal("1"), "Lain", entry_date=date(2024, 1, 1)
        )
        cash_flow_service.add_cash_ledger_entry(
            "B", "new", "Income", Decimal("1"), "Lain", entry_date=date(2024, 6, 1)
        )

        assert [e.item_name for e in cash_flow_service.get_cash_ledger()] == ["new", "old"]

    def test_update_patches_allowed_fields_only(self, cash_flow_service):
        entry = cash_flow_service.add_cash_ledger_entry(
            "Koperasi", "Pinjaman", "Income", Decimal("1000000"), "Hutang",
            entry_date=date(2024, 5, 1),
        )

        updated = cash_flow_service.update_cash_ledger_entry(
            entry.id,
            {
                "amount": "750000",
                "type": "Expense",
                "notes": "cicilan",
                "date": "2030-01-01",
                "created_by": str(uuid4()),
            },
        )

        assert updated.amount == Decimal("750000")
        assert updated.type == CashFlowType.EXPENSE
        assert updated.notes == "cicilan"
        assert updated.source == "Koperasi"
        assert updated.date == date(2024, 5, 1)
        assert updated.created_by is None

    def test_missing_entry(self, cash_flow_service):
        with pytest.raises(CashLedgerEntryNotFoundError):
            cash_flow_service.update_cash_ledger_entry(uuid4(), {"amount": "1"})
        with pytest.raises(CashLedgerEntryNotFoundError):
            cash_flow_service.delete_cash_ledger_entry(uuid4())

    def test_delete(self, cash_flow_service):
        entry = cash_flow_service.add_cash_ledger_entry(
            "A", "B", "Income", Decimal("1"), "Lain"
        )
        cash_flow_service.delete_cash_ledger_entry(entry.id)
        assert cash_flow_service.get_cash_ledger() == []


class TestDailyInfaq:

    def test_add_defaults(self, cash_flow_service, deterministic_clock, clerk):
        entry = cash_flow_service.add_daily_infaq("Kotak Jumat", Decimal("350000"), clerk.id)

        assert entry.type == CashFlowType.INCOME
        assert entry.date == deterministic_clock.today()
        assert entry.handled_by_id == clerk.id

    def test_update_ignores_type_and_date(self, cash_flow_service, clerk):
        entry = cash_flow_service.add_daily_infaq(
            "Kotak Jumat", Decimal("350000"), clerk.id, entry_date=date(2024, 3, 1)
        )

        updated = cash_flow_service.update_daily_infaq(
            entry.id,
            {"source": "Kotak Kelas 5", "amount": 400000, "type": "Expense", "date": "2024-04-01"},
        )

        assert updated.source == "Kotak Kelas 5"
        assert updated.amount == Decimal("400000")
        assert updated.type == CashFlowType.INCOME
        assert updated.date == date(2024, 3, 1)

    def test_listing_latest_date_first(self, cash_flow_service, clerk):
        cash_flow_service.add_daily_infaq("A", Decimal("1"), clerk.id, entry_date=date(2024, 3, 1))
        cash_flow_service.add_daily_infaq("B", Decimal("1"), clerk.id, entry_date=date(2024, 3, 8))

        assert [e.source for e in cash_flow_service.get_daily_infaq()] == ["B", "A"]

    def test_delete_and_missing(self, cash_flow_service, clerk):
        entry = cash_flow_service.add_daily_infaq("A", Decimal("1"), clerk.id)
        cash_flow_service.delete_daily_infaq(entry.id)

        assert cash_flow_service.get_daily_infaq() == []
        with pytest.raises(DailyInfaqNotFoundError):
            cash_flow_service.delete_daily_infaq(entry.id)
