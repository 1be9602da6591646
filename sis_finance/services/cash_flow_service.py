"""
CashFlowService -- the general cash ledger and the daily infaq book.

Both are free-form income/expense logs.  Entries default to today's date
(service clock) when none is given.  Updates patch a fixed set of fields:

    cash ledger:  source, item_name, type, amount, category, notes
    daily infaq:  source, amount, notes

Anything else in the patch is ignored.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select

from sis_finance.domain.dtos import CashLedgerInfo, DailyInfaqInfo
from sis_finance.domain.requests import parse_amount, parse_flow_type
from sis_finance.exceptions import CashLedgerEntryNotFoundError, DailyInfaqNotFoundError
from sis_finance.logging_config import get_logger
from sis_finance.models.cash_flow import CashFlowType, CashLedger, DailyInfaq
from sis_finance.services.base import BaseService

logger = get_logger("services.cash_flow")

CASH_LEDGER_PATCH_FIELDS = ("source", "item_name", "type", "amount", "category", "notes")
DAILY_INFAQ_PATCH_FIELDS = ("source", "amount", "notes")


class CashFlowService(BaseService[CashLedger]):

    def _apply_patch(self, entry: Any, patch: Mapping[str, Any], fields: tuple[str, ...]) -> list[str]:
        changed = []
        for field in fields:
            if field not in patch:
                continue
            value = patch[field]
            if field == "amount":
                value = parse_amount(value, "amount")
            elif field == "type":
                value = parse_flow_type(value).value
            setattr(entry, field, value)
            changed.append(field)
        return changed

    # -------------------------------------------------------------------------
    # Cash ledger
    # -------------------------------------------------------------------------

    def add_cash_ledger_entry(
        self,
        source: str,
        item_name: str,
        entry_type: CashFlowType | str,
        amount: Decimal,
        category: str,
        notes: str = "",
        entry_date: date | None = None,
        created_by: UUID | None = None,
    ) -> CashLedgerInfo:
        entry = CashLedger(
            date=entry_date or self._clock.today(),
            source=source,
            item_name=item_name,
            type=parse_flow_type(entry_type).value,
            amount=parse_amount(amount, "amount"),
            category=category,
            notes=notes,
            created_by=created_by,
        )
        with self._persisting("add_cash_ledger_entry"):
            self.session.add(entry)
            self.session.flush()

        logger.info(
            "cash_ledger_entry_added",
            extra={
                "entry_id": str(entry.id),
                "type": entry.type,
                "category": category,
                "amount": str(entry.amount),
            },
        )
        return CashLedgerInfo.from_model(entry)

    def get_cash_ledger(self) -> list[CashLedgerInfo]:
        """All entries, latest date first."""
        rows = self.session.execute(
            select(CashLedger).order_by(CashLedger.date.desc())
        ).scalars().all()
        return [CashLedgerInfo.from_model(e) for e in rows]

    def update_cash_ledger_entry(
        self, entry_id: UUID, patch: Mapping[str, Any]
    ) -> CashLedgerInfo:
        entry = self.session.get(CashLedger, entry_id)
        if entry is None:
            raise CashLedgerEntryNotFoundError(str(entry_id))

        with self._persisting("update_cash_ledger_entry"):
            changed = self._apply_patch(entry, patch, CASH_LEDGER_PATCH_FIELDS)
            self.session.flush()

        logger.info(
            "cash_ledger_entry_updated",
            extra={"entry_id": str(entry_id), "fields": changed},
        )
        return CashLedgerInfo.from_model(entry)

    def delete_cash_ledger_entry(self, entry_id: UUID) -> None:
        entry = self.session.get(CashLedger, entry_id)
        if entry is None:
            raise CashLedgerEntryNotFoundError(str(entry_id))
        with self._persisting("delete_cash_ledger_entry"):
            self.session.delete(entry)
            self.session.flush()
        logger.info("cash_ledger_entry_deleted", extra={"entry_id": str(entry_id)})

    # -------------------------------------------------------------------------
    # Daily infaq
    # -------------------------------------------------------------------------

    def add_daily_infaq(
        self,
        source: str,
        amount: Decimal,
        handled_by_id: UUID,
        entry_type: CashFlowType | str = CashFlowType.INCOME,
        notes: str = "",
        entry_date: date | None = None,
    ) -> DailyInfaqInfo:
        entry = DailyInfaq(
            date=entry_date or self._clock.today(),
            source=source,
            type=parse_flow_type(entry_type).value,
            amount=parse_amount(amount, "amount"),
            handled_by_id=handled_by_id,
            notes=notes,
        )
        with self._persisting("add_daily_infaq"):
            self.session.add(entry)
            self.session.flush()

        logger.info(
            "daily_infaq_added",
            extra={
                "entry_id": str(entry.id),
                "source": source,
                "amount": str(entry.amount),
            },
        )
        return DailyInfaqInfo.from_model(entry)

    def get_daily_infaq(self) -> list[DailyInfaqInfo]:
        rows = self.session.execute(
            select(DailyInfaq).order_by(DailyInfaq.date.desc())
        ).scalars().all()
        return [DailyInfaqInfo.from_model(e) for e in rows]

    def update_daily_infaq(
        self, entry_id: UUID, patch: Mapping[str, Any]
    ) -> DailyInfaqInfo:
        entry = self.session.get(DailyInfaq, entry_id)
        if entry is None:
            raise DailyInfaqNotFoundError(str(entry_id))

        with self._persisting("update_daily_infaq"):
            changed = self._apply_patch(entry, patch, DAILY_INFAQ_PATCH_FIELDS)
            self.session.flush()

        logger.info(
            "daily_infaq_updated",
            extra={"entry_id": str(entry_id), "fields": changed},
        )
        return DailyInfaqInfo.from_model(entry)

    def delete_daily_infaq(self, entry_id: UUID) -> None:
        entry = self.session.get(DailyInfaq, entry_id)
        if entry is None:
            raise DailyInfaqNotFoundError(str(entry_id))
        with self._persisting("delete_daily_infaq"):
            self.session.delete(entry)
            self.session.flush()
        logger.info("daily_infaq_deleted", extra={"entry_id": str(entry_id)})
