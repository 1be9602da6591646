"""
Module: sis_finance.models.cash_flow
Responsibility: ORM persistence for the institution's general cash ledger and
    the daily infaq (donation) book.  Both are free-form income/expense logs
    independent of student billing.

Notes:
    - A CashLedger row with category "Hutang" records third-party debt:
      Income rows are money borrowed, Expense rows are repayments.  The
      dashboard's outstanding debt is their difference.
"""

import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sis_finance.db.base import TimestampedBase
from sis_finance.models.directory import User


class CashFlowType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


DEBT_CATEGORY = "Hutang"


class CashLedger(TimestampedBase):
    __tablename__ = "cash_ledger"

    __table_args__ = (
        Index("idx_cash_ledger_date", "date"),
        Index("idx_cash_ledger_category_type", "category", "type"),
    )

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    source: Mapped[str] = mapped_column(String(200), nullable=False)
    item_name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[CashFlowType] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<CashLedger {self.date} {self.type} {self.amount} [{self.category}]>"


class DailyInfaq(TimestampedBase):
    """A day's infaq collection (or disbursement) from one source."""

    __tablename__ = "daily_infaq"

    __table_args__ = (Index("idx_daily_infaq_date", "date"),)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    source: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[CashFlowType] = mapped_column(
        String(20), nullable=False, default=CashFlowType.INCOME
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    handled_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    handled_by: Mapped[User] = relationship(lazy="joined")
