"""
Module: sis_finance.models.payroll
Responsibility: ORM persistence for monthly staff payroll entries.

Invariants enforced:
    - total == basic_salary + allowances - deductions.  Computed by the
      request layer on create and recomputed by PayrollService on update;
      a caller-supplied total is never trusted on update.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sis_finance.db.base import TimestampedBase
from sis_finance.models.directory import User


class PayrollStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class Payroll(TimestampedBase):
    """One staff member's pay for one month (``month_year`` such as "11-2023")."""

    __tablename__ = "payrolls"

    __table_args__ = (
        Index("idx_payroll_month_year", "month_year"),
        Index("idx_payroll_user", "user_id"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    month_year: Mapped[str] = mapped_column(String(7), nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    allowances: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    deductions: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    status: Mapped[PayrollStatus] = mapped_column(
        String(20), nullable=False, default=PayrollStatus.PENDING
    )
    payment_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    processed_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    user: Mapped[User] = relationship(foreign_keys=[user_id], lazy="joined")
    processed_by: Mapped[User] = relationship(foreign_keys=[processed_by_id])

    def __repr__(self) -> str:
        return f"<Payroll {self.month_year} user={self.user_id} total={self.total}>"
