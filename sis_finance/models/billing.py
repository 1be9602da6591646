"""
Module: sis_finance.models.billing
Responsibility: ORM persistence for receivables issued to students (Bill) and
    the settlement events recorded against them (Payment).
Architecture position: Ledger > Models.  May import from db/base.py and
    sibling models only.

Invariants enforced:
    - A new bill is Unpaid.  Recording a payment moves it to Paid whatever
      the amount (fully-settling model, enforced by BillingService).
    - Deleting a bill deletes its payments (ORM cascade and ON DELETE
      CASCADE); payments never outlive their bill.

Failure modes:
    - IntegrityError on a bill whose student_id or academic_year_id does
      not exist.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sis_finance.db.base import TimestampedBase
from sis_finance.models.directory import Student


class BillStatus(str, Enum):
    """Lifecycle status of a bill: Unpaid -> (Overdue) -> Paid."""

    UNPAID = "Unpaid"
    PAID = "Paid"
    OVERDUE = "Overdue"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


DEFAULT_BILL_TYPE = "SPP"


class Bill(TimestampedBase):
    """
    A receivable charge issued to one student.

    ``bill_type`` distinguishes monthly tuition (SPP) from entrance fees,
    activity fees and alumni arrears; the dashboard counts SPP bills only.
    """

    __tablename__ = "bills"

    __table_args__ = (
        Index("idx_bill_student", "student_id"),
        Index("idx_bill_type_status", "bill_type", "status"),
    )

    student_id: Mapped[UUID] = mapped_column(ForeignKey("students.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    bill_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_BILL_TYPE
    )
    academic_year_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("academic_years.id"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[BillStatus] = mapped_column(
        String(20), nullable=False, default=BillStatus.UNPAID
    )
    payment_link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    student: Mapped[Student] = relationship(lazy="joined")
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="bill",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Bill {self.title}: {self.amount} {self.status}>"

    @property
    def is_settled(self) -> bool:
        return self.status == BillStatus.PAID


class Payment(TimestampedBase):
    """A settlement event against a bill."""

    __tablename__ = "payments"

    __table_args__ = (Index("idx_payment_bill", "bill_id"),)

    bill_id: Mapped[UUID] = mapped_column(
        ForeignKey("bills.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    method: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING
    )
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    bill: Mapped[Bill] = relationship(back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment {self.amount} via {self.method}: {self.status}>"
