"""
Module: sis_finance.models.savings
Responsibility: ORM persistence for per-student savings accounts and their
    append-only transaction log.
Architecture position: Ledger > Models.  May import from db/base.py and
    sibling models only.

Invariants enforced:
    - Exactly one account per student (uq_saving_account_student).
    - balance >= 0 (ck_saving_account_balance_non_negative, also checked by
      SavingsService before any write).
    - balance == sum(Deposit) - sum(Withdrawal) over the account's
      transactions.  Holds by construction: SavingsService changes the
      balance and appends the log row in the same locked unit of work.
    - Transactions are never updated or deleted; the account FK is
      ON DELETE RESTRICT so the log cannot be orphaned.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sis_finance.db.base import TimestampedBase
from sis_finance.models.directory import Student


class SavingTransactionType(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


class SavingAccount(TimestampedBase):
    """A student's internal savings balance."""

    __tablename__ = "saving_accounts"

    __table_args__ = (
        UniqueConstraint("student_id", name="uq_saving_account_student"),
        CheckConstraint("balance >= 0", name="ck_saving_account_balance_non_negative"),
        Index("idx_saving_account_updated", "updated_at"),
    )

    student_id: Mapped[UUID] = mapped_column(ForeignKey("students.id"), nullable=False)
    balance: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    student: Mapped[Student] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<SavingAccount student={self.student_id} balance={self.balance}>"


class SavingTransaction(TimestampedBase):
    """One immutable deposit or withdrawal against a savings account."""

    __tablename__ = "saving_transactions"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_saving_transaction_amount_positive"),
        Index("idx_saving_transaction_account_date", "account_id", "date"),
    )

    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("saving_accounts.id", ondelete="RESTRICT"), nullable=False
    )
    type: Mapped[SavingTransactionType] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    handled_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    account: Mapped[SavingAccount] = relationship()

    def __repr__(self) -> str:
        return f"<SavingTransaction {self.type} {self.amount}>"
