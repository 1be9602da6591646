"""
DTOs -- immutable records returned by services and selectors.

Responsibility:
    Callers never receive ORM entities.  Each ``*Info`` dataclass mirrors one
    table and exposes a ``from_model()`` converter; the converters are only
    invoked from the service and selector layers.

    ``DashboardAnalytics`` replaces a loosely-typed string-keyed map with
    named fields; ``to_dict()`` gives the JSON-friendly form.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sis_finance.models.billing import BillStatus, PaymentStatus
from sis_finance.models.cash_flow import CashFlowType
from sis_finance.models.payroll import PayrollStatus
from sis_finance.models.savings import SavingTransactionType

if TYPE_CHECKING:
    from sis_finance.models import (
        AcademicYear,
        Bill,
        CashLedger,
        DailyInfaq,
        Notification,
        Parent,
        Payment,
        Payroll,
        SavingAccount,
        SavingTransaction,
        Student,
    )


@dataclass(frozen=True)
class StudentInfo:
    id: UUID
    user_id: UUID
    name: str
    nisn: str
    unit_id: int
    parent_id: UUID | None

    @classmethod
    def from_model(cls, student: Student) -> StudentInfo:
        return cls(
            id=student.id,
            user_id=student.user_id,
            name=student.user.name if student.user is not None else "",
            nisn=student.nisn,
            unit_id=student.unit_id,
            parent_id=student.parent_id,
        )


@dataclass(frozen=True)
class ParentInfo:
    id: UUID
    user_id: UUID
    name: str
    phone: str | None

    @classmethod
    def from_model(cls, parent: Parent) -> ParentInfo:
        return cls(
            id=parent.id,
            user_id=parent.user_id,
            name=parent.user.name if parent.user is not None else "",
            phone=parent.phone,
        )


@dataclass(frozen=True)
class BillInfo:
    """A bill with the display data of the student it belongs to."""

    id: UUID
    student_id: UUID
    title: str
    bill_type: str
    academic_year_id: UUID | None
    amount: Decimal
    due_date: date
    status: BillStatus
    payment_link: str | None
    created_at: datetime | None
    updated_at: datetime | None
    student: StudentInfo | None = None

    @classmethod
    def from_model(cls, bill: Bill) -> BillInfo:
        return cls(
            id=bill.id,
            student_id=bill.student_id,
            title=bill.title,
            bill_type=bill.bill_type,
            academic_year_id=bill.academic_year_id,
            amount=bill.amount,
            due_date=bill.due_date,
            status=BillStatus(bill.status),
            payment_link=bill.payment_link,
            created_at=bill.created_at,
            updated_at=bill.updated_at,
            student=StudentInfo.from_model(bill.student) if bill.student else None,
        )


@dataclass(frozen=True)
class PaymentInfo:
    id: UUID
    bill_id: UUID
    amount: Decimal
    method: str
    status: PaymentStatus
    transaction_id: str | None
    paid_at: datetime | None

    @classmethod
    def from_model(cls, payment: Payment) -> PaymentInfo:
        return cls(
            id=payment.id,
            bill_id=payment.bill_id,
            amount=payment.amount,
            method=payment.method,
            status=PaymentStatus(payment.status),
            transaction_id=payment.transaction_id,
            paid_at=payment.paid_at,
        )


@dataclass(frozen=True)
class SavingAccountInfo:
    id: UUID
    student_id: UUID
    balance: Decimal
    created_at: datetime | None
    updated_at: datetime | None
    student: StudentInfo | None = None

    @classmethod
    def from_model(cls, account: SavingAccount) -> SavingAccountInfo:
        return cls(
            id=account.id,
            student_id=account.student_id,
            balance=account.balance,
            created_at=account.created_at,
            updated_at=account.updated_at,
            student=StudentInfo.from_model(account.student) if account.student else None,
        )


@dataclass(frozen=True)
class SavingTransactionInfo:
    id: UUID
    account_id: UUID
    type: SavingTransactionType
    amount: Decimal
    date: datetime
    handled_by_id: UUID
    notes: str | None

    @classmethod
    def from_model(cls, txn: SavingTransaction) -> SavingTransactionInfo:
        return cls(
            id=txn.id,
            account_id=txn.account_id,
            type=SavingTransactionType(txn.type),
            amount=txn.amount,
            date=txn.date,
            handled_by_id=txn.handled_by_id,
            notes=txn.notes,
        )


@dataclass(frozen=True)
class PayrollInfo:
    id: UUID
    user_id: UUID
    month_year: str
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    total: Decimal
    status: PayrollStatus
    payment_date: datetime | None
    processed_by_id: UUID
    user_name: str | None = None

    @classmethod
    def from_model(cls, payroll: Payroll) -> PayrollInfo:
        return cls(
            id=payroll.id,
            user_id=payroll.user_id,
            month_year=payroll.month_year,
            basic_salary=payroll.basic_salary,
            allowances=payroll.allowances,
            deductions=payroll.deductions,
            total=payroll.total,
            status=PayrollStatus(payroll.status),
            payment_date=payroll.payment_date,
            processed_by_id=payroll.processed_by_id,
            user_name=payroll.user.name if payroll.user is not None else None,
        )


@dataclass(frozen=True)
class CashLedgerInfo:
    id: UUID
    date: date
    source: str
    item_name: str
    type: CashFlowType
    amount: Decimal
    category: str
    notes: str | None
    created_by: UUID | None

    @classmethod
    def from_model(cls, entry: CashLedger) -> CashLedgerInfo:
        return cls(
            id=entry.id,
            date=entry.date,
            source=entry.source,
            item_name=entry.item_name,
            type=CashFlowType(entry.type),
            amount=entry.amount,
            category=entry.category,
            notes=entry.notes,
            created_by=entry.created_by,
        )


@dataclass(frozen=True)
class DailyInfaqInfo:
    id: UUID
    date: date
    source: str
    type: CashFlowType
    amount: Decimal
    handled_by_id: UUID
    notes: str | None

    @classmethod
    def from_model(cls, entry: DailyInfaq) -> DailyInfaqInfo:
        return cls(
            id=entry.id,
            date=entry.date,
            source=entry.source,
            type=CashFlowType(entry.type),
            amount=entry.amount,
            handled_by_id=entry.handled_by_id,
            notes=entry.notes,
        )


@dataclass(frozen=True)
class AcademicYearInfo:
    id: UUID
    name: str
    is_active: bool
    start_date: date | None
    end_date: date | None

    @classmethod
    def from_model(cls, year: AcademicYear) -> AcademicYearInfo:
        return cls(
            id=year.id,
            name=year.name,
            is_active=year.is_active,
            start_date=year.start_date,
            end_date=year.end_date,
        )


@dataclass(frozen=True)
class NotificationInfo:
    id: UUID
    user_id: UUID
    title: str
    message: str
    type: str
    reference_id: str | None
    is_read: bool
    created_at: datetime | None

    @classmethod
    def from_model(cls, notification: Notification) -> NotificationInfo:
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            reference_id=notification.reference_id,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


@dataclass(frozen=True)
class DashboardAnalytics:
    """
    Point-in-time dashboard figures.

    Each figure is an independent read; no cross-metric snapshot is implied.
    """

    total_students: int
    total_teachers: int
    paid_spp_count: int
    unpaid_spp_count: int
    total_student_savings: Decimal
    total_school_debt: Decimal

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
