"""
BillingService -- bills issued to students and the payments that settle them.

Responsibility:
    Creates, lists, edits and deletes bills and payments.  Issuing a bill
    notifies the student and, when linked, the student's parent.

Architecture position:
    Ledger > Services.  Uses DirectorySelector to resolve recipients and a
    ``Notifier`` (NotificationService by default) to deliver messages.

Invariants enforced:
    - A new bill is Unpaid; an empty bill type becomes "SPP".
    - Recording a payment marks the bill Paid whatever the amount, and the
      payment is stored as Success with paid_at = now.
    - Notification is best-effort.  It runs in its own savepoint; a failure
      is logged at WARNING and never undoes or fails the bill creation.
    - Edits are direct overwrites: updating or deleting a payment does not
      recompute the bill's status.

Failure modes:
    - ValidationError: missing amount or due date.
    - BillNotFoundError / PaymentNotFoundError: referenced row is absent.
    - NotAParentError / NotAStudentError: caller cannot be resolved.
    - PersistenceError: store failure (e.g. unknown student_id).
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from sis_finance.domain.clock import Clock
from sis_finance.domain.dtos import BillInfo, PaymentInfo, StudentInfo
from sis_finance.domain.requests import parse_amount
from sis_finance.exceptions import (
    BillNotFoundError,
    NotAParentError,
    NotAStudentError,
    PaymentNotFoundError,
    ValidationError,
)
from sis_finance.logging_config import LogContext, get_logger
from sis_finance.models.billing import (
    DEFAULT_BILL_TYPE,
    Bill,
    BillStatus,
    Payment,
    PaymentStatus,
)
from sis_finance.models.directory import Student
from sis_finance.selectors.directory_selector import DirectorySelector
from sis_finance.services.base import BaseService
from sis_finance.services.notification_service import NotificationService, Notifier

if TYPE_CHECKING:
    from sis_config.settings import Settings

logger = get_logger("services.billing")

BILL_NOTIFICATION_TYPE = "bill"
STUDENT_BILL_TITLE = "Tagihan Baru"
PARENT_BILL_TITLE = "Tagihan Baru untuk Anak Anda"


class BillingService(BaseService[Bill]):

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
        settings: "Settings | None" = None,
    ):
        super().__init__(session, clock)
        self._notifier = notifier or NotificationService(session, clock)
        self._directory = DirectorySelector(session)
        if settings is not None:
            self._default_bill_type = settings.default_bill_type
            self._student_title = settings.student_bill_title
            self._parent_title = settings.parent_bill_title
        else:
            self._default_bill_type = DEFAULT_BILL_TYPE
            self._student_title = STUDENT_BILL_TITLE
            self._parent_title = PARENT_BILL_TITLE

    # -------------------------------------------------------------------------
    # Bills
    # -------------------------------------------------------------------------

    def create_bill(
        self,
        student_id: UUID,
        title: str,
        amount: Decimal,
        due_date: date,
        bill_type: str = "",
        academic_year_id: UUID | None = None,
    ) -> BillInfo:
        """
        Issue a bill to a student and notify the student and parent.

        Raises:
            ValidationError: amount or due_date missing.
            PersistenceError: the insert failed.
        """
        if amount is None:
            raise ValidationError("amount", "is required")
        if due_date is None:
            raise ValidationError("due_date", "is required")
        amount = parse_amount(amount, "amount")

        bill = Bill(
            student_id=student_id,
            title=title,
            bill_type=bill_type or self._default_bill_type,
            academic_year_id=academic_year_id,
            amount=amount,
            due_date=due_date,
            status=BillStatus.UNPAID.value,
        )
        with self._persisting("create_bill"):
            self.session.add(bill)
            self.session.flush()

        with LogContext.bind(bill_id=str(bill.id), student_id=str(student_id)):
            logger.info(
                "bill_created",
                extra={
                    "bill_type": bill.bill_type,
                    "amount": str(amount),
                    "due_date": due_date.isoformat(),
                },
            )
            self._notify_bill_created(bill)

        return BillInfo.from_model(bill)

    def _notify_bill_created(self, bill: Bill) -> None:
        try:
            with self.session.begin_nested():
                student = self._directory.get_student(bill.student_id)
                if student is None:
                    logger.warning("bill_notification_student_missing")
                    return

                self._notifier.send_notification(
                    student.user_id,
                    self._student_title,
                    f"Anda memiliki tagihan baru: {bill.title}",
                    BILL_NOTIFICATION_TYPE,
                    str(bill.id),
                )

                if student.parent_id is not None:
                    parent = self._directory.get_parent(student.parent_id)
                    if parent is not None:
                        self._notifier.send_notification(
                            parent.user_id,
                            self._parent_title,
                            f"Tagihan baru untuk {student.name}: {bill.title}",
                            BILL_NOTIFICATION_TYPE,
                            str(bill.id),
                        )
        except Exception:
            logger.warning("bill_notification_failed", exc_info=True)

    def get_all_bills(self, unit_id: int) -> list[BillInfo]:
        """Bills of every student in a school unit, latest due date first."""
        bills = self.session.execute(
            select(Bill)
            .join(Bill.student)
            .where(Student.unit_id == unit_id)
            .order_by(Bill.due_date.desc())
        ).scalars().all()
        return [BillInfo.from_model(b) for b in bills]

    def get_student_bills(self, student_id: UUID) -> list[BillInfo]:
        bills = self.session.execute(
            select(Bill)
            .where(Bill.student_id == student_id)
            .order_by(Bill.due_date.desc())
        ).scalars().all()
        return [BillInfo.from_model(b) for b in bills]

    def get_student_bills_by_user(self, user_id: UUID) -> list[BillInfo]:
        """Bills of the student whose user account is ``user_id``."""
        student = self._directory.get_student_by_user(user_id)
        if student is None:
            raise NotAStudentError(str(user_id))
        return self.get_student_bills(student.id)

    def get_parent_bills(self, user_id: UUID) -> list[BillInfo]:
        """
        Union of the bills of every child of the parent ``user_id``.

        Raises:
            NotAParentError: The user has no parent record.
        """
        parent = self._directory.get_parent_by_user(user_id)
        if parent is None:
            raise NotAParentError(str(user_id))

        children: list[StudentInfo] = self._directory.get_children_of_parent(parent.id)
        if not children:
            return []

        bills = self.session.execute(
            select(Bill)
            .where(Bill.student_id.in_([c.id for c in children]))
            .order_by(Bill.due_date.desc())
        ).scalars().all()
        return [BillInfo.from_model(b) for b in bills]

    def update_bill(
        self,
        bill_id: UUID,
        student_id: UUID,
        title: str,
        amount: Decimal,
        due_date: date,
    ) -> BillInfo:
        bill = self._get_bill(bill_id)
        with self._persisting("update_bill"):
            bill.student_id = student_id
            bill.title = title
            bill.amount = parse_amount(amount, "amount")
            bill.due_date = due_date
            self.session.flush()
            # student relationship follows the new FK
            self.session.refresh(bill)

        logger.info("bill_updated", extra={"bill_id": str(bill_id)})
        return BillInfo.from_model(bill)

    def delete_bill(self, bill_id: UUID) -> None:
        """Delete a bill together with its payments."""
        bill = self._get_bill(bill_id)
        with self._persisting("delete_bill"):
            self.session.delete(bill)
            self.session.flush()
        logger.info("bill_deleted", extra={"bill_id": str(bill_id)})

    def mark_overdue(self, as_of: date | None = None) -> int:
        """
        Flip Unpaid bills whose due date is before ``as_of`` to Overdue.

        Returns:
            Number of bills changed.
        """
        as_of = as_of or self._clock.today()
        with self._persisting("mark_overdue"):
            result = self.session.execute(
                update(Bill)
                .where(Bill.status == BillStatus.UNPAID.value)
                .where(Bill.due_date < as_of)
                .values(status=BillStatus.OVERDUE.value)
                .execution_options(synchronize_session="fetch")
            )
            self.session.flush()
        count = result.rowcount or 0
        logger.info(
            "bills_marked_overdue",
            extra={"as_of": as_of.isoformat(), "count": count},
        )
        return count

    def _get_bill(self, bill_id: UUID) -> Bill:
        bill = self.session.get(Bill, bill_id)
        if bill is None:
            raise BillNotFoundError(str(bill_id))
        return bill

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def record_payment(self, bill_id: UUID, amount: Decimal, method: str) -> PaymentInfo:
        """
        Record a successful payment and mark the bill Paid.

        The bill becomes Paid for any amount; partial settlement is not
        tracked.

        Raises:
            BillNotFoundError: No such bill.
        """
        bill = self._get_bill(bill_id)
        amount = parse_amount(amount, "amount")

        payment = Payment(
            bill_id=bill.id,
            amount=amount,
            method=method,
            status=PaymentStatus.SUCCESS.value,
            paid_at=self._clock.now(),
        )
        with self._persisting("record_payment"):
            bill.payments.append(payment)
            bill.status = BillStatus.PAID.value
            self.session.flush()

        logger.info(
            "payment_recorded",
            extra={
                "bill_id": str(bill.id),
                "payment_id": str(payment.id),
                "amount": str(amount),
                "method": method,
                "bill_amount": str(bill.amount),
            },
        )
        return PaymentInfo.from_model(payment)

    def update_payment(
        self,
        payment_id: UUID,
        bill_id: UUID,
        amount: Decimal,
        method: str,
    ) -> PaymentInfo:
        payment = self._get_payment(payment_id)
        target = self._get_bill(bill_id)
        with self._persisting("update_payment"):
            # through the relationship, so the payment leaves the old
            # bill's delete-orphan collection
            payment.bill = target
            payment.amount = parse_amount(amount, "amount")
            payment.method = method
            self.session.flush()
        logger.info("payment_updated", extra={"payment_id": str(payment_id)})
        return PaymentInfo.from_model(payment)

    def delete_payment(self, payment_id: UUID) -> None:
        payment = self._get_payment(payment_id)
        with self._persisting("delete_payment"):
            self.session.delete(payment)
            self.session.flush()
        logger.info("payment_deleted", extra={"payment_id": str(payment_id)})

    def get_bill_payments(self, bill_id: UUID) -> list[PaymentInfo]:
        payments = self.session.execute(
            select(Payment)
            .where(Payment.bill_id == bill_id)
            .order_by(Payment.paid_at.desc())
        ).scalars().all()
        return [PaymentInfo.from_model(p) for p in payments]

    def _get_payment(self, payment_id: UUID) -> Payment:
        payment = self.session.get(Payment, payment_id)
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))
        return payment
