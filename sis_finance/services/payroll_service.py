"""
PayrollService -- monthly staff payroll entries.

Invariants enforced:
    - payment_date is stamped from the service clock on create.
    - On update, total is recomputed as basic_salary + allowances -
      deductions; a total supplied by the caller is never used.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from sis_finance.domain.dtos import PayrollInfo
from sis_finance.domain.requests import (
    compute_payroll_total,
    parse_amount,
    parse_payroll_status,
)
from sis_finance.exceptions import PayrollNotFoundError
from sis_finance.logging_config import get_logger
from sis_finance.models.payroll import Payroll, PayrollStatus
from sis_finance.services.base import BaseService

logger = get_logger("services.payroll")


class PayrollService(BaseService[Payroll]):

    def create_payroll(
        self,
        user_id: UUID,
        month_year: str,
        basic_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        total: Decimal,
        status: PayrollStatus | str,
        processed_by_id: UUID,
    ) -> PayrollInfo:
        """
        Record a payroll entry.

        ``total`` is stored as given; build it with ``compute_payroll_total``
        (``parse_payroll_request`` already does).
        """
        payroll = Payroll(
            user_id=user_id,
            month_year=month_year,
            basic_salary=parse_amount(basic_salary, "basic_salary"),
            allowances=parse_amount(allowances, "allowances"),
            deductions=parse_amount(deductions, "deductions"),
            total=Decimal(str(total)),
            status=parse_payroll_status(status).value,
            payment_date=self._clock.now(),
            processed_by_id=processed_by_id,
        )
        with self._persisting("create_payroll"):
            self.session.add(payroll)
            self.session.flush()

        logger.info(
            "payroll_created",
            extra={
                "payroll_id": str(payroll.id),
                "user_id": str(user_id),
                "month_year": month_year,
                "total": str(payroll.total),
            },
        )
        return PayrollInfo.from_model(payroll)

    def update_payroll(
        self,
        payroll_id: UUID,
        user_id: UUID,
        month_year: str,
        basic_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        status: PayrollStatus | str,
        total: Decimal | None = None,
    ) -> PayrollInfo:
        """Overwrite a payroll entry.  ``total`` is ignored and recomputed."""
        payroll = self._get(payroll_id)
        basic_salary = parse_amount(basic_salary, "basic_salary")
        allowances = parse_amount(allowances, "allowances")
        deductions = parse_amount(deductions, "deductions")

        with self._persisting("update_payroll"):
            payroll.user_id = user_id
            payroll.month_year = month_year
            payroll.basic_salary = basic_salary
            payroll.allowances = allowances
            payroll.deductions = deductions
            payroll.total = compute_payroll_total(basic_salary, allowances, deductions)
            payroll.status = parse_payroll_status(status).value
            self.session.flush()
            self.session.refresh(payroll)

        if total is not None and Decimal(str(total)) != payroll.total:
            logger.debug(
                "payroll_supplied_total_ignored",
                extra={"payroll_id": str(payroll_id), "supplied_total": str(total)},
            )
        logger.info(
            "payroll_updated",
            extra={"payroll_id": str(payroll_id), "total": str(payroll.total)},
        )
        return PayrollInfo.from_model(payroll)

    def get_payrolls(self, month_year: str | None = None) -> list[PayrollInfo]:
        """Payroll entries, newest first, optionally for one month."""
        stmt = select(Payroll)
        if month_year:
            stmt = stmt.where(Payroll.month_year == month_year)
        rows = self.session.execute(
            stmt.order_by(Payroll.created_at.desc())
        ).scalars().all()
        return [PayrollInfo.from_model(p) for p in rows]

    def delete_payroll(self, payroll_id: UUID) -> None:
        payroll = self._get(payroll_id)
        with self._persisting("delete_payroll"):
            self.session.delete(payroll)
            self.session.flush()
        logger.info("payroll_deleted", extra={"payroll_id": str(payroll_id)})

    def _get(self, payroll_id: UUID) -> Payroll:
        payroll = self.session.get(Payroll, payroll_id)
        if payroll is None:
            raise PayrollNotFoundError(str(payroll_id))
        return payroll
