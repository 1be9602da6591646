"""
Module: sis_finance.selectors.analytics_selector
Responsibility: Aggregate figures for the finance dashboard.
Architecture position: Ledger > Selectors.  May import from models/,
    domain/dtos.py and selectors/base.py.  MUST NOT import from services/.

Notes:
    - Each figure is its own query.  Writes committed between two of them
      may be reflected in one and not the other.
    - Empty tables yield 0, never None.
    - total_school_debt = sum(Hutang Income) - sum(Hutang Expense).  It is
      not clamped and can be negative if repayments exceed borrowing.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from sis_finance.domain.dtos import DashboardAnalytics
from sis_finance.logging_config import get_logger
from sis_finance.models.billing import DEFAULT_BILL_TYPE, Bill, BillStatus
from sis_finance.models.cash_flow import DEBT_CATEGORY, CashFlowType, CashLedger
from sis_finance.models.directory import Student, Teacher
from sis_finance.models.savings import SavingAccount
from sis_finance.selectors.base import BaseSelector

if TYPE_CHECKING:
    from sis_config.settings import Settings

logger = get_logger("selectors.analytics")


class AnalyticsSelector(BaseSelector[Bill]):
    """Read-only dashboard aggregation."""

    def __init__(
        self,
        session,
        tuition_bill_type: str = DEFAULT_BILL_TYPE,
        debt_category: str = DEBT_CATEGORY,
        settings: "Settings | None" = None,
    ):
        super().__init__(session)
        if settings is not None:
            tuition_bill_type = settings.default_bill_type
            debt_category = settings.debt_category
        self._tuition_bill_type = tuition_bill_type
        self._debt_category = debt_category

    def get_dashboard_analytics(self) -> DashboardAnalytics:
        analytics = DashboardAnalytics(
            total_students=self._count(Student),
            total_teachers=self._count(Teacher),
            paid_spp_count=self._count_tuition_bills(BillStatus.PAID),
            unpaid_spp_count=self._count_tuition_bills(BillStatus.UNPAID),
            total_student_savings=self._sum(
                select(func.coalesce(func.sum(SavingAccount.balance), 0))
            ),
            total_school_debt=(
                self._debt_total(CashFlowType.INCOME)
                - self._debt_total(CashFlowType.EXPENSE)
            ),
        )
        logger.debug("dashboard_analytics_computed", extra=analytics.to_dict())
        return analytics

    def _count(self, model) -> int:
        return self.session.execute(
            select(func.count()).select_from(model)
        ).scalar_one()

    def _count_tuition_bills(self, status: BillStatus) -> int:
        return self.session.execute(
            select(func.count(Bill.id))
            .where(Bill.bill_type == self._tuition_bill_type)
            .where(Bill.status == status.value)
        ).scalar_one()

    def _debt_total(self, flow_type: CashFlowType) -> Decimal:
        return self._sum(
            select(func.coalesce(func.sum(CashLedger.amount), 0))
            .where(CashLedger.category == self._debt_category)
            .where(CashLedger.type == flow_type.value)
        )

    def _sum(self, stmt) -> Decimal:
        value = self.session.execute(stmt).scalar_one()
        return Decimal(str(value)) if value is not None else Decimal("0")
