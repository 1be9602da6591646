"""Services for the school finance ledger (write side)."""

from sis_finance.services.academic_year_service import AcademicYearService
from sis_finance.services.billing_service import BillingService
from sis_finance.services.cash_flow_service import CashFlowService
from sis_finance.services.notification_service import NotificationService, Notifier
from sis_finance.services.payroll_service import PayrollService
from sis_finance.services.savings_service import SavingsService

__all__ = [
    "AcademicYearService",
    "BillingService",
    "CashFlowService",
    "NotificationService",
    "Notifier",
    "PayrollService",
    "SavingsService",
]
