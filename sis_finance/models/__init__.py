"""ORM models for the school finance ledger."""

from sis_finance.models.academic_year import AcademicYear
from sis_finance.models.billing import (
    DEFAULT_BILL_TYPE,
    Bill,
    BillStatus,
    Payment,
    PaymentStatus,
)
from sis_finance.models.cash_flow import (
    DEBT_CATEGORY,
    CashFlowType,
    CashLedger,
    DailyInfaq,
)
from sis_finance.models.directory import Parent, Student, Teacher, User, UserRole
from sis_finance.models.notification import Notification
from sis_finance.models.payroll import Payroll, PayrollStatus
from sis_finance.models.savings import (
    SavingAccount,
    SavingTransaction,
    SavingTransactionType,
)

__all__ = [
    "AcademicYear",
    "Bill",
    "BillStatus",
    "CashFlowType",
    "CashLedger",
    "DailyInfaq",
    "DEBT_CATEGORY",
    "DEFAULT_BILL_TYPE",
    "Notification",
    "Parent",
    "Payment",
    "PaymentStatus",
    "Payroll",
    "PayrollStatus",
    "SavingAccount",
    "SavingTransaction",
    "SavingTransactionType",
    "Student",
    "Teacher",
    "User",
    "UserRole",
]
