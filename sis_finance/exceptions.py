"""
Typed exception hierarchy for the school finance ledger.

Every error carries a class-level ``code`` (machine-readable, API-safe) and
keeps its context as attributes rather than inside the message, so callers
catch by type and read structured data::

    try:
        savings.process_transaction(student_id, clerk_id, "Withdrawal", amount)
    except InsufficientBalanceError as e:
        respond(400, code=e.code, balance=e.balance, requested=e.requested)

Hierarchy::

    SisFinanceError
    +-- ValidationError
    +-- NotFoundError
    |   +-- BillNotFoundError
    |   +-- PaymentNotFoundError
    |   +-- StudentNotFoundError
    |   +-- SavingAccountNotFoundError
    |   +-- PayrollNotFoundError
    |   +-- CashLedgerEntryNotFoundError
    |   +-- DailyInfaqNotFoundError
    |   +-- AcademicYearNotFoundError
    +-- DirectoryError
    |   +-- NotAParentError
    |   +-- NotAStudentError
    +-- SavingsError
    |   +-- InsufficientBalanceError
    +-- AcademicYearExistsError
    +-- PersistenceError

Category           | Code                          | When raised
-------------------|-------------------------------|------------------------------------
Validation         | VALIDATION_ERROR              | Malformed id/date/amount, missing field
Not found          | BILL_NOT_FOUND, ...           | Referenced row does not exist
Directory          | NOT_A_PARENT / NOT_A_STUDENT  | Caller has no parent/student record
Savings            | INSUFFICIENT_BALANCE          | Withdrawal exceeds balance
Academic year      | ACADEMIC_YEAR_EXISTS          | Duplicate academic year name
Persistence        | PERSISTENCE_ERROR             | Store failure, never retried
"""

from decimal import Decimal


class SisFinanceError(Exception):
    """Base exception for all ledger errors."""

    code: str = "SIS_FINANCE_ERROR"


# Validation


class ValidationError(SisFinanceError):
    """Request data failed boundary validation (client-side fault)."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Not found


class NotFoundError(SisFinanceError):
    """Base exception for missing rows."""

    code: str = "NOT_FOUND"
    entity: str = "Entity"

    def __init__(self, entity_id: str):
        self.entity_id = str(entity_id)
        super().__init__(f"{self.entity} not found: {entity_id}")


class BillNotFoundError(NotFoundError):
    code: str = "BILL_NOT_FOUND"
    entity = "Bill"


class PaymentNotFoundError(NotFoundError):
    code: str = "PAYMENT_NOT_FOUND"
    entity = "Payment"


class StudentNotFoundError(NotFoundError):
    code: str = "STUDENT_NOT_FOUND"
    entity = "Student"


class SavingAccountNotFoundError(NotFoundError):
    code: str = "SAVING_ACCOUNT_NOT_FOUND"
    entity = "Saving account"


class PayrollNotFoundError(NotFoundError):
    code: str = "PAYROLL_NOT_FOUND"
    entity = "Payroll"


class CashLedgerEntryNotFoundError(NotFoundError):
    code: str = "CASH_LEDGER_ENTRY_NOT_FOUND"
    entity = "Cash ledger entry"


class DailyInfaqNotFoundError(NotFoundError):
    code: str = "DAILY_INFAQ_NOT_FOUND"
    entity = "Daily infaq entry"


class AcademicYearNotFoundError(NotFoundError):
    code: str = "ACADEMIC_YEAR_NOT_FOUND"
    entity = "Academic year"


# Directory


class DirectoryError(SisFinanceError):
    """Base exception for caller-resolution failures."""

    code: str = "DIRECTORY_ERROR"


class NotAParentError(DirectoryError):
    """The user has no parent record."""

    code: str = "NOT_A_PARENT"

    def __init__(self, user_id: str):
        self.user_id = str(user_id)
        super().__init__(f"User {user_id} is not a parent")


class NotAStudentError(DirectoryError):
    """The user has no student record."""

    code: str = "NOT_A_STUDENT"

    def __init__(self, user_id: str):
        self.user_id = str(user_id)
        super().__init__(f"User {user_id} is not a student")


# Savings


class SavingsError(SisFinanceError):
    """Base exception for savings ledger errors."""

    code: str = "SAVINGS_ERROR"


class InsufficientBalanceError(SavingsError):
    """
    Withdrawal exceeds the current balance.

    Raised before any state is written: no debit, no transaction row.
    """

    code: str = "INSUFFICIENT_BALANCE"

    def __init__(self, account_id: str, balance: Decimal, requested: Decimal):
        self.account_id = str(account_id)
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient balance on saving account {account_id}: "
            f"balance={balance}, requested={requested}"
        )


# Academic years


class AcademicYearExistsError(SisFinanceError):
    code: str = "ACADEMIC_YEAR_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Academic year already exists: {name}")


# Persistence


class PersistenceError(SisFinanceError):
    """
    Underlying store failure.

    The SQLAlchemy exception is chained as ``__cause__``.  Fatal for the
    current operation and never retried.
    """

    code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Persistence failure during {operation}")
