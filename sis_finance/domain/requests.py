"""
Request boundary -- parse raw JSON-like payloads into typed requests.

Responsibility:
    Turns the dicts an HTTP layer would decode into frozen request
    dataclasses, rejecting malformed identifiers, unparsable dates, missing
    required fields and non-numeric amounts with ``ValidationError`` before
    any service is called.

Architecture position:
    Ledger > Domain.  ZERO I/O; imports only exceptions and model enums.

Conventions:
    - Dates are ``YYYY-MM-DD`` strings (``date`` objects pass through).
    - Amounts are parsed with ``Decimal(str(value))``; floats are accepted
      on input but never stored.
    - The acting user (clerk, payroll processor) is passed separately,
      never read from the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping
from uuid import UUID

from sis_finance.exceptions import ValidationError
from sis_finance.models.cash_flow import CashFlowType
from sis_finance.models.payroll import PayrollStatus
from sis_finance.models.savings import SavingTransactionType

DATE_FORMAT = "%Y-%m-%d"


# -----------------------------------------------------------------------------
# Field parsers
# -----------------------------------------------------------------------------


def _require(payload: Mapping[str, Any], field: str) -> Any:
    value = payload.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, "is required")
    return value


def parse_uuid(value: Any, field: str) -> UUID:
    """Parse a UUID from a string (or pass a UUID through)."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValidationError(field, f"expected a UUID string, got {value!r}")
    try:
        return UUID(value.strip())
    except ValueError:
        raise ValidationError(field, f"not a valid UUID: {value!r}") from None


def parse_date(value: Any, field: str) -> date:
    """Parse a ``YYYY-MM-DD`` date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(field, f"expected a YYYY-MM-DD string, got {value!r}")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(field, f"invalid date format (YYYY-MM-DD): {value!r}") from None


def parse_amount(value: Any, field: str, *, positive: bool = False) -> Decimal:
    """Parse a monetary amount.  ``positive=True`` rejects zero and negatives."""
    if isinstance(value, bool):
        raise ValidationError(field, "expected a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(field, f"not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(field, "must be finite")
    if positive and amount <= 0:
        raise ValidationError(field, "must be greater than zero")
    if not positive and amount < 0:
        raise ValidationError(field, "must not be negative")
    return amount


_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def parse_bool(value: Any, field: str) -> bool:
    """Accept real booleans or the usual true/false strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValidationError(field, f"not a boolean: {value!r}")


def _optional_uuid(payload: Mapping[str, Any], field: str) -> UUID | None:
    value = payload.get(field)
    if value in (None, ""):
        return None
    return parse_uuid(value, field)


def _optional_text(payload: Mapping[str, Any], field: str) -> str:
    value = payload.get(field)
    return "" if value is None else str(value)


def compute_payroll_total(
    basic_salary: Decimal,
    allowances: Decimal,
    deductions: Decimal,
) -> Decimal:
    """total = basic_salary + allowances - deductions."""
    return basic_salary + allowances - deductions


# -----------------------------------------------------------------------------
# Billing
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateBillRequest:
    student_id: UUID
    title: str
    amount: Decimal
    due_date: date
    bill_type: str = ""
    academic_year_id: UUID | None = None


def parse_create_bill_request(payload: Mapping[str, Any]) -> CreateBillRequest:
    return CreateBillRequest(
        student_id=parse_uuid(_require(payload, "student_id"), "student_id"),
        title=str(_require(payload, "title")),
        amount=parse_amount(_require(payload, "amount"), "amount", positive=True),
        due_date=parse_date(_require(payload, "due_date"), "due_date"),
        bill_type=_optional_text(payload, "bill_type"),
        academic_year_id=_optional_uuid(payload, "academic_year_id"),
    )


@dataclass(frozen=True)
class PaymentRequest:
    bill_id: UUID
    amount: Decimal
    method: str


def parse_payment_request(payload: Mapping[str, Any]) -> PaymentRequest:
    return PaymentRequest(
        bill_id=parse_uuid(_require(payload, "bill_id"), "bill_id"),
        amount=parse_amount(_require(payload, "amount"), "amount", positive=True),
        method=str(_require(payload, "method")),
    )


# -----------------------------------------------------------------------------
# Savings
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SavingTransactionRequest:
    student_id: UUID
    type: SavingTransactionType
    amount: Decimal
    notes: str = ""


def parse_saving_transaction_type(value: Any, field: str = "type") -> SavingTransactionType:
    try:
        return SavingTransactionType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in SavingTransactionType)
        raise ValidationError(field, f"must be one of {allowed}, got {value!r}") from None


def parse_saving_transaction_request(
    payload: Mapping[str, Any],
) -> SavingTransactionRequest:
    return SavingTransactionRequest(
        student_id=parse_uuid(_require(payload, "student_id"), "student_id"),
        type=parse_saving_transaction_type(_require(payload, "type")),
        amount=parse_amount(_require(payload, "amount"), "amount", positive=True),
        notes=_optional_text(payload, "notes"),
    )


# -----------------------------------------------------------------------------
# Payroll
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollRequest:
    """Payroll payload with ``total`` already derived from its components."""

    user_id: UUID
    month_year: str
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    total: Decimal
    status: PayrollStatus


def parse_payroll_status(value: Any, field: str = "status") -> PayrollStatus:
    try:
        return PayrollStatus(value)
    except ValueError:
        raise ValidationError(field, f"unknown payroll status {value!r}") from None


def parse_payroll_request(payload: Mapping[str, Any]) -> PayrollRequest:
    basic_salary = parse_amount(payload.get("basic_salary", 0), "basic_salary")
    allowances = parse_amount(payload.get("allowances", 0), "allowances")
    deductions = parse_amount(payload.get("deductions", 0), "deductions")
    status = parse_payroll_status(payload.get("status") or PayrollStatus.PENDING.value)
    return PayrollRequest(
        user_id=parse_uuid(_require(payload, "user_id"), "user_id"),
        month_year=str(_require(payload, "month_year")),
        basic_salary=basic_salary,
        allowances=allowances,
        deductions=deductions,
        total=compute_payroll_total(basic_salary, allowances, deductions),
        status=status,
    )


# -----------------------------------------------------------------------------
# Cash ledger & daily infaq
# -----------------------------------------------------------------------------


def parse_flow_type(value: Any, field: str = "type") -> CashFlowType:
    try:
        return CashFlowType(value)
    except ValueError:
        raise ValidationError(field, f"must be Income or Expense, got {value!r}") from None


@dataclass(frozen=True)
class CashLedgerRequest:
    source: str
    item_name: str
    type: CashFlowType
    amount: Decimal
    category: str
    notes: str = ""
    date: date | None = None


def parse_cash_ledger_request(payload: Mapping[str, Any]) -> CashLedgerRequest:
    raw_date = payload.get("date")
    return CashLedgerRequest(
        source=str(_require(payload, "source")),
        item_name=str(_require(payload, "item_name")),
        type=parse_flow_type(_require(payload, "type")),
        amount=parse_amount(_require(payload, "amount"), "amount"),
        category=str(_require(payload, "category")),
        notes=_optional_text(payload, "notes"),
        date=parse_date(raw_date, "date") if raw_date else None,
    )


@dataclass(frozen=True)
class DailyInfaqRequest:
    source: str
    amount: Decimal
    type: CashFlowType = CashFlowType.INCOME
    notes: str = ""
    date: date | None = None


def parse_daily_infaq_request(payload: Mapping[str, Any]) -> DailyInfaqRequest:
    raw_date = payload.get("date")
    raw_type = payload.get("type")
    return DailyInfaqRequest(
        source=str(_require(payload, "source")),
        amount=parse_amount(_require(payload, "amount"), "amount"),
        type=parse_flow_type(raw_type) if raw_type else CashFlowType.INCOME,
        notes=_optional_text(payload, "notes"),
        date=parse_date(raw_date, "date") if raw_date else None,
    )


# -----------------------------------------------------------------------------
# Academic years
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AcademicYearRequest:
    name: str
    is_active: bool
    start_date: date | None
    end_date: date | None


def parse_academic_year_request(payload: Mapping[str, Any]) -> AcademicYearRequest:
    start_raw = payload.get("start_date")
    end_raw = payload.get("end_date")
    start_date = parse_date(start_raw, "start_date") if start_raw else None
    end_date = parse_date(end_raw, "end_date") if end_raw else None
    if start_date and end_date and start_date > end_date:
        raise ValidationError("end_date", "must not be before start_date")
    active_raw = payload.get("is_active")
    return AcademicYearRequest(
        name=str(_require(payload, "name")),
        is_active=parse_bool(active_raw, "is_active") if active_raw is not None else False,
        start_date=start_date,
        end_date=end_date,
    )
