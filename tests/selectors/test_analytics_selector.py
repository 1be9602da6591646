"""Tests for AnalyticsSelector dashboard figures."""

from datetime import date
from decimal import Decimal

from sis_config import Settings
from sis_finance.domain.dtos import DashboardAnalytics
from sis_finance.selectors import AnalyticsSelector
from sis_finance.services import BillingService


class TestEmptyDashboard:

    def test_all_figures_zero(self, analytics_selector):
        analytics = analytics_selector.get_dashboard_analytics()

        assert analytics == DashboardAnalytics(
            total_students=0,
            total_teachers=0,
            paid_spp_count=0,
            unpaid_spp_count=0,
            total_student_savings=Decimal("0"),
            total_school_debt=Decimal("0"),
        )

    def test_to_dict_keys(self, analytics_selector):
        data = analytics_selector.get_dashboard_analytics().to_dict()
        assert set(data) == {
            "total_students",
            "total_teachers",
            "paid_spp_count",
            "unpaid_spp_count",
            "total_student_savings",
            "total_school_debt",
        }


class TestPopulatedDashboard:

    def test_counts_and_sums(
        self,
        analytics_selector,
        billing_service,
        savings_service,
        cash_flow_service,
        student,
        orphan_student,
        teacher_factory,
        clerk,
    ):
        teacher_factory("Bu Aisyah")
        paid = billing_service.create_bill(student.id, "SPP Jan", Decimal("500000"), date(2025, 1, 10))
        billing_service.record_payment(paid.id, Decimal("500000"), "Cash")
        billing_service.create_bill(student.id, "SPP Feb", Decimal("500000"), date(2025, 2, 10))
        billing_service.create_bill(orphan_student.id, "SPP Jan", Decimal("500000"), date(2025, 1, 10))
        billing_service.create_bill(orphan_student.id, "Buku", Decimal("200000"), date(2025, 1, 10), "Buku")

        savings_service.process_transaction(student.id, clerk.id, "Deposit", Decimal("50000"))
        savings_service.process_transaction(orphan_student.id, clerk.id, "Deposit", Decimal("25000"))

        cash_flow_service.add_cash_ledger_entry("Bank", "Pinjaman", "Income", Decimal("1000000"), "Hutang")
        cash_flow_service.add_cash_ledger_entry("Bank", "Cicilan 1", "Expense", Decimal("300000"), "Hutang")
        cash_flow_service.add_cash_ledger_entry("Donatur", "Hibah", "Income", Decimal("999999"), "Donasi")

        analytics = analytics_selector.get_dashboard_analytics()

        assert analytics.total_students == 2
        assert analytics.total_teachers == 1
        assert analytics.paid_spp_count == 1
        assert analytics.unpaid_spp_count == 2
        assert analytics.total_student_savings == Decimal("75000")
        assert analytics.total_school_debt == Decimal("700000")

    def test_overdue_not_counted_as_unpaid(
        self, analytics_selector, billing_service, student
    ):
        billing_service.create_bill(student.id, "SPP Nov", Decimal("500000"), date(2024, 11, 10))
        billing_service.mark_overdue(date(2025, 1, 1))

        assert analytics_selector.get_dashboard_analytics().unpaid_spp_count == 0

    def test_debt_can_go_negative(self, analytics_selector, cash_flow_service):
        cash_flow_service.add_cash_ledger_entry("Bank", "Cicilan", "Expense", Decimal("100"), "Hutang")
        assert analytics_selector.get_dashboard_analytics().total_school_debt == Decimal("-100")

    def test_custom_tuition_type_and_debt_category(self, session, billing_service, cash_flow_service, student):
        billing_service.create_bill(student.id, "Syahriah", Decimal("1"), date(2025, 1, 10), "Syahriah")
        cash_flow_service.add_cash_ledger_entry("Bank", "Pinjaman", "Income", Decimal("5"), "Pinjaman")

        selector = AnalyticsSelector(session, tuition_bill_type="Syahriah", debt_category="Pinjaman")
        analytics = selector.get_dashboard_analytics()

        assert analytics.unpaid_spp_count == 1
        assert analytics.total_school_debt == Decimal("5")

    def test_settings_drive_tuition_type_and_debt_category(self, session, deterministic_clock, cash_flow_service, student):
        settings = Settings(default_bill_type="Syahriah", debt_category="Pinjaman")
        billing = BillingService(session, clock=deterministic_clock, settings=settings)
        billing.create_bill(student.id, "Syahriah Januari", Decimal("500000"), date(2025, 1, 10))
        cash_flow_service.add_cash_ledger_entry("Bank", "Pinjaman", "Income", Decimal("7"), "Pinjaman")

        analytics = AnalyticsSelector(session, settings=settings).get_dashboard_analytics()

        assert analytics.unpaid_spp_count == 1
        assert analytics.total_school_debt == Decimal("7")
