"""End-to-end tests for the aggregation engine."""

import pytest

from cashflow_analyzer.analysis import analyze, analyze_extraction
from cashflow_analyzer.export import format_cash_flow_analysis, format_monthly_report
from cashflow_analyzer.models.analysis import FinancialStatus, ReportSectionId


class TestAnalyze:
    """Tests for the full aggregation."""

    @pytest.fixture
    def simple_month(self, make_income, make_expense):
        incomes = [
            make_income(9600, category="生意收入", type="商品銷售收入"),
            make_income(35000, category="生活收入", type="薪資收入"),
        ]
        expenses = [
            make_expense(8000, category="生意支出", expense_category="變動支出", type="原料"),
            make_expense(12000, category="生活支出", expense_category="住", type="房租"),
        ]
        return incomes, expenses

    def test_simple_month(self, simple_month):
        """Test a month with one line in each account."""
        analysis = analyze(*simple_month)

        assert analysis.accounts.total_balance == 24600
        assert analysis.accounts.total_status.status == FinancialStatus.SURPLUS
        assert analysis.margin.gross_margin_percent == pytest.approx(16.67, abs=0.01)
        assert analysis.emergency_fund.minimum == 36000
        assert analysis.emergency_fund.maximum == 72000
        assert analysis.report.has_business_activity

    def test_idempotent(self, simple_month):
        """Test that the same snapshot always gives the same analysis."""
        first = analyze(*simple_month)
        second = analyze(*simple_month)
        assert first == second
        assert format_monthly_report(first.report) == format_monthly_report(second.report)
        assert format_cash_flow_analysis(first) == format_cash_flow_analysis(second)

    def test_empty_snapshot(self):
        """Test that an empty month does not raise."""
        analysis = analyze([], [])
        assert analysis.margin.gross_margin_percent == 0.0
        assert analysis.report.net == 0
        assert ReportSectionId.BUSINESS_INCOME not in analysis.report.section_ids

    def test_demo_month(self, demo):
        """Test the coffee-shop demo month."""
        analysis = analyze_extraction(demo)
        accounts = analysis.accounts

        assert accounts.business_income == 12850
        assert accounts.business_expense == 34500
        assert accounts.personal_income == 35000
        assert accounts.personal_expense == 32699
        assert accounts.business_status.status == FinancialStatus.DEFICIT
        assert accounts.personal_status.status == FinancialStatus.NEAR_BREAK_EVEN
        assert accounts.total_balance == -19349
        assert analysis.margin.business_cost == 12200
        assert analysis.emergency_fund.minimum == 98097
