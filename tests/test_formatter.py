"""Tests for the plain-text exports."""

import pytest

from cashflow_analyzer.analysis import analyze, analyze_extraction
from cashflow_analyzer.export import (
    format_amount,
    format_cash_flow_analysis,
    format_expense_table,
    format_income_table,
    format_monthly_report,
)
from cashflow_analyzer.export.formatter import format_plain_number


DEMO_MONTHLY_REPORT = """財務月報表

家庭收入:
工資: 35,000\t\t補助或津貼如下
非工資: 0\t\t低收補助: 0
家人提供: 0\t\t身障補助: 0
借款: 0
補助或津貼: 0
其他: 0
總收入: 35,000

支出:
食: 4,500\t\t信用卡: 0
衣: 0\t\t信貸: 0
住: 12,000\t\t房貸: 0
行: 1,800\t\t車貸: 0
育: 0\t\t親友: 0
樂: 0\t\t當鋪: 0
電信: 899\t\t互助會死會: 0
保險: 0\t\t其他貸款: 0
儲蓄: 5,000
醫療: 500
孝養: 8,000
捐款: 0
稅金: 0
生活支出: 32,699\t\t貸款支出: 0\t\t總支出: 32,699

營業收入:
營業額: 12,850

營業支出:
營業固定支出: 21,500\t\t營業變動支出: 12,200
店租: 15,000\t\t進貨: 11,000
水電: 2,500\t\t原物料: 0
薪資: 4,000\t\t行銷廣告: 800
設備: 0
總營業支出: 33,700

收支總結:
總收入: 47,850
總支出: 66,399
淨收支: -18,549
"""


DEMO_CASH_FLOW_ANALYSIS = """財務分析報告

現金流分析
總收入: $47,850
總支出: $67,199
淨現金流: $-19,349
總帳: $-19,349 (入不敷出)

營業分析
營業收入: $12,850
營業支出: $34,500
營業淨利: $-21,650 (入不敷出)
營業成本: $12,200
毛利: $650
毛利率: 5.06%

生活收支分析
生活收入: $35,000
生活支出: $32,699
生活淨收支: $2,301 (接近打平)

緊急預備金建議
最低建議(3個月): $98,097
理想目標(6個月): $196,194
"""


class TestFormatAmount:
    """Tests for number formatting."""

    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (-0.0, "0"),
        (899, "899"),
        (12000.0, "12,000"),
        (1234.5, "1,234.5"),
        (1234.5678, "1,234.568"),
        (-18549, "-18,549"),
        (1000000, "1,000,000"),
    ])
    def test_format_amount(self, value, expected):
        """Test thousands separators and at most three decimals."""
        assert format_amount(value) == expected

    def test_plain_number(self):
        """Test spreadsheet cell numbers."""
        assert format_plain_number(9600.0) == "9600"
        assert format_plain_number(2.5) == "2.5"
        assert format_plain_number(None) == ""


class TestMonthlyReport:
    """Tests for the 財務月報表 export."""

    def test_demo_golden(self, demo):
        """Test the exact text of the demo report."""
        analysis = analyze_extraction(demo)
        assert format_monthly_report(analysis.report) == DEMO_MONTHLY_REPORT

    def test_no_business_blocks_without_activity(self, make_income, make_expense):
        """Test that a personal-only month omits the business blocks."""
        analysis = analyze([make_income(30000)], [make_expense(1000)])
        text = format_monthly_report(analysis.report)
        assert "營業收入:" not in text
        assert "營業支出:" not in text
        assert text.endswith("收支總結:\n總收入: 30,000\n總支出: 1,000\n淨收支: 29,000\n")

    def test_subsidy_split_shown(self, make_income):
        """Test that the subsidy split is printed beside the income lines."""
        analysis = analyze([make_income(1001, type="政府補助")], [])
        text = format_monthly_report(analysis.report)
        assert "非工資: 0\t\t低收補助: 600" in text
        assert "家人提供: 0\t\t身障補助: 400" in text


class TestCashFlowAnalysis:
    """Tests for the 財務分析報告 export."""

    def test_demo_golden(self, demo):
        """Test the exact text of the demo analysis."""
        analysis = analyze_extraction(demo)
        assert format_cash_flow_analysis(analysis) == DEMO_CASH_FLOW_ANALYSIS

    def test_no_business_section_without_activity(self, make_income, make_expense):
        """Test that the business block is omitted for a personal month."""
        analysis = analyze([make_income(30000)], [make_expense(10000)])
        text = format_cash_flow_analysis(analysis)
        assert "營業分析" not in text
        assert "總帳: $20,000 (收支有餘)" in text


class TestDetailTables:
    """Tests for the TSV detail tables."""

    def test_income_table(self, demo):
        """Test the income table header, rows and total."""
        lines = format_income_table(demo.incomes).split("\n")
        assert lines[0].split("\t")[0] == "日期"
        assert len(lines[0].split("\t")) == 11
        assert lines[1] == (
            "2024-01-15\t晴朗\t80\t生意收入\t商品銷售收入\t咖啡銷售"
            "\t80\t120\t已收款\t9600\t現金收款"
        )
        assert lines[4].split("\t")[1] == ""
        assert lines[-1].split("\t") == ["總計"] + [""] * 8 + ["47850", ""]

    def test_expense_table(self, demo):
        """Test the expense table header, rows and total."""
        lines = format_expense_table(demo.expenses).split("\n")
        assert lines[0] == "日期\t分類\t支出分類\t類別\t支出內容\t單價\t數量\t小計"
        assert lines[1] == "2024-01-01\t生意支出\t固定支出\t租金\t店租\t15000\t1\t15000"
        assert len(lines) == 1 + len(demo.expenses) + 1
        assert lines[-1] == "總計\t\t\t\t\t\t\t67199"

    def test_empty_table(self):
        """Test that an empty table still has a header and total row."""
        lines = format_expense_table([]).split("\n")
        assert len(lines) == 2
        assert lines[-1].endswith("\t0")


class TestOverflowingAmounts:
    """Tests for exports of sums that overflow the float range."""

    def test_format_non_finite(self):
        """Test that inf and nan are printed instead of raising."""
        assert format_amount(float("inf")) == "inf"
        assert format_amount(float("-inf")) == "-inf"
        assert format_amount(float("nan")) == "nan"
        assert format_plain_number(float("inf")) == "inf"

    def test_monthly_report_with_overflowing_subsidy(self, make_income):
        """Test the report export when the subsidy sum overflows."""
        analysis = analyze([make_income(1e308, type="政府補助")] * 2, [])
        text = format_monthly_report(analysis.report)
        assert "補助或津貼: inf" in text
        assert "低收補助: inf" in text

    def test_cash_flow_analysis_with_overflowing_income(self, make_income):
        """Test the analysis export when personal income overflows."""
        analysis = analyze([make_income(1e308, type="利息")] * 2, [])
        text = format_cash_flow_analysis(analysis)
        assert "總收入: $inf" in text
        assert "最低建議(3個月): $0" in text

    def test_income_table_with_overflowing_total(self, make_income):
        """Test the TSV total row when the sum overflows."""
        lines = format_income_table([make_income(1e308)] * 2).split("\n")
        assert lines[-1].split("\t")[9] == "inf"
