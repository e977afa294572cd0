"""Tests for the keyword bucket rules."""

from cashflow_analyzer.analysis.rules import (
    BUSINESS_COST,
    BUSINESS_EXPENSE_RULES,
    INCOME_RULES,
    LIVING_EXPENSE_RULES,
    LOAN_EXPENSE_RULES,
    BucketRule,
    kw,
)


def rule(rules, bucket_id) -> BucketRule:
    return next(r for r in rules if r.bucket_id == bucket_id)


class TestBucketRule:
    """Tests for the rule matching semantics."""

    def test_any_of_matches_on_substring(self, make_expense):
        """Test that a keyword anywhere in the field is a match."""
        r = BucketRule(bucket_id="x", label="x", any_of=(kw("description", "房貸"),))
        assert r.matches(make_expense(1, description="本月房貸繳款"))
        assert not r.matches(make_expense(1, description="房租"))

    def test_missing_field_never_matches(self, make_income):
        """Test that a field the record does not have is treated as empty."""
        r = BucketRule(bucket_id="x", label="x", any_of=(kw("expense_category", "食"),))
        assert not r.matches(make_income(1))

    def test_total_sums_matching_subtotals(self, make_expense):
        """Test that total only adds matching records."""
        r = rule(LIVING_EXPENSE_RULES, "food")
        records = [
            make_expense(100, expense_category="食"),
            make_expense(50, expense_category="住"),
            make_expense(25.5, expense_category="食"),
        ]
        assert r.total(records) == 125.5

    def test_total_of_nothing_is_zero(self):
        """Test that an empty sequence sums to 0."""
        assert rule(LIVING_EXPENSE_RULES, "food").total([]) == 0.0

    def test_keywords_are_enumerable(self):
        """Test that a rule lists the keywords it looks for."""
        assert rule(LOAN_EXPENSE_RULES, "rotating_credit").keywords == ("互助會", "標會")
        assert rule(LOAN_EXPENSE_RULES, "friend_loan").keywords == ("親友", "借款")


class TestRuleTables:
    """Tests for the bucket tables themselves."""

    def test_income_buckets_in_display_order(self):
        """Test the income bucket order and labels."""
        assert [r.label for r in INCOME_RULES] == [
            "工資", "非工資", "家人提供", "借款", "補助或津貼", "其他",
        ]

    def test_living_buckets_in_display_order(self):
        """Test the living expense bucket order."""
        assert [r.label for r in LIVING_EXPENSE_RULES] == [
            "食", "衣", "住", "行", "育", "樂", "電信", "保險",
            "儲蓄", "醫療", "孝養", "捐款", "稅金",
        ]

    def test_loan_buckets_in_display_order(self):
        """Test the loan bucket order."""
        assert [r.label for r in LOAN_EXPENSE_RULES] == [
            "信用卡", "信貸", "房貸", "車貸", "親友", "當鋪", "互助會死會", "其他貸款",
        ]

    def test_bucket_ids_are_unique(self):
        """Test that no table reuses a bucket id."""
        for table in (INCOME_RULES, LIVING_EXPENSE_RULES, LOAN_EXPENSE_RULES,
                      BUSINESS_EXPENSE_RULES):
            ids = [r.bucket_id for r in table]
            assert len(ids) == len(set(ids))


class TestIncomeRules:
    """Tests for income classification by type."""

    def test_salary(self, make_income):
        """Test that 薪資 in type is salary."""
        assert rule(INCOME_RULES, "salary").matches(make_income(1, type="薪資收入"))

    def test_non_salary_keywords(self, make_income):
        """Test that side jobs and investments are non-salary."""
        r = rule(INCOME_RULES, "non_salary")
        assert r.matches(make_income(1, type="副業收入"))
        assert r.matches(make_income(1, type="定期投資收益"))

    def test_family_support_keywords(self, make_income):
        """Test that family and gift income is family support."""
        r = rule(INCOME_RULES, "family_support")
        assert r.matches(make_income(1, type="家人給的"))
        assert r.matches(make_income(1, type="親友贈與"))

    def test_subsidy_keywords(self, make_income):
        """Test that subsidies and allowances match."""
        r = rule(INCOME_RULES, "subsidy")
        assert r.matches(make_income(1, type="政府補助"))
        assert r.matches(make_income(1, type="交通津貼"))

    def test_other_income_requires_personal_category(self, make_income):
        """Test that other income only takes personal records."""
        r = rule(INCOME_RULES, "other_income")
        assert r.matches(make_income(1, category="生活收入", type="利息收入"))
        assert not r.matches(make_income(1, category="生意收入", type="利息收入"))

    def test_other_income_excludes_named_buckets(self, make_income):
        """Test that other income never double counts a named bucket."""
        r = rule(INCOME_RULES, "other_income")
        for type_ in ("薪資收入", "副業", "投資", "家人", "贈與", "借款", "補助", "津貼"):
            assert not r.matches(make_income(1, category="生活收入", type=type_))


class TestLivingExpenseRules:
    """Tests for living expense classification."""

    def test_donation_on_description(self, make_expense):
        """Test that donations are found in the description."""
        r = rule(LIVING_EXPENSE_RULES, "donation")
        assert r.matches(make_expense(1, description="教會奉獻"))
        assert r.matches(make_expense(1, description="慈善捐款"))

    def test_tax_on_description(self, make_expense):
        """Test that taxes are found in the description."""
        assert rule(LIVING_EXPENSE_RULES, "tax").matches(
            make_expense(1, description="房屋稅")
        )

    def test_record_can_hit_two_buckets(self, make_expense):
        """Test that buckets are independent: one record, two buckets."""
        expense = make_expense(1000, expense_category="住", description="房屋稅")
        matched = [r.bucket_id for r in LIVING_EXPENSE_RULES if r.matches(expense)]
        assert matched == ["housing", "tax"]


class TestLoanRules:
    """Tests for loan expense classification."""

    def test_friend_loan_needs_both_keywords(self, make_expense):
        """Test that 親友 alone is not a loan."""
        r = rule(LOAN_EXPENSE_RULES, "friend_loan")
        assert r.matches(make_expense(1, description="還親友借款"))
        assert not r.matches(make_expense(1, description="親友聚餐"))
        assert not r.matches(make_expense(1, description="銀行借款"))

    def test_rotating_credit_keywords(self, make_expense):
        """Test both rotating credit keywords."""
        r = rule(LOAN_EXPENSE_RULES, "rotating_credit")
        assert r.matches(make_expense(1, description="互助會會錢"))
        assert r.matches(make_expense(1, description="標會"))

    def test_other_loan_excludes_specific_loans(self, make_expense):
        """Test that other loan skips personal, mortgage and car loans."""
        r = rule(LOAN_EXPENSE_RULES, "other_loan")
        assert r.matches(make_expense(1, description="學生貸款"))
        assert not r.matches(make_expense(1, description="信貸貸款"))
        assert not r.matches(make_expense(1, description="房貸貸款"))
        assert not r.matches(make_expense(1, description="車貸貸款"))

    def test_mortgage_not_double_counted_as_other(self, make_expense):
        """Test that 房貸 lands in mortgage only."""
        expense = make_expense(20000, description="房貸貸款")
        matched = [r.bucket_id for r in LOAN_EXPENSE_RULES if r.matches(expense)]
        assert matched == ["mortgage"]


class TestBusinessRules:
    """Tests for the business cost and expense buckets."""

    def test_cost_by_expense_category(self, make_expense):
        """Test that variable business expenses are cost."""
        assert BUSINESS_COST.matches(
            make_expense(1, category="生意支出", expense_category="變動支出")
        )

    def test_cost_by_type(self, make_expense):
        """Test that packaging is cost even when booked as fixed."""
        assert BUSINESS_COST.matches(
            make_expense(1, category="生意支出", expense_category="固定支出", type="包材")
        )

    def test_cost_by_description(self, make_expense):
        """Test that a purchase of stock is cost."""
        assert BUSINESS_COST.matches(
            make_expense(1, category="生意支出", expense_category="固定支出",
                         description="麵粉進貨")
        )

    def test_cost_requires_business_category(self, make_expense):
        """Test that personal spending is never business cost."""
        assert not BUSINESS_COST.matches(
            make_expense(1, category="生活支出", expense_category="變動支出", type="原料")
        )

    def test_fixed_rent_is_not_cost(self, make_expense):
        """Test that shop rent is not cost of goods."""
        assert not BUSINESS_COST.matches(
            make_expense(1, category="生意支出", expense_category="固定支出",
                         type="租金", description="店租")
        )

    def test_rent_requires_business_category(self, make_expense):
        """Test that home rent is not shop rent."""
        r = rule(BUSINESS_EXPENSE_RULES, "rent")
        assert r.matches(make_expense(1, category="生意支出", description="店租"))
        assert not r.matches(make_expense(1, category="生活支出", description="房租"))

    def test_purchasing_ignores_category(self, make_expense):
        """Test that purchasing matches on description alone."""
        r = rule(BUSINESS_EXPENSE_RULES, "purchasing")
        assert r.matches(make_expense(1, category="生活支出", description="原料"))
