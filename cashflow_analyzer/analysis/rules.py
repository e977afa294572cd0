"""
Classification Rules

Every bucket of the analysis is a substring rule over one or more free-text
fields of a record. The rules are DATA: each one lists the fields and the
keywords it looks for, so the tables below can be enumerated, printed and
tested without running any aggregation.

A rule matches a record when:
- at least one `any_of` test matches, AND
- every `all_of` test matches, AND
- no `none_of` test matches.

A single test matches when the field contains ANY of its keywords.

DESIGN DECISION: Rules are evaluated INDEPENDENTLY. There is no first-match
dispatch, so a record whose text hits the keywords of two buckets is counted
in both. The only buckets that are exclusive are the ones that say so with an
explicit `none_of` (other income, other loan).
"""

from typing import Iterable, Union

from pydantic import BaseModel, ConfigDict

from cashflow_analyzer.models.records import ExpenseRecord, IncomeRecord


Record = Union[IncomeRecord, ExpenseRecord]

# Account markers, matched by containment on `category`
BUSINESS_MARKER = "生意"
PERSONAL_MARKER = "生活"


class KeywordTest(BaseModel):
    """`field` contains any of `keywords`."""
    model_config = ConfigDict(frozen=True)

    field: str
    keywords: tuple[str, ...]

    def test(self, record: Record) -> bool:
        value = getattr(record, self.field, None) or ""
        return any(keyword in value for keyword in self.keywords)


class BucketRule(BaseModel):
    """A named bucket and the keyword tests that select its records."""
    model_config = ConfigDict(frozen=True)

    bucket_id: str
    label: str
    any_of: tuple[KeywordTest, ...]
    all_of: tuple[KeywordTest, ...] = ()
    none_of: tuple[KeywordTest, ...] = ()

    def matches(self, record: Record) -> bool:
        return (
            any(t.test(record) for t in self.any_of)
            and all(t.test(record) for t in self.all_of)
            and not any(t.test(record) for t in self.none_of)
        )

    def total(self, records: Iterable[Record]) -> float:
        """Sum of `subtotal` over matching records, in sequence order."""
        return sum(
            (record.subtotal for record in records if self.matches(record)),
            0.0,
        )

    @property
    def keywords(self) -> tuple[str, ...]:
        """All keywords the rule mentions, in declaration order."""
        return tuple(
            keyword
            for test in self.any_of + self.all_of + self.none_of
            for keyword in test.keywords
        )


def kw(field: str, *keywords: str) -> KeywordTest:
    return KeywordTest(field=field, keywords=keywords)


IS_BUSINESS = kw("category", BUSINESS_MARKER)
IS_PERSONAL = kw("category", PERSONAL_MARKER)


# =============================================================================
# ACCOUNTS
# =============================================================================

BUSINESS_ACCOUNT = BucketRule(
    bucket_id="business",
    label="公帳（營業）",
    any_of=(IS_BUSINESS,),
)
PERSONAL_ACCOUNT = BucketRule(
    bucket_id="personal",
    label="私帳（生活）",
    any_of=(IS_PERSONAL,),
)

# Cost of goods: union of three independent tests, business records only.
# A 固定支出 line whose description mentions 原料 still counts as cost.
BUSINESS_COST = BucketRule(
    bucket_id="business_cost",
    label="營業成本",
    any_of=(
        kw("expense_category", "變動"),
        kw("type", "原料", "包材"),
        kw("description", "原料", "進貨"),
    ),
    all_of=(IS_BUSINESS,),
)


# =============================================================================
# INCOME (matched on `type`)
# =============================================================================

SALARY_KEYWORDS = ("薪資",)
NON_SALARY_KEYWORDS = ("副業", "投資")
FAMILY_SUPPORT_KEYWORDS = ("家人", "贈與")
LOAN_INCOME_KEYWORDS = ("借款",)
SUBSIDY_KEYWORDS = ("補助", "津貼")

INCOME_RULES: tuple[BucketRule, ...] = (
    BucketRule(
        bucket_id="salary",
        label="工資",
        any_of=(kw("type", *SALARY_KEYWORDS),),
    ),
    BucketRule(
        bucket_id="non_salary",
        label="非工資",
        any_of=(kw("type", *NON_SALARY_KEYWORDS),),
    ),
    BucketRule(
        bucket_id="family_support",
        label="家人提供",
        any_of=(kw("type", *FAMILY_SUPPORT_KEYWORDS),),
    ),
    BucketRule(
        bucket_id="loan_income",
        label="借款",
        any_of=(kw("type", *LOAN_INCOME_KEYWORDS),),
    ),
    BucketRule(
        bucket_id="subsidy",
        label="補助或津貼",
        any_of=(kw("type", *SUBSIDY_KEYWORDS),),
    ),
    BucketRule(
        bucket_id="other_income",
        label="其他",
        any_of=(IS_PERSONAL,),
        none_of=(
            kw(
                "type",
                *SALARY_KEYWORDS,
                *NON_SALARY_KEYWORDS,
                *FAMILY_SUPPORT_KEYWORDS,
                *LOAN_INCOME_KEYWORDS,
                *SUBSIDY_KEYWORDS,
            ),
        ),
    ),
)

# Fixed display split of the subsidy bucket. Not derived from the records.
SUBSIDY_SPLIT: tuple[tuple[str, str, float], ...] = (
    ("subsidy_low_income", "低收補助", 0.6),
    ("subsidy_disability", "身障補助", 0.4),
)


# =============================================================================
# LIVING EXPENSE
# =============================================================================

def _living(bucket_id: str, label: str, tag: str) -> BucketRule:
    return BucketRule(
        bucket_id=bucket_id,
        label=label,
        any_of=(kw("expense_category", tag),),
    )


LIVING_EXPENSE_RULES: tuple[BucketRule, ...] = (
    _living("food", "食", "食"),
    _living("clothing", "衣", "衣"),
    _living("housing", "住", "住"),
    _living("transport", "行", "行"),
    _living("education", "育", "育"),
    _living("entertainment", "樂", "樂"),
    _living("telecom", "電信", "電信"),
    _living("insurance", "保險", "保險"),
    _living("savings", "儲蓄", "儲蓄"),
    _living("medical", "醫療", "醫療"),
    _living("family_care", "孝養", "孝養"),
    BucketRule(
        bucket_id="donation",
        label="捐款",
        any_of=(kw("description", "捐款", "奉獻"),),
    ),
    BucketRule(
        bucket_id="tax",
        label="稅金",
        any_of=(kw("description", "稅"),),
    ),
)


# =============================================================================
# LOAN EXPENSE (matched on `description`)
# =============================================================================

SPECIFIC_LOAN_KEYWORDS = ("信貸", "房貸", "車貸")

LOAN_EXPENSE_RULES: tuple[BucketRule, ...] = (
    BucketRule(
        bucket_id="credit_card",
        label="信用卡",
        any_of=(kw("description", "信用卡"),),
    ),
    BucketRule(
        bucket_id="personal_loan",
        label="信貸",
        any_of=(kw("description", "信貸"),),
    ),
    BucketRule(
        bucket_id="mortgage",
        label="房貸",
        any_of=(kw("description", "房貸"),),
    ),
    BucketRule(
        bucket_id="car_loan",
        label="車貸",
        any_of=(kw("description", "車貸"),),
    ),
    BucketRule(
        bucket_id="friend_loan",
        label="親友",
        any_of=(kw("description", "親友"),),
        all_of=(kw("description", "借款"),),
    ),
    BucketRule(
        bucket_id="pawnshop",
        label="當鋪",
        any_of=(kw("description", "當鋪"),),
    ),
    BucketRule(
        bucket_id="rotating_credit",
        label="互助會死會",
        any_of=(kw("description", "互助會", "標會"),),
    ),
    BucketRule(
        bucket_id="other_loan",
        label="其他貸款",
        any_of=(kw("description", "貸款"),),
        none_of=(kw("description", *SPECIFIC_LOAN_KEYWORDS),),
    ),
)


# =============================================================================
# BUSINESS
# =============================================================================

BUSINESS_REVENUE = BucketRule(
    bucket_id="business_revenue",
    label="營業額",
    any_of=(IS_BUSINESS,),
)

BUSINESS_FIXED = BucketRule(
    bucket_id="business_fixed",
    label="營業固定支出",
    any_of=(kw("expense_category", "固定"),),
    all_of=(IS_BUSINESS,),
)
BUSINESS_VARIABLE = BucketRule(
    bucket_id="business_variable",
    label="營業變動支出",
    any_of=(kw("expense_category", "變動"),),
    all_of=(IS_BUSINESS,),
)

BUSINESS_EXPENSE_RULES: tuple[BucketRule, ...] = (
    BUSINESS_FIXED,
    BUSINESS_VARIABLE,
    BucketRule(
        bucket_id="rent",
        label="店租",
        any_of=(kw("description", "租"),),
        all_of=(IS_BUSINESS,),
    ),
    BucketRule(
        bucket_id="utilities",
        label="水電",
        any_of=(kw("description", "水電", "瓦斯"),),
        all_of=(IS_BUSINESS,),
    ),
    BucketRule(
        bucket_id="purchasing",
        label="進貨",
        any_of=(kw("description", "進貨", "原料"),),
    ),
    BucketRule(
        bucket_id="raw_materials",
        label="原物料",
        any_of=(kw("description", "原物料"),),
    ),
    BucketRule(
        bucket_id="payroll",
        label="薪資",
        any_of=(kw("description", "薪資"),),
        all_of=(IS_BUSINESS,),
    ),
    BucketRule(
        bucket_id="marketing",
        label="行銷廣告",
        any_of=(kw("description", "廣告", "行銷"),),
    ),
    BucketRule(
        bucket_id="equipment",
        label="設備",
        any_of=(kw("description", "設備", "器材"),),
    ),
)
