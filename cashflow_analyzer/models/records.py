"""
Transaction Record Models

These models define the fixed schema the extractor must satisfy.
They are designed to:
1. Accept the camelCase JSON the language model returns
2. Be immutable once created (an analysis works on a snapshot)
3. Keep free-text fields as free text

DESIGN DECISION: `category`, `type` and `expense_category` stay plain
strings rather than enums. The aggregation engine classifies records by
substring containment on these fields, so unexpected values must survive
validation and simply fall out of the buckets they do not match.

DESIGN DECISION: `subtotal` is stored independently of unit_price × quantity
and is trusted as-is. Nothing here recomputes it.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    str_strip_whitespace=True,
    extra="ignore",
    allow_inf_nan=False,
)


class IncomeRecord(BaseModel):
    """
    A single income line.

    category is expected to be "生意收入" (business) or "生活收入"
    (personal) but any text is accepted.
    """
    model_config = _RECORD_CONFIG

    date: str = Field(..., description="Calendar date as written by the extractor")
    weather: Optional[str] = Field(default=None, description="Weather note (shops)")
    customer_count: Optional[int] = Field(
        default=None,
        ge=0,
        description="Number of customers for the day"
    )
    category: str = Field(..., description="生意收入 / 生活收入")
    type: str = Field(..., description="Sub-classification, e.g. 薪資收入")
    description: str = Field(..., description="Free-text description")
    unit_price: float = Field(..., description="Unit price")
    quantity: float = Field(..., description="Quantity")
    payment_status: str = Field(..., description="e.g. 已收款")
    subtotal: float = Field(..., description="Line total, trusted as-is")
    customer_note: Optional[str] = Field(default=None, description="Customer note")


class ExpenseRecord(BaseModel):
    """
    A single expense line.

    category is expected to be "生意支出" (business) or "生活支出"
    (personal). expense_category holds the sub-bucket: 固定支出 / 變動支出
    for business lines, a living tag such as 食 or 住 for personal ones.
    """
    model_config = _RECORD_CONFIG

    date: str = Field(..., description="Calendar date as written by the extractor")
    category: str = Field(..., description="生意支出 / 生活支出")
    expense_category: str = Field(..., description="固定支出, 變動支出, 食, 住, ...")
    type: str = Field(..., description="Sub-classification, e.g. 原料")
    description: str = Field(..., description="Free-text description")
    unit_price: float = Field(..., description="Unit price")
    quantity: float = Field(..., description="Quantity")
    subtotal: float = Field(..., description="Line total, trusted as-is")


class ExtractionResult(BaseModel):
    """
    Output of the extractor: one immutable snapshot per analysis run.

    Record order is preserved; sums are always taken in this order so the
    floating point results are reproducible.
    """
    model_config = ConfigDict(frozen=True)

    incomes: tuple[IncomeRecord, ...] = Field(default_factory=tuple)
    expenses: tuple[ExpenseRecord, ...] = Field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.incomes and not self.expenses

    def to_wire(self) -> dict:
        """Dump back to the camelCase JSON shape the extractor produced."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
