"""
Record Models for Pocketbook

These models describe the rows we read from the record store and the
money events the aggregation engine consumes. They are designed to:
1. Enforce type safety at runtime
2. Reject impossible values (negative amounts) at construction
3. Keep date text as fetched, so the engine can skip bad dates
   instead of failing the whole fetch

DESIGN DECISION: Event dates are stored as raw text and parsed by the
engine. A malformed date must exclude one event from a chart, not
make the entire list unloadable.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """Which side of the ledger a money event belongs to."""
    INCOME = "income"
    EXPENSE = "expense"


class DebtType(str, Enum):
    """
    Direction of a debt.

    BORROWED: the user owes someone.
    LENT: someone owes the user.
    """
    BORROWED = "borrowed"
    LENT = "lent"


class DebtStatus(str, Enum):
    """Stored debt status. OVERDUE is also derived from the due date."""
    ACTIVE = "active"
    CLEARED = "cleared"
    OVERDUE = "overdue"


def _date_to_text(value: Any) -> Any:
    """Normalize date/datetime objects to ISO calendar date text."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


# =============================================================================
# ENGINE INPUT
# =============================================================================

class MoneyEvent(BaseModel):
    """
    A single dated, amount-bearing record (income or expense).

    Immutable once built. The engine only reads it.

    `occurred_on` may be None, empty, or malformed text; the engine
    decides what to do with such events. It can be populated by the
    name `date` as well, matching the shape of plain records.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Opaque record identifier"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount"
    )
    occurred_on: Optional[str] = Field(
        default=None,
        alias="date",
        description="Calendar date as ISO-8601 text (raw, unparsed)"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category label; None means uncategorized"
    )
    description: Optional[str] = Field(
        default=None,
        description="Free text (income source or expense description)"
    )
    kind: EntryKind = Field(
        ...,
        description="Income or expense"
    )

    @field_validator('occurred_on', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _date_to_text(v)

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        """Identifiers are opaque; UUIDs and ints become text."""
        if v is None:
            return str(uuid4())
        return str(v)


# =============================================================================
# STORED RECORDS - rows as returned by the record store
# =============================================================================

class IncomeRecord(BaseModel):
    """A row of the incomes table."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str
    source: str = Field(default="", max_length=200)
    amount: Decimal = Field(..., ge=0)
    income_date: Optional[str] = None
    category: Optional[str] = None

    @field_validator('income_date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _date_to_text(v)

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v)

    def to_event(self) -> MoneyEvent:
        return MoneyEvent(
            id=self.id,
            amount=self.amount,
            occurred_on=self.income_date,
            category=self.category,
            description=self.source,
            kind=EntryKind.INCOME,
        )


class ExpenseRecord(BaseModel):
    """A row of the expenses table."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str
    description: str = Field(default="", max_length=500)
    amount: Decimal = Field(..., ge=0)
    category: Optional[str] = None
    expense_date: Optional[str] = None

    @field_validator('expense_date', mode='before')
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _date_to_text(v)

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v)

    def to_event(self) -> MoneyEvent:
        return MoneyEvent(
            id=self.id,
            amount=self.amount,
            occurred_on=self.expense_date,
            category=self.category,
            description=self.description,
            kind=EntryKind.EXPENSE,
        )


class Debt(BaseModel):
    """
    A debt the user owes (borrowed) or is owed (lent).

    Payments accumulate in `paid_amount`. The remaining balance and
    the overdue state are derived, see pocketbook.analytics.progress.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0)
    interest_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Percent per year"
    )
    due_date: date
    start_date: Optional[date] = None
    debt_type: DebtType = DebtType.BORROWED
    status: DebtStatus = DebtStatus.ACTIVE
    notes: Optional[str] = Field(default=None, max_length=1000)
    payment_mode: Optional[str] = None

    @field_validator('paid_amount', mode='before')
    @classmethod
    def null_paid_is_zero(cls, v: Any) -> Any:
        """The store defaults paid_amount to 0 but older rows hold NULL."""
        return Decimal("0") if v is None else v

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v)


class SavingsGoal(BaseModel):
    """A savings target and the amount saved towards it so far."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    target_date: Optional[date] = None

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v)


class Budget(BaseModel):
    """Monthly spending limit for one expense category."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: str
    category: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v)


class FinanceSnapshot(BaseModel):
    """Everything the dashboard needs, fetched in one go."""

    incomes: list[IncomeRecord] = Field(default_factory=list)
    expenses: list[ExpenseRecord] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)

    def income_events(self) -> list[MoneyEvent]:
        return [record.to_event() for record in self.incomes]

    def expense_events(self) -> list[MoneyEvent]:
        return [record.to_event() for record in self.expenses]


# =============================================================================
# FILTER MODELS
# =============================================================================

class DateRange(BaseModel):
    """An inclusive calendar date range."""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class DebtFilter(BaseModel):
    """Filter options for the debts list. "all" disables a filter."""

    search: str = ""
    status: str = Field(
        default="all",
        pattern="^(all|active|cleared|overdue)$"
    )
    debt_type: str = Field(
        default="all",
        pattern="^(all|borrowed|lent)$"
    )
    due_from: Optional[date] = None
    due_to: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return bool(
            self.search
            or self.status != "all"
            or self.debt_type != "all"
            or self.due_from
            or self.due_to
        )
