"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from payment_calendar.domain.models import BillFrequency, BillType, LoanFrequency

Money = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


def strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


class LoanRequest(BaseModel):
    """Request body for POST/PUT /v1/loans"""

    name: str = Field(..., description="Display name")
    total_amount: Money
    installment_amount: Money
    frequency: LoanFrequency
    start_date: date

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return strip_name(value)

    @model_validator(mode="after")
    def installment_within_total(self) -> "LoanRequest":
        if self.installment_amount > self.total_amount:
            raise ValueError("Installment amount cannot exceed total amount")
        return self


class LoanResponse(BaseModel):
    id: int
    name: str
    total_amount: float
    installment_amount: float
    frequency: LoanFrequency
    start_date: date
    payoff_date: Optional[date] = None
    total_paid: float = 0.0


class LoanScheduleEntrySchema(BaseModel):
    """Single installment in a projected loan schedule"""

    date: date
    scheduled_amount: float
    paid: bool
    paid_amount: Optional[float] = None
    can_pay: bool


class LoanScheduleResponse(BaseModel):
    """Response for GET /v1/loans/{loan_id}/schedule"""

    loan_id: int
    payoff_date: Optional[date]
    total_paid: float
    entries: List[LoanScheduleEntrySchema]


class PaymentRequest(BaseModel):
    """Request body for recording a loan or bill payment"""

    date: date
    amount: Money


class PaymentResponse(BaseModel):
    item_id: int
    date: date
    amount: float


class BillRequest(BaseModel):
    """Request body for POST/PUT /v1/bills"""

    name: str
    amount: Money
    frequency: BillFrequency
    type: BillType = BillType.EXPENSE
    start_date: date

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return strip_name(value)


class BillResponse(BaseModel):
    id: int
    name: str
    amount: float
    frequency: BillFrequency
    type: BillType
    start_date: date


class BillScheduleEntrySchema(BaseModel):
    date: date
    scheduled_amount: float
    paid: bool
    paid_amount: Optional[float] = None


class BillScheduleResponse(BaseModel):
    """Response for GET /v1/bills/{bill_id}/schedule"""

    bill_id: int
    horizon: date
    entries: List[BillScheduleEntrySchema]


class SavingsRequest(BaseModel):
    name: str
    balance: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return strip_name(value)


class SavingsResponse(BaseModel):
    id: int
    name: str
    balance: float


class SavingsListResponse(BaseModel):
    accounts: List[SavingsResponse]
    total_balance: float


class DatesRequest(BaseModel):
    """Explicit selection of calendar days, e.g. a drag-selected range"""

    dates: List[date] = Field(..., min_length=1)


class PeriodTotalsResponse(BaseModel):
    """Scheduled totals for a month, range or date selection"""

    start: date
    end: date
    loan_total: float
    bill_total: float
    income_total: float
    expense_total: float
    net: float
    paid_total: float
    paid_count: int


class CalendarItemSchema(BaseModel):
    kind: str
    item_id: int
    name: str
    scheduled_amount: float
    paid: bool
    paid_amount: Optional[float] = None
    can_pay: bool


class CalendarDaySchema(BaseModel):
    date: date
    items: List[CalendarItemSchema]


class CalendarResponse(BaseModel):
    """Response for GET /v1/calendar"""

    start: date
    end: date
    days: List[CalendarDaySchema]
