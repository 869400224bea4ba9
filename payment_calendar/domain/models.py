"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class LoanFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class BillFrequency(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BillType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


@dataclass(frozen=True)
class LoanTerms:
    """Amortizing debt paid down in fixed installments"""

    id: int
    name: str
    total_amount: Decimal
    installment_amount: Decimal
    frequency: LoanFrequency
    start_date: date


@dataclass(frozen=True)
class LoanPayment:
    """Actual payment recorded against a loan on a due date"""

    loan_id: int
    date: date
    amount: Decimal


@dataclass(frozen=True)
class BillTerms:
    """Recurring or one-time expense or income"""

    id: int
    name: str
    amount: Decimal
    frequency: BillFrequency
    type: BillType
    start_date: date


@dataclass(frozen=True)
class BillPayment:
    """Actual payment recorded against a bill on a due date"""

    bill_id: int
    date: date
    amount: Decimal


@dataclass(frozen=True)
class SavingsAccount:
    id: int
    name: str
    balance: Decimal


@dataclass
class LoanScheduleEntry:
    """Single installment in a projected loan schedule"""

    date: date
    scheduled_amount: Decimal
    paid: bool
    paid_amount: Optional[Decimal]
    can_pay: bool = False


@dataclass
class BillScheduleEntry:
    """Single occurrence in a projected bill schedule (always payable when unpaid)"""

    date: date
    scheduled_amount: Decimal
    paid: bool
    paid_amount: Optional[Decimal]


@dataclass
class PeriodTotals:
    """Scheduled totals over a date range, split by category"""

    loan_total: Decimal = Decimal("0.00")
    bill_total: Decimal = Decimal("0.00")
    income_total: Decimal = Decimal("0.00")
    paid_total: Decimal = Decimal("0.00")
    paid_count: int = 0

    @property
    def expense_total(self) -> Decimal:
        return self.loan_total + self.bill_total

    @property
    def net(self) -> Decimal:
        return self.income_total - self.expense_total


@dataclass
class CalendarItem:
    """One loan installment or bill occurrence shown on a calendar day"""

    kind: str  # "loan", "bill" or "income"
    item_id: int
    name: str
    scheduled_amount: Decimal
    paid: bool
    paid_amount: Optional[Decimal]
    can_pay: bool


@dataclass
class CalendarDay:
    date: date
    items: List[CalendarItem] = field(default_factory=list)
