"""Loan schedule projection with sequential payoff"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from payment_calendar.domain.exceptions import PaymentOrderError
from payment_calendar.domain.models import LoanPayment, LoanScheduleEntry, LoanTerms
from payment_calendar.utils.date_utils import date_at_offset
from payment_calendar.utils.money import round_money

MAX_ITERATIONS = 10_000
BALANCE_EPSILON = Decimal("0.005")


def _payments_by_date(loan_id: int, payments: Iterable[LoanPayment]) -> Dict[date, Decimal]:
    """Sum recorded amounts per date; upsert should keep one row per date but duplicates are tolerated"""
    paid_by_date: Dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
    for payment in payments:
        if payment.loan_id == loan_id:
            paid_by_date[payment.date] += payment.amount
    return {day: round_money(amount) for day, amount in paid_by_date.items()}


def generate_loan_schedule(
    loan: LoanTerms,
    payments: Iterable[LoanPayment],
    max_iterations: int = MAX_ITERATIONS,
) -> List[LoanScheduleEntry]:
    """
    Project the installment schedule of a loan, accounting for actual payments.

    Walks forward from the start date by the loan frequency. On each due date:
    - recorded payment: entry is paid and the actual amount reduces the balance,
      so over/under-payment shortens or extends the remaining schedule
    - no payment: min(installment, balance) is scheduled and deducted for projection

    Stops when the balance reaches zero or after `max_iterations` due dates,
    which bounds malformed terms such as a non-positive installment.

    Only the earliest unpaid entry is payable (`can_pay`). A linear scan is used
    because undoing a payment can leave gaps (paid, unpaid, paid).
    """
    paid_by_date = _payments_by_date(loan.id, payments)

    balance = round_money(loan.total_amount)
    schedule: List[LoanScheduleEntry] = []

    for offset in range(max_iterations):
        if balance <= BALANCE_EPSILON:
            break

        due_date = date_at_offset(loan.start_date, offset, loan.frequency)
        paid_amount = paid_by_date.get(due_date)
        scheduled_amount = round_money(min(loan.installment_amount, balance))

        schedule.append(
            LoanScheduleEntry(
                date=due_date,
                scheduled_amount=scheduled_amount,
                paid=paid_amount is not None,
                paid_amount=paid_amount,
            )
        )

        deduction = paid_amount if paid_amount is not None else scheduled_amount
        balance = round_money(balance - deduction)

    for entry in schedule:
        if not entry.paid:
            entry.can_pay = True
            break

    return schedule


def get_payoff_date(
    loan: LoanTerms,
    payments: Iterable[LoanPayment],
    max_iterations: int = MAX_ITERATIONS,
) -> Optional[date]:
    """Projected payoff date: the last due date of the schedule"""
    schedule = generate_loan_schedule(loan, payments, max_iterations)
    if not schedule:
        return None
    return schedule[-1].date


def get_total_paid(loan_id: int, payments: Iterable[LoanPayment]) -> Decimal:
    """Total of all recorded payments for a loan"""
    return sum(
        (p.amount for p in payments if p.loan_id == loan_id),
        Decimal("0.00"),
    )


def next_payable_entry(schedule: List[LoanScheduleEntry]) -> Optional[LoanScheduleEntry]:
    return next((entry for entry in schedule if entry.can_pay), None)


def ensure_payable(schedule: List[LoanScheduleEntry], payment_date: date) -> None:
    """
    Reject a payment that would skip an earlier unpaid installment.

    Overwriting an installment that is already paid is always allowed.
    """
    for entry in schedule:
        if entry.date == payment_date and (entry.paid or entry.can_pay):
            return

    payable = next_payable_entry(schedule)
    if payable is None:
        raise PaymentOrderError("Loan is fully paid")
    raise PaymentOrderError(
        f"Installment on {payment_date.isoformat()} is not payable; "
        f"next payable installment is {payable.date.isoformat()}"
    )
