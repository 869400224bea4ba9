"""Calendar view and period totals across all loans and bills"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from payment_calendar.domain.bill_schedule import generate_bill_schedule
from payment_calendar.domain.loan_schedule import MAX_ITERATIONS, generate_loan_schedule
from payment_calendar.domain.models import (
    BillPayment,
    BillTerms,
    BillType,
    CalendarDay,
    CalendarItem,
    LoanPayment,
    LoanTerms,
    PeriodTotals,
)
from payment_calendar.utils.date_utils import generate_date_range


def collect_items(
    loans: Sequence[LoanTerms],
    loan_payments: Sequence[LoanPayment],
    bills: Sequence[BillTerms],
    bill_payments: Sequence[BillPayment],
    horizon: date,
    max_iterations: int = MAX_ITERATIONS,
) -> List[Tuple[date, CalendarItem]]:
    """
    Run every schedule and flatten the entries into dated calendar items.

    Loan schedules run to payoff regardless of `horizon`; bill schedules stop at it.
    Both are capped at `max_iterations` due dates per loan or bill.
    """
    items: List[Tuple[date, CalendarItem]] = []

    for loan in loans:
        for entry in generate_loan_schedule(loan, loan_payments, max_iterations):
            items.append(
                (
                    entry.date,
                    CalendarItem(
                        kind="loan",
                        item_id=loan.id,
                        name=loan.name,
                        scheduled_amount=entry.scheduled_amount,
                        paid=entry.paid,
                        paid_amount=entry.paid_amount,
                        can_pay=entry.can_pay,
                    ),
                )
            )

    for bill in bills:
        kind = "income" if bill.type == BillType.INCOME else "bill"
        for entry in generate_bill_schedule(bill, bill_payments, horizon, max_iterations):
            items.append(
                (
                    entry.date,
                    CalendarItem(
                        kind=kind,
                        item_id=bill.id,
                        name=bill.name,
                        scheduled_amount=entry.scheduled_amount,
                        paid=entry.paid,
                        paid_amount=entry.paid_amount,
                        can_pay=not entry.paid,
                    ),
                )
            )

    return items


def _fold(items: Iterable[Tuple[date, CalendarItem]], in_period: Callable[[date], bool]) -> PeriodTotals:
    totals = PeriodTotals()
    for day, item in items:
        if not in_period(day):
            continue

        if item.kind == "loan":
            totals.loan_total += item.scheduled_amount
        elif item.kind == "income":
            totals.income_total += item.scheduled_amount
        else:
            totals.bill_total += item.scheduled_amount

        if item.paid:
            totals.paid_total += item.paid_amount if item.paid_amount is not None else item.scheduled_amount
            totals.paid_count += 1

    return totals


def aggregate_range(
    loans: Sequence[LoanTerms],
    loan_payments: Sequence[LoanPayment],
    bills: Sequence[BillTerms],
    bill_payments: Sequence[BillPayment],
    start: date,
    end: date,
    max_iterations: int = MAX_ITERATIONS,
) -> PeriodTotals:
    """Sum scheduled amounts of every entry dated within [start, end]"""
    if end < start:
        return PeriodTotals()
    items = collect_items(loans, loan_payments, bills, bill_payments, horizon=end, max_iterations=max_iterations)
    return _fold(items, lambda day: start <= day <= end)


def aggregate_month(
    loans: Sequence[LoanTerms],
    loan_payments: Sequence[LoanPayment],
    bills: Sequence[BillTerms],
    bill_payments: Sequence[BillPayment],
    month_start: date,
    month_end: date,
    max_iterations: int = MAX_ITERATIONS,
) -> PeriodTotals:
    """Totals for one calendar month, e.g. 2024-03-01 .. 2024-03-31"""
    return aggregate_range(loans, loan_payments, bills, bill_payments, month_start, month_end, max_iterations)


def aggregate_dates(
    loans: Sequence[LoanTerms],
    loan_payments: Sequence[LoanPayment],
    bills: Sequence[BillTerms],
    bill_payments: Sequence[BillPayment],
    dates: Iterable[date],
    max_iterations: int = MAX_ITERATIONS,
) -> PeriodTotals:
    """Totals over an explicit, possibly non-contiguous, set of days"""
    selected = set(dates)
    if not selected:
        return PeriodTotals()
    items = collect_items(
        loans, loan_payments, bills, bill_payments, horizon=max(selected), max_iterations=max_iterations
    )
    return _fold(items, lambda day: day in selected)


def build_calendar(
    loans: Sequence[LoanTerms],
    loan_payments: Sequence[LoanPayment],
    bills: Sequence[BillTerms],
    bill_payments: Sequence[BillPayment],
    start: date,
    end: date,
    max_iterations: int = MAX_ITERATIONS,
) -> List[CalendarDay]:
    """One CalendarDay per date in [start, end], items ordered loans first then bills"""
    if end < start:
        return []

    by_date: Dict[date, List[CalendarItem]] = {}
    items = collect_items(loans, loan_payments, bills, bill_payments, horizon=end, max_iterations=max_iterations)
    for day, item in items:
        if start <= day <= end:
            by_date.setdefault(day, []).append(item)

    return [CalendarDay(date=day, items=by_date.get(day, [])) for day in generate_date_range(start, end)]
