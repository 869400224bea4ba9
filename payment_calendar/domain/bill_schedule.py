"""Bill and income schedule projection up to a horizon"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List

from payment_calendar.domain.models import BillFrequency, BillPayment, BillScheduleEntry, BillTerms
from payment_calendar.utils.date_utils import date_at_offset
from payment_calendar.utils.money import round_money

MAX_ITERATIONS = 10_000


def _payments_by_date(bill_id: int, payments: Iterable[BillPayment]) -> Dict[date, Decimal]:
    paid_by_date: Dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
    for payment in payments:
        if payment.bill_id == bill_id:
            paid_by_date[payment.date] += payment.amount
    return {day: round_money(amount) for day, amount in paid_by_date.items()}


def generate_bill_schedule(
    bill: BillTerms,
    payments: Iterable[BillPayment],
    horizon: date,
    max_iterations: int = MAX_ITERATIONS,
) -> List[BillScheduleEntry]:
    """
    Generate bill occurrences from the start date through `horizon` (inclusive).

    Bills do not amortize: every occurrence is scheduled for the full amount and
    each one can be paid independently of the others. A one-time bill yields a
    single entry on its start date whatever the horizon.
    """
    paid_by_date = _payments_by_date(bill.id, payments)
    amount = round_money(bill.amount)

    def entry_for(due_date: date) -> BillScheduleEntry:
        paid_amount = paid_by_date.get(due_date)
        return BillScheduleEntry(
            date=due_date,
            scheduled_amount=amount,
            paid=paid_amount is not None,
            paid_amount=paid_amount,
        )

    if bill.frequency == BillFrequency.ONCE:
        return [entry_for(bill.start_date)]

    schedule: List[BillScheduleEntry] = []
    for offset in range(max_iterations):
        due_date = date_at_offset(bill.start_date, offset, bill.frequency)
        if due_date > horizon:
            break
        schedule.append(entry_for(due_date))

    return schedule
