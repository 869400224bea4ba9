"""Unit tests for bill and income schedule projection"""

from datetime import date
from decimal import Decimal
from payment_calendar.domain.bill_schedule import generate_bill_schedule
from payment_calendar.domain.models import BillPayment


def test_monthly_bill_stops_at_horizon(bill_factory):
    schedule = generate_bill_schedule(bill_factory(), [], horizon=date(2024, 3, 31))

    assert [e.date for e in schedule] == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]
    assert all(e.scheduled_amount == Decimal("150.00") for e in schedule)


def test_horizon_is_inclusive(bill_factory):
    schedule = generate_bill_schedule(bill_factory(), [], horizon=date(2024, 3, 15))
    assert schedule[-1].date == date(2024, 3, 15)


def test_horizon_before_start_yields_nothing(bill_factory):
    assert generate_bill_schedule(bill_factory(), [], horizon=date(2023, 12, 31)) == []


def test_one_time_bill_ignores_horizon(bill_factory):
    bill = bill_factory(frequency="once", start=date(2024, 6, 1))

    for horizon in (date(2024, 1, 1), date(2030, 1, 1)):
        schedule = generate_bill_schedule(bill, [], horizon=horizon)
        assert len(schedule) == 1
        assert schedule[0].date == date(2024, 6, 1)


def test_biweekly_and_daily_steps(bill_factory):
    biweekly = generate_bill_schedule(
        bill_factory(frequency="biweekly", start=date(2024, 1, 1)), [], horizon=date(2024, 2, 15)
    )
    daily = generate_bill_schedule(
        bill_factory(frequency="daily", start=date(2024, 1, 1)), [], horizon=date(2024, 1, 7)
    )

    assert [e.date for e in biweekly] == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29), date(2024, 2, 12)]
    assert len(daily) == 7


def test_yearly_leap_day_bill(bill_factory):
    schedule = generate_bill_schedule(
        bill_factory(frequency="yearly", start=date(2024, 2, 29)), [], horizon=date(2028, 12, 31)
    )

    assert [e.date for e in schedule] == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 29),
    ]


def test_later_entry_can_be_paid_first(bill_factory):
    """Bills have no payoff order: paying March before January is fine"""
    payments = [BillPayment(bill_id=1, date=date(2024, 3, 15), amount=Decimal("140"))]
    schedule = generate_bill_schedule(bill_factory(), payments, horizon=date(2024, 3, 31))

    assert [e.paid for e in schedule] == [False, False, True]
    assert schedule[2].paid_amount == Decimal("140.00")
    assert schedule[2].scheduled_amount == Decimal("150.00")


def test_payment_lookup_scoped_to_bill(bill_factory):
    payments = [
        BillPayment(bill_id=2, date=date(2024, 1, 15), amount=Decimal("150")),
        BillPayment(bill_id=1, date=date(2024, 2, 15), amount=Decimal("75")),
        BillPayment(bill_id=1, date=date(2024, 2, 15), amount=Decimal("75")),
    ]
    schedule = generate_bill_schedule(bill_factory(), payments, horizon=date(2024, 2, 29))

    assert schedule[0].paid is False
    assert schedule[1].paid_amount == Decimal("150.00")


def test_iteration_cap(bill_factory):
    schedule = generate_bill_schedule(
        bill_factory(frequency="daily", start=date(2000, 1, 1)), [], horizon=date(2100, 1, 1), max_iterations=100
    )
    assert len(schedule) == 100


def test_bill_schedule_is_idempotent(bill_factory):
    bill = bill_factory(frequency="weekly")
    payments = [BillPayment(bill_id=1, date=date(2024, 1, 22), amount=Decimal("150"))]
    horizon = date(2024, 6, 30)

    assert generate_bill_schedule(bill, payments, horizon) == generate_bill_schedule(bill, payments, horizon)
