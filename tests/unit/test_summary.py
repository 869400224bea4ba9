"""Unit tests for period totals and the calendar view"""

import pytest
from datetime import date
from decimal import Decimal
from payment_calendar.domain.models import BillPayment, LoanPayment
from payment_calendar.domain.summary import aggregate_dates, aggregate_month, aggregate_range, build_calendar


@pytest.fixture
def portfolio(loan_factory, bill_factory):
    """One loan (300/month from Jan 10), one expense (150/month from Jan 5), one income (2000/month from Jan 25)"""
    loans = [loan_factory(total="3000", installment="300", start=date(2024, 1, 10))]
    bills = [
        bill_factory(amount="150", start=date(2024, 1, 5), bill_id=1, name="Internet"),
        bill_factory(amount="2000", start=date(2024, 1, 25), bill_type="income", bill_id=2, name="Salary"),
    ]
    return loans, bills


def test_aggregate_month(portfolio):
    loans, bills = portfolio
    totals = aggregate_month(loans, [], bills, [], date(2024, 3, 1), date(2024, 3, 31))

    assert totals.loan_total == Decimal("300.00")
    assert totals.bill_total == Decimal("150.00")
    assert totals.income_total == Decimal("2000.00")
    assert totals.expense_total == Decimal("450.00")
    assert totals.net == Decimal("1550.00")


def test_aggregate_range_spans_months(portfolio):
    loans, bills = portfolio
    totals = aggregate_range(loans, [], bills, [], date(2024, 1, 1), date(2024, 3, 31))

    assert totals.loan_total == Decimal("900.00")
    assert totals.bill_total == Decimal("450.00")
    assert totals.income_total == Decimal("6000.00")


def test_aggregate_range_reversed_is_empty(portfolio):
    loans, bills = portfolio
    totals = aggregate_range(loans, [], bills, [], date(2024, 3, 31), date(2024, 3, 1))

    assert totals.loan_total == 0
    assert totals.net == 0


def test_aggregate_dates_only_counts_selected_days(portfolio):
    loans, bills = portfolio
    totals = aggregate_dates(loans, [], bills, [], [date(2024, 3, 5), date(2024, 3, 25)])

    assert totals.loan_total == Decimal("0")
    assert totals.bill_total == Decimal("150.00")
    assert totals.income_total == Decimal("2000.00")


def test_aggregate_dates_empty_selection(portfolio):
    loans, bills = portfolio
    totals = aggregate_dates(loans, [], bills, [], [])
    assert totals.paid_count == 0
    assert totals.net == 0


def test_paid_totals_use_recorded_amounts(portfolio):
    loans, bills = portfolio
    loan_payments = [
        LoanPayment(loan_id=1, date=date(2024, 1, 10), amount=Decimal("300")),
        LoanPayment(loan_id=1, date=date(2024, 2, 10), amount=Decimal("300")),
        LoanPayment(loan_id=1, date=date(2024, 3, 10), amount=Decimal("320")),
    ]
    bill_payments = [BillPayment(bill_id=1, date=date(2024, 3, 5), amount=Decimal("149.99"))]

    totals = aggregate_month(loans, loan_payments, bills, bill_payments, date(2024, 3, 1), date(2024, 3, 31))

    assert totals.paid_count == 2
    assert totals.paid_total == Decimal("469.99")
    # Scheduled totals are unaffected by what was actually paid
    assert totals.loan_total == Decimal("300.00")


def test_one_time_bill_counted_in_its_month(bill_factory):
    bills = [bill_factory(amount="80", frequency="once", start=date(2024, 4, 20))]

    assert aggregate_month([], [], bills, [], date(2024, 4, 1), date(2024, 4, 30)).bill_total == Decimal("80.00")
    assert aggregate_month([], [], bills, [], date(2024, 5, 1), date(2024, 5, 31)).bill_total == Decimal("0")


def test_build_calendar_groups_items_by_day(portfolio):
    loans, bills = portfolio
    days = build_calendar(loans, [], bills, [], date(2024, 1, 9), date(2024, 1, 11))

    assert [d.date for d in days] == [date(2024, 1, 9), date(2024, 1, 10), date(2024, 1, 11)]
    assert days[0].items == []
    assert len(days[1].items) == 1

    item = days[1].items[0]
    assert item.kind == "loan"
    assert item.name == "Car loan"
    assert item.can_pay is True


def test_build_calendar_sequential_and_independent_flags(portfolio):
    """A later loan installment is blocked while bill and income items stay payable"""
    loans, bills = portfolio
    days = build_calendar(loans, [], bills, [], date(2024, 3, 1), date(2024, 3, 31))
    items = {item.kind: item for day in days for item in day.items}

    assert items["loan"].can_pay is False
    assert items["bill"].can_pay is True
    assert items["income"].can_pay is True
    assert items["income"].name == "Salary"


def test_build_calendar_respects_iteration_cap(loan_factory):
    """A zero installment never pays down, so the cap bounds how many installments are placed"""
    loans = [loan_factory(installment="0", frequency="daily")]
    days = build_calendar(loans, [], [], [], date(2024, 1, 1), date(2024, 3, 1), max_iterations=20)

    loan_items = [item for day in days for item in day.items if item.kind == "loan"]
    assert len(days) == 61
    assert len(loan_items) == 20
    assert days[19].items and days[20].items == []


def test_aggregates_respect_iteration_cap(loan_factory, bill_factory):
    loans = [loan_factory(installment="0", frequency="daily")]
    bills = [bill_factory(amount="10", frequency="daily", start=date(2024, 1, 1))]

    totals = aggregate_range(loans, [], bills, [], date(2024, 1, 1), date(2024, 3, 1), max_iterations=5)
    assert totals.bill_total == Decimal("50.00")

    selected = aggregate_dates(loans, [], bills, [], [date(2024, 1, 3), date(2024, 1, 10)], max_iterations=5)
    assert selected.bill_total == Decimal("10.00")

    month = aggregate_month(loans, [], bills, [], date(2024, 1, 1), date(2024, 1, 31), max_iterations=5)
    assert month.bill_total == Decimal("50.00")
