"""Month, range and date-selection totals plus the per-day calendar view"""

from datetime import date
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from payment_calendar.api.dependencies import get_owner_id
from payment_calendar.api.v1.schemas import (
    CalendarDaySchema,
    CalendarItemSchema,
    CalendarResponse,
    DatesRequest,
    PeriodTotalsResponse,
)
from payment_calendar.config import settings
from payment_calendar.domain.models import BillPayment, BillTerms, LoanPayment, LoanTerms, PeriodTotals
from payment_calendar.domain.summary import aggregate_dates, aggregate_month, aggregate_range, build_calendar
from payment_calendar.infrastructure.database.repositories import (
    BillPaymentRepository,
    BillRepository,
    LoanPaymentRepository,
    LoanRepository,
)
from payment_calendar.infrastructure.database.session import get_db
from payment_calendar.infrastructure.observability.metrics import schedule_generation_histogram
from payment_calendar.utils.date_utils import month_bounds

router = APIRouter()


OwnerData = Tuple[List[LoanTerms], List[LoanPayment], List[BillTerms], List[BillPayment]]


def _load_owner_data(db: Session, owner_id: str) -> OwnerData:
    """Load every loan, bill and recorded payment for the owner in one pass"""
    return (
        LoanRepository(db).list_loans(owner_id),
        LoanPaymentRepository(db).list_for_owner(owner_id),
        BillRepository(db).list_bills(owner_id),
        BillPaymentRepository(db).list_for_owner(owner_id),
    )


def _validate_range(start: date, end: date) -> None:
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")


def _totals_response(start: date, end: date, totals: PeriodTotals) -> PeriodTotalsResponse:
    return PeriodTotalsResponse(
        start=start,
        end=end,
        loan_total=float(totals.loan_total),
        bill_total=float(totals.bill_total),
        income_total=float(totals.income_total),
        expense_total=float(totals.expense_total),
        net=float(totals.net),
        paid_total=float(totals.paid_total),
        paid_count=totals.paid_count,
    )


@router.get("/summary/month", response_model=PeriodTotalsResponse)
def get_month_summary(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Scheduled loan, bill and income totals for one calendar month"""
    month_start, month_end = month_bounds(year, month)
    with schedule_generation_histogram.labels(view="summary").time():
        totals = aggregate_month(
            *_load_owner_data(db, owner_id), month_start, month_end, settings.max_schedule_iterations
        )
    return _totals_response(month_start, month_end, totals)


@router.get("/summary/range", response_model=PeriodTotalsResponse)
def get_range_summary(
    start: date = Query(...),
    end: date = Query(...),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    _validate_range(start, end)
    with schedule_generation_histogram.labels(view="summary").time():
        totals = aggregate_range(*_load_owner_data(db, owner_id), start, end, settings.max_schedule_iterations)
    return _totals_response(start, end, totals)


@router.post("/summary/dates", response_model=PeriodTotalsResponse)
def get_dates_summary(
    body: DatesRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Totals over an explicit selection of days"""
    with schedule_generation_histogram.labels(view="summary").time():
        totals = aggregate_dates(*_load_owner_data(db, owner_id), body.dates, settings.max_schedule_iterations)
    return _totals_response(min(body.dates), max(body.dates), totals)


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    start: date = Query(...),
    end: date = Query(...),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Loan installments and bill occurrences grouped by day.

    Loan items carry the sequential-payoff can_pay flag; bill and income items
    are payable whenever they are unpaid.
    """
    _validate_range(start, end)
    if (end - start).days + 1 > settings.max_calendar_days:
        raise HTTPException(status_code=400, detail=f"Calendar range is limited to {settings.max_calendar_days} days")

    with schedule_generation_histogram.labels(view="calendar").time():
        days = build_calendar(*_load_owner_data(db, owner_id), start, end, settings.max_schedule_iterations)

    return CalendarResponse(
        start=start,
        end=end,
        days=[
            CalendarDaySchema(
                date=day.date,
                items=[
                    CalendarItemSchema(
                        kind=item.kind,
                        item_id=item.item_id,
                        name=item.name,
                        scheduled_amount=float(item.scheduled_amount),
                        paid=item.paid,
                        paid_amount=float(item.paid_amount) if item.paid_amount is not None else None,
                        can_pay=item.can_pay,
                    )
                    for item in day.items
                ],
            )
            for day in days
        ],
    )
