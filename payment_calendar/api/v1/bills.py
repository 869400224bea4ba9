"""/v1/bills - bill and income CRUD, projected schedule and payments"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from payment_calendar.api.dependencies import get_owner_id, get_request_id
from payment_calendar.api.v1.schemas import (
    BillRequest,
    BillResponse,
    BillScheduleEntrySchema,
    BillScheduleResponse,
    PaymentRequest,
    PaymentResponse,
)
from payment_calendar.config import settings
from payment_calendar.domain.bill_schedule import generate_bill_schedule
from payment_calendar.domain.exceptions import BillNotFoundError, PaymentNotFoundError
from payment_calendar.domain.models import BillTerms, BillType
from payment_calendar.infrastructure.database.repositories import BillPaymentRepository, BillRepository
from payment_calendar.infrastructure.database.session import get_db
from payment_calendar.infrastructure.observability.logging import log_payment_event
from payment_calendar.infrastructure.observability.metrics import record_payment, schedule_generation_histogram
from payment_calendar.utils.date_utils import default_horizon

router = APIRouter()


def _bill_response(bill: BillTerms) -> BillResponse:
    return BillResponse(
        id=bill.id,
        name=bill.name,
        amount=float(bill.amount),
        frequency=bill.frequency,
        type=bill.type,
        start_date=bill.start_date,
    )


def _get_bill_or_404(repo: BillRepository, owner_id: str, bill_id: int) -> BillTerms:
    try:
        return repo.get_bill(owner_id, bill_id)
    except BillNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/bills", response_model=List[BillResponse])
def list_bills(
    type: Optional[BillType] = Query(None, description="Only expenses or only income"),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    bills = BillRepository(db).list_bills(owner_id, type.value if type else None)
    return [_bill_response(bill) for bill in bills]


@router.post("/bills", response_model=BillResponse, status_code=201)
def create_bill(body: BillRequest, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    bill = BillRepository(db).create_bill(
        owner_id=owner_id,
        name=body.name,
        amount=body.amount,
        frequency=body.frequency,
        bill_type=body.type,
        start_date=body.start_date,
    )
    db.commit()
    logging.info("Bill created", extra={"owner_id": owner_id, "bill_id": bill.id, "bill_type": bill.type.value})
    return _bill_response(bill)


@router.get("/bills/{bill_id}", response_model=BillResponse)
def get_bill(bill_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    return _bill_response(_get_bill_or_404(BillRepository(db), owner_id, bill_id))


@router.put("/bills/{bill_id}", response_model=BillResponse)
def update_bill(
    bill_id: int,
    body: BillRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    try:
        bill = BillRepository(db).update_bill(
            owner_id=owner_id,
            bill_id=bill_id,
            name=body.name,
            amount=body.amount,
            frequency=body.frequency,
            bill_type=body.type,
            start_date=body.start_date,
        )
    except BillNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return _bill_response(bill)


@router.delete("/bills/{bill_id}", status_code=204)
def delete_bill(bill_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """Delete a bill and all of its recorded payments"""
    try:
        BillRepository(db).delete_bill(owner_id, bill_id)
    except BillNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return Response(status_code=204)


@router.get("/bills/{bill_id}/schedule", response_model=BillScheduleResponse)
def get_bill_schedule(
    bill_id: int,
    horizon: Optional[date] = Query(None, description="Last date to project (default: end of next year)"),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Projected occurrences up to the horizon.

    Every unpaid occurrence is payable; there is no ordering between them.
    """
    bill = _get_bill_or_404(BillRepository(db), owner_id, bill_id)
    payments = BillPaymentRepository(db).list_for_bill(bill_id)
    horizon = horizon or default_horizon(date.today(), settings.horizon_years_ahead)

    with schedule_generation_histogram.labels(view="bill").time():
        schedule = generate_bill_schedule(bill, payments, horizon, settings.max_schedule_iterations)

    return BillScheduleResponse(
        bill_id=bill.id,
        horizon=horizon,
        entries=[
            BillScheduleEntrySchema(
                date=entry.date,
                scheduled_amount=float(entry.scheduled_amount),
                paid=entry.paid,
                paid_amount=float(entry.paid_amount) if entry.paid_amount is not None else None,
            )
            for entry in schedule
        ],
    )


@router.get("/bills/{bill_id}/payments", response_model=List[PaymentResponse])
def list_bill_payments(bill_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    _get_bill_or_404(BillRepository(db), owner_id, bill_id)
    return [
        PaymentResponse(item_id=p.bill_id, date=p.date, amount=float(p.amount))
        for p in BillPaymentRepository(db).list_for_bill(bill_id)
    ]


@router.post("/bills/{bill_id}/payments", response_model=PaymentResponse, status_code=201)
def record_bill_payment(
    bill_id: int,
    body: PaymentRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Record (or overwrite) the payment for one occurrence, in any order"""
    _get_bill_or_404(BillRepository(db), owner_id, bill_id)
    payment = BillPaymentRepository(db).upsert(bill_id, body.date, body.amount)
    db.commit()

    record_payment("bill")
    log_payment_event(get_request_id(request), owner_id, "bill", bill_id, "recorded", body.date, body.amount)
    return PaymentResponse(item_id=payment.bill_id, date=payment.date, amount=float(payment.amount))


@router.delete("/bills/{bill_id}/payments/{payment_date}", status_code=204)
def undo_bill_payment(
    bill_id: int,
    payment_date: date,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    _get_bill_or_404(BillRepository(db), owner_id, bill_id)

    try:
        BillPaymentRepository(db).remove(bill_id, payment_date)
    except PaymentNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    record_payment("bill", undone=True)
    log_payment_event(get_request_id(request), owner_id, "bill", bill_id, "undone", payment_date)
    return Response(status_code=204)
