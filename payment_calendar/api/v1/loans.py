"""/v1/loans - loan CRUD, projected schedule and installment payments"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from payment_calendar.api.dependencies import get_owner_id, get_request_id
from payment_calendar.api.v1.schemas import (
    LoanRequest,
    LoanResponse,
    LoanScheduleEntrySchema,
    LoanScheduleResponse,
    PaymentRequest,
    PaymentResponse,
)
from payment_calendar.config import settings
from payment_calendar.domain.exceptions import LoanNotFoundError, PaymentNotFoundError, PaymentOrderError
from payment_calendar.domain.loan_schedule import (
    ensure_payable,
    generate_loan_schedule,
    get_payoff_date,
    get_total_paid,
)
from payment_calendar.domain.models import LoanPayment, LoanTerms
from payment_calendar.infrastructure.database.repositories import LoanPaymentRepository, LoanRepository
from payment_calendar.infrastructure.database.session import get_db
from payment_calendar.infrastructure.observability.logging import log_payment_event
from payment_calendar.infrastructure.observability.metrics import (
    payment_order_rejections_counter,
    record_payment,
    schedule_generation_histogram,
)

router = APIRouter()


def _loan_response(loan: LoanTerms, payments: List[LoanPayment]) -> LoanResponse:
    return LoanResponse(
        id=loan.id,
        name=loan.name,
        total_amount=float(loan.total_amount),
        installment_amount=float(loan.installment_amount),
        frequency=loan.frequency,
        start_date=loan.start_date,
        payoff_date=get_payoff_date(loan, payments, settings.max_schedule_iterations),
        total_paid=float(get_total_paid(loan.id, payments)),
    )


def _get_loan_or_404(repo: LoanRepository, owner_id: str, loan_id: int) -> LoanTerms:
    try:
        return repo.get_loan(owner_id, loan_id)
    except LoanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/loans", response_model=List[LoanResponse])
def list_loans(owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """List the owner's loans, newest first, with payoff date and total paid"""
    loans = LoanRepository(db).list_loans(owner_id)
    payments = LoanPaymentRepository(db).list_for_owner(owner_id)
    return [_loan_response(loan, payments) for loan in loans]


@router.post("/loans", response_model=LoanResponse, status_code=201)
def create_loan(
    body: LoanRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    loan = LoanRepository(db).create_loan(
        owner_id=owner_id,
        name=body.name,
        total_amount=body.total_amount,
        installment_amount=body.installment_amount,
        frequency=body.frequency,
        start_date=body.start_date,
    )
    db.commit()
    logging.info("Loan created", extra={"owner_id": owner_id, "loan_id": loan.id})
    return _loan_response(loan, [])


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    loan = _get_loan_or_404(LoanRepository(db), owner_id, loan_id)
    return _loan_response(loan, LoanPaymentRepository(db).list_for_loan(loan_id))


@router.put("/loans/{loan_id}", response_model=LoanResponse)
def update_loan(
    loan_id: int,
    body: LoanRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Replace the loan terms; recorded payments are kept and the schedule is re-projected"""
    try:
        loan = LoanRepository(db).update_loan(
            owner_id=owner_id,
            loan_id=loan_id,
            name=body.name,
            total_amount=body.total_amount,
            installment_amount=body.installment_amount,
            frequency=body.frequency,
            start_date=body.start_date,
        )
    except LoanNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return _loan_response(loan, LoanPaymentRepository(db).list_for_loan(loan_id))


@router.delete("/loans/{loan_id}", status_code=204)
def delete_loan(loan_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """Delete a loan and all of its recorded payments"""
    try:
        LoanRepository(db).delete_loan(owner_id, loan_id)
    except LoanNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    logging.info("Loan deleted", extra={"owner_id": owner_id, "loan_id": loan_id})
    return Response(status_code=204)


@router.get("/loans/{loan_id}/schedule", response_model=LoanScheduleResponse)
def get_loan_schedule(loan_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    """
    Projected installment schedule.

    Returns:
        Every due date until payoff; only the earliest unpaid entry has can_pay=true
    """
    loan = _get_loan_or_404(LoanRepository(db), owner_id, loan_id)
    payments = LoanPaymentRepository(db).list_for_loan(loan_id)

    with schedule_generation_histogram.labels(view="loan").time():
        schedule = generate_loan_schedule(loan, payments, settings.max_schedule_iterations)

    return LoanScheduleResponse(
        loan_id=loan.id,
        payoff_date=schedule[-1].date if schedule else None,
        total_paid=float(get_total_paid(loan.id, payments)),
        entries=[
            LoanScheduleEntrySchema(
                date=entry.date,
                scheduled_amount=float(entry.scheduled_amount),
                paid=entry.paid,
                paid_amount=float(entry.paid_amount) if entry.paid_amount is not None else None,
                can_pay=entry.can_pay,
            )
            for entry in schedule
        ],
    )


@router.get("/loans/{loan_id}/payments", response_model=List[PaymentResponse])
def list_loan_payments(loan_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    _get_loan_or_404(LoanRepository(db), owner_id, loan_id)
    return [
        PaymentResponse(item_id=p.loan_id, date=p.date, amount=float(p.amount))
        for p in LoanPaymentRepository(db).list_for_loan(loan_id)
    ]


@router.post("/loans/{loan_id}/payments", response_model=PaymentResponse, status_code=201)
def record_loan_payment(
    loan_id: int,
    body: PaymentRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Record (or overwrite) the payment for one installment.

    Flow:
    1. Re-project the schedule from the stored payments
    2. Reject the payment unless the date is the earliest unpaid installment
       or an already-paid one being corrected
    3. Upsert the payment keyed by (loan, date)
    """
    request_id = get_request_id(request)
    loan = _get_loan_or_404(LoanRepository(db), owner_id, loan_id)
    payment_repo = LoanPaymentRepository(db)

    try:
        schedule = generate_loan_schedule(loan, payment_repo.list_for_loan(loan_id), settings.max_schedule_iterations)
        ensure_payable(schedule, body.date)
        payment = payment_repo.upsert(loan_id, body.date, body.amount)
        db.commit()

    except PaymentOrderError as e:
        db.rollback()
        payment_order_rejections_counter.inc()
        logging.warning(f"Out-of-order payment: {e}", extra={"request_id": request_id, "loan_id": loan_id})
        raise HTTPException(status_code=409, detail=str(e))

    record_payment("loan")
    log_payment_event(request_id, owner_id, "loan", loan_id, "recorded", body.date, body.amount)
    return PaymentResponse(item_id=payment.loan_id, date=payment.date, amount=float(payment.amount))


@router.delete("/loans/{loan_id}/payments/{payment_date}", status_code=204)
def undo_loan_payment(
    loan_id: int,
    payment_date: date,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Remove the payment recorded on a date, making that installment unpaid again"""
    _get_loan_or_404(LoanRepository(db), owner_id, loan_id)

    try:
        LoanPaymentRepository(db).remove(loan_id, payment_date)
    except PaymentNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    record_payment("loan", undone=True)
    log_payment_event(get_request_id(request), owner_id, "loan", loan_id, "undone", payment_date)
    return Response(status_code=204)
