"""/v1/savings - savings account balances"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from payment_calendar.api.dependencies import get_owner_id
from payment_calendar.api.v1.schemas import SavingsListResponse, SavingsRequest, SavingsResponse
from payment_calendar.domain.exceptions import SavingsAccountNotFoundError
from payment_calendar.domain.models import SavingsAccount
from payment_calendar.infrastructure.database.repositories import SavingsRepository
from payment_calendar.infrastructure.database.session import get_db

router = APIRouter()


def _savings_response(account: SavingsAccount) -> SavingsResponse:
    return SavingsResponse(id=account.id, name=account.name, balance=float(account.balance))


@router.get("/savings", response_model=SavingsListResponse)
def list_savings(owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    accounts = SavingsRepository(db).list_accounts(owner_id)
    total = sum((account.balance for account in accounts), Decimal("0.00"))
    return SavingsListResponse(
        accounts=[_savings_response(account) for account in accounts],
        total_balance=float(total),
    )


@router.post("/savings", response_model=SavingsResponse, status_code=201)
def create_savings(body: SavingsRequest, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    account = SavingsRepository(db).create_account(owner_id, body.name, body.balance)
    db.commit()
    return _savings_response(account)


@router.put("/savings/{account_id}", response_model=SavingsResponse)
def update_savings(
    account_id: int,
    body: SavingsRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    try:
        account = SavingsRepository(db).update_account(owner_id, account_id, body.name, body.balance)
    except SavingsAccountNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return _savings_response(account)


@router.delete("/savings/{account_id}", status_code=204)
def delete_savings(account_id: int, owner_id: str = Depends(get_owner_id), db: Session = Depends(get_db)):
    try:
        SavingsRepository(db).delete_account(owner_id, account_id)
    except SavingsAccountNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    db.commit()
    return Response(status_code=204)
