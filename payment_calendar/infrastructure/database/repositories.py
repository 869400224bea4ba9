"""Data access layer for loans, bills, payments and savings

Every read is scoped to an owner; payment writes are upserts keyed by
(parent id, date), so re-recording a date replaces the amount.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from payment_calendar.domain.exceptions import (
    BillNotFoundError,
    LoanNotFoundError,
    PaymentNotFoundError,
    SavingsAccountNotFoundError,
)
from payment_calendar.domain.models import (
    BillFrequency,
    BillPayment,
    BillTerms,
    BillType,
    LoanFrequency,
    LoanPayment,
    LoanTerms,
    SavingsAccount,
)
from payment_calendar.infrastructure.database.models import (
    Bill,
    BillPaymentRecord,
    Loan,
    LoanPaymentRecord,
    SavingsAccountRecord,
)


def to_loan_terms(row: Loan) -> LoanTerms:
    return LoanTerms(
        id=row.id,
        name=row.name,
        total_amount=Decimal(row.total_amount),
        installment_amount=Decimal(row.installment_amount),
        frequency=LoanFrequency(row.frequency),
        start_date=row.start_date,
    )


def to_loan_payment(row: LoanPaymentRecord) -> LoanPayment:
    return LoanPayment(loan_id=row.loan_id, date=row.date, amount=Decimal(row.amount))


def to_bill_terms(row: Bill) -> BillTerms:
    return BillTerms(
        id=row.id,
        name=row.name,
        amount=Decimal(row.amount),
        frequency=BillFrequency(row.frequency),
        type=BillType(row.type),
        start_date=row.start_date,
    )


def to_bill_payment(row: BillPaymentRecord) -> BillPayment:
    return BillPayment(bill_id=row.bill_id, date=row.date, amount=Decimal(row.amount))


def to_savings_account(row: SavingsAccountRecord) -> SavingsAccount:
    return SavingsAccount(id=row.id, name=row.name, balance=Decimal(row.balance))


class LoanRepository:
    """Repository for loan terms"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, owner_id: str, loan_id: int) -> Loan:
        row = (
            self.db.query(Loan)
            .filter(Loan.id == loan_id, Loan.owner_id == owner_id)
            .first()
        )
        if row is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return row

    def list_loans(self, owner_id: str) -> List[LoanTerms]:
        rows = (
            self.db.query(Loan)
            .filter(Loan.owner_id == owner_id)
            .order_by(Loan.created_at.desc(), Loan.id.desc())
            .all()
        )
        return [to_loan_terms(row) for row in rows]

    def get_loan(self, owner_id: str, loan_id: int) -> LoanTerms:
        return to_loan_terms(self._get_row(owner_id, loan_id))

    def create_loan(
        self,
        owner_id: str,
        name: str,
        total_amount: Decimal,
        installment_amount: Decimal,
        frequency: str,
        start_date: date,
    ) -> LoanTerms:
        row = Loan(
            owner_id=owner_id,
            name=name,
            total_amount=total_amount,
            installment_amount=installment_amount,
            frequency=LoanFrequency(frequency).value,
            start_date=start_date,
        )
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        return to_loan_terms(row)

    def update_loan(
        self,
        owner_id: str,
        loan_id: int,
        name: str,
        total_amount: Decimal,
        installment_amount: Decimal,
        frequency: str,
        start_date: date,
    ) -> LoanTerms:
        """Full replace of the loan terms; recorded payments are kept"""
        row = self._get_row(owner_id, loan_id)
        row.name = name
        row.total_amount = total_amount
        row.installment_amount = installment_amount
        row.frequency = LoanFrequency(frequency).value
        row.start_date = start_date
        self.db.flush()
        return to_loan_terms(row)

    def delete_loan(self, owner_id: str, loan_id: int) -> None:
        """Delete a loan together with its payments"""
        self.db.delete(self._get_row(owner_id, loan_id))
        self.db.flush()


class LoanPaymentRepository:
    """Repository for recorded loan payments"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_owner(self, owner_id: str) -> List[LoanPayment]:
        rows = (
            self.db.query(LoanPaymentRecord)
            .join(Loan, LoanPaymentRecord.loan_id == Loan.id)
            .filter(Loan.owner_id == owner_id)
            .order_by(LoanPaymentRecord.date.asc())
            .all()
        )
        return [to_loan_payment(row) for row in rows]

    def list_for_loan(self, loan_id: int) -> List[LoanPayment]:
        rows = (
            self.db.query(LoanPaymentRecord)
            .filter(LoanPaymentRecord.loan_id == loan_id)
            .order_by(LoanPaymentRecord.date.asc())
            .all()
        )
        return [to_loan_payment(row) for row in rows]

    def upsert(self, loan_id: int, payment_date: date, amount: Decimal) -> LoanPayment:
        """Insert a payment, or overwrite the amount already recorded on that date"""
        row = (
            self.db.query(LoanPaymentRecord)
            .filter(LoanPaymentRecord.loan_id == loan_id, LoanPaymentRecord.date == payment_date)
            .first()
        )
        if row is None:
            row = LoanPaymentRecord(loan_id=loan_id, date=payment_date, amount=amount)
            self.db.add(row)
        else:
            row.amount = amount
        self.db.flush()
        return to_loan_payment(row)

    def remove(self, loan_id: int, payment_date: date) -> None:
        deleted = (
            self.db.query(LoanPaymentRecord)
            .filter(LoanPaymentRecord.loan_id == loan_id, LoanPaymentRecord.date == payment_date)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise PaymentNotFoundError(f"No payment for loan {loan_id} on {payment_date.isoformat()}")


class BillRepository:
    """Repository for bill and income terms"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, owner_id: str, bill_id: int) -> Bill:
        row = (
            self.db.query(Bill)
            .filter(Bill.id == bill_id, Bill.owner_id == owner_id)
            .first()
        )
        if row is None:
            raise BillNotFoundError(f"Bill {bill_id} not found")
        return row

    def list_bills(self, owner_id: str, bill_type: Optional[str] = None) -> List[BillTerms]:
        query = self.db.query(Bill).filter(Bill.owner_id == owner_id)
        if bill_type is not None:
            query = query.filter(Bill.type == BillType(bill_type).value)
        rows = query.order_by(Bill.created_at.desc(), Bill.id.desc()).all()
        return [to_bill_terms(row) for row in rows]

    def get_bill(self, owner_id: str, bill_id: int) -> BillTerms:
        return to_bill_terms(self._get_row(owner_id, bill_id))

    def create_bill(
        self,
        owner_id: str,
        name: str,
        amount: Decimal,
        frequency: str,
        bill_type: str,
        start_date: date,
    ) -> BillTerms:
        row = Bill(
            owner_id=owner_id,
            name=name,
            amount=amount,
            frequency=BillFrequency(frequency).value,
            type=BillType(bill_type).value,
            start_date=start_date,
        )
        self.db.add(row)
        self.db.flush()
        return to_bill_terms(row)

    def update_bill(
        self,
        owner_id: str,
        bill_id: int,
        name: str,
        amount: Decimal,
        frequency: str,
        bill_type: str,
        start_date: date,
    ) -> BillTerms:
        row = self._get_row(owner_id, bill_id)
        row.name = name
        row.amount = amount
        row.frequency = BillFrequency(frequency).value
        row.type = BillType(bill_type).value
        row.start_date = start_date
        self.db.flush()
        return to_bill_terms(row)

    def delete_bill(self, owner_id: str, bill_id: int) -> None:
        self.db.delete(self._get_row(owner_id, bill_id))
        self.db.flush()


class BillPaymentRepository:
    """Repository for recorded bill payments"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_owner(self, owner_id: str) -> List[BillPayment]:
        rows = (
            self.db.query(BillPaymentRecord)
            .join(Bill, BillPaymentRecord.bill_id == Bill.id)
            .filter(Bill.owner_id == owner_id)
            .order_by(BillPaymentRecord.date.asc())
            .all()
        )
        return [to_bill_payment(row) for row in rows]

    def list_for_bill(self, bill_id: int) -> List[BillPayment]:
        rows = (
            self.db.query(BillPaymentRecord)
            .filter(BillPaymentRecord.bill_id == bill_id)
            .order_by(BillPaymentRecord.date.asc())
            .all()
        )
        return [to_bill_payment(row) for row in rows]

    def upsert(self, bill_id: int, payment_date: date, amount: Decimal) -> BillPayment:
        row = (
            self.db.query(BillPaymentRecord)
            .filter(BillPaymentRecord.bill_id == bill_id, BillPaymentRecord.date == payment_date)
            .first()
        )
        if row is None:
            row = BillPaymentRecord(bill_id=bill_id, date=payment_date, amount=amount)
            self.db.add(row)
        else:
            row.amount = amount
        self.db.flush()
        return to_bill_payment(row)

    def remove(self, bill_id: int, payment_date: date) -> None:
        deleted = (
            self.db.query(BillPaymentRecord)
            .filter(BillPaymentRecord.bill_id == bill_id, BillPaymentRecord.date == payment_date)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise PaymentNotFoundError(f"No payment for bill {bill_id} on {payment_date.isoformat()}")


class SavingsRepository:
    """Repository for savings balances"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, owner_id: str, account_id: int) -> SavingsAccountRecord:
        row = (
            self.db.query(SavingsAccountRecord)
            .filter(SavingsAccountRecord.id == account_id, SavingsAccountRecord.owner_id == owner_id)
            .first()
        )
        if row is None:
            raise SavingsAccountNotFoundError(f"Savings account {account_id} not found")
        return row

    def list_accounts(self, owner_id: str) -> List[SavingsAccount]:
        rows = (
            self.db.query(SavingsAccountRecord)
            .filter(SavingsAccountRecord.owner_id == owner_id)
            .order_by(SavingsAccountRecord.created_at.desc(), SavingsAccountRecord.id.desc())
            .all()
        )
        return [to_savings_account(row) for row in rows]

    def create_account(self, owner_id: str, name: str, balance: Decimal) -> SavingsAccount:
        row = SavingsAccountRecord(owner_id=owner_id, name=name, balance=balance)
        self.db.add(row)
        self.db.flush()
        return to_savings_account(row)

    def update_account(self, owner_id: str, account_id: int, name: str, balance: Decimal) -> SavingsAccount:
        row = self._get_row(owner_id, account_id)
        row.name = name
        row.balance = balance
        self.db.flush()
        return to_savings_account(row)

    def delete_account(self, owner_id: str, account_id: int) -> None:
        self.db.delete(self._get_row(owner_id, account_id))
        self.db.flush()
