"""SQLAlchemy ORM models for loans, bills, recorded payments and savings"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Loan(Base):
    """Loan terms owned by a single user"""

    __tablename__ = "loan"
    __table_args__ = (
        CheckConstraint("total_amount > 0", name="ck_loan_total_positive"),
        CheckConstraint(
            "installment_amount > 0 AND installment_amount <= total_amount",
            name="ck_loan_installment_range",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    installment_amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("LoanPaymentRecord", back_populates="loan", cascade="all, delete-orphan")


class LoanPaymentRecord(Base):
    """Recorded installment payment; one row per loan and date"""

    __tablename__ = "loan_payment"
    __table_args__ = (UniqueConstraint("loan_id", "date", name="uq_loan_payment_loan_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(Integer, ForeignKey("loan.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("Loan", back_populates="payments")


class Bill(Base):
    """Recurring or one-time expense/income owned by a single user"""

    __tablename__ = "bill"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_bill_amount_positive"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="expense")
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship("BillPaymentRecord", back_populates="bill", cascade="all, delete-orphan")


class BillPaymentRecord(Base):
    """Recorded bill payment; one row per bill and date"""

    __tablename__ = "bill_payment"
    __table_args__ = (UniqueConstraint("bill_id", "date", name="uq_bill_payment_bill_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_id = Column(Integer, ForeignKey("bill.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bill = relationship("Bill", back_populates="payments")


class SavingsAccountRecord(Base):
    __tablename__ = "savings_account"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_savings_balance_non_negative"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
