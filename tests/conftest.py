"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from payment_calendar.api.main import create_app
from payment_calendar.infrastructure.database.models import Base
from payment_calendar.infrastructure.database.session import get_db
from payment_calendar.domain.models import BillFrequency, BillTerms, BillType, LoanFrequency, LoanTerms


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def owner_headers() -> dict:
    return {"X-User-ID": "user_1"}


@pytest.fixture
def other_owner_headers() -> dict:
    return {"X-User-ID": "user_2"}


def make_loan(
    total: str = "1000",
    installment: str = "200",
    frequency: str = "monthly",
    start: date = date(2024, 1, 1),
    loan_id: int = 1,
    name: str = "Car loan",
) -> LoanTerms:
    return LoanTerms(
        id=loan_id,
        name=name,
        total_amount=Decimal(total),
        installment_amount=Decimal(installment),
        frequency=LoanFrequency(frequency),
        start_date=start,
    )


def make_bill(
    amount: str = "150",
    frequency: str = "monthly",
    start: date = date(2024, 1, 15),
    bill_type: str = "expense",
    bill_id: int = 1,
    name: str = "Electricity",
) -> BillTerms:
    return BillTerms(
        id=bill_id,
        name=name,
        amount=Decimal(amount),
        frequency=BillFrequency(frequency),
        type=BillType(bill_type),
        start_date=start,
    )


@pytest.fixture
def loan_factory():
    """Build LoanTerms with sensible defaults (1000 total, 200 monthly from 2024-01-01)"""
    return make_loan


@pytest.fixture
def bill_factory():
    """Build BillTerms with sensible defaults (150 monthly expense from 2024-01-15)"""
    return make_bill
