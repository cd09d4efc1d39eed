"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from rewards_recorder.api.dependencies import get_now
from rewards_recorder.api.main import create_app
from rewards_recorder.domain.banks import banks_for
from rewards_recorder.domain.calendar import expiry_from_draw_date
from rewards_recorder.domain.models import Award
from rewards_recorder.infrastructure.database.models import Base
from rewards_recorder.infrastructure.database.repositories import AwardRepository
from rewards_recorder.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test_rewards.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BOC = banks_for()[0]
MONDAY = date(2025, 9, 1)  # Week of Monday 2025-09-01 .. Sunday 2025-09-07


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
def repo(db: Session) -> AwardRepository:
    """Award repository on the test database"""
    return AwardRepository(db, key="test-awards", tz="Asia/Macau")


@pytest.fixture
def now() -> datetime:
    """Wednesday afternoon of the reference week"""
    return datetime(2025, 9, 3, 15, 30)


@pytest.fixture
def client(db: Session, now: datetime) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: now
    return TestClient(app)


@pytest.fixture
def make_award() -> Callable[..., Award]:
    """Factory for awards with the default (next Sunday) expiry"""
    counter = {"n": 0}

    def _make(
        value: int = 50,
        bank: str = BOC,
        draw_date: date = MONDAY,
        redeemed: bool = False,
        merchant: str | None = None,
        **overrides,
    ) -> Award:
        counter["n"] += 1
        fields = dict(
            id=f"award_{counter['n']}",
            value=value,
            bank=bank,
            draw_date=draw_date,
            expiry_date=expiry_from_draw_date(draw_date),
            redeemed=redeemed,
            merchant=merchant,
        )
        fields.update(overrides)
        return Award(**fields)

    return _make
