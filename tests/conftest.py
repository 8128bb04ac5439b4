"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seed companies and jobs
"""

import os

# Point the application engine at SQLite before app modules read settings
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.models import Company, Job
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def companies(db_session):
    """Two companies, c1 and c2"""
    rows = [
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def jobs(db_session, companies):
    """
    Three jobs with ids 1-3:
    - Title1 at c1, salary 10000, no equity
    - Title2 at c1, salary 20000, equity 0
    - Title3 at c2, salary 30000, equity 0.05
    """
    rows = [
        Job(title="Title1", salary=10000, equity=None, company_handle="c1"),
        Job(title="Title2", salary=20000, equity=0, company_handle="c1"),
        Job(title="Title3", salary=30000, equity=0.05, company_handle="c2"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return [job.id for job in rows]


@pytest.fixture
def sample_job_data():
    """Sample job creation body, as a client would send it"""
    return {
        "title": "Senior Python Developer",
        "salary": 150000,
        "equity": 0.01,
        "companyHandle": "c1"
    }
