"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seeded companies, jobs and users with their auth headers
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.crud import company as company_crud
from app.crud import job as job_crud
from app.crud import user as user_crud
from app import models  # noqa: F401  (registers tables on Base.metadata)
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


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
def seed_data(db_session):
    """
    Three companies, three jobs, one regular user and one admin.

    c1 "Acme Corp" (10 employees)  - Engineer, Designer
    c2 "Bolt Labs" (50 employees)  - Senior Engineer
    c3 "Cog Works" (200 employees) - no jobs
    """
    company_crud.create(db_session, {"handle": "c1", "name": "Acme Corp", "description": "Desc1",
                                     "numEmployees": 10, "logoUrl": "http://c1.img"})
    company_crud.create(db_session, {"handle": "c2", "name": "Bolt Labs", "description": "Desc2",
                                     "numEmployees": 50, "logoUrl": "http://c2.img"})
    company_crud.create(db_session, {"handle": "c3", "name": "Cog Works", "description": "Desc3",
                                     "numEmployees": 200, "logoUrl": None})

    jobs = [
        job_crud.create(db_session, {"title": "Engineer", "salary": 100000, "equity": "0.01",
                                     "companyHandle": "c1"}),
        job_crud.create(db_session, {"title": "Senior Engineer", "salary": 150000, "equity": "0",
                                     "companyHandle": "c2"}),
        job_crud.create(db_session, {"title": "Designer", "salary": 80000, "equity": None,
                                     "companyHandle": "c1"}),
    ]

    users = [
        user_crud.register(db_session, {"username": "u1", "password": "password1", "firstName": "U1F",
                                        "lastName": "U1L", "email": "u1@example.com", "isAdmin": False}),
        user_crud.register(db_session, {"username": "admin", "password": "password2", "firstName": "AdF",
                                        "lastName": "AdL", "email": "admin@example.com", "isAdmin": True}),
    ]

    return {"job_ids": {job["title"]: job["id"] for job in jobs}, "users": users}


@pytest.fixture
def u1_headers(seed_data):
    """Auth headers for the regular user u1"""
    token = create_access_token(seed_data["users"][0])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(seed_data):
    """Auth headers for the admin user"""
    token = create_access_token(seed_data["users"][1])
    return {"Authorization": f"Bearer {token}"}
