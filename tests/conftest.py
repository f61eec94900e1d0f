"""Shared pytest fixtures.

The backend reads its settings at import time, so the test environment is
configured here before any backend module is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = "A" * 43 + "="
os.environ["BCRYPT_ROUNDS"] = "4"

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from backend.api.main import app  # noqa: E402
from backend.database import models  # noqa: E402,F401
from backend.database.connection import Base, SessionLocal, engine  # noqa: E402
from backend.database.models import User  # noqa: E402
from backend.database.repository import SecurityRepository  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database() -> Generator[None, None, None]:
    """Give every test an empty schema."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def repo(db_session: Session) -> SecurityRepository:
    return SecurityRepository(db_session)


@pytest.fixture
def user(repo: SecurityRepository) -> User:
    return repo.create_user(email="jonathan@example.com", username="jonathan", password="correct-horse")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
