# tests/conftest.py
from __future__ import annotations

import os
from typing import Iterator

import pytest

# --- Config din env: DB in-memory, setat ÎNAINTE de importul aplicației -------
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SQLALCHEMY_CREATE_ALL", "1")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.product import Product  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="session")
def client() -> Iterator[TestClient]:
    """Client HTTP (httpx) legat direct de aplicație; rulează și lifespan-ul."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db() -> Iterator[Session]:
    """Sesiune SQLAlchemy pentru teste pe stratul de persistență."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def empty_products() -> None:
    """Golește tabelul pentru testele care numără înregistrări."""
    with SessionLocal() as s:
        s.execute(delete(Product))
        s.commit()
