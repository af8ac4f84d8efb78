# app/database.py
from __future__ import annotations

import logging
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.core.settings import settings

# Încarcă variabilele din .env (pe host). În Docker vin din env_file/environment.
load_dotenv()

logger = logging.getLogger(__name__)

# -----------------------------
# Helpers
# -----------------------------
def _mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"

def _resolve_schema(url: str, raw: Optional[str]) -> Optional[str]:
    """
    SQLite nu are scheme → None.
    Pentru Postgres/MySQL implicit 'app', dacă DB_SCHEMA nu e setat.
    """
    if raw is not None:
        return raw.strip() or None
    return None if url.startswith("sqlite") else "app"

# -----------------------------
# Config din settings
# -----------------------------
DATABASE_URL = (settings.DATABASE_URL or "").strip()
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is empty. Set a valid SQLAlchemy URL.")

DEFAULT_SCHEMA = _resolve_schema(DATABASE_URL, settings.DB_SCHEMA)

# -----------------------------
# Naming convention pentru constrângeri
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(schema=DEFAULT_SCHEMA, naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)

# -----------------------------
# Engine factory
# -----------------------------
def _build_engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": settings.DB_ECHO}

    if url.startswith("sqlite"):
        # SQLite: single-thread în driver → dezactivează check_same_thread
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory → StaticPool (altfel fiecare conexiune are DB separat)
        if url in {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
    else:
        kwargs.update(
            {
                "pool_pre_ping": True,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
            }
        )
        if DEFAULT_SCHEMA and url.startswith("postgresql"):
            kwargs["connect_args"] = {"options": f"-c search_path={DEFAULT_SCHEMA},public"}

    return kwargs

engine: Engine = create_engine(DATABASE_URL, **_build_engine_kwargs(DATABASE_URL))

# -----------------------------
# Session factory
# -----------------------------
# expire_on_commit=False → obiectele rămân utilizabile după commit (evită re-load imediat)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency pentru o sesiune SQLAlchemy închisă garantat.
    Face rollback automat dacă apare o excepție în request handler.
    """
    db: Session = SessionLocal()
    try:
        yield db
        # commit-ul e responsabilitatea stratului de persistență (crud.save / delete_by_id)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def _ensure_schema() -> None:
    """Creează schema DEFAULT_SCHEMA dacă lipsește (doar Postgres)."""
    if DEFAULT_SCHEMA and engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{DEFAULT_SCHEMA}"')

def init_db_if_requested() -> None:
    """
    Creează tabelele din modele când SQLALCHEMY_CREATE_ALL=1 (implicit activ).
    """
    if not settings.SQLALCHEMY_CREATE_ALL:
        return
    _ensure_schema()
    from app.models import product  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Tables ensured on %s", _mask_url(DATABASE_URL))

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_db",
    "init_db_if_requested",
]
