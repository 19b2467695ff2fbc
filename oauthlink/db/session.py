"""Database engine setup for the reference identity store.

In-memory SQLite uses a StaticPool so every session shares one connection.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from oauthlink.core.config import settings


def build_engine(url: str | None) -> Engine:
    url = url or "sqlite:///:memory:"
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("postgresql"):
        return create_engine(
            url,
            future=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=3600,  # Recycle connections after 1 hour
            pool_pre_ping=True,  # Verify connection health before use
        )
    return create_engine(url, future=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Generator[Session, None, None]:
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
