"""
Database engine and session factory.

Both tables (aliases and clicks) live in the same database. The engine uses a
bounded connection pool so a burst of requests or click writes can never open
an unbounded number of connections.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shortlink_app.config import settings


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # Click writes run in worker threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
