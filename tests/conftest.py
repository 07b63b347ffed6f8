"""
Test configuration and fixtures.

Environment is set before any application module is imported so that the
settings singleton, the engine and the cache factory all pick up the test
configuration (SQLite file database, in-memory cache).
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["CLICK_SHUTDOWN_TIMEOUT"] = "10"

import random

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.cache.factory import CacheFactory
from shortlink_app.database.connection import Base, SessionLocal, engine
from shortlink_app.dependencies import get_cache
from shortlink_app.services.alias_generator import AliasGenerator
from shortlink_app.services.alias_service import AliasService
from shortlink_app.storage.strategies import SQLClickStorage


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped afterwards so tests stay isolated.
    """
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def cache():
    """Fresh in-memory cache, also the one the app resolves through"""
    CacheFactory.clear_instance()
    get_cache.cache_clear()

    yield get_cache()

    CacheFactory.clear_instance()
    get_cache.cache_clear()


@pytest.fixture(scope="function")
def click_storage(db_session):
    return SQLClickStorage(session_factory=SessionLocal)


@pytest.fixture(scope="function")
def alias_service(db_session, cache):
    return AliasService(db_session, cache=cache, generator=AliasGenerator(random.Random(1234)))


@pytest.fixture(scope="function")
def client(db_session, cache):
    """
    Test client with the app lifespan running (click workers included).
    Leaving the context drains the click backlog.
    """
    with TestClient(app) as test_client:
        yield test_client
