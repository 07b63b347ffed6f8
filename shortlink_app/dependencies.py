"""
FastAPI dependencies for dependency injection.

Cache, alias generator and click storage are process-wide singletons. The
click recorder lives on `app.state` because its queue and worker tasks belong
to the running event loop (created in the application lifespan).
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.click_processor.click_worker import ClickRecorder
from shortlink_app.config import settings
from shortlink_app.database.connection import SessionLocal, get_db
from shortlink_app.services.alias_generator import AliasGenerator
from shortlink_app.services.alias_service import AliasService
from shortlink_app.services.analytics_service import AnalyticsService
from shortlink_app.storage.strategies import ClickStorageStrategy, SQLClickStorage


@lru_cache()
def get_cache() -> CacheStrategy:
    """Cache instance (singleton), backend chosen by settings"""
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_alias_generator() -> AliasGenerator:
    """One generator (and one random source) for the whole process"""
    return AliasGenerator()


@lru_cache()
def get_click_storage() -> ClickStorageStrategy:
    return SQLClickStorage(session_factory=SessionLocal)


def get_click_recorder(request: Request) -> ClickRecorder:
    return request.app.state.click_recorder


def get_alias_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache),
    generator: AliasGenerator = Depends(get_alias_generator)
) -> AliasService:
    return AliasService(db=db, cache=cache, generator=generator)


def get_analytics_service(
    alias_service: AliasService = Depends(get_alias_service),
    storage: ClickStorageStrategy = Depends(get_click_storage)
) -> AnalyticsService:
    return AnalyticsService(aliases=alias_service, storage=storage)
