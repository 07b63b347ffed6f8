import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink_app.cache.strategies import CacheStrategy, alias_cache_key
from shortlink_app.config import settings
from shortlink_app.errors import ConflictError, TransientStoreError
from shortlink_app.models.alias import Alias
from shortlink_app.schemas.alias import AliasCreate, AliasRecord, AliasResponse
from shortlink_app.services.alias_generator import AliasGenerator
from shortlink_app.timeutils import utc_now

logger = logging.getLogger(__name__)


class AliasService:
    """
    Alias creation and resolution.

    The alias table is the source of truth; the cache is advisory and only
    ever written at creation time. Cache and generator are injected so tests
    can swap them.
    """

    def __init__(
        self,
        db: Session,
        cache: Optional[CacheStrategy] = None,
        generator: Optional[AliasGenerator] = None
    ):
        self.db = db
        self.cache = cache
        self.generator = generator or AliasGenerator()

    async def create_alias(self, data: AliasCreate) -> AliasResponse:
        """
        Create a new alias.

        Process:
        1. Custom alias: validate shape, insert; a unique violation is a conflict
        2. Otherwise generate a code and insert, retrying on collision
        3. Cache the serialized record (best-effort)
        """
        if data.custom_alias is not None:
            self.generator.validate_custom(data.custom_alias)
            try:
                alias = self._insert(data.custom_alias, data, custom_alias=data.custom_alias)
            except IntegrityError:
                logger.info("Custom alias %s already exists", data.custom_alias)
                raise ConflictError()
        else:
            alias = self._insert_generated(data)

        record = AliasResponse.model_validate(alias)
        await self._cache_record(record)
        return record

    def _insert_generated(self, data: AliasCreate) -> Alias:
        for attempt in range(1, settings.max_retries + 1):
            code = self.generator.generate(settings.short_code_length)
            try:
                return self._insert(code, data)
            except IntegrityError:
                logger.warning("Generated code %s collided (attempt %d/%d)",
                               code, attempt, settings.max_retries)

        logger.error("Could not generate a unique code after %d attempts", settings.max_retries)
        raise TransientStoreError(f"code generation exhausted {settings.max_retries} attempts")

    def _insert(self, code: str, data: AliasCreate, custom_alias: Optional[str] = None) -> Alias:
        """Insert one alias row. IntegrityError is re-raised after rollback."""
        alias = Alias(
            code=code,
            target_url=data.long_url,
            custom_alias=custom_alias,
            created_at=utc_now(),
            expires_at=data.expires_at,
        )
        try:
            self.db.add(alias)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to insert alias %s", code)
            raise TransientStoreError(str(e)) from e
        return alias

    async def _cache_record(self, record: AliasRecord) -> None:
        if not self.cache:
            return
        key = alias_cache_key(settings.cache_key_prefix, record.code)
        try:
            stored = await self.cache.set(key, record.model_dump_json(), ttl=settings.cache_ttl)
        except Exception as e:
            logger.warning("Failed to cache alias %s: %s", record.code, e)
            return
        if not stored:
            logger.warning("Failed to cache alias %s", record.code)

    async def resolve(self, code: str) -> Optional[AliasRecord]:
        """
        Resolve a code to a live alias using the Cache-Aside pattern.

        Flow:
        1. Check cache. A decoded entry is trusted for the target, but its
           expiry is checked against now; an expired entry resolves to None
           and is left in the cache.
        2. On miss (or undecodable entry, or cache failure) query the store.
           Absent or expired -> None. The cache is NOT repopulated here.

        Unknown and expired codes both return None.
        """
        now = utc_now()

        cached = await self._cached_record(code)
        if cached is not None:
            return cached if cached.is_live(now) else None

        alias = self._find(code)
        if alias is None:
            return None

        record = AliasRecord.model_validate(alias)
        if not record.is_live(now):
            return None
        return record

    async def lookup(self, code: str) -> Optional[AliasRecord]:
        """Stored alias regardless of liveness"""
        alias = self._find(code)
        return AliasRecord.model_validate(alias) if alias is not None else None

    async def _cached_record(self, code: str) -> Optional[AliasRecord]:
        if not self.cache:
            return None
        key = alias_cache_key(settings.cache_key_prefix, code)
        try:
            raw = await self.cache.get(key)
        except Exception as e:
            logger.warning("Cache lookup failed for %s: %s", code, e)
            return None
        if raw is None:
            return None
        try:
            return AliasRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning("Undecodable cache entry for %s: %s", code, e)
            return None

    def _find(self, code: str) -> Optional[Alias]:
        try:
            return self.db.query(Alias).filter(Alias.code == code).first()
        except SQLAlchemyError as e:
            logger.exception("Alias lookup failed for %s", code)
            raise TransientStoreError(str(e)) from e
