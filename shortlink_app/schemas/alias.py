from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, computed_field, field_validator

from shortlink_app.config import settings
from shortlink_app.timeutils import as_utc, utc_now

_http_url = TypeAdapter(HttpUrl)


class AliasCreate(BaseModel):
    """Request body for POST /v1/shorten."""

    long_url: str = Field(..., description="The original URL to be shortened")
    custom_alias: Optional[str] = Field(None, description="Alphanumeric, 3-30 characters")
    expires_at: Optional[datetime] = Field(None, description="Alias stops resolving after this instant")

    @field_validator("long_url")
    @classmethod
    def check_url(cls, value: str) -> str:
        # Validate as http(s) URL but keep the caller's exact spelling
        value = value.strip()
        _http_url.validate_python(value)
        return value

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class AliasRecord(BaseModel):
    """
    Alias as seen by the resolver.

    This is also the value serialized into the cache, so a cache hit and a
    store hit produce the same object. Works with SQLAlchemy rows via
    from_attributes=True.
    """
    code: str
    target_url: str
    custom_alias: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "expires_at")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    def is_live(self, at: Optional[datetime] = None) -> bool:
        at = at or utc_now()
        return self.expires_at is None or self.expires_at > at


class AliasResponse(AliasRecord):
    """Created alias returned to the caller"""

    @computed_field
    @property
    def short_url(self) -> str:
        """Resolvable URL for this alias"""
        return f"{settings.base_url}/v1/s/{self.code}"
