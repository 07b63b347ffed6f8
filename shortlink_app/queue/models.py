"""
Data models for queue messages.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shortlink_app.timeutils import utc_now


class ClickEvent(BaseModel):
    """
    Event model for click tracking.

    Published to the click queue when a code resolves. Carries the raw request
    metadata; user-agent parsing happens in the worker, off the redirect path.
    """

    code: str = Field(..., description="The short code that was resolved")
    timestamp: datetime = Field(default_factory=utc_now, description="When the click occurred")

    # Request metadata
    ip_address: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Raw User-Agent header")
    referer: Optional[str] = Field(None, description="HTTP referer")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "aB3xYz",
                "timestamp": "2025-10-29T10:30:00Z",
                "ip_address": "192.168.1.1",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "referer": "https://twitter.com",
            }
        }
    )
