"""
Response envelope shared by every JSON endpoint:

    {"status": "ok", "data": {...}}
    {"status": "error", "error": {"code": "...", "desc": "..."}}
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ErrorBody(BaseModel):
    code: str
    desc: str


class Envelope(BaseModel, Generic[DataT]):
    status: str
    data: Optional[DataT] = None
    error: Optional[ErrorBody] = None


def ok(data: Any) -> dict:
    return {"status": "ok", "data": data}


def error(code: str, desc: str) -> dict:
    return Envelope[Any](status="error", error=ErrorBody(code=code, desc=desc)).model_dump(exclude_none=True)
