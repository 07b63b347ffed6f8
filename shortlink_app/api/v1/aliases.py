from fastapi import APIRouter, Depends, status

from shortlink_app.dependencies import get_alias_service
from shortlink_app.schemas.alias import AliasCreate, AliasResponse
from shortlink_app.schemas.response import Envelope, ok
from shortlink_app.services.alias_service import AliasService

router = APIRouter(tags=["aliases"])


@router.post(
    "/shorten",
    response_model=Envelope[AliasResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_alias(
    payload: AliasCreate,
    alias_service: AliasService = Depends(get_alias_service)
):
    """Create a new alias, generated or custom (async for cache I/O)"""
    return ok(await alias_service.create_alias(payload))
