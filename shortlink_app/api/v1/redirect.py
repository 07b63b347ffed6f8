from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from shortlink_app.click_processor.click_worker import ClickRecorder
from shortlink_app.dependencies import get_alias_service, get_click_recorder
from shortlink_app.errors import NotFoundError
from shortlink_app.services.alias_service import AliasService

router = APIRouter(tags=["redirect"])


@router.get("/s/{code}")
async def redirect_to_target(
    code: str,
    request: Request,
    alias_service: AliasService = Depends(get_alias_service),
    recorder: ClickRecorder = Depends(get_click_recorder)
):
    """
    Redirect to the alias target.

    Flow:
    1. Resolve the code (cache first, alias store on miss)
    2. Queue the click (returns immediately, written by a worker)
    3. Redirect

    Unknown and expired codes get the same 404.
    """
    alias = await alias_service.resolve(code)
    if alias is None:
        raise NotFoundError()

    recorder.record(
        code=alias.code,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )

    return RedirectResponse(url=alias.target_url, status_code=status.HTTP_302_FOUND)
