from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from shortlink_app.dependencies import get_analytics_service
from shortlink_app.schemas.analytics import AliasAnalytics, FieldAnalytics, WindowAnalytics
from shortlink_app.schemas.response import Envelope, ok
from shortlink_app.services.analytics_service import AnalyticsService

router = APIRouter(tags=["analytics"])


@router.get(
    "/analytics/{code}",
    response_model=Envelope[Union[AliasAnalytics, WindowAnalytics, FieldAnalytics]],
    response_model_exclude_none=True,
)
async def get_analytics(
    code: str,
    by: Optional[str] = Query(None, description="day, month, browser, os or device"),
    value: Optional[str] = Query(None, description="YYYY-MM-DD for day, YYYY-MM for month"),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
):
    """Click analytics for an alias, optionally filtered by day, month or field"""
    return ok(await analytics_service.aggregate(code, by=by, value=value))
