"""
Analytics aggregation over the click log.

Modes (selected by the `by` filter):
- none:                   totals, unique IPs, (browser, os, device) breakdown,
                          7-day/30-day/all-time counts
- day   (value YYYY-MM-DD): totals, unique IPs and breakdown for one calendar day
- month (value YYYY-MM):    the same for one calendar month
- browser | os | device:  all-time counts for that single field, plus the
                          7-day/30-day/all-time counts

Day and month windows are half-open and computed in the configured reference
timezone. Missing browser/os/device values are reported as "Unknown".
"""

import logging
import re
from datetime import date, datetime
from typing import Callable, Optional, Union

from shortlink_app.config import settings
from shortlink_app.errors import NotFoundError, ValidationError
from shortlink_app.schemas.analytics import AliasAnalytics, FieldAnalytics, WindowAnalytics
from shortlink_app.services.alias_service import AliasService
from shortlink_app.storage.strategies import ClickStorageStrategy, GroupField
from shortlink_app.timeutils import TimeWindow, day_window, month_window, reference_zone, utc_now

logger = logging.getLogger(__name__)

AnalyticsResult = Union[AliasAnalytics, WindowAnalytics, FieldAnalytics]

# Zero-padded only: "2025-3-1" and "2025-3" are rejected
_DAY_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_MONTH_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}")


class AnalyticsService:

    def __init__(
        self,
        aliases: AliasService,
        storage: ClickStorageStrategy,
        timezone_name: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.aliases = aliases
        self.storage = storage
        self.zone = reference_zone(timezone_name or settings.analytics_timezone)
        self.clock = clock

    async def aggregate(
        self,
        code: str,
        by: Optional[str] = None,
        value: Optional[str] = None
    ) -> AnalyticsResult:
        """
        Dispatch on the filter.

        Raises:
            NotFoundError: no alias was ever created with this code
            ValidationError: malformed day/month value or unsupported field
        """
        if await self.aliases.lookup(code) is None:
            raise NotFoundError()

        if not by:
            return self.summary(code)

        if by == "day":
            return self.for_day(code, _parse_day(value))

        if by == "month":
            year, month = _parse_month(value)
            return self.for_month(code, year, month)

        try:
            field = GroupField(by)
        except ValueError:
            raise ValidationError(
                f"unsupported field '{by}', expected one of: day, month, browser, os, device"
            )
        return self.for_field(code, field)

    def summary(self, code: str) -> AliasAnalytics:
        return AliasAnalytics(
            code=code,
            total_clicks=self.storage.count_clicks(code),
            unique_ips=self.storage.count_unique_ips(code),
            user_agents=self.storage.user_agent_stats(code),
            period=self.storage.period_counts(code, self.clock()),
        )

    def for_day(self, code: str, day: date) -> WindowAnalytics:
        return self._windowed(code, day_window(day, self.zone))

    def for_month(self, code: str, year: int, month: int) -> WindowAnalytics:
        return self._windowed(code, month_window(year, month, self.zone))

    def for_field(self, code: str, field: GroupField) -> FieldAnalytics:
        return FieldAnalytics(
            code=code,
            field=field.value,
            stats=self.storage.field_stats(code, field),
            period=self.storage.period_counts(code, self.clock()),
        )

    def _windowed(self, code: str, window: TimeWindow) -> WindowAnalytics:
        logger.debug("Aggregating %s over [%s, %s)", code, window.start, window.end)
        return WindowAnalytics(
            code=code,
            total_clicks=self.storage.count_clicks(code, window),
            unique_ips=self.storage.count_unique_ips(code, window),
            user_agents=self.storage.user_agent_stats(code, window),
            window_start=window.start,
            window_end=window.end,
        )


def _parse_day(value: Optional[str]) -> date:
    if not value:
        raise ValidationError("'value' must be specified for day analytics")
    if not _DAY_FORMAT.fullmatch(value):
        raise ValidationError("invalid date format, must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("invalid date format, must be YYYY-MM-DD")


def _parse_month(value: Optional[str]) -> tuple:
    if not value:
        raise ValidationError("'value' must be specified for month analytics")
    if not _MONTH_FORMAT.fullmatch(value):
        raise ValidationError("invalid month format, must be YYYY-MM")
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError:
        raise ValidationError("invalid month format, must be YYYY-MM")
    return parsed.year, parsed.month
