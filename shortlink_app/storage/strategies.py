"""
Click storage strategies using Strategy Pattern.

The click log is append-only and is the sole source for analytics. The
aggregator only talks to ClickStorageStrategy, so the backing store can be
swapped (the SQL store below, or a columnar analytics database) without
touching the service layer.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from sqlalchemy import case, distinct, func, literal_column, select
from sqlalchemy.exc import SQLAlchemyError

from shortlink_app.errors import TransientStoreError
from shortlink_app.models.click import Click
from shortlink_app.schemas.analytics import FieldStat, PeriodStats, UserAgentStat
from shortlink_app.timeutils import TimeWindow

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
# Inlined literal so the SELECT and GROUP BY expressions render identically
_UNKNOWN_SQL = literal_column("'Unknown'")


class GroupField(Enum):
    """Fields a single-field breakdown may group by"""
    BROWSER = "browser"
    OS = "os"
    DEVICE = "device"


# Fixed column per field: user input selects a member, never a column name
_FIELD_COLUMNS = {
    GroupField.BROWSER: Click.browser,
    GroupField.OS: Click.os,
    GroupField.DEVICE: Click.device,
}


class ClickStorageStrategy(ABC):
    """
    Abstract base class for click storage.

    `window` arguments restrict a query to a half-open [start, end) interval;
    None means all time.
    """

    @abstractmethod
    def store_click(self, click: Click) -> None:
        """Append one click row"""

    @abstractmethod
    def count_clicks(self, code: str, window: Optional[TimeWindow] = None) -> int:
        """Total clicks for a code"""

    @abstractmethod
    def count_unique_ips(self, code: str, window: Optional[TimeWindow] = None) -> int:
        """Distinct non-null IPs for a code"""

    @abstractmethod
    def user_agent_stats(self, code: str, window: Optional[TimeWindow] = None) -> List[UserAgentStat]:
        """Counts per (browser, os, device), highest first"""

    @abstractmethod
    def field_stats(self, code: str, field: GroupField) -> List[FieldStat]:
        """All-time counts per value of one field, highest first"""

    @abstractmethod
    def period_counts(self, code: str, now: datetime) -> PeriodStats:
        """Clicks in the last 7 days, last 30 days and all time"""


class SQLClickStorage(ClickStorageStrategy):
    """
    SQLAlchemy implementation over the `clicks` table.

    Each call opens its own short-lived session from the factory, so the
    store can be used both from request handlers and from click workers
    running in threads.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def store_click(self, click: Click) -> None:
        with self.session_factory() as session:
            try:
                session.add(click)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise TransientStoreError(f"failed to insert click for {click.code}: {e}") from e

    def count_clicks(self, code: str, window: Optional[TimeWindow] = None) -> int:
        query = _in_window(select(func.count(Click.id)).where(Click.code == code), window)
        return self._scalar(query, code)

    def count_unique_ips(self, code: str, window: Optional[TimeWindow] = None) -> int:
        # COUNT(DISTINCT ...) ignores NULLs
        query = _in_window(select(func.count(distinct(Click.ip))).where(Click.code == code), window)
        return self._scalar(query, code)

    def user_agent_stats(self, code: str, window: Optional[TimeWindow] = None) -> List[UserAgentStat]:
        browser = func.coalesce(Click.browser, _UNKNOWN_SQL).label("browser")
        os_name = func.coalesce(Click.os, _UNKNOWN_SQL).label("os")
        device = func.coalesce(Click.device, _UNKNOWN_SQL).label("device")
        total = func.count(Click.id).label("total")

        query = _in_window(
            select(browser, os_name, device, total).where(Click.code == code),
            window,
        ).group_by(browser, os_name, device).order_by(total.desc())

        rows = self._rows(query, code)
        return [
            UserAgentStat(browser=row.browser, os=row.os, device=row.device, count=row.total)
            for row in rows
        ]

    def field_stats(self, code: str, field: GroupField) -> List[FieldStat]:
        value = func.coalesce(_FIELD_COLUMNS[field], _UNKNOWN_SQL).label("value")
        total = func.count(Click.id).label("total")

        query = (
            select(value, total)
            .where(Click.code == code)
            .group_by(value)
            .order_by(total.desc())
        )

        rows = self._rows(query, code)
        return [FieldStat(value=row.value, count=row.total) for row in rows]

    def period_counts(self, code: str, now: datetime) -> PeriodStats:
        since_7 = now - timedelta(days=7)
        since_30 = now - timedelta(days=30)

        query = select(
            func.coalesce(func.sum(case((Click.created_at >= since_7, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Click.created_at >= since_30, 1), else_=0)), 0),
            func.count(Click.id),
        ).where(Click.code == code)

        rows = self._rows(query, code)
        last_7, last_30, all_time = rows[0]
        return PeriodStats(last_7_days=last_7, last_30_days=last_30, all_time=all_time)

    def _scalar(self, query, code: str) -> int:
        with self.session_factory() as session:
            try:
                return session.execute(query).scalar_one()
            except SQLAlchemyError as e:
                logger.error("Click query failed for %s: %s", code, e)
                raise TransientStoreError(str(e)) from e

    def _rows(self, query, code: str) -> list:
        with self.session_factory() as session:
            try:
                return session.execute(query).all()
            except SQLAlchemyError as e:
                logger.error("Click query failed for %s: %s", code, e)
                raise TransientStoreError(str(e)) from e


def _in_window(query, window: Optional[TimeWindow]):
    if window is None:
        return query
    return query.where(Click.created_at >= window.start, Click.created_at < window.end)
