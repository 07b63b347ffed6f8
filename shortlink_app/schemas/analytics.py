from datetime import datetime
from typing import List

from pydantic import BaseModel


class UserAgentStat(BaseModel):
    browser: str
    os: str
    device: str
    count: int


class FieldStat(BaseModel):
    value: str
    count: int


class PeriodStats(BaseModel):
    last_7_days: int
    last_30_days: int
    all_time: int


class AliasAnalytics(BaseModel):
    """Default analytics: totals, breakdown and rolling periods"""
    code: str
    total_clicks: int
    unique_ips: int
    user_agents: List[UserAgentStat]
    period: PeriodStats


class WindowAnalytics(BaseModel):
    """Analytics restricted to one calendar day or month"""
    code: str
    total_clicks: int
    unique_ips: int
    user_agents: List[UserAgentStat]
    window_start: datetime
    window_end: datetime


class FieldAnalytics(BaseModel):
    """All-time counts grouped by a single field"""
    code: str
    field: str
    stats: List[FieldStat]
    period: PeriodStats
