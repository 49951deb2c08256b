"""
Analytics Schemas.

Chart series are lists of {name, value} or {date, count} points so the
frontend can feed them to charts unchanged.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

AnalyticsRange = Literal["7d", "30d", "90d", "1y", "all"]


class NamedCount(BaseModel):
    name: str
    value: int


class DatePoint(BaseModel):
    date: str
    count: int


# =============================================================================
# Event analytics
# =============================================================================


class EventInfo(BaseModel):
    title: str
    capacity: int | None
    date: datetime


class EventStats(BaseModel):
    registrations: int
    check_ins: int
    check_in_rate: int
    capacity_fill: int


class EventCharts(BaseModel):
    timeline: list[DatePoint]
    cities: list[NamedCount]
    countries: list[NamedCount]
    study_levels: list[NamedCount]
    majors: list[NamedCount]


class EventAnalytics(BaseModel):
    event: EventInfo
    stats: EventStats
    charts: EventCharts


# =============================================================================
# Dashboard
# =============================================================================


class RecentRegistration(BaseModel):
    id: str
    full_name: str
    email: str
    event_title: str
    created_at: datetime


class AiStats(BaseModel):
    majors: list[NamedCount]
    categories: list[NamedCount]
    gender: list[NamedCount]


class DashboardStats(BaseModel):
    total_registrations: int
    total_events: int
    active_events: int
    registrations_last_hour: int
    pending_university_requests: int
    registration_trend: list[DatePoint]
    events_by_status: list[NamedCount]
    recent_registrations: list[RecentRegistration]
    geo_distribution: list[NamedCount]
    ai_stats: AiStats


# =============================================================================
# Overview
# =============================================================================


class Kpi(BaseModel):
    value: int | float
    change: int = Field(description="Percentage change against the previous period")


class OverviewKpis(BaseModel):
    total_registrations: Kpi
    events_created: Kpi
    active_events: Kpi
    avg_registrations_per_event: Kpi
    check_ins: Kpi
    attendance_rate: Kpi


class TopEvent(BaseModel):
    id: str
    title: str
    registrations: int
    check_ins: int
    attendance_rate: int


class OverviewCharts(BaseModel):
    registration_trend: list[DatePoint]
    events_by_status: list[NamedCount]
    majors: list[NamedCount]
    categories: list[NamedCount]
    gender: list[NamedCount]
    countries: list[NamedCount]
    traffic_sources: list[NamedCount]
    top_events: list[TopEvent]


class OverviewAnalytics(BaseModel):
    range: AnalyticsRange
    kpis: OverviewKpis
    charts: OverviewCharts
