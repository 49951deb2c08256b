"""
Analytics Service.

Per-event analytics, the admin dashboard and the range-based overview
report. Queries are grouped in SQL by AnalyticsRepository; this service
merges empty labels into "Unknown", ranks series and buckets timestamps
into daily or monthly points.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.utils import percent, percent_change, round_half_up, utc_now
from fairpass.backend.models.enums import ParticipationStatus
from fairpass.backend.repositories.analytics import AnalyticsRepository
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.registration import RegistrationRepository
from fairpass.backend.repositories.university import ParticipationRepository
from fairpass.backend.schemas.analytics import (
    AiStats,
    AnalyticsRange,
    DashboardStats,
    DatePoint,
    EventAnalytics,
    EventCharts,
    EventInfo,
    EventStats,
    Kpi,
    NamedCount,
    OverviewAnalytics,
    OverviewCharts,
    OverviewKpis,
    RecentRegistration,
    TopEvent,
)
from fairpass.backend.services.base import BaseService

UNKNOWN = "Unknown"
DAY_LABEL = "%b %d"
MONTH_LABEL = "%b %Y"

RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def rank_counts(
    rows: Iterable[tuple[str | None, int]],
    limit: int | None = None,
) -> list[NamedCount]:
    """Merge empty labels into "Unknown" and sort by count, highest first."""
    merged: Counter[str] = Counter()
    for label, count in rows:
        merged[label or UNKNOWN] += count
    return [NamedCount(name=name, value=value) for name, value in merged.most_common(limit)]


def daily_points(timestamps: list[datetime], first_day: datetime, last_day: datetime) -> list[DatePoint]:
    """One point per day from first_day through last_day, zero-filled."""
    counts = Counter(start_of_day(ts) for ts in timestamps)
    points = []
    day = start_of_day(first_day)
    while day <= last_day:
        points.append(DatePoint(date=day.strftime(DAY_LABEL), count=counts[day]))
        day += timedelta(days=1)
    return points


def _month_key(value: datetime) -> tuple[int, int]:
    return value.year, value.month


def monthly_points(timestamps: list[datetime], months: list[tuple[int, int]] | None = None) -> list[DatePoint]:
    """
    One point per month.

    With months given, those months are reported zero-filled and in order.
    Without, only months that have data are reported, oldest first.
    """
    counts = Counter(_month_key(ts) for ts in timestamps)
    keys = months if months is not None else sorted(counts)
    return [
        DatePoint(date=datetime(year, month, 1).strftime(MONTH_LABEL), count=counts[(year, month)])
        for year, month in keys
    ]


def last_months(now: datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) keys for the last `count` months, oldest first, ending with now."""
    year, month = now.year, now.month
    keys = []
    for _ in range(count):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def period_bounds(
    range_: AnalyticsRange,
    now: datetime,
) -> tuple[datetime | None, datetime | None, datetime | None]:
    """
    (start, previous_start, previous_end) for a report range.

    The current period runs from start through now; the previous period
    has the same length and ends where the current one starts. The "all"
    range has no bounds and no previous period.
    """
    days = RANGE_DAYS.get(range_)
    if days is None:
        return None, None, None
    start = start_of_day(now - timedelta(days=days))
    return start, start_of_day(now - timedelta(days=days * 2)), start


class AnalyticsService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AnalyticsRepository(session)
        self.events = EventRepository(session)
        self.registrations = RegistrationRepository(session)
        self.participations = ParticipationRepository(session)

    # -------------------------------------------------------------------------
    # Event analytics
    # -------------------------------------------------------------------------

    async def event_analytics(self, event_id: str) -> EventAnalytics:
        event = await self.events.get_by_id(event_id)
        now = utc_now()

        registrations = await self.registrations.count_for_event(event.id)
        check_ins = await self.registrations.count_checked_in(event.id)

        first_day = start_of_day(now - timedelta(days=29))
        timestamps = await self.repo.registration_timestamps(start=first_day, event_id=event.id)

        async def top(field: str, limit: int) -> list[NamedCount]:
            return rank_counts(await self.repo.event_registrant_field_counts(event.id, field), limit)

        return EventAnalytics(
            event=EventInfo(title=event.title, capacity=event.capacity, date=event.start_date_time),
            stats=EventStats(
                registrations=registrations,
                check_ins=check_ins,
                check_in_rate=percent(check_ins, registrations),
                capacity_fill=percent(registrations, event.capacity),
            ),
            charts=EventCharts(
                timeline=daily_points(timestamps, first_day, now),
                cities=await top("city", 5),
                countries=await top("country", 5),
                study_levels=await top("level_of_study", 5),
                majors=await top("interested_major", 8),
            ),
        )

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    async def dashboard(self) -> DashboardStats:
        now = utc_now()
        first_day = start_of_day(now - timedelta(days=29))

        timestamps = await self.repo.registration_timestamps(start=first_day)
        recent = await self.registrations.list_recent(5)

        return DashboardStats(
            total_registrations=await self.repo.count_registrations(),
            total_events=await self.repo.count_events(),
            active_events=await self.repo.count_active_events(now),
            registrations_last_hour=await self.repo.count_registrations(start=now - timedelta(hours=1)),
            pending_university_requests=await self.participations.count_with_status(
                ParticipationStatus.REQUESTED
            ),
            registration_trend=daily_points(timestamps, first_day, now),
            events_by_status=rank_counts(await self.repo.event_status_counts()),
            recent_registrations=[
                RecentRegistration(
                    id=r.id,
                    full_name=r.registrant.full_name,
                    email=r.registrant.email,
                    event_title=r.event.title,
                    created_at=r.created_at,
                )
                for r in recent
            ],
            geo_distribution=rank_counts(await self.repo.registrant_field_counts("country"), 100),
            ai_stats=AiStats(
                majors=rank_counts(
                    await self.repo.registrant_field_counts("standardized_major", skip_null=True), 5
                ),
                categories=rank_counts(
                    await self.repo.registrant_field_counts("major_category", skip_null=True)
                ),
                gender=rank_counts(await self.repo.registrant_field_counts("gender", skip_null=True)),
            ),
        )

    # -------------------------------------------------------------------------
    # Overview
    # -------------------------------------------------------------------------

    async def overview(self, range_: AnalyticsRange = "30d") -> OverviewAnalytics:
        """KPIs against the previous equal period plus the report charts."""
        now = utc_now()
        start, prev_start, prev_end = period_bounds(range_, now)
        has_previous = prev_start is not None

        registrations = await self.repo.count_registrations(start)
        events = await self.repo.count_events(start)
        check_ins = await self.repo.count_check_ins(start)
        active_events = await self.repo.count_active_events(now)

        if has_previous:
            prev_registrations = await self.repo.count_registrations(prev_start, prev_end)
            prev_events = await self.repo.count_events(prev_start, prev_end)
            prev_check_ins = await self.repo.count_check_ins(prev_start, prev_end)
        else:
            prev_registrations = prev_events = prev_check_ins = 0

        avg_registrations = round_half_up(registrations / events) if events else 0
        prev_avg_registrations = round_half_up(prev_registrations / prev_events) if prev_events else 0
        attendance_rate = percent(check_ins, registrations)
        prev_attendance_rate = percent(prev_check_ins, prev_registrations)

        kpis = OverviewKpis(
            total_registrations=Kpi(
                value=registrations, change=percent_change(registrations, prev_registrations)
            ),
            events_created=Kpi(value=events, change=percent_change(events, prev_events)),
            active_events=Kpi(value=active_events, change=0),
            avg_registrations_per_event=Kpi(
                value=avg_registrations,
                change=percent_change(avg_registrations, prev_avg_registrations),
            ),
            check_ins=Kpi(value=check_ins, change=percent_change(check_ins, prev_check_ins)),
            attendance_rate=Kpi(
                value=attendance_rate,
                change=percent_change(attendance_rate, prev_attendance_rate),
            ),
        )

        self._log_debug("Overview computed", range=range_, registrations=registrations)
        return OverviewAnalytics(
            range=range_,
            kpis=kpis,
            charts=OverviewCharts(
                registration_trend=await self._trend(range_, start, now),
                events_by_status=rank_counts(await self.repo.event_status_counts(start)),
                majors=rank_counts(
                    await self.repo.registrant_field_counts("standardized_major", start, skip_null=True),
                    8,
                ),
                categories=rank_counts(
                    await self.repo.registrant_field_counts("major_category", start, skip_null=True)
                ),
                gender=rank_counts(
                    await self.repo.registrant_field_counts("gender", start, skip_null=True)
                ),
                countries=rank_counts(await self.repo.registrant_field_counts("country", start), 10),
                traffic_sources=rank_counts(
                    await self.repo.registrant_field_counts("utm_source", start, skip_null=True), 6
                ),
                top_events=await self._top_events(start),
            ),
        )

    async def _trend(
        self,
        range_: AnalyticsRange,
        start: datetime | None,
        now: datetime,
    ) -> list[DatePoint]:
        timestamps = await self.repo.registration_timestamps(start=start)
        if range_ == "1y":
            return monthly_points(timestamps, last_months(now, 12))
        if range_ == "all" or start is None:
            return monthly_points(timestamps)
        return daily_points(timestamps, start, now)

    async def _top_events(self, start: datetime | None) -> list[TopEvent]:
        top = []
        for event_id, title, registrations in await self.repo.top_events_by_registrations(
            start, None, 5
        ):
            check_ins = await self.repo.count_checked_in_registrations(event_id, start)
            top.append(
                TopEvent(
                    id=event_id,
                    title=title,
                    registrations=registrations,
                    check_ins=check_ins,
                    attendance_rate=percent(check_ins, registrations),
                )
            )
        return top
