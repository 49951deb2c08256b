"""
Analytics API Endpoints.

Admin dashboard and the range-based overview report.
"""

from fastapi import APIRouter, Query

from fairpass.backend.core.dependencies import DbSession, ManagerAdmin
from fairpass.backend.schemas.analytics import AnalyticsRange, DashboardStats, OverviewAnalytics
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.services.analytics import AnalyticsService

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardStats],
    summary="Dashboard statistics",
)
async def dashboard(db: DbSession, admin: ManagerAdmin) -> ApiResponse[DashboardStats]:
    return ApiResponse(data=await AnalyticsService(db).dashboard())


@router.get(
    "/overview",
    response_model=ApiResponse[OverviewAnalytics],
    summary="Overview report",
    description="KPIs compared with the previous equal period, plus charts.",
)
async def overview(
    db: DbSession,
    admin: ManagerAdmin,
    range: AnalyticsRange = Query(default="30d", description="Report range"),
) -> ApiResponse[OverviewAnalytics]:
    return ApiResponse(data=await AnalyticsService(db).overview(range))
