from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_visit_repository
from ..models.analytics import (
    ContinentBreakdownResponse,
    CountryBreakdownResponse,
    LocationBreakdownResponse,
    SuspiciousVisitsResponse,
    TopUsersResponse,
    TripScoreStats,
    TrustTimelineResponse,
)
from ..services import analytics
from ..services.visits import VisitRepository
from ..config import get_settings

router = APIRouter(prefix="/admin/tripscore", tags=["TripScore Analytics"])
settings = get_settings()


async def _active_visits(repository: VisitRepository, start_date: Optional[datetime], end_date: Optional[datetime]):
    return await repository.get_active_visits(
        start_date=start_date, end_date=end_date, limit=settings.ANALYTICS_FETCH_LIMIT
    )


@router.get("/stats", response_model=TripScoreStats)
async def get_stats(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get platform-wide visit totals and trust/source breakdowns."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_stats(visits, precision=settings.CLUSTER_PRECISION)


@router.get("/top-users", response_model=TopUsersResponse)
async def get_top_users(
    limit: int = Query(10, ge=1, le=100),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get the users with the highest TripScore."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_top_users(visits, limit=limit, precision=settings.CLUSTER_PRECISION)


@router.get("/suspicious-visits", response_model=SuspiciousVisitsResponse)
async def get_suspicious_visits(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get visits flagged as suspicious for review."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_suspicious_visits(visits, page=page, limit=limit)


@router.get("/trust-timeline", response_model=TrustTimelineResponse)
async def get_trust_timeline(
    group_by: Literal["hour", "day", "week", "month"] = "day",
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get visit counts per trust level over time."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_trust_timeline(visits, group_by=group_by)


@router.get("/continents", response_model=ContinentBreakdownResponse)
async def get_continent_breakdown(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get unique places per continent across all users."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_continent_breakdown(visits, precision=settings.CLUSTER_PRECISION)


@router.get("/countries", response_model=CountryBreakdownResponse)
async def get_country_breakdown(
    continent: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get unique places per country across all users."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_country_breakdown(visits, continent=continent, precision=settings.CLUSTER_PRECISION)


@router.get("/locations", response_model=LocationBreakdownResponse)
async def get_location_breakdown(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get the most visited locations across all users."""
    visits = await _active_visits(repository, start_date, end_date)
    return analytics.get_location_breakdown(visits, page=page, limit=limit, precision=settings.CLUSTER_PRECISION)
