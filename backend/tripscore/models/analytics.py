from typing import Dict, List, Optional
from datetime import datetime

from .tripscore import CamelModel


class TripScoreStats(CamelModel):
    """Platform-wide visit counts."""
    total_visits: int
    unique_users: int
    unique_places: int
    scoring_visits: int
    suspicious_visits: int
    trust_breakdown: Dict[str, int]
    source_breakdown: Dict[str, int]
    verification_breakdown: Dict[str, int]


class TopUser(CamelModel):
    user_id: str
    trip_score: int
    total_visits: int


class TopUsersResponse(CamelModel):
    top_users: List[TopUser]


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SuspiciousVisit(CamelModel):
    id: str
    user_id: str
    post_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    country: str
    continent: str
    source: str
    verification_status: str
    taken_at: Optional[datetime] = None
    uploaded_at: datetime


class SuspiciousVisitsResponse(CamelModel):
    suspicious_visits: List[SuspiciousVisit]
    pagination: Pagination


class TrustTimelineEntry(CamelModel):
    date: str
    high: int = 0
    medium: int = 0
    low: int = 0
    unverified: int = 0
    suspicious: int = 0


class TrustTimelineResponse(CamelModel):
    group_by: str
    timeline: List[TrustTimelineEntry]


class ContinentBreakdown(CamelModel):
    continent: str
    unique_places: int
    total_visits: int


class ContinentBreakdownResponse(CamelModel):
    total_score: int
    continents: List[ContinentBreakdown]


class CountryBreakdown(CamelModel):
    country: str
    continent: str
    unique_places: int
    total_visits: int
    unique_users: int


class CountryBreakdownResponse(CamelModel):
    countries: List[CountryBreakdown]


class LocationBreakdown(CamelModel):
    lat: float
    lng: float
    address: Optional[str] = None
    country: str
    continent: str
    visit_count: int
    unique_users: int
    first_visit: datetime
    last_visit: datetime


class LocationBreakdownResponse(CamelModel):
    locations: List[LocationBreakdown]
    pagination: Pagination
