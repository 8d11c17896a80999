"""
Admin analytics across all users.

Same clustering, normalization and aggregation as the per-user views, applied
to the platform-wide visit set.
"""
import math
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence

from ..models.analytics import (
    ContinentBreakdown,
    ContinentBreakdownResponse,
    CountryBreakdown,
    CountryBreakdownResponse,
    LocationBreakdown,
    LocationBreakdownResponse,
    Pagination,
    SuspiciousVisit,
    SuspiciousVisitsResponse,
    TopUser,
    TopUsersResponse,
    TripScoreStats,
    TrustTimelineEntry,
    TrustTimelineResponse,
)
from ..models.visit import TRUST_LEVELS, VERIFICATION_STATUSES, VISIT_SOURCES, Visit
from .aggregator import ScoreAggregator, resolve_continent, resolve_country
from .clustering import DEFAULT_PRECISION, cluster_key_or_none, round_coordinate
from .normalizer import normalize_continent

TIMELINE_FORMATS = {
    "hour": "%Y-%m-%d %H:00",
    "day": "%Y-%m-%d",
    "week": "%G-W%V",
    "month": "%Y-%m",
}


def _paginate(total: int, page: int, limit: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


def _visits_by_cell(visits: Sequence[Visit], precision: int) -> Dict[str, List[Visit]]:
    cells = defaultdict(list)
    for visit in visits:
        if not visit.counts_towards_score:
            continue
        key = cluster_key_or_none(visit.lat, visit.lng, precision)
        if key is not None:
            cells[key].append(visit)
    return cells


def get_stats(visits: Sequence[Visit], precision: int = DEFAULT_PRECISION) -> TripScoreStats:
    """Totals and trust/source/verification breakdowns over active visits."""
    trust = Counter(v.trust_level for v in visits)
    sources = Counter(v.source for v in visits)
    verification = Counter(v.verification_status for v in visits)

    return TripScoreStats(
        total_visits=len(visits),
        unique_users=len({v.user_id for v in visits}),
        unique_places=len(ScoreAggregator(precision).unique_places(visits)),
        scoring_visits=sum(1 for v in visits if v.counts_towards_score),
        suspicious_visits=trust.get("suspicious", 0),
        trust_breakdown={level: trust.get(level, 0) for level in TRUST_LEVELS},
        source_breakdown={source: sources.get(source, 0) for source in VISIT_SOURCES},
        verification_breakdown={s: verification.get(s, 0) for s in VERIFICATION_STATUSES},
    )


def get_top_users(visits: Sequence[Visit], limit: int = 10, precision: int = DEFAULT_PRECISION) -> TopUsersResponse:
    """Users ranked by TripScore, each scored exactly like their own profile."""
    by_user = defaultdict(list)
    for visit in visits:
        by_user[visit.user_id].append(visit)

    aggregator = ScoreAggregator(precision)
    users = [
        TopUser(
            user_id=user_id,
            trip_score=aggregator.aggregate(user_visits).total_score,
            total_visits=sum(1 for v in user_visits if v.counts_towards_score),
        )
        for user_id, user_visits in by_user.items()
    ]
    users = [user for user in users if user.trip_score > 0]
    users.sort(key=lambda user: (-user.trip_score, user.user_id))
    return TopUsersResponse(top_users=users[:limit])


def get_suspicious_visits(visits: Sequence[Visit], page: int = 1, limit: int = 50) -> SuspiciousVisitsResponse:
    """Visits flagged suspicious at ingestion, newest upload first."""
    flagged = sorted(
        (v for v in visits if v.trust_level == "suspicious"),
        key=lambda v: (v.uploaded_at, v.id),
        reverse=True,
    )
    start = (page - 1) * limit

    items = []
    for visit in flagged[start:start + limit]:
        country = resolve_country(visit)
        items.append(SuspiciousVisit(
            id=visit.id,
            user_id=visit.user_id,
            post_id=visit.post_id,
            lat=visit.lat,
            lng=visit.lng,
            address=visit.address,
            country=country,
            continent=resolve_continent(visit, country),
            source=visit.source,
            verification_status=visit.verification_status,
            taken_at=visit.taken_at,
            uploaded_at=visit.uploaded_at,
        ))

    return SuspiciousVisitsResponse(suspicious_visits=items, pagination=_paginate(len(flagged), page, limit))


def get_trust_timeline(visits: Sequence[Visit], group_by: str = "day") -> TrustTimelineResponse:
    """Visit counts per trust level, bucketed by upload time."""
    date_format = TIMELINE_FORMATS.get(group_by, TIMELINE_FORMATS["day"])
    buckets: Dict[str, Counter] = defaultdict(Counter)
    for visit in visits:
        buckets[visit.uploaded_at.strftime(date_format)][visit.trust_level] += 1

    timeline = [
        TrustTimelineEntry(date=date, **{level: counts.get(level, 0) for level in TRUST_LEVELS})
        for date, counts in sorted(buckets.items())
    ]
    return TrustTimelineResponse(group_by=group_by if group_by in TIMELINE_FORMATS else "day", timeline=timeline)


def get_continent_breakdown(visits: Sequence[Visit], precision: int = DEFAULT_PRECISION) -> ContinentBreakdownResponse:
    """Unique places per continent across all users."""
    snapshot = ScoreAggregator(precision).aggregate(visits)
    cells = _visits_by_cell(visits, precision)

    total_visits = Counter()
    for place in snapshot.places:
        total_visits[place.continent] += len(cells[place.key])

    continents = [
        ContinentBreakdown(continent=name, unique_places=score, total_visits=total_visits[name])
        for name, score in snapshot.continents.items()
    ]
    continents.sort(key=lambda c: (-c.unique_places, c.continent))
    return ContinentBreakdownResponse(total_score=snapshot.total_score, continents=continents)


def get_country_breakdown(
    visits: Sequence[Visit],
    continent: Optional[str] = None,
    precision: int = DEFAULT_PRECISION,
) -> CountryBreakdownResponse:
    """Unique places per country across all users, optionally for one continent."""
    scope = normalize_continent(continent) if continent else None
    snapshot = ScoreAggregator(precision).aggregate(visits, continent=scope)
    cells = _visits_by_cell(visits, precision)

    rows = {}
    for place in snapshot.places:
        bucket = (place.continent, place.country)
        if bucket not in rows:
            rows[bucket] = {"places": 0, "visits": 0, "users": set()}
        rows[bucket]["places"] += 1
        rows[bucket]["visits"] += len(cells[place.key])
        rows[bucket]["users"].update(v.user_id for v in cells[place.key])

    countries = [
        CountryBreakdown(
            country=country,
            continent=continent_name,
            unique_places=row["places"],
            total_visits=row["visits"],
            unique_users=len(row["users"]),
        )
        for (continent_name, country), row in rows.items()
    ]
    countries.sort(key=lambda c: (-c.unique_places, c.country))
    return CountryBreakdownResponse(countries=countries)


def get_location_breakdown(
    visits: Sequence[Visit],
    page: int = 1,
    limit: int = 100,
    precision: int = DEFAULT_PRECISION,
) -> LocationBreakdownResponse:
    """Most visited cells across all users."""
    places = ScoreAggregator(precision).unique_places(visits)
    cells = _visits_by_cell(visits, precision)

    locations = []
    for place in places:
        cell_visits = cells[place.key]
        visited = [v.visited_at for v in cell_visits]
        locations.append(LocationBreakdown(
            lat=round_coordinate(place.lat, precision),
            lng=round_coordinate(place.lng, precision),
            address=place.address,
            country=place.country,
            continent=place.continent,
            visit_count=len(cell_visits),
            unique_users=len({v.user_id for v in cell_visits}),
            first_visit=min(visited),
            last_visit=max(visited),
        ))

    locations.sort(key=lambda loc: -loc.visit_count)
    start = (page - 1) * limit
    return LocationBreakdownResponse(
        locations=locations[start:start + limit],
        pagination=_paginate(len(locations), page, limit),
    )
