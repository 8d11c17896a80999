"""
Response shapes built on top of the aggregator.

Each builder takes the visits fetched for one request and returns a response
model. They hold no state and do no scoring of their own.
"""
import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from fastapi import HTTPException, status

from ..models.tripscore import (
    CategoryTags,
    ContinentScore,
    ContinentsResponse,
    Coordinates,
    CountriesResponse,
    CountryDetailsResponse,
    CountryScore,
    PlaceDetail,
    TravelMapPlace,
    TravelMapResponse,
    TravelMapStatistics,
    TripScoreSummary,
)
from ..models.visit import Visit
from .aggregator import ScoreAggregator, UniquePlace
from .clustering import DEFAULT_PRECISION
from .distance import cumulative_distance, round_km
from .media import MediaClient, clean_media, pick_representative_image
from .normalizer import (
    CONTINENTS,
    UNKNOWN_CONTINENT,
    get_countries_for_continent,
    normalize_continent,
    normalize_country,
)

UNKNOWN_LOCATION = "Unknown Location"
DEFAULT_TRAVEL_INFO = "Drivable"
DEFAULT_SPOT_TYPE = "General"
DEFAULT_MEDIA_CONCURRENCY = 8

logger = logging.getLogger(__name__)


def build_summary(visits: Sequence[Visit], precision: int = DEFAULT_PRECISION) -> TripScoreSummary:
    snapshot = ScoreAggregator(precision).aggregate(visits)
    return TripScoreSummary(
        total_score=snapshot.total_score,
        continents=snapshot.continents,
        countries=snapshot.countries,
    )


def build_continents_breakdown(visits: Sequence[Visit], precision: int = DEFAULT_PRECISION) -> ContinentsResponse:
    """Score and distance for each of the seven continents."""
    snapshot = ScoreAggregator(precision).aggregate(visits)

    continents = [
        ContinentScore(
            name=name,
            score=snapshot.continents.get(name, 0),
            distance_km=round_km(snapshot.distance_km(continent=name)),
        )
        for name in CONTINENTS
    ]

    return ContinentsResponse(
        total_score=snapshot.total_score,
        unknown_score=snapshot.unknown_score,
        continents=continents,
    )


def build_countries_breakdown(
    visits: Sequence[Visit],
    continent: str,
    precision: int = DEFAULT_PRECISION,
) -> CountriesResponse:
    """Every reference country of a continent, visited or not, alphabetically."""
    continent_key = normalize_continent(continent)
    if continent_key == UNKNOWN_CONTINENT:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown continent: {continent}"
        )

    snapshot = ScoreAggregator(precision).aggregate(visits, continent=continent_key)
    country_scores = snapshot.country_scores.get(continent_key, {})

    names = set(get_countries_for_continent(continent_key)) | set(country_scores)
    countries = [
        CountryScore(name=name, score=country_scores.get(name, 0), visited=country_scores.get(name, 0) > 0)
        for name in sorted(names, key=str.casefold)
    ]

    return CountriesResponse(
        continent=continent_key,
        continent_score=sum(country.score for country in countries),
        countries=countries,
    )


async def _enrich(
    place: UniquePlace,
    media_client: Optional[MediaClient],
    semaphore: asyncio.Semaphore,
) -> Tuple[Optional[str], Optional[str]]:
    if media_client is None or not place.visit.post_id:
        return None, None

    async with semaphore:
        media = await media_client.get_post_media(place.visit.post_id)
    if not media:
        return None, None
    if not isinstance(media, dict):
        logger.warning("Ignoring media for post %s: expected an object, got %r", place.visit.post_id, type(media))
        return None, None

    media = clean_media(media)
    return pick_representative_image(media), media.get("caption") or None


def _place_detail(place: UniquePlace, image_url: Optional[str], caption: Optional[str]) -> PlaceDetail:
    return PlaceDetail(
        name=place.address or UNKNOWN_LOCATION,
        score=1,
        date=place.visited_at,
        coordinates=Coordinates(latitude=place.lat, longitude=place.lng),
        category_tags=CategoryTags(
            travel_info=place.visit.travel_info or DEFAULT_TRAVEL_INFO,
            spot_type=place.visit.spot_type or DEFAULT_SPOT_TYPE,
        ),
        caption=caption,
        image_url=image_url,
    )


async def build_country_details(
    visits: Sequence[Visit],
    country: str,
    media_client: Optional[MediaClient] = None,
    precision: int = DEFAULT_PRECISION,
    media_concurrency: int = DEFAULT_MEDIA_CONCURRENCY,
) -> CountryDetailsResponse:
    """
    Unique places in one country, newest first, with best-effort images.

    At most ``media_concurrency`` media lookups are in flight at once.
    """
    country_name = normalize_country(country)
    snapshot = ScoreAggregator(precision).aggregate(visits, country=country_name)

    if snapshot.places:
        country_name = snapshot.places[0].country

    semaphore = asyncio.Semaphore(max(1, media_concurrency))
    enrichments = await asyncio.gather(
        *(_enrich(place, media_client, semaphore) for place in snapshot.places)
    )
    places = [
        _place_detail(place, image_url, caption)
        for place, (image_url, caption) in zip(snapshot.places, enrichments)
    ]
    places.sort(key=lambda p: _comparable(p.date), reverse=True)

    return CountryDetailsResponse(
        country=country_name,
        country_score=snapshot.total_score,
        country_distance_km=round_km(snapshot.distance_km()),
        places=places,
    )


def _comparable(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def build_travel_map(
    visits: Sequence[Visit],
    precision: int = DEFAULT_PRECISION,
    now: Optional[datetime] = None,
) -> TravelMapResponse:
    """Numbered unique places in visiting order plus travel statistics."""
    places: List[UniquePlace] = ScoreAggregator(precision).unique_places(visits)

    map_places = [
        TravelMapPlace(
            number=number,
            lat=place.lat,
            lng=place.lng,
            address=place.address or UNKNOWN_LOCATION,
            date=place.visited_at,
        )
        for number, place in enumerate(places, 1)
    ]

    total_days = 0
    if places:
        first_visit = _comparable(places[0].visited_at)
        current = _comparable(now) if now else datetime.utcnow()
        elapsed = (current - first_visit).total_seconds()
        total_days = max(0, math.ceil(elapsed / 86400))

    return TravelMapResponse(
        places=map_places,
        statistics=TravelMapStatistics(
            total_places=len(map_places),
            total_distance_km=round_km(cumulative_distance((p.lat, p.lng) for p in places)),
            total_days_since_first_visit=total_days,
        ),
    )
