"""
TripScore aggregation.

A TripScore is the number of unique verified places a user has been to. The
aggregator turns a list of visits into a ``ScoreSnapshot``: places are
deduplicated on their cluster key, resolved to a canonical continent and
country, and counted once in their country bucket. Continent and global
totals are then derived from the country buckets, never kept as separate
counters, so every view of the same visits adds up the same way.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..models.visit import Visit
from .clustering import DEFAULT_PRECISION, cluster_key_or_none
from .distance import cumulative_distance
from .fallbacks import continent_from_address, continent_from_coordinates, country_from_address
from .normalizer import (
    UNKNOWN_CONTINENT,
    UNKNOWN_COUNTRY,
    continent_for_country,
    normalize_continent,
    normalize_country,
)

logger = logging.getLogger(__name__)


@dataclass
class UniquePlace:
    """One deduplicated place, represented by the first visit seen in its cell."""
    key: str
    continent: str
    country: str
    visit: Visit

    @property
    def lat(self) -> float:
        return self.visit.lat

    @property
    def lng(self) -> float:
        return self.visit.lng

    @property
    def address(self) -> Optional[str]:
        return self.visit.address

    @property
    def visited_at(self) -> datetime:
        return self.visit.visited_at


@dataclass
class ScoreSnapshot:
    """Scores for one query. Built per request and thrown away afterwards."""
    country_scores: Dict[str, Dict[str, int]] = field(default_factory=dict)
    places: List[UniquePlace] = field(default_factory=list)
    continents: Dict[str, int] = field(default_factory=dict)
    countries: Dict[str, int] = field(default_factory=dict)
    total_score: int = 0

    @property
    def unknown_score(self) -> int:
        return self.continents.get(UNKNOWN_CONTINENT, 0)

    def places_in(self, continent: Optional[str] = None, country: Optional[str] = None) -> List[UniquePlace]:
        return [place for place in self.places if _in_scope(place, continent, country)]

    def distance_km(self, continent: Optional[str] = None, country: Optional[str] = None) -> float:
        """Unrounded path length over the scope's places in chronological order."""
        return cumulative_distance((place.lat, place.lng) for place in self.places_in(continent, country))


def resolve_country(visit: Visit) -> str:
    """Canonical country for a visit, falling back to address keywords."""
    country = normalize_country(visit.raw_country)
    if country != UNKNOWN_COUNTRY:
        return country
    return country_from_address(visit.address) or UNKNOWN_COUNTRY


def resolve_continent(visit: Visit, country: str) -> str:
    """
    Canonical continent for a visit.

    The stored continent name wins. Without one, the country's continent from
    the reference table is used, then the coordinate bounding boxes, then
    address keywords.
    """
    continent = normalize_continent(visit.raw_continent)
    if continent != UNKNOWN_CONTINENT:
        return continent

    continent = continent_for_country(country)
    if continent != UNKNOWN_CONTINENT:
        return continent

    continent = continent_from_coordinates(visit.lat, visit.lng)
    if continent != UNKNOWN_CONTINENT:
        return continent

    return continent_from_address(visit.address)


def _sort_key(visit: Visit) -> datetime:
    visited_at = visit.visited_at
    if visited_at.tzinfo is not None:
        visited_at = visited_at.astimezone(timezone.utc).replace(tzinfo=None)
    return visited_at


def sort_chronologically(visits: Iterable[Visit]) -> List[Visit]:
    """Oldest first by capture time, upload time when capture time is missing."""
    return sorted(visits, key=_sort_key)


def _in_scope(place: UniquePlace, continent: Optional[str], country: Optional[str]) -> bool:
    if continent is not None and place.continent != normalize_continent(continent):
        return False
    if country is not None and place.country.casefold() != normalize_country(country).casefold():
        return False
    return True


class ScoreAggregator:
    """Builds score snapshots from raw visits."""

    def __init__(self, precision: int = DEFAULT_PRECISION):
        self.precision = precision

    def unique_places(self, visits: Iterable[Visit]) -> List[UniquePlace]:
        """
        Deduplicate eligible visits into places, in chronological order.

        Ineligible visits and visits without usable coordinates are dropped.
        """
        seen = set()
        places = []
        skipped = 0

        for visit in sort_chronologically(v for v in visits if v.counts_towards_score):
            key = cluster_key_or_none(visit.lat, visit.lng, self.precision)
            if key is None:
                skipped += 1
                continue
            if key in seen:
                continue
            seen.add(key)

            country = resolve_country(visit)
            places.append(UniquePlace(
                key=key,
                continent=resolve_continent(visit, country),
                country=country,
                visit=visit,
            ))

        if skipped:
            logger.debug("Skipped %d eligible visits without usable coordinates", skipped)
        return places

    def aggregate(
        self,
        visits: Iterable[Visit],
        continent: Optional[str] = None,
        country: Optional[str] = None,
    ) -> ScoreSnapshot:
        """
        Score the visits, optionally narrowed to one continent and/or country.

        Places are deduplicated across the whole visit set before the scope
        is applied, so a continent view always agrees with the global view.
        """
        country_scores: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        places = []

        for place in self.unique_places(visits):
            if not _in_scope(place, continent, country):
                continue
            places.append(place)
            country_scores[place.continent][place.country] += 1

        # Parent totals are always re-derived from their children.
        continents = {name: sum(scores.values()) for name, scores in country_scores.items()}
        countries: Dict[str, int] = defaultdict(int)
        for scores in country_scores.values():
            for name, score in scores.items():
                countries[name] += score
        total_score = sum(continents.values())

        # One point per cell: the bucket sum must equal the distinct cells in scope
        distinct_cells = len({place.key for place in places})
        if total_score != distinct_cells:
            logger.warning(
                "TripScore mismatch detected: calculated_total=%d, distinct_cells=%d. Using calculated total.",
                total_score, distinct_cells,
            )

        snapshot = ScoreSnapshot(
            country_scores={name: dict(scores) for name, scores in country_scores.items()},
            places=places,
            continents=continents,
            countries=dict(countries),
            total_score=total_score,
        )

        if snapshot.unknown_score:
            logger.warning(
                "%d of %d unique places have no resolvable continent; they count toward the total "
                "but not toward any named continent",
                snapshot.unknown_score, total_score,
            )

        return snapshot
