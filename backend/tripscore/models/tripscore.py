from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TripScoreSummary(CamelModel):
    """Compact TripScore shown on a profile."""
    total_score: int
    continents: Dict[str, int]
    countries: Dict[str, int]


class ContinentScore(CamelModel):
    """Score and distance travelled within one continent."""
    name: str
    score: int
    distance_km: int


class ContinentsResponse(CamelModel):
    """Response with the seven-continent breakdown."""
    total_score: int
    unknown_score: int = 0
    continents: List[ContinentScore]


class CountryScore(CamelModel):
    """One country in a continent breakdown."""
    name: str
    score: int
    visited: bool


class CountriesResponse(CamelModel):
    """Response with every country of one continent."""
    continent: str
    continent_score: int
    countries: List[CountryScore]


class Coordinates(CamelModel):
    latitude: float
    longitude: float


class CategoryTags(CamelModel):
    travel_info: str
    spot_type: str


class PlaceDetail(CamelModel):
    """A unique place inside a country."""
    name: str
    score: int = 1
    date: datetime
    coordinates: Coordinates
    category_tags: CategoryTags
    caption: Optional[str] = None
    image_url: Optional[str] = None


class CountryDetailsResponse(CamelModel):
    """Response with the places visited in one country."""
    country: str
    country_score: int
    country_distance_km: int
    places: List[PlaceDetail]


class TravelMapPlace(CamelModel):
    """Numbered point on the travel map."""
    number: int
    lat: float
    lng: float
    address: str
    date: datetime


class TravelMapStatistics(CamelModel):
    total_places: int
    total_distance_km: int
    total_days_since_first_visit: int


class TravelMapResponse(CamelModel):
    """Response with the travel map points and statistics."""
    places: List[TravelMapPlace]
    statistics: TravelMapStatistics
