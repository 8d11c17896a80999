from fastapi import APIRouter, Depends

from ..dependencies import get_media_client, get_user_id, get_visit_repository
from ..models.tripscore import (
    ContinentsResponse,
    CountriesResponse,
    CountryDetailsResponse,
    TravelMapResponse,
    TripScoreSummary,
)
from ..services import reporting
from ..services.media import MediaClient
from ..services.visits import VisitRepository
from ..config import get_settings

router = APIRouter(prefix="/users/{user_id}", tags=["TripScore"])
settings = get_settings()


@router.get("/tripscore", response_model=TripScoreSummary)
async def get_tripscore_summary(
    user_id: str = Depends(get_user_id),
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get the compact TripScore shown on a profile."""
    visits = await repository.get_scoring_visits(user_id, limit=settings.VISIT_FETCH_LIMIT)
    return reporting.build_summary(visits, precision=settings.CLUSTER_PRECISION)


@router.get("/tripscore/continents", response_model=ContinentsResponse)
async def get_tripscore_continents(
    user_id: str = Depends(get_user_id),
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get the TripScore breakdown for all seven continents."""
    visits = await repository.get_scoring_visits(user_id, limit=settings.VISIT_FETCH_LIMIT)
    return reporting.build_continents_breakdown(visits, precision=settings.CLUSTER_PRECISION)


@router.get("/tripscore/continents/{continent}/countries", response_model=CountriesResponse)
async def get_tripscore_countries(
    continent: str,
    user_id: str = Depends(get_user_id),
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get every country of a continent with the user's score in each."""
    visits = await repository.get_scoring_visits(user_id, limit=settings.VISIT_FETCH_LIMIT)
    return reporting.build_countries_breakdown(visits, continent, precision=settings.CLUSTER_PRECISION)


@router.get(
    "/tripscore/countries/{country}",
    response_model=CountryDetailsResponse,
    response_model_exclude_none=True
)
async def get_tripscore_country_details(
    country: str,
    user_id: str = Depends(get_user_id),
    repository: VisitRepository = Depends(get_visit_repository),
    media_client: MediaClient = Depends(get_media_client)
):
    """Get the unique places a user visited in one country."""
    visits = await repository.get_scoring_visits(user_id, limit=settings.VISIT_FETCH_LIMIT)
    return await reporting.build_country_details(
        visits,
        country,
        media_client=media_client,
        precision=settings.CLUSTER_PRECISION,
        media_concurrency=settings.MEDIA_MAX_CONCURRENCY,
    )


@router.get("/travel-map", response_model=TravelMapResponse)
async def get_travel_map(
    user_id: str = Depends(get_user_id),
    repository: VisitRepository = Depends(get_visit_repository)
):
    """Get numbered travel map points and travel statistics."""
    visits = await repository.get_scoring_visits(user_id, limit=settings.VISIT_FETCH_LIMIT)
    return reporting.build_travel_map(visits, precision=settings.CLUSTER_PRECISION)
