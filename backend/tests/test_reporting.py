import asyncio
from datetime import datetime

import pytest

from fastapi import HTTPException

from tripscore.services import reporting
from tripscore.services.normalizer import CONTINENTS, get_countries_for_continent


class FakeMediaClient:
    """Returns canned media per post id."""

    def __init__(self, media=None):
        self.media = media or {}
        self.calls = []

    async def get_post_media(self, post_id):
        self.calls.append(post_id)
        return self.media.get(post_id)


@pytest.fixture
def japan_france(make_visit):
    return [
        make_visit(35.00, 139.00, country="Japan"),
        make_visit(35.004, 139.004, country="Japan"),
        make_visit(48.80, 2.30, country="France"),
    ]


def test_continents_breakdown(japan_france):
    response = reporting.build_continents_breakdown(japan_france)

    assert [c.name for c in response.continents] == list(CONTINENTS)
    scores = {c.name: c.score for c in response.continents}
    assert scores["ASIA"] == 1
    assert scores["EUROPE"] == 1
    assert response.total_score == 2 == sum(scores.values())
    assert response.unknown_score == 0


def test_empty_continents_report_zero(japan_france):
    response = reporting.build_continents_breakdown(japan_france)
    africa = next(c for c in response.continents if c.name == "AFRICA")
    assert africa.score == 0
    assert africa.distance_km == 0


def test_continents_breakdown_without_visits():
    response = reporting.build_continents_breakdown([])
    assert response.total_score == 0
    assert all(c.score == 0 and c.distance_km == 0 for c in response.continents)


def test_continent_distance_is_rounded_at_the_end(make_visit):
    visits = [
        make_visit(35.0, 139.0, country="Japan"),
        make_visit(34.69, 135.50, country="Japan"),
    ]
    response = reporting.build_continents_breakdown(visits)
    asia = next(c for c in response.continents if c.name == "ASIA")
    assert isinstance(asia.distance_km, int)
    assert 300 < asia.distance_km < 340


def test_countries_of_asia(japan_france):
    response = reporting.build_countries_breakdown(japan_france, "Asia")

    assert response.continent == "ASIA"
    assert response.continent_score == 1
    by_name = {c.name: c for c in response.countries}
    assert by_name["Japan"].score == 1
    assert by_name["Japan"].visited is True
    assert set(by_name) == set(get_countries_for_continent("ASIA"))
    assert all(c.score == 0 and not c.visited for name, c in by_name.items() if name != "Japan")
    names = [c.name for c in response.countries]
    assert names == sorted(names, key=str.casefold)


def test_countries_of_europe_merge_uk_nations(make_visit):
    visits = [
        make_visit(51.50, -0.12, country="England"),
        make_visit(55.95, -3.19, country="Scotland"),
        make_visit(55.951, -3.191, country="Scotland"),
    ]
    response = reporting.build_countries_breakdown(visits, "EUROPE")

    uk = [c for c in response.countries if c.name == "United Kingdom"]
    assert len(uk) == 1
    assert uk[0].score == 2
    assert response.continent_score == 2
    assert not any(c.name in ("England", "Scotland") for c in response.countries)


def test_countries_breakdown_lists_unlisted_countries(make_visit):
    visits = [make_visit(35.0, 139.0, country="Zipangu", continent="Asia")]
    response = reporting.build_countries_breakdown(visits, "asia")
    assert {c.name: c.score for c in response.countries}["Zipangu"] == 1


def test_countries_breakdown_rejects_unknown_continent(japan_france):
    with pytest.raises(HTTPException) as excinfo:
        reporting.build_countries_breakdown(japan_france, "Atlantis")
    assert excinfo.value.status_code == 404


async def test_country_details(make_visit):
    visits = [
        make_visit(35.0, 139.0, country="Japan", address="Tokyo", post_id="p1",
                   taken_at=datetime(2024, 1, 1), spot_type="City"),
        make_visit(34.69, 135.50, country="Japan", address="Osaka", post_id="p2",
                   taken_at=datetime(2024, 2, 1)),
        make_visit(48.8, 2.3, country="France", address="Paris", post_id="p3"),
    ]
    media = FakeMediaClient({"p1": {"type": "photo", "signedUrl": "https://cdn/p1.jpg", "caption": "Shibuya"}})

    response = await reporting.build_country_details(visits, "japan", media_client=media)

    assert response.country == "Japan"
    assert response.country_score == 2
    assert 300 < response.country_distance_km < 340
    assert [p.name for p in response.places] == ["Osaka", "Tokyo"]
    tokyo = response.places[1]
    assert tokyo.score == 1
    assert tokyo.image_url == "https://cdn/p1.jpg"
    assert tokyo.caption == "Shibuya"
    assert tokyo.category_tags.spot_type == "City"
    assert tokyo.category_tags.travel_info == "Drivable"
    assert response.places[0].image_url is None
    assert sorted(media.calls) == ["p1", "p2"]


@pytest.mark.parametrize("payload", [
    {"images": {"cover": "x"}, "caption": 42},
    {"type": "short", "thumbnailUrl": 7, "videoUrl": ["v"], "caption": None},
    {"signedUrl": {"url": "x"}, "images": [None, 3]},
    ["not", "an", "object"],
])
async def test_country_details_survive_malformed_media(make_visit, payload):
    visits = [make_visit(35.0, 139.0, country="Japan", address="Tokyo", post_id="p1")]
    media = FakeMediaClient({"p1": payload})

    response = await reporting.build_country_details(visits, "Japan", media_client=media)

    assert response.country_score == 1
    assert response.places[0].image_url is None
    assert response.places[0].caption is None


async def test_malformed_images_fall_back_to_other_fields(make_visit):
    visits = [make_visit(35.0, 139.0, country="Japan", post_id="p1")]
    media = FakeMediaClient({"p1": {"images": {"cover": "x"}, "imageUrl": "https://cdn/p1.jpg", "caption": "Tokyo"}})

    response = await reporting.build_country_details(visits, "Japan", media_client=media)

    assert response.places[0].image_url == "https://cdn/p1.jpg"
    assert response.places[0].caption == "Tokyo"


class SlowMediaClient:
    """Records how many lookups run at the same time."""

    def __init__(self):
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_post_media(self, post_id):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.001)
        self.in_flight -= 1
        return {"signedUrl": f"https://cdn/{post_id}.jpg"}


async def test_media_lookups_are_bounded(make_visit):
    visits = [make_visit(30.0 + i * 0.1, 135.0, country="Japan", post_id=f"p{i}") for i in range(20)]
    media = SlowMediaClient()

    response = await reporting.build_country_details(visits, "Japan", media_client=media, media_concurrency=3)

    assert len(response.places) == 20
    assert all(place.image_url for place in response.places)
    assert media.max_in_flight == 3


async def test_country_details_for_region_name(make_visit):
    visits = [
        make_visit(51.50, -0.12, country="England", address="London"),
        make_visit(55.95, -3.19, country="Scotland", address="Edinburgh"),
    ]
    response = await reporting.build_country_details(visits, "Scotland")
    assert response.country == "United Kingdom"
    assert response.country_score == 2


async def test_country_details_without_visits():
    response = await reporting.build_country_details([], "Peru")
    assert response.country == "Peru"
    assert response.country_score == 0
    assert response.country_distance_km == 0
    assert response.places == []


def test_travel_map(make_visit):
    visits = [
        make_visit(48.8, 2.3, country="France", address="Paris", taken_at=datetime(2024, 1, 10)),
        make_visit(35.0, 139.0, country="Japan", address="Tokyo", taken_at=datetime(2024, 1, 1)),
        make_visit(35.001, 139.001, country="Japan", address="Tokyo again", taken_at=datetime(2024, 1, 2)),
        make_visit(0, 0, address="Nowhere", taken_at=datetime(2023, 1, 1)),
    ]

    response = reporting.build_travel_map(visits, now=datetime(2024, 1, 11))

    assert [(p.number, p.address) for p in response.places] == [(1, "Tokyo"), (2, "Paris")]
    assert response.statistics.total_places == 2
    assert 9500 < response.statistics.total_distance_km < 9900
    assert response.statistics.total_days_since_first_visit == 10


def test_travel_map_without_visits():
    response = reporting.build_travel_map([])
    assert response.places == []
    assert response.statistics.total_places == 0
    assert response.statistics.total_distance_km == 0
    assert response.statistics.total_days_since_first_visit == 0


def test_summary_uses_camel_case(japan_france):
    summary = reporting.build_summary(japan_france)
    payload = summary.model_dump(by_alias=True)
    assert payload == {
        "totalScore": 2,
        "continents": {"ASIA": 1, "EUROPE": 1},
        "countries": {"Japan": 1, "France": 1},
    }
