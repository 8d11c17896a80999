from datetime import datetime

import pytest

from tripscore.services import analytics


@pytest.fixture
def platform_visits(make_visit):
    return [
        make_visit(35.0, 139.0, country="Japan", user_id="alice", address="Tokyo"),
        make_visit(35.001, 139.001, country="Japan", user_id="bob", address="Tokyo station"),
        make_visit(48.8, 2.3, country="France", user_id="alice", address="Paris"),
        make_visit(51.5, -0.12, country="England", user_id="alice", trust_level="medium"),
        make_visit(40.7, -74.0, country="New York", user_id="bob", trust_level="suspicious",
                   verification_status="pending", source="gallery_no_exif",
                   uploaded_at=datetime(2024, 2, 1)),
        make_visit(13.75, 100.5, country="Thailand", user_id="carol", trust_level="low",
                   verification_status="rejected", source="manual_only"),
    ]


def test_stats(platform_visits):
    stats = analytics.get_stats(platform_visits)

    assert stats.total_visits == 6
    assert stats.unique_users == 3
    assert stats.unique_places == 3
    assert stats.scoring_visits == 4
    assert stats.suspicious_visits == 1
    assert stats.trust_breakdown == {"high": 3, "medium": 1, "low": 1, "unverified": 0, "suspicious": 1}
    assert stats.source_breakdown["camera_live"] == 4
    assert stats.source_breakdown["gallery_exif"] == 0
    assert stats.verification_breakdown == {"pending": 1, "auto_verified": 4, "approved": 0, "rejected": 1}


def test_top_users_are_scored_like_profiles(platform_visits):
    response = analytics.get_top_users(platform_visits, limit=10)

    assert [(u.user_id, u.trip_score) for u in response.top_users] == [("alice", 3), ("bob", 1)]
    assert response.top_users[0].total_visits == 3


def test_top_users_limit(platform_visits):
    assert len(analytics.get_top_users(platform_visits, limit=1).top_users) == 1


def test_suspicious_visits(platform_visits):
    response = analytics.get_suspicious_visits(platform_visits, page=1, limit=10)

    assert len(response.suspicious_visits) == 1
    flagged = response.suspicious_visits[0]
    assert flagged.user_id == "bob"
    assert flagged.country == "United States"
    assert flagged.continent == "NORTH AMERICA"
    assert response.pagination.total == 1
    assert response.pagination.total_pages == 1


def test_suspicious_visits_pagination(make_visit):
    visits = [
        make_visit(35.0 + i, 139.0, trust_level="suspicious", uploaded_at=datetime(2024, 1, i + 1))
        for i in range(5)
    ]
    response = analytics.get_suspicious_visits(visits, page=2, limit=2)

    assert [v.uploaded_at.day for v in response.suspicious_visits] == [3, 2]
    assert response.pagination.total_pages == 3


def test_trust_timeline(platform_visits):
    response = analytics.get_trust_timeline(platform_visits, group_by="month")

    assert response.group_by == "month"
    assert [entry.date for entry in response.timeline] == ["2024-01", "2024-02"]
    january = response.timeline[0]
    assert (january.high, january.medium, january.low, january.suspicious) == (3, 1, 1, 0)
    assert response.timeline[1].suspicious == 1


def test_trust_timeline_by_day(make_visit):
    visits = [
        make_visit(uploaded_at=datetime(2024, 1, 1, 8)),
        make_visit(uploaded_at=datetime(2024, 1, 1, 20)),
        make_visit(uploaded_at=datetime(2024, 1, 2, 8), trust_level="low"),
    ]
    response = analytics.get_trust_timeline(visits)
    assert [(e.date, e.high, e.low) for e in response.timeline] == [("2024-01-01", 2, 0), ("2024-01-02", 0, 1)]


def test_continent_breakdown(platform_visits):
    response = analytics.get_continent_breakdown(platform_visits)

    assert response.total_score == 3
    by_name = {c.continent: c for c in response.continents}
    assert by_name["EUROPE"].unique_places == 2
    assert by_name["ASIA"].unique_places == 1
    assert by_name["ASIA"].total_visits == 2
    assert response.continents[0].continent == "EUROPE"


def test_country_breakdown(platform_visits):
    response = analytics.get_country_breakdown(platform_visits)
    by_name = {c.country: c for c in response.countries}

    assert set(by_name) == {"Japan", "France", "United Kingdom"}
    assert by_name["Japan"].unique_users == 2
    assert by_name["Japan"].total_visits == 2

    europe = analytics.get_country_breakdown(platform_visits, continent="europe")
    assert {c.country for c in europe.countries} == {"France", "United Kingdom"}


def test_location_breakdown(platform_visits):
    response = analytics.get_location_breakdown(platform_visits, page=1, limit=2)

    top = response.locations[0]
    assert (top.lat, top.lng) == (35.0, 139.0)
    assert top.address == "Tokyo"
    assert top.visit_count == 2
    assert top.unique_users == 2
    assert top.first_visit < top.last_visit
    assert len(response.locations) == 2
    assert response.pagination.total == 3
    assert response.pagination.total_pages == 2
