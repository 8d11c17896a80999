import itertools
import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from tripscore.models.visit import Visit  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def make_visit():
    """Factory for verified, active visits; every field can be overridden."""
    counter = itertools.count(1)

    def factory(lat=35.0, lng=139.0, country=None, continent=None, **overrides):
        n = next(counter)
        fields = dict(
            id=f"visit-{n}",
            user_id="user-1",
            lat=lat,
            lng=lng,
            raw_country=country,
            raw_continent=continent,
            source="camera_live",
            trust_level="high",
            verification_status="auto_verified",
            taken_at=BASE_TIME + timedelta(hours=n),
            uploaded_at=BASE_TIME + timedelta(hours=n, minutes=5),
            is_active=True,
        )
        fields.update(overrides)
        return Visit(**fields)

    return factory
