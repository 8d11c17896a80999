from datetime import datetime

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tripscore.database.models import TripVisit
from tripscore.database.session import Base
from tripscore.services.visits import VisitRepository


@pytest.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


def row(id, user_id="user-1", **fields):
    defaults = dict(
        lat=35.0,
        lng=139.0,
        country="Japan",
        continent="Asia",
        source="camera_live",
        trust_level="high",
        verification_status="auto_verified",
        taken_at=None,
        uploaded_at=datetime(2024, 1, 1),
        is_active=True,
    )
    defaults.update(fields)
    return TripVisit(id=id, user_id=user_id, **defaults)


async def test_scoring_visits_are_gated_and_ordered(db):
    db.add_all([
        row("late", taken_at=datetime(2024, 5, 1)),
        row("early", taken_at=None, uploaded_at=datetime(2024, 2, 1)),
        row("pending", verification_status="pending"),
        row("rejected", verification_status="rejected"),
        row("approved", verification_status="approved", taken_at=datetime(2024, 3, 1)),
        row("inactive", is_active=False),
        row("other-user", user_id="user-2"),
    ])
    await db.commit()

    visits = await VisitRepository(db).get_scoring_visits("user-1")

    assert [v.id for v in visits] == ["early", "approved", "late"]
    assert visits[0].raw_country == "Japan"
    assert visits[0].raw_continent == "Asia"
    assert all(v.counts_towards_score for v in visits)


async def test_scoring_visits_respect_the_cap(db, caplog):
    db.add_all([row(f"v{i}", taken_at=datetime(2024, 1, i + 1)) for i in range(5)])
    await db.commit()

    visits = await VisitRepository(db).get_scoring_visits("user-1", limit=3)

    assert [v.id for v in visits] == ["v0", "v1", "v2"]
    assert "record cap" in caplog.text


async def test_active_visits_filter_by_upload_window(db):
    db.add_all([
        row("jan", uploaded_at=datetime(2024, 1, 15), verification_status="pending"),
        row("feb", uploaded_at=datetime(2024, 2, 15), user_id="user-2"),
        row("mar", uploaded_at=datetime(2024, 3, 15)),
        row("inactive", uploaded_at=datetime(2024, 2, 20), is_active=False),
    ])
    await db.commit()

    visits = await VisitRepository(db).get_active_visits(
        start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 28)
    )

    assert [v.id for v in visits] == ["feb", "jan"]


async def test_storage_failure_becomes_internal_error():
    class BrokenSession:
        async def execute(self, query):
            raise OperationalError("SELECT", {}, Exception("database is down"))

    with pytest.raises(HTTPException) as excinfo:
        await VisitRepository(BrokenSession()).get_scoring_visits("user-1")

    assert excinfo.value.status_code == 500
    assert "database is down" not in excinfo.value.detail
