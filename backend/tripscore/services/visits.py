import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import TripVisit
from ..models.visit import VERIFIED_STATUSES, Visit

logger = logging.getLogger(__name__)


class VisitRepository:
    """Read-only access to the visits written by the ingestion pipeline."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, query, limit: int) -> List[Visit]:
        try:
            result = await self.db.execute(query.limit(limit))
            rows = result.scalars().all()
        except SQLAlchemyError:
            logger.exception("Error fetching trip visits")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error fetching trip visits."
            )

        if len(rows) >= limit:
            # Scores over a truncated set undercount; the cap is a known ceiling.
            logger.warning("Visit fetch hit the %d record cap; results only cover the earliest visits", limit)

        return [Visit.from_row(row) for row in rows]

    async def get_scoring_visits(self, user_id: str, limit: int = 1000) -> List[Visit]:
        """
        Fetch a user's visits that count toward TripScore, oldest first.

        Args:
            user_id: Owner of the visits
            limit: Maximum number of visits to read

        Returns:
            Active visits with an auto_verified or approved status
        """
        query = (
            select(TripVisit)
            .where(
                TripVisit.user_id == user_id,
                TripVisit.is_active == True,
                TripVisit.verification_status.in_(VERIFIED_STATUSES),
            )
            .order_by(func.coalesce(TripVisit.taken_at, TripVisit.uploaded_at), TripVisit.id)
        )
        return await self._fetch(query, limit)

    async def get_active_visits(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 10000,
    ) -> List[Visit]:
        """Fetch active visits of every user, optionally limited to an upload window."""
        query = select(TripVisit).where(TripVisit.is_active == True)
        if start_date:
            query = query.where(TripVisit.uploaded_at >= start_date)
        if end_date:
            query = query.where(TripVisit.uploaded_at <= end_date)
        query = query.order_by(TripVisit.uploaded_at.desc(), TripVisit.id)
        return await self._fetch(query, limit)
