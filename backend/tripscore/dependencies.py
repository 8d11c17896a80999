import re
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database.session import get_db
from .services.media import MediaClient
from .services.visits import VisitRepository

USER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")


def get_user_id(user_id: str) -> str:
    """Validate the user id path parameter before any work is done."""
    if not USER_ID_PATTERN.fullmatch(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User id must be 1-64 letters, digits, '-' or '_'."
        )
    return user_id


def get_visit_repository(db: AsyncSession = Depends(get_db)) -> VisitRepository:
    return VisitRepository(db)


@lru_cache()
def get_media_client() -> MediaClient:
    settings = get_settings()
    return MediaClient(settings.MEDIA_API_URL, settings.MEDIA_API_KEY, timeout=settings.MEDIA_TIMEOUT_SECONDS)
