from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime


VisitSource = Literal["camera_live", "gallery_exif", "gallery_no_exif", "manual_only"]
TrustLevel = Literal["high", "medium", "low", "unverified", "suspicious"]
VerificationStatus = Literal["pending", "auto_verified", "approved", "rejected"]

TRUST_LEVELS = ("high", "medium", "low", "unverified", "suspicious")
VISIT_SOURCES = ("camera_live", "gallery_exif", "gallery_no_exif", "manual_only")
VERIFICATION_STATUSES = ("pending", "auto_verified", "approved", "rejected")

# Only these statuses contribute to TripScore. Trust level is a review signal
# and never gates scoring on its own.
VERIFIED_STATUSES = ("auto_verified", "approved")


class Visit(BaseModel):
    """A geotagged visit as read from the visit store."""
    id: str
    user_id: str
    post_id: Optional[str] = None

    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    city: Optional[str] = None
    raw_country: Optional[str] = None
    raw_continent: Optional[str] = None

    spot_type: Optional[str] = None
    travel_info: Optional[str] = None

    source: VisitSource = "manual_only"
    trust_level: TrustLevel = "unverified"
    verification_status: VerificationStatus = "pending"

    taken_at: Optional[datetime] = None
    uploaded_at: datetime
    is_active: bool = True

    class Config:
        from_attributes = True

    @property
    def counts_towards_score(self) -> bool:
        return self.is_active and self.verification_status in VERIFIED_STATUSES

    @property
    def visited_at(self) -> datetime:
        """When the visit happened: capture time if known, else upload time."""
        return self.taken_at or self.uploaded_at

    @classmethod
    def from_row(cls, row) -> "Visit":
        """Build a visit from a ``TripVisit`` database row."""
        return cls(
            id=row.id,
            user_id=row.user_id,
            post_id=row.post_id,
            lat=row.lat,
            lng=row.lng,
            address=row.address,
            city=row.city,
            raw_country=row.country,
            raw_continent=row.continent,
            spot_type=row.spot_type,
            travel_info=row.travel_info,
            source=row.source,
            trust_level=row.trust_level,
            verification_status=row.verification_status,
            taken_at=row.taken_at,
            uploaded_at=row.uploaded_at,
            is_active=row.is_active,
        )
