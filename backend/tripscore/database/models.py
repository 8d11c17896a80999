from datetime import datetime
from sqlalchemy import Column, String, Float, DateTime, Boolean, Text, Index
from .session import Base


class TripVisit(Base):
    """A geotagged visit derived from a post or short.

    Rows are written by the ingestion pipeline; this service only reads them.
    """
    __tablename__ = "trip_visits"

    id = Column(String(64), primary_key=True, index=True)
    user_id = Column(String(64), index=True, nullable=False)
    post_id = Column(String(64), nullable=True)

    # Location data
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)
    country = Column(String(120), nullable=True)
    continent = Column(String(50), nullable=True)

    # Display metadata copied from the post
    spot_type = Column(String(50), nullable=True)
    travel_info = Column(String(50), nullable=True)

    # Classification assigned at ingestion
    source = Column(String(30), nullable=False, default="manual_only")
    trust_level = Column(String(20), nullable=False, default="unverified", index=True)
    verification_status = Column(String(20), nullable=False, default="auto_verified", index=True)

    # Timestamps
    taken_at = Column(DateTime, nullable=True)
    uploaded_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    is_active = Column(Boolean, default=True, index=True)

    __table_args__ = (
        Index("ix_trip_visits_user_scoring", "user_id", "is_active", "verification_status"),
        Index("ix_trip_visits_user_taken_at", "user_id", "taken_at"),
    )
