"""Gastronomic event model"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import (
    Column, String, Boolean, DateTime, Float, ForeignKey, Integer, Text, JSON,
    Index, CheckConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Event(Base):
    """Festival, class, tasting or other food event"""
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"))

    title = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(300))

    type = Column(String(30), nullable=False)
    category = Column(String(20), nullable=False)
    tags = Column(JSON, default=list)

    # Organizer
    organizer_name = Column(String(100), nullable=False)
    organizer_type = Column(String(20), nullable=False, default="individual")

    # Location
    region = Column(String(20), nullable=False)
    city = Column(String(100))
    venue = Column(String(200))
    is_online = Column(Boolean, default=False, nullable=False)

    # Schedule
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    # Capacity / pricing
    capacity = Column(Integer)
    pricing_type = Column(String(20), nullable=False, default="free")
    price = Column(Float)
    currency = Column(String(3), nullable=False, default="EUR")

    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="events")

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_event_dates"),
        Index("ix_events_region_start", "region", "start_date"),
    )

    def status_at(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.utcnow()
        if self.start_date > now:
            return "upcoming"
        if self.end_date >= now:
            return "ongoing"
        return "past"

    @property
    def status(self) -> str:
        return self.status_at()
