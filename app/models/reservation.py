"""Reservation model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, Date, DateTime, ForeignKey, Text, Boolean, JSON,
    Index, CheckConstraint, text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


ACTIVE_STATUSES = (ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value)

_ACTIVE_SLOT_FILTER = text("status IN ('pending', 'confirmed')")


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)

    # Slot
    date = Column(Date, nullable=False)
    time = Column(String(20), nullable=False)  # slot label, e.g. "19:00"
    party_size = Column(Integer, nullable=False)

    # Preferences
    special_requests = Column(String(500))
    dietary_restrictions = Column(JSON, default=list)
    occasion = Column(String(20))

    # Contact, captured per reservation
    contact_name = Column(String(100), nullable=False)
    contact_phone = Column(String(20), nullable=False)
    contact_email = Column(String(255), nullable=False)

    # Lifecycle
    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING.value)
    confirmation_code = Column(String(6), unique=True, nullable=False)
    confirmed_at = Column(DateTime)
    cancelled_at = Column(DateTime)
    cancelled_by = Column(String(20))
    cancellation_reason = Column(String(200))

    # Notes
    restaurant_notes = Column(Text)
    user_notes = Column(Text)

    reminder_sent_at = Column(DateTime)

    # Soft delete
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="reservations")
    restaurant = relationship("Restaurant", back_populates="reservations")

    __table_args__ = (
        # One active reservation per (restaurant, date, time)
        Index(
            "uq_reservations_active_slot",
            "restaurant_id",
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_FILTER,
            sqlite_where=_ACTIVE_SLOT_FILTER,
        ),
        Index("ix_reservations_user_date", "user_id", "date"),
        Index("ix_reservations_restaurant_date", "restaurant_id", "date"),
        Index("ix_reservations_status", "status"),
        CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_reservation_party_size"),
    )

    @property
    def is_open(self) -> bool:
        """Pending or confirmed"""
        return self.status in ACTIVE_STATUSES

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, restaurant={self.restaurant_id}, "
            f"date={self.date}, time={self.time}, status={self.status})>"
        )
