"""Database models"""

from app.models.user import User, UserRole
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.models.reservation import Reservation, ReservationStatus
from app.models.audit import AuditLog
from app.models.event import Event
from app.models.story import Story
from app.models.favorite import user_favorites

__all__ = [
    "User",
    "UserRole",
    "Restaurant",
    "Review",
    "Reservation",
    "ReservationStatus",
    "AuditLog",
    "Event",
    "Story",
    "user_favorites",
]
