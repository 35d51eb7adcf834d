"""Restaurants a user has marked as favorite"""

from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Table
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

user_favorites = Table(
    "user_favorites",
    Base.metadata,
    Column("user_id", UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True),
    Column("restaurant_id", UUID(as_uuid=True), ForeignKey("restaurants.id"), primary_key=True),
    Column("created_at", DateTime, default=datetime.utcnow, nullable=False),
)
