"""Audit log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class AuditLog(Base):
    """Audit trail for reservation lifecycle actions"""
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"))

    # Actor information
    actor_id = Column(UUID(as_uuid=True))  # User ID or null for system
    actor_type = Column(String(50))  # user, restaurant_owner, admin, system

    # Action details
    action = Column(String(100), nullable=False)  # reservation.confirm, reservation.cancel, etc.
    resource_type = Column(String(50))
    resource_id = Column(UUID(as_uuid=True))

    # Change data
    data_json = Column(JSON)  # {"before": {...}, "after": {...}}

    created_at = Column(DateTime, default=datetime.utcnow)
