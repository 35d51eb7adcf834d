"""Reservation schemas"""

from datetime import datetime
from datetime import date as date_type
from typing import Optional, List, Literal
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator


Occasion = Literal["casual", "business", "romantic", "celebration", "anniversary", "birthday", "other"]


class ReservationCreate(BaseModel):
    """Create reservation request"""
    restaurant_id: UUID
    date: date_type
    time: str = Field(..., min_length=1, max_length=20)
    party_size: int = Field(..., ge=1, le=20)
    special_requests: Optional[str] = Field(None, max_length=500)
    dietary_restrictions: List[str] = []
    occasion: Optional[Occasion] = None
    contact_name: str = Field(..., min_length=2, max_length=50)
    contact_phone: str = Field(..., min_length=9, max_length=15)
    contact_email: EmailStr
    user_notes: Optional[str] = None

    @field_validator("time", "contact_name", "contact_phone")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ReservationUpdate(BaseModel):
    """Update reservation request (non-lifecycle fields only)"""
    date: Optional[date_type] = None
    time: Optional[str] = Field(None, min_length=1, max_length=20)
    party_size: Optional[int] = Field(None, ge=1, le=20)
    special_requests: Optional[str] = Field(None, max_length=500)
    dietary_restrictions: Optional[List[str]] = None
    occasion: Optional[Occasion] = None
    user_notes: Optional[str] = None
    restaurant_notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def strip_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ReservationCancel(BaseModel):
    """Cancel reservation request"""
    reason: Optional[str] = Field(None, max_length=200)


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    user_id: UUID
    restaurant_id: UUID
    date: date_type
    time: str
    party_size: int
    special_requests: Optional[str]
    dietary_restrictions: Optional[List[str]]
    occasion: Optional[str]
    contact_name: str
    contact_phone: str
    contact_email: str
    status: str
    confirmation_code: str
    confirmed_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    cancelled_by: Optional[str]
    cancellation_reason: Optional[str]
    restaurant_notes: Optional[str]
    user_notes: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ReservationStats(BaseModel):
    """Reservation counts per status"""
    period: str
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0
    no_show: int = 0
