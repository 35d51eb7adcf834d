"""Event schemas"""

from datetime import datetime, timezone
from typing import Optional, List, Literal
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from app.schemas.restaurant import Region


EventType = Literal[
    "festival", "cooking_class", "wine_tasting", "cultural_celebration",
    "food_tour", "workshop", "dinner_experience",
]
EventCategory = Literal["festivals", "classes", "tastings", "cultural", "tours", "workshops", "experiences"]
OrganizerType = Literal["restaurant", "chef", "organization", "individual"]
PricingType = Literal["free", "fixed", "variable", "donation"]
EventStatus = Literal["upcoming", "ongoing", "past"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventCreate(BaseModel):
    """Create event request"""
    title: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=300)
    type: EventType
    category: EventCategory
    tags: List[str] = []
    restaurant_id: Optional[UUID] = None
    organizer_name: Optional[str] = Field(None, min_length=2, max_length=100)
    organizer_type: Optional[OrganizerType] = None
    region: Region
    city: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=200)
    is_online: bool = False
    start_date: datetime
    end_date: datetime
    capacity: Optional[int] = Field(None, ge=1)
    pricing_type: PricingType = "free"
    price: Optional[float] = Field(None, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_dates(cls, value):
        return to_naive_utc(value)


class EventUpdate(BaseModel):
    """Update event request"""
    title: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=300)
    type: Optional[EventType] = None
    category: Optional[EventCategory] = None
    tags: Optional[List[str]] = None
    organizer_name: Optional[str] = Field(None, min_length=2, max_length=100)
    organizer_type: Optional[OrganizerType] = None
    region: Optional[Region] = None
    city: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=200)
    is_online: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity: Optional[int] = Field(None, ge=1)
    pricing_type: Optional[PricingType] = None
    price: Optional[float] = Field(None, ge=0)
    is_featured: Optional[bool] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_dates(cls, value):
        return to_naive_utc(value)


class EventResponse(BaseModel):
    """Event response"""
    id: UUID
    created_by: UUID
    restaurant_id: Optional[UUID]
    title: str
    slug: str
    description: str
    short_description: Optional[str]
    type: str
    category: str
    tags: Optional[List[str]]
    organizer_name: str
    organizer_type: str
    region: str
    city: Optional[str]
    venue: Optional[str]
    is_online: bool
    start_date: datetime
    end_date: datetime
    status: EventStatus
    capacity: Optional[int]
    pricing_type: str
    price: Optional[float]
    currency: str
    is_featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventListResponse(BaseModel):
    """Paginated event list"""
    items: List[EventResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
