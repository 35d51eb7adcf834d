"""Restaurant schemas"""

from datetime import datetime
from typing import Optional, List, Literal
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field


Region = Literal["minho", "douro", "beiras", "lisboa", "alentejo", "algarve", "madeira", "acores"]
CuisineType = Literal["tradicional", "contemporanea", "fusion", "vegetariana", "vegana"]
PriceRange = Literal["€", "€€", "€€€", "€€€€"]


class RestaurantCreate(BaseModel):
    """Create restaurant request"""
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    region: Region
    cuisine_type: CuisineType
    price_range: PriceRange
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    accepts_reservations: bool = False


class RestaurantUpdate(BaseModel):
    """Update restaurant request"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    region: Optional[Region] = None
    cuisine_type: Optional[CuisineType] = None
    price_range: Optional[PriceRange] = None
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    accepts_reservations: Optional[bool] = None
    is_featured: Optional[bool] = None


class RestaurantResponse(BaseModel):
    """Restaurant response"""
    id: UUID
    owner_id: UUID
    name: str
    slug: str
    description: str
    region: str
    cuisine_type: str
    price_range: str
    address: Optional[str]
    city: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    accepts_reservations: bool
    is_featured: bool
    rating_average: float
    rating_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RestaurantListResponse(BaseModel):
    """Paginated restaurant list"""
    items: List[RestaurantResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class FavoriteToggle(BaseModel):
    """Result of toggling a favorite"""
    restaurant_id: UUID
    is_favorite: bool
