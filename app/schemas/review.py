"""Review schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    """Create review request"""
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = Field(None, max_length=2000)
    food_rating: Optional[int] = Field(None, ge=1, le=5)
    service_rating: Optional[int] = Field(None, ge=1, le=5)
    atmosphere_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)


class ReviewUpdate(BaseModel):
    """Update review request"""
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = Field(None, max_length=2000)
    food_rating: Optional[int] = Field(None, ge=1, le=5)
    service_rating: Optional[int] = Field(None, ge=1, le=5)
    atmosphere_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("rating")
    @classmethod
    def rating_required(cls, value):
        # Omit the field to keep the current rating
        if value is None:
            raise ValueError("rating cannot be empty")
        return value


class ReviewResponse(BaseModel):
    """Review response"""
    id: UUID
    user_id: UUID
    restaurant_id: UUID
    rating: int
    title: Optional[str]
    content: Optional[str]
    food_rating: Optional[int]
    service_rating: Optional[int]
    atmosphere_rating: Optional[int]
    value_rating: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
