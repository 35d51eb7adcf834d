"""Search and map schemas"""

from typing import Optional, List, Literal
from pydantic import BaseModel

from app.schemas.event import EventResponse
from app.schemas.restaurant import RestaurantResponse
from app.schemas.story import StoryResponse


ContentType = Literal["restaurants", "events", "stories"]


class SearchResults(BaseModel):
    """Matches per content type; a type left out of the search is null"""
    query: str
    type: str
    restaurants: Optional[List[RestaurantResponse]] = None
    events: Optional[List[EventResponse]] = None
    stories: Optional[List[StoryResponse]] = None
    total: int
    page: int
    page_size: int


class Suggestion(BaseModel):
    type: Literal["restaurant", "event", "story"]
    text: str
    slug: str


class RegionSummary(BaseModel):
    """Active content per region"""
    name: str
    restaurants: int
    events: int
    stories: int


class RegionContent(BaseModel):
    """Content shown on the map for one region"""
    region: str
    restaurants: Optional[List[RestaurantResponse]] = None
    events: Optional[List[EventResponse]] = None
    stories: Optional[List[StoryResponse]] = None
