"""Regional map of restaurants, events and stories"""

from typing import List, Literal, get_args

from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.event import Event
from app.models.restaurant import Restaurant
from app.models.story import Story
from app.schemas.discovery import RegionSummary, RegionContent
from app.schemas.restaurant import Region
from app.api.events import upcoming

router = APIRouter()

REGIONS = get_args(Region)

RESTAURANTS_PER_REGION = 20
EVENTS_PER_REGION = 10
STORIES_PER_REGION = 10


def _active_restaurants(region: str):
    return (Restaurant.region == region, Restaurant.is_active == True)  # noqa: E712


def _active_events(region: str):
    return (Event.region == region, Event.is_active == True)  # noqa: E712


def _published_stories(region: str):
    return (Story.region == region, Story.is_published == True)  # noqa: E712


@router.get("/regions", response_model=List[RegionSummary])
async def regions(
    db: AsyncSession = Depends(get_db),
):
    """Active content counts for every region"""
    summaries = []
    for region in REGIONS:
        counts = {}
        for name, model, filters in (
            ("restaurants", Restaurant, _active_restaurants(region)),
            ("events", Event, _active_events(region)),
            ("stories", Story, _published_stories(region)),
        ):
            counts[name] = (await db.execute(select(func.count(model.id)).where(*filters))).scalar()
        summaries.append(RegionSummary(name=region, **counts))
    return summaries


@router.get("/region/{region}", response_model=RegionContent)
async def region_content(
    region: Region,
    type: Literal["all", "restaurants", "events", "stories"] = "all",
    db: AsyncSession = Depends(get_db),
):
    """Best rated restaurants, next events and latest stories of a region"""
    content = {}

    if type in ("all", "restaurants"):
        result = await db.execute(
            select(Restaurant)
            .where(*_active_restaurants(region))
            .order_by(Restaurant.rating_average.desc(), Restaurant.name)
            .limit(RESTAURANTS_PER_REGION)
        )
        content["restaurants"] = result.scalars().all()

    if type in ("all", "events"):
        result = await db.execute(
            select(Event)
            .where(*_active_events(region), upcoming())
            .order_by(Event.start_date)
            .limit(EVENTS_PER_REGION)
        )
        content["events"] = result.scalars().all()

    if type in ("all", "stories"):
        result = await db.execute(
            select(Story)
            .where(*_published_stories(region))
            .order_by(Story.published_at.desc())
            .limit(STORIES_PER_REGION)
        )
        content["stories"] = result.scalars().all()

    return RegionContent(region=region, **content)
