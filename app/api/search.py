"""Search across restaurants, events and stories"""

from typing import List, Optional, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.event import Event
from app.models.restaurant import Restaurant
from app.models.story import Story
from app.schemas.discovery import SearchResults, Suggestion, ContentType
from app.schemas.restaurant import Region

router = APIRouter()

SUGGESTIONS_PER_TYPE = 5
MAX_SUGGESTIONS = 10


def restaurant_match(pattern: str):
    return (
        Restaurant.is_active == True,  # noqa: E712
        or_(Restaurant.name.ilike(pattern), Restaurant.description.ilike(pattern)),
    )


def event_match(pattern: str):
    return (
        Event.is_active == True,  # noqa: E712
        or_(Event.title.ilike(pattern), Event.description.ilike(pattern)),
    )


def story_match(pattern: str):
    return (
        Story.is_published == True,  # noqa: E712
        or_(Story.title.ilike(pattern), Story.content.ilike(pattern)),
    )


@router.get("", response_model=SearchResults)
async def search(
    q: str = Query(..., min_length=1, max_length=100),
    type: Literal["all", "restaurants", "events", "stories"] = "all",
    region: Optional[Region] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """Case-insensitive text search; ``total`` sums matches over the searched types"""
    pattern = f"%{q.strip()}%"
    offset = (page - 1) * page_size
    total, found = 0, {}

    searches = {
        "restaurants": (Restaurant, restaurant_match(pattern), Restaurant.region,
                        (Restaurant.rating_average.desc(), Restaurant.name)),
        "events": (Event, event_match(pattern), Event.region, (Event.start_date,)),
        "stories": (Story, story_match(pattern), Story.region, (Story.published_at.desc(),)),
    }
    for name, (model, match, region_column, order) in searches.items():
        if type not in ("all", name):
            continue
        filters = list(match)
        if region:
            filters.append(region_column == region)

        total += (await db.execute(select(func.count(model.id)).where(*filters))).scalar()
        rows = await db.execute(
            select(model).where(*filters).order_by(*order).offset(offset).limit(page_size)
        )
        found[name] = rows.scalars().all()

    return SearchResults(query=q, type=type, total=total, page=page, page_size=page_size, **found)


@router.get("/suggestions", response_model=List[Suggestion])
async def suggestions(
    q: str = Query(..., min_length=1, max_length=100),
    type: Optional[ContentType] = None,
    db: AsyncSession = Depends(get_db),
):
    """Titles to complete a search box"""
    pattern = f"%{q.strip()}%"
    found: List[Suggestion] = []

    if type in (None, "restaurants"):
        rows = await db.execute(
            select(Restaurant.name, Restaurant.slug)
            .where(*restaurant_match(pattern))
            .order_by(Restaurant.rating_average.desc(), Restaurant.name)
            .limit(SUGGESTIONS_PER_TYPE)
        )
        found.extend(Suggestion(type="restaurant", text=name, slug=slug) for name, slug in rows)

    if type in (None, "events"):
        rows = await db.execute(
            select(Event.title, Event.slug)
            .where(*event_match(pattern))
            .order_by(Event.start_date)
            .limit(SUGGESTIONS_PER_TYPE)
        )
        found.extend(Suggestion(type="event", text=title, slug=slug) for title, slug in rows)

    if type in (None, "stories"):
        rows = await db.execute(
            select(Story.title, Story.slug)
            .where(*story_match(pattern))
            .order_by(Story.published_at.desc())
            .limit(SUGGESTIONS_PER_TYPE)
        )
        found.extend(Suggestion(type="story", text=title, slug=slug) for title, slug in rows)

    return found[:MAX_SUGGESTIONS]
