"""Event API endpoints"""

import math
from datetime import datetime, date
from typing import List, Optional, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.event import Event
from app.models.restaurant import Restaurant
from app.models.user import User
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventListResponse,
    EventType,
    EventCategory,
    EventStatus,
)
from app.schemas.restaurant import Region
from app.services.permissions import ensure_can_edit_event, ensure_can_operate
from app.services.slugs import unique_slug
from app.api.auth import get_current_active_user

logger = structlog.get_logger()

router = APIRouter()

FEATURED_LIMIT = 6

# Columns an update may not clear
REQUIRED_FIELDS = (
    "title", "description", "type", "category", "organizer_name", "organizer_type",
    "region", "is_online", "start_date", "end_date", "pricing_type", "is_featured",
)


def upcoming(now: Optional[datetime] = None):
    return Event.start_date > (now or datetime.utcnow())


def status_filter(event_status: str, now: datetime):
    if event_status == "upcoming":
        return upcoming(now)
    if event_status == "ongoing":
        return (Event.start_date <= now) & (Event.end_date >= now)
    return Event.end_date < now


def check_schedule(start: datetime, end: datetime, start_changed: bool = True) -> None:
    if end <= start:
        raise ValidationError.for_field("end_date", "End date must be after the start date")
    if start_changed and start < datetime.utcnow():
        raise ValidationError.for_field("start_date", "Start date cannot be in the past")


async def get_event_by_id(event_id: UUID, db: AsyncSession) -> Event:
    result = await db.execute(
        select(Event).where(Event.id == event_id, Event.is_active == True)  # noqa: E712
    )
    event = result.scalar_one_or_none()
    if not event:
        raise NotFoundError("Event not found")
    return event


async def _linked_restaurant(event: Event, db: AsyncSession) -> Optional[Restaurant]:
    if event.restaurant_id is None:
        return None
    return await db.get(Restaurant, event.restaurant_id)


async def paginate_events(
    db: AsyncSession, filters: list, order: tuple, page: int, page_size: int
) -> EventListResponse:
    total = (await db.execute(select(func.count(Event.id)).where(*filters))).scalar()
    result = await db.execute(
        select(Event)
        .where(*filters)
        .order_by(*order)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return EventListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("", response_model=EventListResponse)
async def list_events(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    type: Optional[EventType] = None,
    category: Optional[EventCategory] = None,
    region: Optional[Region] = None,
    event_status: Optional[EventStatus] = Query(None, alias="status"),
    on_date: Optional[date] = Query(None, alias="date"),
    search: Optional[str] = None,
    sort: Literal["date", "title", "newest"] = "date",
    db: AsyncSession = Depends(get_db),
):
    """List active events with filters"""
    now = datetime.utcnow()
    filters = [Event.is_active == True]  # noqa: E712
    if type:
        filters.append(Event.type == type)
    if category:
        filters.append(Event.category == category)
    if region:
        filters.append(Event.region == region)
    if event_status:
        filters.append(status_filter(event_status, now))
    if on_date:
        # Events running at any time during that day
        day_start = datetime.combine(on_date, datetime.min.time())
        day_end = datetime.combine(on_date, datetime.max.time())
        filters.append((Event.start_date <= day_end) & (Event.end_date >= day_start))
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))

    if sort == "title":
        order = (Event.title,)
    elif sort == "newest":
        order = (Event.created_at.desc(),)
    else:
        order = (Event.start_date,)

    return await paginate_events(db, filters, order, page, page_size)


@router.get("/featured", response_model=List[EventResponse])
async def featured_events(
    db: AsyncSession = Depends(get_db),
):
    """Featured upcoming events, soonest first"""
    result = await db.execute(
        select(Event)
        .where(Event.is_featured == True, Event.is_active == True, upcoming())  # noqa: E712
        .order_by(Event.start_date)
        .limit(FEATURED_LIMIT)
    )
    return result.scalars().all()


@router.get("/upcoming", response_model=List[EventResponse])
async def upcoming_events(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """Next upcoming events"""
    result = await db.execute(
        select(Event)
        .where(Event.is_active == True, upcoming())  # noqa: E712
        .order_by(Event.start_date)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/region/{region}", response_model=EventListResponse)
async def events_by_region(
    region: Region,
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Upcoming events in a region"""
    filters = [Event.region == region, Event.is_active == True, upcoming()]  # noqa: E712
    return await paginate_events(db, filters, (Event.start_date,), page, page_size)


@router.get("/type/{event_type}", response_model=EventListResponse)
async def events_by_type(
    event_type: EventType,
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Upcoming events of one type"""
    filters = [Event.type == event_type, Event.is_active == True, upcoming()]  # noqa: E712
    return await paginate_events(db, filters, (Event.start_date,), page, page_size)


@router.get("/{slug}", response_model=EventResponse)
async def get_event(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """Get event details"""
    result = await db.execute(
        select(Event).where(Event.slug == slug, Event.is_active == True)  # noqa: E712
    )
    event = result.scalar_one_or_none()
    if not event:
        raise NotFoundError("Event not found")
    return event


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create an event, optionally hosted by a restaurant the user operates"""
    check_schedule(event_data.start_date, event_data.end_date)

    if event_data.restaurant_id is not None:
        restaurant = await db.get(Restaurant, event_data.restaurant_id)
        if restaurant is None or not restaurant.is_active:
            raise NotFoundError("Restaurant not found")
        ensure_can_operate(current_user, restaurant)

    fields = event_data.model_dump()
    fields["organizer_name"] = fields["organizer_name"] or current_user.full_name or current_user.email
    if fields["organizer_type"] is None:
        fields["organizer_type"] = "restaurant" if event_data.restaurant_id else "individual"

    event = Event(
        created_by=current_user.id,
        slug=await unique_slug(db, Event, event_data.title, "event"),
        **fields,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info("Event created", event_id=str(event.id), created_by=str(current_user.id))
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    event_data: EventUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update event (creator, operator of its restaurant, or admin)"""
    event = await get_event_by_id(event_id, db)
    ensure_can_edit_event(current_user, event, await _linked_restaurant(event, db))

    changes = event_data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationError.for_field(field, f"{field} cannot be empty")
    if "is_featured" in changes and not current_user.is_admin:
        raise AuthorizationError("Only administrators may feature events")

    if "start_date" in changes or "end_date" in changes:
        start = changes.get("start_date", event.start_date)
        check_schedule(start, changes.get("end_date", event.end_date), start != event.start_date)
    if "title" in changes and changes["title"] != event.title:
        event.slug = await unique_slug(db, Event, changes["title"], "event")

    for field, value in changes.items():
        setattr(event, field, value)

    await db.commit()
    await db.refresh(event)

    logger.info("Event updated", event_id=str(event.id), fields=sorted(changes))
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete event (soft delete)"""
    event = await get_event_by_id(event_id, db)
    ensure_can_edit_event(current_user, event, await _linked_restaurant(event, db))

    event.is_active = False
    await db.commit()

    logger.info("Event deleted", event_id=str(event.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
