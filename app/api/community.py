"""Community story endpoints"""

import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.errors import AuthorizationError, NotFoundError
from app.models.story import Story, make_excerpt
from app.models.user import User
from app.schemas.restaurant import Region
from app.schemas.story import StoryCreate, StoryResponse, StoryListResponse
from app.services.slugs import unique_slug
from app.api.auth import get_current_active_user, get_optional_user

logger = structlog.get_logger()

router = APIRouter()

GENERAL_REGION = "general"


@router.get("/stories", response_model=StoryListResponse)
async def list_stories(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    category: Optional[str] = None,
    region: Optional[Region] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Published stories, newest first"""
    filters = [Story.is_published == True]  # noqa: E712
    if category:
        filters.append(Story.category == category)
    if region:
        filters.append(Story.region == region)
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(or_(Story.title.ilike(pattern), Story.content.ilike(pattern)))

    total = (await db.execute(select(func.count(Story.id)).where(*filters))).scalar()
    result = await db.execute(
        select(Story)
        .where(*filters)
        .order_by(Story.published_at.desc(), Story.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return StoryListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("/stories/{slug}", response_model=StoryResponse)
async def get_story(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """Read a story; every read counts as a view"""
    visible = (Story.slug == slug, Story.is_published == True)  # noqa: E712
    result = await db.execute(
        update(Story)
        .where(*visible)
        .values(views=Story.views + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise NotFoundError("Story not found")
    await db.commit()

    story = await db.execute(
        select(Story).where(*visible).execution_options(populate_existing=True)
    )
    return story.scalar_one()


@router.post("/stories", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    story_data: StoryCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Share a story; without a token it is published anonymously"""
    story = Story(
        author_id=current_user.id if current_user else None,
        title=story_data.title,
        slug=await unique_slug(db, Story, story_data.title, "story"),
        content=story_data.content,
        excerpt=make_excerpt(story_data.content),
        category=story_data.category,
        region=story_data.region or GENERAL_REGION,
    )
    db.add(story)
    await db.commit()
    await db.refresh(story)

    logger.info("Story published", story_id=str(story.id), anonymous=current_user is None)
    return story


@router.delete("/stories/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story(
    story_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Unpublish a story (author or admin)"""
    story = await db.get(Story, story_id)
    if story is None or not story.is_published:
        raise NotFoundError("Story not found")
    if story.author_id != current_user.id and not current_user.is_admin:
        raise AuthorizationError("Not authorized to remove this story")

    story.is_published = False
    await db.commit()

    logger.info("Story unpublished", story_id=str(story.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
