"""URL slugs for restaurants, events and stories"""

import re
import unicodedata

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def slugify(text: str) -> str:
    """Build a URL slug, folding accents ("Açores" -> "acores")"""
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9 -]", "", folded.lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return re.sub(r"-+", "-", slug).strip("-")


async def unique_slug(db: AsyncSession, model, text: str, fallback: str) -> str:
    """First free slug for ``model``, suffixing -2, -3, ... on collisions.

    Soft-deleted rows keep their slug, so they still count as taken.
    """
    base = slugify(text)[:110].strip("-") or fallback
    slug, suffix = base, 2
    while (await db.execute(select(model.id).where(model.slug == slug))).first():
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug
