"""Test configuration and fixtures"""

from datetime import datetime, timedelta
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from app.main import app
from app.database import Base, get_db
from app.models.event import Event
from app.models.restaurant import Restaurant
from app.models.story import Story, make_excerpt
from app.models.user import User, UserRole
from app.api.auth import create_access_token, get_password_hash
from app.services.reservations import ReservationService


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def future_date(days: int = 7):
    return ReservationService.today() + timedelta(days=days)


def reservation_payload(restaurant, days: int = 7, time: str = "19:00", **overrides):
    """JSON body for POST /reservations"""
    payload = {
        "restaurant_id": str(restaurant.id),
        "date": future_date(days).isoformat(),
        "time": time,
        "party_size": 4,
        "contact_name": "Ana Costa",
        "contact_phone": "+351912345678",
        "contact_email": "ana@example.com",
    }
    payload.update(overrides)
    return payload


async def make_event(db, creator, title="Festa do Bacalhau", restaurant=None, days=14, hours=4, **overrides):
    """Insert an event directly, bypassing the future-start rule"""
    start = datetime.utcnow() + timedelta(days=days)
    fields = {
        "id": uuid4(),
        "created_by": creator.id,
        "restaurant_id": restaurant.id if restaurant else None,
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "description": "Três dias de petiscos, música e tradição.",
        "type": "festival",
        "category": "festivals",
        "organizer_name": creator.full_name,
        "organizer_type": "restaurant" if restaurant else "individual",
        "region": "lisboa",
        "start_date": start,
        "end_date": start + timedelta(hours=hours),
    }
    fields.update(overrides)
    event = Event(**fields)
    db.add(event)
    await db.commit()
    return event


async def make_story(db, title="Domingos de cataplana", author=None, **overrides):
    content = overrides.pop("content", "Todos os domingos a cataplana ia ao lume cedo.")
    fields = {
        "id": uuid4(),
        "author_id": author.id if author else None,
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "content": content,
        "excerpt": make_excerpt(content),
        "category": "memories",
        "region": "algarve",
    }
    fields.update(overrides)
    story = Story(**fields)
    db.add(story)
    await db.commit()
    return story


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def make_user(email: str, role: UserRole, full_name: str = "Test User") -> User:
    return User(
        id=uuid4(),
        email=email,
        hashed_password=get_password_hash("testpass123"),
        full_name=full_name,
        role=role,
        is_active=True,
    )


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_user(test_db):
    """A diner"""
    user = make_user("ana@example.com", UserRole.USER, "Ana Costa")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def other_user(test_db):
    """A second diner"""
    user = make_user("rui@example.com", UserRole.USER, "Rui Santos")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def test_owner(test_db):
    """A restaurant operator"""
    user = make_user("chico@tascadochico.pt", UserRole.RESTAURANT_OWNER, "Francisco Silva")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def other_owner(test_db):
    """An operator of a different restaurant"""
    user = make_user("maria@pescador.pt", UserRole.RESTAURANT_OWNER, "Maria Lopes")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def test_admin(test_db):
    """A platform administrator"""
    user = make_user("admin@sabores.pt", UserRole.ADMIN, "Admin User")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def test_restaurant(test_db, test_owner):
    """A restaurant that accepts reservations"""
    restaurant = Restaurant(
        id=uuid4(),
        owner_id=test_owner.id,
        name="Tasca do Chico",
        slug="tasca-do-chico",
        description="Family tavern serving petiscos and live fado.",
        region="lisboa",
        cuisine_type="tradicional",
        price_range="€€",
        accepts_reservations=True,
    )
    test_db.add(restaurant)
    await test_db.commit()
    return restaurant


@pytest.fixture
async def walk_in_restaurant(test_db, other_owner):
    """A restaurant that does not take reservations"""
    restaurant = Restaurant(
        id=uuid4(),
        owner_id=other_owner.id,
        name="O Pescador",
        slug="o-pescador",
        description="Walk-in grill for the catch of the day.",
        region="algarve",
        cuisine_type="tradicional",
        price_range="€",
        accepts_reservations=False,
    )
    test_db.add(restaurant)
    await test_db.commit()
    return restaurant


@pytest.fixture
async def client(test_db):
    """Create test client with overridden database"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
