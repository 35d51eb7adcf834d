#!/usr/bin/env python3
"""
Seed script to create demo users and restaurants
"""

import asyncio

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


DEMO_RESTAURANTS = [
    {
        "name": "Tasca do Chico",
        "description": "Family tavern serving petiscos and live fado since 1968.",
        "region": "lisboa",
        "cuisine_type": "tradicional",
        "price_range": "€€",
        "city": "Lisboa",
        "accepts_reservations": True,
    },
    {
        "name": "Casa de Pasto Douro",
        "description": "Riverside kitchen with slow-cooked regional dishes and port pairings.",
        "region": "douro",
        "cuisine_type": "contemporanea",
        "price_range": "€€€",
        "city": "Peso da Régua",
        "accepts_reservations": True,
    },
    {
        "name": "O Pescador",
        "description": "Walk-in grill for the catch of the day on the Algarve coast.",
        "region": "algarve",
        "cuisine_type": "tradicional",
        "price_range": "€",
        "city": "Olhão",
        "accepts_reservations": False,
    },
]


async def seed_demo_data():
    """Seed demo data for development"""
    from datetime import datetime, timedelta

    from sqlalchemy import select
    from app.database import SessionLocal, init_db
    from app.models.event import Event
    from app.models.restaurant import Restaurant
    from app.models.story import Story, make_excerpt
    from app.services.slugs import slugify
    from app.models.user import User, UserRole

    # Create tables
    await init_db()

    async with SessionLocal() as db:
        # Check if demo data already exists
        result = await db.execute(
            select(User).where(User.email == "admin@sabores.pt")
        )
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo users...")

        admin = User(
            email="admin@sabores.pt",
            hashed_password=pwd_context.hash("admin123"),
            full_name="Sabores Admin",
            role=UserRole.ADMIN,
        )
        owner = User(
            email="chico@tascadochico.pt",
            hashed_password=pwd_context.hash("owner123"),
            full_name="Francisco Silva",
            role=UserRole.RESTAURANT_OWNER,
        )
        diner = User(
            email="ana@example.com",
            hashed_password=pwd_context.hash("diner123"),
            full_name="Ana Costa",
            phone="+351912345678",
            role=UserRole.USER,
        )
        db.add_all([admin, owner, diner])
        await db.flush()

        print("Creating demo restaurants...")
        restaurants = [
            Restaurant(owner_id=owner.id, slug=slugify(data["name"]), **data)
            for data in DEMO_RESTAURANTS
        ]
        db.add_all(restaurants)
        await db.flush()

        print("Creating demo event and story...")
        start = datetime.utcnow().replace(hour=20, minute=0, second=0, microsecond=0) + timedelta(days=10)
        db.add(Event(
            created_by=owner.id,
            restaurant_id=restaurants[0].id,
            title="Noite de Fado e Petiscos",
            slug="noite-de-fado-e-petiscos",
            description="Fado ao vivo com petiscos da casa e vinho da regiao.",
            type="dinner_experience",
            category="experiences",
            organizer_name=owner.full_name,
            organizer_type="restaurant",
            region="lisboa",
            city="Lisboa",
            venue=restaurants[0].name,
            start_date=start,
            end_date=start + timedelta(hours=3),
            pricing_type="fixed",
            price=35.0,
        ))
        content = "Todos os domingos a cataplana ia ao lume cedo, e a casa inteira cheirava a mar."
        db.add(Story(
            author_id=diner.id,
            title="Domingos de cataplana",
            slug="domingos-de-cataplana",
            content=content,
            excerpt=make_excerpt(content),
            category="memories",
            region="algarve",
        ))

        await db.commit()

    print(f"""
Demo data created successfully!

Users:
  Admin:
    Email: admin@sabores.pt
    Password: admin123

  Restaurant Owner:
    Email: chico@tascadochico.pt
    Password: owner123

  Diner:
    Email: ana@example.com
    Password: diner123

Restaurants: {len(DEMO_RESTAURANTS)} created
Events: 1 created
Stories: 1 created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
