"""Shared test configuration and fixtures.

Each test gets a fresh database: an in-memory SQLite engine (through
aiosqlite) with every table created up front. Set ``TEST_DATABASE_URL`` to
run the same tests against another async URL, e.g. a scratch PostgreSQL DB.
The query service session factory is pointed at the test engine for the
duration of the test.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from datetime import date

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lightbnb.database import Base, async_session_factory, set_session_factory
from lightbnb.models import Property, PropertyReview, Reservation, User

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _make_engine() -> AsyncEngine:
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database.
        return create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    return create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Per-test: fresh schema and service session factory
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create the schema on a new engine and drop it afterwards."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine: AsyncEngine) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Route the query service to the test engine."""
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    set_session_factory(factory)
    yield factory
    set_session_factory(async_session_factory)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging test data directly through the ORM."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Convenience fixtures: users, properties, reservations, reviews
# ---------------------------------------------------------------------------


def _make_property(owner_id: int, **overrides) -> Property:
    fields = {
        "owner_id": owner_id,
        "title": "Speed lamp",
        "description": "description",
        "thumbnail_photo_url": "https://images.example.com/thumb.jpeg",
        "cover_photo_url": "https://images.example.com/cover.jpeg",
        "cost_per_night": 9300,
        "parking_spaces": 6,
        "number_of_bathrooms": 4,
        "number_of_bedrooms": 8,
        "country": "Canada",
        "street": "536 Namsub Highway",
        "city": "Sotboske",
        "province": "Quebec",
        "post_code": "28142",
    }
    fields.update(overrides)
    return Property(**fields)


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    user = User(
        name="Devin Sanders",
        email=f"owner-{uuid.uuid4().hex[:8]}@example.com",
        password="$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u.",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def guest(db_session: AsyncSession) -> User:
    user = User(
        name="Eliza Gutierrez",
        email=f"guest-{uuid.uuid4().hex[:8]}@example.com",
        password="$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u.",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def listed_properties(db_session: AsyncSession, owner: User, guest: User) -> list[Property]:
    """Four properties at different prices and cities, three of them reviewed.

    ==================  ========  ==============  ==========
    title               cents     city            avg rating
    ==================  ========  ==============  ==========
    Habit mix           2500      Vancouver       4.5
    Headed known        4500      North Vancouver 3.0
    Port out            12000     Victoria        5.0
    Blank hope          30000     Vancouver       (none)
    ==================  ========  ==============  ==========
    """
    properties = [
        _make_property(owner.id, title="Blank hope", cost_per_night=30000, city="Vancouver"),
        _make_property(owner.id, title="Port out", cost_per_night=12000, city="Victoria"),
        _make_property(owner.id, title="Headed known", cost_per_night=4500, city="North Vancouver"),
        _make_property(owner.id, title="Habit mix", cost_per_night=2500, city="Vancouver"),
    ]
    db_session.add_all(properties)
    await db_session.flush()

    by_title = {p.title: p for p in properties}
    ratings = {"Habit mix": [4, 5], "Headed known": [2, 4], "Port out": [5]}
    for title, values in ratings.items():
        for rating in values:
            db_session.add(PropertyReview(guest_id=guest.id, property_id=by_title[title].id, rating=rating))
    await db_session.commit()
    return properties


@pytest_asyncio.fixture
async def past_reservations(db_session: AsyncSession, guest: User, listed_properties: list[Property]) -> list[Reservation]:
    """Six completed stays for ``guest``, one per month of 2019 starting in June."""
    reservations = [
        Reservation(
            guest_id=guest.id,
            property_id=listed_properties[month % len(listed_properties)].id,
            start_date=date(2019, month, 1),
            end_date=date(2019, month, 5),
        )
        for month in (11, 6, 9, 7, 10, 8)
    ]
    db_session.add_all(reservations)
    await db_session.commit()
    return reservations


@pytest_asyncio.fixture
async def property_factory(db_session: AsyncSession, owner: User):
    """Insert a property owned by ``owner`` with the given column overrides."""

    async def _create(**overrides) -> Property:
        prop = _make_property(overrides.pop("owner_id", owner.id), **overrides)
        db_session.add(prop)
        await db_session.commit()
        return prop

    return _create
