import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import itertools  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from campusmatch import models  # noqa: E402
from campusmatch.db.base_class import Base  # noqa: E402
from campusmatch.db.session import get_db  # noqa: E402
from campusmatch.main import app  # noqa: E402
from campusmatch.security import get_password_hash  # noqa: E402

TEST_PASSWORD = "secret123"
_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)
_email_counter = itertools.count(1)

NEW_DELHI = (28.6139, 77.2090)
GURGAON = (28.4595, 77.0266)
MUMBAI = (19.0760, 72.8777)


async def swiped_user_ids(db, *, actor_id, action=None) -> set:
    statement = select(models.Swipe.target_id).where(models.Swipe.actor_id == actor_id)
    if action is not None:
        statement = statement.where(models.Swipe.action == action)
    return set((await db.execute(statement)).scalars().all())


async def matched_user_ids(db, user_id) -> set:
    statement = select(models.MatchEntry.matched_user_id).where(models.MatchEntry.user_id == user_id)
    return set((await db.execute(statement)).scalars().all())


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for committed users; location defaults to New Delhi."""
    async def _make_user(**overrides) -> models.User:
        latitude, longitude = overrides.pop("location", NEW_DELHI)
        fields = {
            "email": f"user{next(_email_counter)}@campus.example.com",
            "hashed_password": _PASSWORD_HASH,
            "name": "Test User",
            "age": 21,
            "gender": models.Gender.FEMALE,
            "interested_in": models.InterestedIn.BOTH,
            "bio": "",
            "interests": [],
            "education": "",
            "occupation": "",
            "latitude": latitude,
            "longitude": longitude,
            "city": "",
            "age_min": 18,
            "age_max": 50,
            "max_distance": 50,
            "is_active": True,
            "is_online": False,
            "photos": [],
        }
        fields.update(overrides)
        user = models.User(**fields)
        db.add(user)
        await db.commit()
        return user

    return _make_user
