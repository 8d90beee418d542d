import asyncio
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.api.deps import get_session_store
from app.core.session import SessionPolicy, SessionStore
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import Category, City, User

TEST_POLICY = SessionPolicy(secret="test-secret", cookie_name="city_marketplace_session")
PASSWORD = "correct horse battery"


def run_db(engine, fn):
    """Run ``fn(session)`` in its own event loop and commit."""

    async def _run():
        maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with maker() as session:
            result = await fn(session)
            await session.commit()
            return result

    return asyncio.run(_run())


@pytest.fixture()
def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}", poolclass=NullPool)

    async def _create_all():
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_all())
    return eng


@pytest.fixture()
def catalog(engine):
    """Two active cities, one inactive city and two categories."""
    ids = SimpleNamespace(
        city_a=uuid.uuid4(),
        city_b=uuid.uuid4(),
        city_closed=uuid.uuid4(),
        electronics=uuid.uuid4(),
        furniture=uuid.uuid4(),
    )

    async def _seed(session):
        session.add_all(
            [
                City(id=ids.city_a, name="Calbayog City", slug="calbayog-city"),
                City(id=ids.city_b, name="Tacloban City", slug="tacloban-city"),
                City(id=ids.city_closed, name="Catarman City", slug="catarman-city", is_active=False),
                Category(id=ids.electronics, name="Electronics", slug="electronics"),
                Category(id=ids.furniture, name="Furniture", slug="furniture"),
            ]
        )

    run_db(engine, _seed)
    return ids


@pytest.fixture()
def client(engine):
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def _get_db():
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_store] = lambda: SessionStore(TEST_POLICY)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def move_user(engine):
    """Reassign a user to another city directly in the database."""

    def _move(user_id, city_id):
        async def _update(session):
            await session.execute(
                update(User).where(User.id == uuid.UUID(str(user_id))).values(city_id=city_id)
            )

        run_db(engine, _update)

    return _move


def signup(client, city_id, email="ana@example.com", phone="0917-123-4567", **overrides):
    """Sign up (replacing any session cookie held by ``client``) and return the response."""
    client.cookies.clear()
    body = {
        "firstName": "Ana",
        "lastName": "Reyes",
        "email": email,
        "phone": phone,
        "password": PASSWORD,
        "cityId": str(city_id),
    }
    body.update(overrides)
    return client.post("/api/v1/auth/signup", json=body)


def login(client, email, password=PASSWORD):
    client.cookies.clear()
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def listing_body(category_id, **overrides):
    body = {
        "title": "Mountain bike",
        "description": "Barely used, 21 speeds",
        "price": 8500,
        "negotiable": True,
        "condition": "USED",
        "categoryId": str(category_id),
        "images": ["https://img.example.com/bike-1.jpg", "https://img.example.com/bike-2.jpg"],
    }
    body.update(overrides)
    return body
