"""
Shared fixtures: an in-memory SQLite document store, row factories and a fake auth provider.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from lokalfinds.api.v1.schemas.auth import AuthUser, SignInResult, UserProfile
from lokalfinds.models import Base, BusinessProfile, Product, StoreReview

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


async def create_test_session_maker():
    """
    Fresh in-memory database with all tables created.

    StaticPool keeps the single in-memory connection alive across sessions.
    Reference: https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#using-a-memory-database-in-multiple-threads
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine, session_maker


async def add_rows(session_maker, *rows):
    async with session_maker() as db:
        db.add_all(rows)
        await db.commit()
        for row in rows:
            await db.refresh(row)
    return rows


def make_profile(owner_id="owner-1", name="Corner Bakery", minutes=0, **overrides):
    created = BASE_TIME + timedelta(minutes=minutes)
    values = dict(
        owner_id=owner_id,
        name=name,
        address="12 Main Street",
        hours="Mon-Fri 8-18",
        profile_type="store",
        category="food-restaurant",
        created_at=created,
        updated_at=created,
    )
    values.update(overrides)
    return BusinessProfile(**values)


def make_product(store_id, name="Sourdough", price="4.50", minutes=0, **overrides):
    created = BASE_TIME + timedelta(minutes=minutes)
    values = dict(
        store_id=store_id,
        name=name,
        price=price,
        in_stock=True,
        created_at=created,
        updated_at=created,
    )
    values.update(overrides)
    return Product(**values)


def make_review(store_id, user_id, rating, minutes=0, **overrides):
    created = BASE_TIME + timedelta(minutes=minutes)
    values = dict(
        store_id=store_id,
        user_id=user_id,
        user_name=f"User {user_id}",
        rating=rating,
        created_at=created,
        updated_at=created,
    )
    values.update(overrides)
    return StoreReview(**values)


class FakeAuthProvider:
    """Records every call; optionally fails the next one."""

    def __init__(self):
        self.calls = []
        self.error: Optional[Exception] = None

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    async def sign_in(self, email, password):
        self._record("sign_in", email, password)
        return SignInResult(
            user=AuthUser(id="user_1", email=email, access_token="token"),
            profile=UserProfile(first_name="Ana", last_name="Cruz", email=email),
        )

    async def sign_up(self, email, password, first_name, last_name):
        self._record("sign_up", email, password, first_name, last_name)
        return SignInResult(
            user=AuthUser(id="user_2", email=email),
            profile=UserProfile(first_name=first_name, last_name=last_name, email=email),
        )

    async def sign_in_anonymously(self):
        self._record("sign_in_anonymously")
        return AuthUser(id="guest_abc", is_anonymous=True)

    async def send_password_reset(self, email):
        self._record("send_password_reset", email)

    async def update_profile(self, user_id, first_name, last_name):
        self._record("update_profile", user_id, first_name, last_name)
        return UserProfile(first_name=first_name, last_name=last_name, email="")
