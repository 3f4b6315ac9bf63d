"""Shared test fixtures.

Uses in-memory SQLite so records get real primary keys: the first user,
group and project each get id 1, and a record that was never flushed has no
id at all.
"""

from __future__ import annotations

import pytest
from fakeredis.aioredis import FakeRedis
from sqlalchemy import ForeignKey, Integer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from rendersync.addressing.registry import NamedScopeRegistry
from rendersync.channels.signer import ChannelSigner
from rendersync.core.config import Settings

_TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET = "test-secret"


class Base(DeclarativeBase):
    pass


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    age: Mapped[int] = mapped_column(Integer, default=0)
    cool: Mapped[bool] = mapped_column(default=False)
    group_id: Mapped[int | None] = mapped_column(ForeignKey("groups.id"), nullable=True)


@pytest.fixture
async def test_engine():
    """Create a test database engine with all tables."""
    engine = create_async_engine(_TEST_DB_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    session_factory = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def group(test_session: AsyncSession) -> Group:
    group = Group()
    test_session.add(group)
    await test_session.flush()
    return group


@pytest.fixture
async def user(test_session: AsyncSession, group: Group) -> User:
    user = User(age=20, cool=True, group_id=group.id)
    test_session.add(user)
    await test_session.flush()
    return user


@pytest.fixture
async def project(test_session: AsyncSession) -> Project:
    project = Project()
    test_session.add(project)
    await test_session.flush()
    return project


@pytest.fixture
def new_user() -> User:
    """A user that was never added to a session."""
    return User()


@pytest.fixture
def user_scopes() -> NamedScopeRegistry:
    scopes = NamedScopeRegistry("user")
    scopes.define("cool", predicate=lambda user: user.cool)
    scopes.define(
        "in_group",
        params=("group",),
        predicate=lambda user, group: user.group_id == group.id,
    )
    scopes.define(
        "with_group_id",
        params=("group_id",),
        predicate=lambda user, group_id: user.group_id == group_id,
    )
    scopes.define(
        "with_min_age_in_group",
        params=("age", "group_id"),
        predicate=lambda user, age, group_id: user.age >= age and user.group_id == group_id,
    )
    return scopes


@pytest.fixture
def test_settings() -> Settings:
    return Settings(secret=TEST_SECRET, _env_file=None)


@pytest.fixture
def signer(test_settings: Settings) -> ChannelSigner:
    return ChannelSigner.from_settings(test_settings)


@pytest.fixture
async def redis() -> FakeRedis:
    return FakeRedis()
