"""Shared models and fixtures for the SQLAlchemy adapter tests."""

from __future__ import annotations

import datetime
import uuid
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Interval,
    PickleType,
    String,
    Text,
    Uuid,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from adminkit_specifications.settings import QuerySettings
from adminkit_sqlalchemy import CollectionRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        info={"validate": {"contains": {"args": "@", "msg": "not an email"}}},
    )
    firstName: Mapped[str | None] = mapped_column("first_name", String(100))
    role: Mapped[str] = mapped_column(
        Enum("admin", "member", "guest", name="role"), default="member"
    )
    isActive: Mapped[bool | None] = mapped_column("is_active", Boolean)
    createdAt: Mapped[datetime.datetime | None] = mapped_column(
        "created_at", DateTime
    )
    birthday: Mapped[datetime.date | None] = mapped_column(Date)
    preferences: Mapped[Any] = mapped_column(JSON(none_as_null=True), nullable=True)

    addresses: Mapped[list[Address]] = relationship(back_populates="user")
    orders: Mapped[list[Order]] = relationship(back_populates="user")


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    city: Mapped[str] = mapped_column(String(100))
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))

    user: Mapped[User | None] = relationship(back_populates="addresses")


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    amount: Mapped[int] = mapped_column(Integer, info={"validate": {"min": 0}})
    comment: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"))
    createdAt: Mapped[datetime.datetime | None] = mapped_column(
        "created_at", DateTime
    )

    user: Mapped[User | None] = relationship(back_populates="orders")


class Bike(Base):
    __tablename__ = "bikes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(50))


class Rental(Base):
    __tablename__ = "rentals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rider: Mapped[str] = mapped_column(String(50))
    bike_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("bikes.id"))

    bike: Mapped[Bike | None] = relationship()


class Log(Base):
    __tablename__ = "logs"

    code: Mapped[str] = mapped_column(String(50), primary_key=True)
    trace: Mapped[str] = mapped_column(String(50), primary_key=True)
    message: Mapped[str | None] = mapped_column(Text)


class Reminder(Base):
    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(String(50))
    every: Mapped[datetime.timedelta] = mapped_column(Interval)
    payload: Mapped[Any] = mapped_column(PickleType, nullable=True)


BIKE_ID = uuid.UUID("1f0e8d6a-5c4b-4a39-8e27-1d0c9b8a7f6e")

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def build_registry(settings: QuerySettings | None = None) -> CollectionRegistry:
    registry = CollectionRegistry(settings)
    registry.register(User)
    registry.register(Address, search_fields=["city"])
    registry.register(Order, search_fields=["amount", "comment"])
    registry.register(Bike)
    registry.register(Log)
    registry.register(Reminder)
    registry.register(Rental, search_fields=["rider"])
    registry.freeze()
    return registry


@pytest.fixture
def models() -> SimpleNamespace:
    return SimpleNamespace(
        User=User,
        Address=Address,
        Order=Order,
        Bike=Bike,
        Log=Log,
        Reminder=Reminder,
        Rental=Rental,
    )


@pytest.fixture
def registry() -> CollectionRegistry:
    return build_registry()


@pytest.fixture
def registry_factory():
    """Build a frozen registry over the test models with custom settings."""
    return build_registry


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        yield sess


@pytest.fixture
async def seeded(session: AsyncSession) -> AsyncSession:
    """Four users, three addresses, five orders, a bike, two rentals and two logs."""
    session.add_all(
        [
            User(
                id=1,
                email="alice@example.com",
                firstName="Alice",
                role="admin",
                isActive=True,
                createdAt=datetime.datetime(2024, 1, 15, 10, 0),
                birthday=datetime.date(1990, 5, 17),
                preferences={"theme": "dark"},
            ),
            User(
                id=2,
                email="bob@example.com",
                firstName="Bob",
                role="member",
                isActive=False,
                createdAt=datetime.datetime(2024, 1, 20, 23, 30),
            ),
            User(
                id=3,
                email="carol@test.org",
                firstName="Carol",
                role="guest",
                createdAt=datetime.datetime(2024, 2, 3, 8, 0),
                birthday=datetime.date(1985, 12, 1),
            ),
            User(
                id=4,
                email="dave@test.org",
                role="member",
                isActive=True,
                createdAt=datetime.datetime(2024, 3, 1, 12, 0),
            ),
        ]
    )
    session.add_all(
        [
            Address(id=1, city="Paris", user_id=1),
            Address(id=2, city="Lyon", user_id=1),
            Address(id=3, city="Berlin", user_id=2),
        ]
    )
    session.add_all(
        [
            Order(
                id=1,
                amount=100,
                comment="first order",
                status="paid",
                user_id=1,
                createdAt=datetime.datetime(2024, 1, 16, 9, 0),
            ),
            Order(
                id=2,
                amount=250,
                comment="rush delivery",
                status="pending",
                user_id=1,
                createdAt=datetime.datetime(2024, 1, 31, 23, 30),
            ),
            Order(
                id=3,
                amount=40,
                status="paid",
                user_id=2,
                createdAt=datetime.datetime(2024, 2, 10, 12, 0),
            ),
            Order(
                id=4,
                amount=75,
                comment="gift",
                status="refunded",
                user_id=3,
                createdAt=datetime.datetime(2024, 2, 11, 12, 0),
            ),
            Order(id=5, amount=310, comment="bulk", status="paid"),
        ]
    )
    session.add(Bike(id=BIKE_ID, name="Roadster"))
    session.add_all(
        [
            Rental(id=1, rider="Eve", bike_id=BIKE_ID),
            Rental(id=2, rider="Frank"),
        ]
    )
    session.add_all(
        [
            Log(code="G@G#F@G@", trace="Ggg23g242@", message="weird ids"),
            Log(code="A", trace="B-C", message="separator in the last key"),
        ]
    )
    await session.commit()
    session.expunge_all()
    return session
