"""SQLAlchemy ORM models for the trip graph written by the materializer."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from tripgen.models.common import ActivityCategory


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class User(Base):
    """User table - trip owners."""

    __tablename__ = "user"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trips: Mapped[list["Trip"]] = relationship("Trip", back_populates="user")


class Trip(Base):
    """Trip table - owns an ordered sequence of stops."""

    __tablename__ = "trip"
    __table_args__ = (Index("idx_trip_user", "user_id"),)

    trip_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="trips")
    stops: Mapped[list["Stop"]] = relationship(
        "Stop", back_populates="trip", cascade="all, delete-orphan", order_by="Stop.order"
    )


class City(Base):
    """City table - lazily populated reference data keyed by name."""

    __tablename__ = "city"
    __table_args__ = (Index("idx_city_name", "name"),)

    city_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Stop(Base):
    """Stop table - one city visit within a trip."""

    __tablename__ = "stop"
    __table_args__ = (UniqueConstraint("trip_id", "order", name="uq_stop_trip_order"),)

    stop_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trip.trip_id", ondelete="CASCADE"), nullable=False
    )
    city_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("city.city_id"), nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="stops")
    city: Mapped["City"] = relationship("City")
    activities: Mapped[list["Activity"]] = relationship(
        "Activity", back_populates="stop", cascade="all, delete-orphan"
    )


class Activity(Base):
    """Activity table - belongs to exactly one stop and one trip."""

    __tablename__ = "activity"
    __table_args__ = (
        UniqueConstraint("stop_id", "order", name="uq_activity_stop_order"),
        Index("idx_activity_trip", "trip_id"),
    )

    activity_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trip.trip_id", ondelete="CASCADE"), nullable=False
    )
    stop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stop.stop_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[ActivityCategory] = mapped_column(
        Enum(ActivityCategory, native_enum=False, length=32), nullable=False
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    stop: Mapped["Stop"] = relationship("Stop", back_populates="activities")
