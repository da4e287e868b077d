"""
Event-related models.

Models:
- Chapter: Regional chapter organizing rides
- Route: Club-curated course with ordered controls
- RouteControl: One checkpoint on a route
- Event: A scheduled ride instance
- Registration: A rider's intent to start an event
"""

from datetime import datetime
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from randonneurs.db.base import Base
from randonneurs.shared.constants import EventStatus, EventType, RegistrationStatus


def _uuid() -> str:
    return str(uuid.uuid4())


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    vp_email = Column(String(255), nullable=True)

    events = relationship("Event", back_populates="chapter")

    def __repr__(self):
        return f"<Chapter {self.slug}>"


class Route(Base):
    __tablename__ = "routes"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    chapter_id = Column(String(36), ForeignKey("chapters.id"), nullable=True)
    distance_km = Column(Float, nullable=True)
    rwgps_id = Column(String(20), nullable=True)

    controls = relationship(
        "RouteControl",
        back_populates="route",
        order_by="RouteControl.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Route {self.slug} ({self.distance_km} km)>"


class RouteControl(Base):
    """Checkpoint with cumulative distance from the start."""

    __tablename__ = "route_controls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(String(36), ForeignKey("routes.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    distance_km = Column(Float, nullable=False)

    route = relationship("Route", back_populates="controls")

    __table_args__ = (
        UniqueConstraint("route_id", "position", name="uq_route_control_position"),
    )


class Event(Base):
    """
    A scheduled ride.

    Status moves scheduled -> completed -> submitted, or scheduled -> cancelled.
    start_time is "HH:MM"; NULL means the club default (08:00).
    """

    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(150), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    distance_km = Column(Integer, nullable=False)
    event_type = Column(String(20), nullable=False, default=EventType.BREVET.value)
    event_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(8), nullable=True)
    start_location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=EventStatus.SCHEDULED.value, index=True)

    chapter_id = Column(String(36), ForeignKey("chapters.id"), nullable=True, index=True)
    route_id = Column(String(36), ForeignKey("routes.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    chapter = relationship("Chapter", back_populates="events", lazy="joined")
    route = relationship("Route", lazy="joined")
    registrations = relationship(
        "Registration",
        back_populates="event",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Event {self.id} {self.name} {self.distance_km}km [{self.status}]>"


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    rider_id = Column(String(36), ForeignKey("riders.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=RegistrationStatus.REGISTERED.value)
    share_registration = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)
    registered_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="registrations")
    rider = relationship("Rider", lazy="joined")

    __table_args__ = (
        UniqueConstraint("event_id", "rider_id", name="uq_registration_event_rider"),
    )
