"""Rider model."""

from datetime import datetime
import uuid

from sqlalchemy import Column, String, DateTime

from randonneurs.db.base import Base


class Rider(Base):
    """
    A person who rides.

    Identity is not unique per person: historical imports created riders
    without email. Duplicates are surfaced by the fuzzy matcher, never merged
    automatically.
    """

    __tablename__ = "riders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), index=True, nullable=True)
    gender = Column(String(1), nullable=True)  # M | F | X

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Rider {self.id} ({self.full_name})>"
