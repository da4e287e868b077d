"""
Result model.

One row per (event, rider). Created as `pending` when the event completes,
then filled in by the rider through their submission token.
"""

from datetime import datetime
import secrets
import uuid

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from randonneurs.db.base import Base
from randonneurs.shared.constants import ResultStatus


def generate_submission_token() -> str:
    return secrets.token_urlsafe(24)


class Result(Base):
    __tablename__ = "results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    rider_id = Column(String(36), ForeignKey("riders.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=ResultStatus.PENDING.value)
    finish_time = Column(String(8), nullable=True)  # H(HH):MM elapsed
    season = Column(Integer, nullable=True, index=True)
    distance_km = Column(Integer, nullable=True)

    # Capability token for the rider's unauthenticated submission link
    submission_token = Column(
        String(64), unique=True, index=True, nullable=False, default=generate_submission_token
    )

    # Rider-supplied evidence
    gpx_url = Column(String(500), nullable=True)
    gpx_file_path = Column(String(500), nullable=True)
    control_card_front_path = Column(String(500), nullable=True)
    control_card_back_path = Column(String(500), nullable=True)
    rider_notes = Column(Text, nullable=True)

    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", lazy="joined")
    rider = relationship("Rider", lazy="joined")

    __table_args__ = (
        UniqueConstraint("event_id", "rider_id", name="uq_result_event_rider"),
    )

    def __repr__(self):
        return f"<Result {self.id} event={self.event_id} rider={self.rider_id} [{self.status}]>"
