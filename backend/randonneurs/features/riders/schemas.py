"""Rider-related schemas."""

from typing import Optional

from pydantic import BaseModel


class RiderMatchCandidate(BaseModel):
    """Existing rider that may be the person registering."""

    id: str
    first_name: str
    last_name: str
    full_name: str
    first_season: Optional[int] = None
    total_rides: int = 0
    score: float


class RiderHistory(BaseModel):
    id: str
    first_name: str
    last_name: str
    first_season: Optional[int] = None
    total_rides: int = 0
