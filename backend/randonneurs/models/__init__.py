"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.
Feature code should import models from their feature package.
"""

from randonneurs.db.base import Base
from randonneurs.features.events.models import Chapter, Event, Route, RouteControl, Registration
from randonneurs.features.riders.models import Rider
from randonneurs.features.results.models import Result

__all__ = [
    "Base",
    "Chapter",
    "Event",
    "Route",
    "RouteControl",
    "Registration",
    "Rider",
    "Result",
]
