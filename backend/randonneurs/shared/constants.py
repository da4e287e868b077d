"""
Shared enums and constants.

Single source of truth for status and type naming across the app.
Values are stored as-is in the database.
"""

from enum import Enum


class EventType(str, Enum):
    BREVET = "brevet"
    POPULAIRE = "populaire"
    FLECHE = "fleche"
    PERMANENT = "permanent"


class EventStatus(str, Enum):
    """
    Event lifecycle.

    scheduled -> completed -> submitted
    scheduled -> cancelled
    """
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SUBMITTED = "submitted"


class ResultStatus(str, Enum):
    PENDING = "pending"
    FINISHED = "finished"
    DNF = "dnf"
    DNS = "dns"


# Statuses a rider may submit through their token link
RIDER_SUBMITTABLE_STATUSES = (ResultStatus.FINISHED, ResultStatus.DNF, ResultStatus.DNS)


class RegistrationStatus(str, Enum):
    REGISTERED = "registered"
    CANCELLED = "cancelled"


class ResultFileType(str, Enum):
    """Evidence a rider can attach to a result."""
    GPX = "gpx"
    CONTROL_CARD_FRONT = "control_card_front"
    CONTROL_CARD_BACK = "control_card_back"

    @property
    def path_field(self) -> str:
        """Result column holding this file's storage key."""
        if self is ResultFileType.GPX:
            return "gpx_file_path"
        return f"{self.value}_path"


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "X"
