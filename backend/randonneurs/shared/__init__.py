"""
Shared utilities (NOT business logic).

Usage:
    from randonneurs.shared import BaseRepository, map_with_partial_failure
    from randonneurs.shared.formatters import format_control_time
"""
from .action_result import ActionResult
from .batch import BatchFailure, BatchResult, map_with_partial_failure
from .constants import (
    EventStatus,
    EventType,
    Gender,
    RegistrationStatus,
    ResultFileType,
    ResultStatus,
    RIDER_SUBMITTABLE_STATUSES,
)
from .errors import (
    AlreadySubmittedToACP,
    DomainError,
    EmailDeliveryError,
    InvalidDistance,
    InvalidEventData,
    InvalidFinishTimeFormat,
    InvalidStatus,
    InvalidTransition,
    LifecycleCheckInProgress,
    NotFound,
    PartialBatchFailure,
    ResultSaveFailed,
    UploadRejected,
)
from .formatters import (
    format_card_date,
    format_control_time,
    format_event_type,
    format_hm,
    format_long_date,
)
from .repository import BaseRepository

__all__ = [
    # action result
    "ActionResult",
    # batch
    "BatchFailure",
    "BatchResult",
    "map_with_partial_failure",
    # constants
    "EventStatus",
    "EventType",
    "Gender",
    "RegistrationStatus",
    "ResultFileType",
    "ResultStatus",
    "RIDER_SUBMITTABLE_STATUSES",
    # errors
    "AlreadySubmittedToACP",
    "DomainError",
    "EmailDeliveryError",
    "InvalidDistance",
    "InvalidEventData",
    "InvalidFinishTimeFormat",
    "InvalidStatus",
    "InvalidTransition",
    "LifecycleCheckInProgress",
    "NotFound",
    "PartialBatchFailure",
    "ResultSaveFailed",
    "UploadRejected",
    # formatters
    "format_card_date",
    "format_control_time",
    "format_event_type",
    "format_hm",
    "format_long_date",
    # repository
    "BaseRepository",
]
