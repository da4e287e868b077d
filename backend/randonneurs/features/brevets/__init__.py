"""
Brevet time calculations.

Usage:
    from randonneurs.features.brevets import close_hours, compute_control_times

- close_hours / total_allowable_time: overall ride limits
- compute_control_times: per-control open/close clock times
- estimate_event_duration: calendar duration
"""

from .time_limits import (
    BRM_TIME_LIMITS_HOURS,
    AllowableTime,
    ControlTimes,
    close_hours,
    total_allowable_time,
    hours_to_allowable_time,
    control_open_hours,
    control_close_hours,
    compute_control_times,
    nominal_distance,
    parse_distance,
)
from .duration import (
    EventDuration,
    estimate_event_duration,
    event_start,
    event_end,
    parse_start_time,
)

__all__ = [
    "BRM_TIME_LIMITS_HOURS",
    "AllowableTime",
    "ControlTimes",
    "close_hours",
    "total_allowable_time",
    "hours_to_allowable_time",
    "control_open_hours",
    "control_close_hours",
    "compute_control_times",
    "nominal_distance",
    "parse_distance",
    "EventDuration",
    "estimate_event_duration",
    "event_start",
    "event_end",
    "parse_start_time",
]
