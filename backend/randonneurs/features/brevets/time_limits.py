"""
ACP / BRM time limits.

Two families of limits:

- Overall time limit for a ride (`close_hours`): the official table of
  brevet limits, flèche fixed at 24 h, a nominal-speed fallback otherwise.
- Per-control opening and closing times (`compute_control_times`): the ACP
  segment speeds applied to a control's cumulative distance.

Pure functions, no I/O.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from randonneurs.shared.constants import EventType
from randonneurs.shared.errors import InvalidDistance

# Official overall limits for BRM distances (hours)
BRM_TIME_LIMITS_HOURS: dict[int, float] = {
    200: 13.5,
    300: 20.0,
    400: 27.0,
    600: 40.0,
    1000: 75.0,
    1200: 90.0,
}

FLECHE_HOURS = 24.0
MIN_BREVET_KM = 200

# Beyond the table, and for populaires / sub-200 km rides
EXTRAPOLATION_SPEED_KMH = 15.0
FALLBACK_SPEED_KMH = 15.0

# Opening times: maximum speed per distance band (km/h)
OPEN_SEGMENTS: tuple[tuple[float, float], ...] = (
    (200, 34.0),
    (400, 32.0),
    (600, 30.0),
    (1000, 28.0),
    (math.inf, 26.0),
)

# Closing times: first 60 km close at 1 h + d/20, then minimum speeds (km/h)
NEUTRAL_ZONE_KM = 60
NEUTRAL_ZONE_SPEED_KMH = 20.0
START_CONTROL_CLOSE_HOURS = 1.0
CLOSE_SEGMENTS: tuple[tuple[float, float], ...] = (
    (600, 15.0),
    (1000, 11.428),
    (math.inf, 13.333),
)

NOMINAL_DISTANCES = (200, 300, 400, 600, 1000, 1200, 1300)

# Finish detection tolerance (km)
_FINISH_EPSILON = 1e-4


@dataclass(frozen=True)
class AllowableTime:
    """Whole hours plus remainder minutes."""
    hours: int
    minutes: int

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def as_timedelta(self) -> timedelta:
        return timedelta(hours=self.hours, minutes=self.minutes)


@dataclass(frozen=True)
class ControlTimes:
    open_at: datetime
    close_at: datetime
    open_minutes: int
    close_minutes: int


def parse_distance(distance_km) -> float:
    """
    Validate a distance in km.

    Raises:
        InvalidDistance: not a number, not finite, or not positive
    """
    if isinstance(distance_km, bool):
        raise InvalidDistance(f"Invalid distance: {distance_km!r}")
    try:
        d = float(distance_km)
    except (TypeError, ValueError):
        raise InvalidDistance(f"Invalid distance: {distance_km!r}")
    if not math.isfinite(d) or d <= 0:
        raise InvalidDistance(f"Invalid distance: {distance_km!r}")
    return d


def _brevet_limit_hours(d: float) -> float:
    largest = max(BRM_TIME_LIMITS_HOURS)
    if d > largest:
        return float(math.ceil(d / EXTRAPOLATION_SPEED_KMH))

    # Floor policy: the bracket's lower entry, never interpolated
    limit = BRM_TIME_LIMITS_HOURS[min(BRM_TIME_LIMITS_HOURS)]
    for km in sorted(BRM_TIME_LIMITS_HOURS):
        if d >= km:
            limit = BRM_TIME_LIMITS_HOURS[km]
    return float(limit)


def close_hours(distance_km, event_type: EventType | str = EventType.BREVET) -> float:
    """
    Overall time limit in hours for a ride.

    Args:
        distance_km: Ride distance (positive)
        event_type: brevet | populaire | fleche | permanent

    Returns:
        Hours allowed from start to finish

    Raises:
        InvalidDistance: for zero, negative or unparseable distances

    Examples:
        close_hours(200)  -> 13.5
        close_hours(250)  -> 13.5   (lower bracket)
        close_hours(1500) -> 100.0  (ceil(1500 / 15))
        close_hours(100, "populaire") -> 7.0
    """
    d = parse_distance(distance_km)
    event_type = EventType(event_type)

    if event_type is EventType.FLECHE:
        return FLECHE_HOURS

    if event_type in (EventType.BREVET, EventType.PERMANENT) and d >= MIN_BREVET_KM:
        return _brevet_limit_hours(d)

    return float(math.ceil(d / FALLBACK_SPEED_KMH))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hours_to_allowable_time(total_hours: float) -> AllowableTime:
    """hours = floor(t), minutes = round((t - hours) * 60)."""
    hours = int(math.floor(total_hours))
    minutes = _round_half_up((total_hours - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    return AllowableTime(hours=hours, minutes=minutes)


def total_allowable_time(
    distance_km, event_type: EventType | str = EventType.BREVET
) -> AllowableTime:
    """Overall limit as whole hours + minutes, e.g. 200 km -> 13 h 30 min."""
    return hours_to_allowable_time(close_hours(distance_km, event_type))


def _segmented_hours(
    km: float,
    segments: tuple[tuple[float, float], ...],
    start_edge: float = 0.0,
) -> float:
    hours = 0.0
    edge = start_edge
    remaining = km - start_edge
    for up_to, speed in segments:
        if remaining <= 0:
            break
        span = min(remaining, up_to - edge)
        hours += span / speed
        remaining -= span
        edge = up_to
    return hours


def _control_km(control_km) -> float:
    try:
        d = float(control_km)
    except (TypeError, ValueError):
        raise InvalidDistance(f"Invalid control distance: {control_km!r}")
    if not math.isfinite(d) or d < 0:
        raise InvalidDistance(f"Invalid control distance: {control_km!r}")
    return d


def control_open_hours(control_km: float) -> float:
    """Hours after the start at which a control at `control_km` opens."""
    return _segmented_hours(_control_km(control_km), OPEN_SEGMENTS)


def control_close_hours(control_km: float) -> float:
    """Hours after the start at which a control at `control_km` closes."""
    d = _control_km(control_km)
    if d == 0:
        return START_CONTROL_CLOSE_HOURS

    neutral = min(d, NEUTRAL_ZONE_KM)
    hours = START_CONTROL_CLOSE_HOURS + neutral / NEUTRAL_ZONE_SPEED_KMH
    if d <= NEUTRAL_ZONE_KM:
        return hours
    return hours + _segmented_hours(d, CLOSE_SEGMENTS, start_edge=NEUTRAL_ZONE_KM)


def compute_control_times(
    start: datetime,
    control_km: float,
    route_km: float,
    event_type: EventType | str = EventType.BREVET,
    truncate_km: bool = True,
) -> ControlTimes:
    """
    Opening and closing clock times for one control.

    Distances are truncated to whole km unless `truncate_km` is False.
    A control at or beyond the route length is the finish: it closes at the
    ride's overall limit. No control closes later than the finish.
    """
    d_route = parse_distance(route_km)
    d_ctrl = _control_km(control_km)
    if truncate_km:
        d_ctrl = math.trunc(d_ctrl)
        d_route = math.trunc(d_route)

    finish_minutes = _round_half_up(close_hours(route_km, event_type) * 60)

    open_minutes = _round_half_up(control_open_hours(d_ctrl) * 60)
    if d_ctrl >= d_route - _FINISH_EPSILON:
        close_minutes = finish_minutes
    else:
        close_minutes = min(
            _round_half_up(control_close_hours(d_ctrl) * 60),
            finish_minutes,
        )

    return ControlTimes(
        open_at=start + timedelta(minutes=open_minutes),
        close_at=start + timedelta(minutes=close_minutes),
        open_minutes=open_minutes,
        close_minutes=close_minutes,
    )


def nominal_distance(distance_km: float) -> int:
    """Smallest BRM distance at or above `distance_km` (1300 beyond 1200)."""
    d = parse_distance(distance_km)
    for nominal in NOMINAL_DISTANCES[:-1]:
        if d <= nominal:
            return nominal
    return NOMINAL_DISTANCES[-1]
