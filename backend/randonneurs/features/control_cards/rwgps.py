"""
Ride with GPS route import.

Reads a published route's course points and keeps the ones tagged as
controls. Best-effort: any failure yields no controls and a warning, and
the admin enters controls by hand.
"""

import logging
import re
from typing import Optional

import httpx

from randonneurs.config import settings
from randonneurs.features.events.schemas import ControlInput

logger = logging.getLogger(__name__)

RWGPS_ID_PATTERNS = (
    re.compile(r"ridewithgps\.com/routes/(\d+)"),
    re.compile(r"ridewithgps\.com/ambassador_routes/(\d+)"),
    re.compile(r"ridewithgps\.com/trips/(\d+)"),
)

_NUMERIC_ID = re.compile(r"^\d+$")

# "CTL 2: Tim Hortons", "Control - Port Perry" -> the place name
_CONTROL_PREFIX = re.compile(
    r"^\s*(?:CTL|CONTROL)(?![a-z])[\s#:.\-]*\d*[\s#:.\-]*",
    re.IGNORECASE,
)

CONTROL_POINT_TYPE = "control"


def extract_rwgps_id(value: Optional[str]) -> Optional[str]:
    """
    Route ID from a Ride with GPS URL or a bare ID.

    https://ridewithgps.com/routes/12345678?privacy_code=x -> "12345678"
    "12345678" -> "12345678"
    Anything else unrecognised is returned trimmed.
    """
    if not value:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if _NUMERIC_ID.match(trimmed):
        return trimmed

    for pattern in RWGPS_ID_PATTERNS:
        match = pattern.search(trimmed)
        if match:
            return match.group(1)
    return trimmed


def clean_control_name(name: str) -> str:
    cleaned = _CONTROL_PREFIX.sub("", name or "").strip()
    return cleaned or (name or "").strip() or "Control"


def parse_course_points(data: dict) -> list[ControlInput]:
    """
    Controls from a route JSON payload, by distance.

    Course points look like {"n": name, "t": type, "d": metres}; they sit
    under "route" or at the top level depending on the endpoint. Distances
    are rounded to 0.1 km; points that land on an already-kept distance are
    dropped (first one wins), so the list is strictly increasing.
    """
    route = data.get("route", data) if isinstance(data, dict) else {}
    points = route.get("course_points") or []

    found = []
    for point in points:
        if str(point.get("t", "")).lower() != CONTROL_POINT_TYPE:
            continue
        metres = point.get("d")
        if metres is None:
            continue
        found.append((float(metres), clean_control_name(str(point.get("n", "")))))
    found.sort(key=lambda p: p[0])

    unique: list[ControlInput] = []
    for metres, name in found:
        control = ControlInput(name=name, distance_km=round(metres / 1000, 1))
        if unique and control.distance_km == unique[-1].distance_km:
            logger.info(
                "Dropping RWGPS control %r at %s km (same distance as %r)",
                control.name, control.distance_km, unique[-1].name,
            )
            continue
        unique.append(control)
    return unique


class RWGPSClient:
    """Read-only client for published Ride with GPS routes."""

    def __init__(self, base_url: Optional[str] = None, timeout: float = 10.0):
        self.base_url = (base_url or settings.rwgps_base_url).rstrip("/")
        self.timeout = timeout

    async def fetch_controls(self, rwgps_id: str) -> list[ControlInput]:
        """
        Controls of a route, or [] if the route cannot be read.

        Args:
            rwgps_id: Route ID (or URL)
        """
        route_id = extract_rwgps_id(rwgps_id)
        if not route_id:
            return []

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/routes/{route_id}.json")

            if response.status_code != 200:
                logger.warning(
                    "RWGPS route %s request failed: %s %s",
                    route_id,
                    response.status_code,
                    response.text[:200],
                )
                return []

            return parse_course_points(response.json())

        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning("RWGPS route %s import error: %s", route_id, e)
            return []


_rwgps_client: Optional[RWGPSClient] = None


def get_rwgps_client() -> RWGPSClient:
    """Get or create RWGPSClient singleton."""
    global _rwgps_client
    if _rwgps_client is None:
        _rwgps_client = RWGPSClient()
    return _rwgps_client
