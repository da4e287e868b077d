"""
Printable control cards.

Usage:
    from randonneurs.features.control_cards import build_control_card_set, ControlCardGenerator
"""

from .schemas import (
    CardEvent,
    CardRider,
    CardSheet,
    ControlCardRequest,
    ControlCardSet,
    ControlPoint,
    OrganizerInfo,
)
from .generator import (
    ControlCardGenerator,
    build_control_card_set,
    order_controls,
    pair_riders,
    split_columns,
)
from .rwgps import RWGPSClient, extract_rwgps_id, parse_course_points

__all__ = [
    "CardEvent",
    "CardRider",
    "CardSheet",
    "ControlCardRequest",
    "ControlCardSet",
    "ControlPoint",
    "OrganizerInfo",
    "ControlCardGenerator",
    "build_control_card_set",
    "order_controls",
    "pair_riders",
    "split_columns",
    "RWGPSClient",
    "extract_rwgps_id",
    "parse_course_points",
]
