"""
Rider identity.

Usage:
    from randonneurs.features.riders import fuzzy_name_score, find_fuzzy_name_matches
"""

from .models import Rider
from .matching import (
    FuzzyMatch,
    find_fuzzy_name_matches,
    fuzzy_name_score,
    get_name_variants,
    levenshtein_distance,
    similarity_score,
)

__all__ = [
    "Rider",
    "FuzzyMatch",
    "find_fuzzy_name_matches",
    "fuzzy_name_score",
    "get_name_variants",
    "levenshtein_distance",
    "similarity_score",
]
