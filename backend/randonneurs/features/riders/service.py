"""
Rider identity resolution.

Suggests existing riders during registration so returning riders (whose
historical records have no email) link to their profile instead of
creating a duplicate.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from .matching import find_fuzzy_name_matches, get_name_variants
from .repository import RiderRepository
from .schemas import RiderMatchCandidate

logger = logging.getLogger(__name__)

CANDIDATE_THRESHOLD = 0.4
MAX_CANDIDATES = 10


class RiderMatchService:
    def __init__(self, db: AsyncSession):
        self.riders = RiderRepository(db)

    async def search_candidates(
        self, first_name: str, last_name: str
    ) -> list[RiderMatchCandidate]:
        """
        Ranked candidates for a registrant's name.

        Args:
            first_name: First name as typed on the form
            last_name: Last name as typed on the form

        Returns:
            Up to MAX_CANDIDATES riders, best match first
        """
        first = first_name.strip()
        last = last_name.strip()
        if not first and not last:
            return []

        variants = get_name_variants(first) if first else []
        if not variants:
            return []

        pool = await self.riders.search_without_email(variants)
        matches = find_fuzzy_name_matches(
            first,
            last,
            pool,
            threshold=CANDIDATE_THRESHOLD,
            max_results=MAX_CANDIDATES,
        )
        logger.debug(
            "Rider match for %s %s: %d of %d candidates", first, last, len(matches), len(pool)
        )

        return [
            RiderMatchCandidate(
                id=m.item.id,
                first_name=m.item.first_name,
                last_name=m.item.last_name,
                full_name=f"{m.item.first_name} {m.item.last_name}",
                first_season=m.item.first_season,
                total_rides=m.item.total_rides,
                score=round(m.score, 3),
            )
            for m in matches
        ]
