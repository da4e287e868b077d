"""
Rider routes.

Candidate search used by the registration form ("is this you?").
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.db.session import get_async_db
from randonneurs.features.riders.schemas import RiderMatchCandidate
from randonneurs.features.riders.service import RiderMatchService

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.get("/match", response_model=list[RiderMatchCandidate])
async def match_riders(
    first_name: str = Query(..., min_length=1, max_length=100),
    last_name: str = Query(default="", max_length=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Existing riders whose name resembles the one entered."""
    return await RiderMatchService(db).search_candidates(first_name, last_name)
