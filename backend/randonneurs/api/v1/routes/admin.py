"""
Admin routes.

Protected by X-API-Key header (ADMIN_API_KEY).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.db.session import get_async_db
from randonneurs.shared.errors import DomainError
from randonneurs.features.control_cards import ControlCardGenerator, ControlCardRequest, ControlCardSet
from randonneurs.features.events.lifecycle import LifecycleService
from randonneurs.features.events.schemas import EventStatusUpdate
from randonneurs.features.results.repository import ResultRepository
from randonneurs.features.results.schemas import CollectionReport, SeasonResultRow
from randonneurs.api.v1.dependencies import current_season, raise_http, verify_api_key

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_api_key)],
)


# =============================================================================
# Schemas
# =============================================================================

class StatusChangeResponse(BaseModel):
    id: str
    status: str
    collection: Optional[CollectionReport] = None


class SubmitResultsRequest(BaseModel):
    submitted_by: Optional[str] = None


class SubmitResultsResponse(BaseModel):
    success: bool
    sent_to: str


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/events/{event_id}/status", response_model=StatusChangeResponse)
async def change_event_status(
    event_id: str,
    request: EventStatusUpdate,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Move an event along its lifecycle.

    Completing starts result collection; cancelling removes results;
    submitting emails the results summary to the chapter VP.
    """
    try:
        report = await LifecycleService(db).change_status(event_id, request.status)
    except DomainError as e:
        raise_http(e)
    return StatusChangeResponse(id=event_id, status=request.status.value, collection=report)


@router.post("/events/{event_id}/submit-results", response_model=SubmitResultsResponse)
async def submit_event_results(
    event_id: str,
    request: SubmitResultsRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Send results to the chapter VP for ACP and mark the event submitted."""
    try:
        sent_to = await LifecycleService(db).submit_event_results(event_id, request.submitted_by)
    except DomainError as e:
        raise_http(e)
    return SubmitResultsResponse(success=True, sent_to=sent_to)


@router.post("/events/{event_id}/control-cards", response_model=ControlCardSet)
async def generate_control_cards(
    event_id: str,
    request: ControlCardRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Printable control cards for the event's registered riders."""
    try:
        return await ControlCardGenerator(db).generate(event_id, request)
    except DomainError as e:
        raise_http(e)


@router.get("/results", response_model=list[SeasonResultRow])
async def list_season_results(
    season: int = Depends(current_season),
    db: AsyncSession = Depends(get_async_db),
):
    """All results of a season (defaults to the current season)."""
    return await ResultRepository(db).list_for_season(season)
