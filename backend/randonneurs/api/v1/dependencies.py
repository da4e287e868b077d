"""
Shared route dependencies.

- Header guards for the scheduled trigger and admin endpoints
- DomainError -> HTTPException mapping
"""

from datetime import date
from typing import NoReturn, Optional

from fastapi import Header, HTTPException, Query

from randonneurs.config import settings
from randonneurs.shared.errors import DomainError

# Errors not listed here are client errors (400)
DOMAIN_ERROR_STATUS = {
    "not_found": 404,
    "invalid_transition": 409,
    "already_submitted_to_acp": 409,
    "lifecycle_check_in_progress": 409,
    "email_delivery_failed": 502,
    "result_save_failed": 500,
}


def status_for(error: DomainError) -> int:
    return DOMAIN_ERROR_STATUS.get(error.code, 400)


def raise_http(error: DomainError) -> NoReturn:
    raise HTTPException(status_code=status_for(error), detail=error.message)


async def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Verify `Authorization: Bearer <CRON_SECRET>`."""
    if not settings.cron_secret:
        raise HTTPException(status_code=500, detail="Server configuration error")
    if authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")


async def verify_api_key(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> str:
    """Verify admin API key."""
    if not settings.admin_api_key:
        raise HTTPException(status_code=503, detail="Admin API not configured")
    if x_api_key != settings.admin_api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


def current_season(season: Optional[int] = Query(default=None, ge=1900, le=2200)) -> int:
    """Requested season, else the configured current season, else this year."""
    if season is not None:
        return season
    return settings.current_season or date.today().year
