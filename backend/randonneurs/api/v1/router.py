"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from randonneurs.api.v1.routes import admin, calendar, cron, results, riders

api_router = APIRouter()

api_router.include_router(cron.router)
api_router.include_router(results.router)
api_router.include_router(calendar.router)
api_router.include_router(riders.router)
api_router.include_router(admin.router)
