"""
Randonneurs API

FastAPI application for club events, brevet control times and rider results.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from randonneurs import __version__
from randonneurs.config import settings
from randonneurs.db.session import init_db
from randonneurs.api.v1.router import api_router
import randonneurs.models  # noqa: F401  registers every mapper


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Randonneurs API...")
    await init_db()
    logger.info("Database initialized")

    if not settings.cron_secret:
        logger.warning("CRON_SECRET not set: scheduled event completion is disabled")
    if not settings.sendgrid_api_key:
        logger.warning("SENDGRID_API_KEY not set: emails will be skipped")

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Randonneurs API",
    description="Brevet control times, event lifecycle and rider results",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
