"""
Shared test fixtures.

Database tests run against an in-memory SQLite database (aiosqlite) that
is created fresh for every test.
"""

from datetime import date, datetime
from typing import Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from randonneurs.models import (
    Base,
    Chapter,
    Event,
    Registration,
    Result,
    Rider,
    Route,
    RouteControl,
)
from randonneurs.shared.constants import EventStatus, RegistrationStatus, ResultStatus
from randonneurs.shared.email import EmailMessage
from randonneurs.shared.errors import EmailDeliveryError


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncSession:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


class Factory:
    """Creates persisted rows with sensible defaults."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._n = 0

    def _next(self) -> int:
        self._n += 1
        return self._n

    async def _add(self, entity):
        self.db.add(entity)
        await self.db.flush()
        # Load eager relationships now; lazy loads are not allowed under asyncio
        await self.db.refresh(entity)
        return entity

    async def chapter(self, slug: str = "toronto", name: str = "Toronto", vp_email: Optional[str] = None) -> Chapter:
        return await self._add(Chapter(slug=slug, name=name, vp_email=vp_email))

    async def rider(self, first_name: str = "Jane", last_name: str = "Doe", email: Optional[str] = "rider@example.com") -> Rider:
        if email == "rider@example.com":
            email = f"rider{self._next()}@example.com"
        return await self._add(Rider(first_name=first_name, last_name=last_name, email=email))

    async def route(self, chapter: Optional[Chapter] = None, controls: tuple = (), rwgps_id: Optional[str] = None, name: str = "Uxbridge Loop") -> Route:
        route = Route(
            slug=f"route-{self._next()}",
            name=name,
            chapter_id=chapter.id if chapter else None,
            distance_km=200.0,
            rwgps_id=rwgps_id,
        )
        route.controls = [
            RouteControl(position=i, name=n, distance_km=km)
            for i, (n, km) in enumerate(controls)
        ]
        return await self._add(route)

    async def event(
        self,
        chapter: Optional[Chapter] = None,
        route: Optional[Route] = None,
        name: str = "Spring 200",
        distance_km: int = 200,
        event_type: str = "brevet",
        event_date: date = date(2026, 5, 1),
        start_time: Optional[str] = "08:00",
        status: EventStatus = EventStatus.SCHEDULED,
        **extra,
    ) -> Event:
        return await self._add(Event(
            slug=f"event-{self._next()}",
            name=name,
            distance_km=distance_km,
            event_type=event_type,
            event_date=event_date,
            start_time=start_time,
            status=status.value,
            chapter_id=chapter.id if chapter else None,
            route_id=route.id if route else None,
            **extra,
        ))

    async def registration(self, event: Event, rider: Rider, status: RegistrationStatus = RegistrationStatus.REGISTERED) -> Registration:
        return await self._add(Registration(
            event_id=event.id,
            rider_id=rider.id,
            status=status.value,
            registered_at=datetime(2026, 4, 1, 12, self._next() % 60),
        ))

    async def result(self, event: Event, rider: Rider, status: ResultStatus = ResultStatus.PENDING, **extra) -> Result:
        return await self._add(Result(
            event_id=event.id,
            rider_id=rider.id,
            status=status.value,
            season=event.event_date.year,
            distance_km=event.distance_km,
            **extra,
        ))


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)


# =============================================================================
# Collaborators
# =============================================================================

class FakeEmailSender:
    """Records messages instead of calling the email API."""

    def __init__(self, enabled: bool = True, fail_for: tuple = ()):
        self.enabled = enabled
        self.fail_for = set(fail_for)
        self.sent: list[tuple[str, EmailMessage]] = []

    async def send(self, to: str, message: EmailMessage, from_email: Optional[str] = None) -> bool:
        if to in self.fail_for:
            raise EmailDeliveryError(f"Failed to send email to {to}: HTTP 500")
        if not self.enabled:
            return False
        self.sent.append((to, message))
        return True

    @property
    def recipients(self) -> list[str]:
        return [to for to, _ in self.sent]


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def mock_http(monkeypatch):
    """
    Route every httpx.AsyncClient through a handler.

    Usage:
        mock_http(lambda request: httpx.Response(200, json={...}))
    """
    real_client = httpx.AsyncClient

    def install(handler):
        def client_factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", client_factory)

    return install
