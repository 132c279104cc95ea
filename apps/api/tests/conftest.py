"""Shared fixtures: in-memory database, fake voice provider and an API client."""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("VAPI_API_TOKEN", "test-token")
os.environ.setdefault("VAPI_ASSISTANT_ID", "assistant-test")
os.environ.setdefault("VAPI_PHONE_NUMBER_ID", "phone-number-test")

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from curbside_calls.db.session import get_session
from curbside_calls.main import app
from curbside_calls.models import Order
from curbside_calls.models.base import Base
from curbside_calls.services.follow_up import FollowUpScheduler, get_follow_up_scheduler
from curbside_calls.services.gateway import CallGatewayError, get_call_gateway

ORDER_FIELDS: dict[str, Any] = {
    "customer_name": "A",
    "phone_number": "555",
    "vehicle_make": "Ford",
    "vehicle_model": "F150",
    "vehicle_color": "Red",
    "store_name": "S",
    "order_number": "42",
    "items": "2x filter",
}


class FakeGateway:
    """Stands in for the voice provider and records what it was asked to do."""

    def __init__(self) -> None:
        self.initiated: list[Any] = []
        self.fetched: list[str] = []
        self.call_response: dict[str, Any] = {
            "id": "call-123",
            "assistantId": "assistant-test",
            "phoneNumberId": "phone-number-test",
            "type": "outboundPhoneCall",
            "createdAt": "2025-01-15T10:30:00.000Z",
            "updatedAt": "2025-01-15T10:30:01.000Z",
            "orgId": "org-1",
            "cost": 0,
            "customer": {"number": "555"},
            "status": "queued",
            "phoneCallProvider": "twilio",
            "phoneCallProviderId": "CA123",
            "phoneCallTransport": "pstn",
            "assistantOverrides": {"variableValues": {"customer_name": "A"}},
            "monitor": {"listenUrl": "wss://example.test/listen"},
        }
        self.details_response: dict[str, Any] = {"id": "call-123", "status": "ended"}
        self.fail_initiate = False
        self.fail_details = False

    async def initiate(self, context: Any) -> dict[str, Any]:
        self.initiated.append(context)
        if self.fail_initiate:
            raise CallGatewayError("provider down", status_code=503)
        return dict(self.call_response)

    async def fetch_details(self, call_id: str) -> dict[str, Any]:
        self.fetched.append(call_id)
        if self.fail_details:
            raise CallGatewayError("provider down", status_code=503)
        return dict(self.details_response)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture
async def scheduler(gateway: FakeGateway, session_factory):
    # Long delay so armed follow-ups stay pending for the duration of a test.
    follow_ups = FollowUpScheduler(gateway, session_factory, delay_seconds=3600)
    yield follow_ups
    await follow_ups.shutdown()


@pytest_asyncio.fixture
async def client(session_factory, gateway: FakeGateway, scheduler: FollowUpScheduler):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_call_gateway] = lambda: gateway
    app.dependency_overrides[get_follow_up_scheduler] = lambda: scheduler

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def order(session_factory) -> Order:
    async with session_factory() as session:
        async with session.begin():
            record = Order(**ORDER_FIELDS)
            session.add(record)
    return record
