"""Call initiation and call record lookups."""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utcnow
from ..models.call import Call
from ..repositories import calls as calls_repo
from ..repositories import orders as orders_repo
from ..schemas import calls as schemas
from .follow_up import FollowUpScheduler
from .gateway import CallContext, VapiCallGateway

logger = logging.getLogger(__name__)

DEFAULT_COST = Decimal("0.00")


async def list_calls(session: AsyncSession) -> list[Call]:
    return await calls_repo.list_calls(session)


async def list_calls_for_order(order_id: int, session: AsyncSession) -> list[Call]:
    return await calls_repo.list_by_order(session, order_id)


async def initiate_call(
    order_id: int,
    session: AsyncSession,
    gateway: VapiCallGateway,
    scheduler: FollowUpScheduler,
) -> schemas.CallInitiatedResponse:
    """Place a confirmation call for an order, record it and arm its follow-up.

    The provider call, the insert and the follow-up are independent steps: a
    failed insert after the provider accepted the call leaves the call unrecorded.
    """

    async with session.begin():
        order = await orders_repo.get_by_id(session, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    context = CallContext(
        customer_name=order.customer_name,
        phone_number=order.phone_number,
        store_name=order.store_name,
        order_number=order.order_number,
        order_items=order.items,
        vehicle_make=order.vehicle_make,
        vehicle_model=order.vehicle_model,
        vehicle_color=order.vehicle_color,
    )
    raw_call = await gateway.initiate(context)
    provider_call = schemas.ProviderCall.model_validate(raw_call)

    async with session.begin():
        await calls_repo.insert_call(session, build_call_record(order.id, provider_call))

    scheduler.arm(provider_call.id, order.id)
    logger.info("Call %s initiated for order_id=%s", provider_call.id, order.id)

    return schemas.CallInitiatedResponse(message="Call initiated successfully", call_id=provider_call.id)


async def get_call_details(call_id: str, gateway: VapiCallGateway) -> dict[str, Any]:
    return await gateway.fetch_details(call_id)


def build_call_record(order_id: int, provider_call: schemas.ProviderCall) -> Call:
    """Map the provider's call object onto a call row."""

    return Call(
        id=provider_call.id,
        order_id=order_id,
        assistant_id=provider_call.assistant_id,
        phone_number_id=provider_call.phone_number_id,
        type=provider_call.type,
        created_at=provider_call.created_at or utcnow(),
        updated_at=provider_call.updated_at,
        org_id=provider_call.org_id,
        cost=provider_call.cost if provider_call.cost is not None else DEFAULT_COST,
        customer_number=provider_call.customer.number if provider_call.customer else None,
        status=provider_call.status,
        phone_call_provider=provider_call.phone_call_provider,
        phone_call_provider_id=provider_call.phone_call_provider_id,
        phone_call_transport=provider_call.phone_call_transport,
        assistant_overrides=_json_safe(provider_call.assistant_overrides),
        monitor_data=_json_safe(provider_call.monitor),
    )


def _json_safe(value: dict[str, Any] | None) -> Any:
    """Return a JSON round-tripped copy so the column stores plain data."""

    if value is None:
        return None
    return json.loads(json.dumps(value, default=str))
