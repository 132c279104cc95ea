"""Order endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import calls as calls_schema
from ..schemas import orders as orders_schema
from ..services import calls as calls_service
from ..services import orders as orders_service
from ..services.follow_up import FollowUpScheduler, get_follow_up_scheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


@router.get("/orders", response_model=list[orders_schema.OrderRead])
async def list_orders(session: AsyncSession = Depends(get_session)) -> list[orders_schema.OrderRead]:
    """Return all orders, newest first."""

    try:
        orders = await orders_service.list_orders(session)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error fetching orders: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching orders") from exc
    return [orders_schema.OrderRead.model_validate(order) for order in orders]


@router.post("/orders", response_model=orders_schema.OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: orders_schema.OrderCreate,
    session: AsyncSession = Depends(get_session),
) -> orders_schema.OrderRead:
    """Create an order."""

    try:
        order = await orders_service.create_order(payload, session)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error creating order: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating order") from exc
    return orders_schema.OrderRead.model_validate(order)


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: int,
    session: AsyncSession = Depends(get_session),
    scheduler: FollowUpScheduler = Depends(get_follow_up_scheduler),
) -> Response:
    """Delete an order and the calls recorded for it."""

    try:
        await orders_service.delete_order(order_id, session, scheduler)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error deleting order: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting order") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/orders/{order_id}/calls", response_model=list[calls_schema.CallRead])
async def list_order_calls(
    order_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[calls_schema.CallRead]:
    """Return the calls placed for one order."""

    try:
        calls = await calls_service.list_calls_for_order(order_id, session)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error fetching calls: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching calls") from exc
    return [calls_schema.CallRead.model_validate(call) for call in calls]
