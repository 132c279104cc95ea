"""Business logic for order management."""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.order import Order
from ..repositories import calls as calls_repo
from ..repositories import orders as orders_repo
from ..schemas import orders as schemas
from .follow_up import FollowUpScheduler

logger = logging.getLogger(__name__)


async def list_orders(session: AsyncSession) -> list[Order]:
    return await orders_repo.list_orders(session)


async def create_order(payload: schemas.OrderCreate, session: AsyncSession) -> Order:
    """Persist a new order from the request body."""

    async with session.begin():
        order = await orders_repo.create_order(session, **payload.model_dump())
    return order


async def delete_order(
    order_id: int,
    session: AsyncSession,
    scheduler: FollowUpScheduler,
) -> None:
    """Delete an order together with its calls and any pending follow-ups.

    Unknown ids are ignored so the operation stays idempotent.
    """

    async with session.begin():
        removed_calls = await calls_repo.delete_for_order(session, order_id)
        removed = await orders_repo.delete_order(session, order_id)

    cancelled = scheduler.cancel_for_order(order_id)
    if removed:
        logger.info(
            "Deleted order_id=%s with %s call(s), cancelled %s follow-up(s)",
            order_id,
            removed_calls,
            cancelled,
        )
