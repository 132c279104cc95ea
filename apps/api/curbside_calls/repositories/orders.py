"""Order repository helpers."""
from __future__ import annotations

from typing import Any

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.order import Order


async def create_order(
    session: AsyncSession,
    *,
    customer_name: str,
    phone_number: str,
    vehicle_make: str,
    vehicle_model: str,
    vehicle_color: str,
    store_name: str,
    order_number: str,
    items: Any,
) -> Order:
    """Persist a new order and return it with its generated id and timestamp."""

    order = Order(
        customer_name=customer_name,
        phone_number=phone_number,
        vehicle_make=vehicle_make,
        vehicle_model=vehicle_model,
        vehicle_color=vehicle_color,
        store_name=store_name,
        order_number=order_number,
        items=items,
    )
    session.add(order)
    await session.flush()
    return order


async def list_orders(session: AsyncSession) -> list[Order]:
    """Return every order, newest first."""

    stmt: Select[tuple[Order]] = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, order_id: int) -> Order | None:
    """Return an order by identifier."""

    return await session.get(Order, order_id)


async def delete_order(session: AsyncSession, order_id: int) -> bool:
    """Delete an order; return True if a row was removed."""

    result = await session.execute(delete(Order).where(Order.id == order_id))
    return result.rowcount > 0


async def update_success_evaluation(session: AsyncSession, order_id: int, value: str) -> bool:
    """Set the success evaluation of one order; return True if it exists."""

    result = await session.execute(
        update(Order).where(Order.id == order_id).values(success_evaluation=value)
    )
    return result.rowcount > 0
