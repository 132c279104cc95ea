"""Call repository helpers."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.call import Call


async def insert_call(session: AsyncSession, call: Call) -> Call:
    """Persist a call record."""

    session.add(call)
    await session.flush()
    return call


async def list_calls(session: AsyncSession) -> list[Call]:
    """Return every recorded call."""

    stmt = select(Call).order_by(Call.created_at.asc(), Call.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_by_order(session: AsyncSession, order_id: int) -> list[Call]:
    """Return the calls placed for one order."""

    stmt = select(Call).where(Call.order_id == order_id).order_by(Call.created_at.asc(), Call.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def delete_for_order(session: AsyncSession, order_id: int) -> int:
    """Remove the calls of an order and return how many were deleted."""

    result = await session.execute(delete(Call).where(Call.order_id == order_id))
    return result.rowcount
