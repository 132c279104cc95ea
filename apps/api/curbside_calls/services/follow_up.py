"""Delayed one-shot follow-up that copies a call's outcome onto its order."""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models.base import utcnow
from ..repositories import orders as orders_repo

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 300.0


class CallDetailsSource(Protocol):
    async def fetch_details(self, call_id: str) -> dict[str, Any]:
        """Return the provider's call object."""


class FollowUpState(str, enum.Enum):
    ARMED = "armed"
    FIRED = "fired"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass
class FollowUp:
    call_id: str
    order_id: int
    armed_at: datetime = field(default_factory=utcnow)
    state: FollowUpState = FollowUpState.ARMED
    success_evaluation: str | None = None
    task: asyncio.Task[None] | None = field(default=None, repr=False)


class FollowUpScheduler:
    """In-memory registry of delayed call re-checks.

    Each armed follow-up sleeps for the configured delay, fetches the call once
    and writes ``analysis.successEvaluation`` onto the order when present. Errors
    are logged and end the follow-up; nothing is retried or persisted, so
    follow-ups still armed when the process stops are lost.
    """

    def __init__(
        self,
        gateway: CallDetailsSource,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        self._gateway = gateway
        self._session_factory = session_factory
        self._delay = delay_seconds
        self._follow_ups: dict[str, FollowUp] = {}

    @property
    def delay_seconds(self) -> float:
        return self._delay

    def arm(self, call_id: str, order_id: int) -> FollowUp:
        """Schedule the re-check for a freshly initiated call."""

        previous = self._follow_ups.get(call_id)
        if previous is not None and previous.task is not None and not previous.task.done():
            logger.warning("Follow-up already armed for call_id=%s, keeping the existing one", call_id)
            return previous

        follow_up = FollowUp(call_id=call_id, order_id=order_id)
        follow_up.task = asyncio.create_task(self._run(follow_up), name=f"follow-up:{call_id}")
        follow_up.task.add_done_callback(lambda _task: self._forget(follow_up))
        self._follow_ups[call_id] = follow_up
        logger.info(
            "Armed follow-up for call_id=%s order_id=%s in %.0fs", call_id, order_id, self._delay
        )
        return follow_up

    def get(self, call_id: str) -> FollowUp | None:
        return self._follow_ups.get(call_id)

    def pending(self) -> list[FollowUp]:
        """Return follow-ups that have not finished yet."""

        return [
            item
            for item in self._follow_ups.values()
            if item.state in (FollowUpState.ARMED, FollowUpState.FIRED)
        ]

    def cancel(self, call_id: str) -> bool:
        follow_up = self._follow_ups.get(call_id)
        if follow_up is None or follow_up.state is not FollowUpState.ARMED:
            return False
        follow_up.state = FollowUpState.CANCELLED
        if follow_up.task is not None:
            follow_up.task.cancel()
        logger.info("Cancelled follow-up for call_id=%s", call_id)
        return True

    def cancel_for_order(self, order_id: int) -> int:
        """Cancel every armed follow-up of an order and return how many were cancelled."""

        call_ids = [item.call_id for item in self._follow_ups.values() if item.order_id == order_id]
        return sum(1 for call_id in call_ids if self.cancel(call_id))

    async def shutdown(self) -> None:
        """Cancel outstanding follow-ups and wait for their tasks to unwind."""

        tasks = []
        for follow_up in self._follow_ups.values():
            if follow_up.task is not None and not follow_up.task.done():
                if follow_up.state is FollowUpState.ARMED:
                    follow_up.state = FollowUpState.CANCELLED
                follow_up.task.cancel()
                tasks.append(follow_up.task)
        if tasks:
            logger.info("Dropping %d outstanding follow-up(s) on shutdown", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, follow_up: FollowUp) -> None:
        if self._follow_ups.get(follow_up.call_id) is follow_up:
            del self._follow_ups[follow_up.call_id]

    async def _run(self, follow_up: FollowUp) -> None:
        try:
            await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            follow_up.state = FollowUpState.CANCELLED
            raise

        follow_up.state = FollowUpState.FIRED
        call_id, order_id = follow_up.call_id, follow_up.order_id
        try:
            logger.info("Fetching call details for call_id=%s", call_id)
            details = await self._gateway.fetch_details(call_id)
            evaluation = extract_success_evaluation(details)

            if evaluation is not None:
                async with self._session_factory() as session:
                    async with session.begin():
                        found = await orders_repo.update_success_evaluation(session, order_id, evaluation)
                follow_up.success_evaluation = evaluation
                if found:
                    logger.info(
                        "Updated order_id=%s with success_evaluation=%s", order_id, evaluation
                    )
                else:
                    logger.warning("Order order_id=%s no longer exists, evaluation dropped", order_id)
            else:
                logger.info("No success evaluation yet for call_id=%s", call_id)

            logger.info("Follow-up done for call_id=%s order_id=%s", call_id, order_id)
        except asyncio.CancelledError:
            logger.info("Follow-up for call_id=%s interrupted during shutdown", call_id)
            raise
        except Exception:  # noqa: BLE001 - follow-ups never surface errors
            logger.exception("Follow-up failed for call_id=%s order_id=%s", call_id, order_id)
        finally:
            if follow_up.state is FollowUpState.FIRED:
                follow_up.state = FollowUpState.DONE


def extract_success_evaluation(details: dict[str, Any] | None) -> str | None:
    """Return ``analysis.successEvaluation`` as text, or None when absent or empty."""

    if not details:
        return None
    analysis = details.get("analysis")
    if not isinstance(analysis, dict):
        return None
    value = analysis.get("successEvaluation")
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def get_follow_up_scheduler(request: Request) -> FollowUpScheduler:
    """FastAPI dependency returning the scheduler created at startup."""

    return request.app.state.follow_up_scheduler
