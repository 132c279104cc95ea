"""Call endpoints: listing, initiation and provider lookups."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import calls as calls_schema
from ..services import calls as calls_service
from ..services.follow_up import FollowUpScheduler, get_follow_up_scheduler
from ..services.gateway import VapiCallGateway, get_call_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calls"])


@router.get("/calls", response_model=list[calls_schema.CallRead])
async def list_calls(session: AsyncSession = Depends(get_session)) -> list[calls_schema.CallRead]:
    """Return every recorded call."""

    try:
        calls = await calls_service.list_calls(session)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error fetching calls: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching calls") from exc
    logger.debug("Fetched %d calls from database", len(calls))
    return [calls_schema.CallRead.model_validate(call) for call in calls]


@router.post("/call/{order_id}", response_model=calls_schema.CallInitiatedResponse)
async def initiate_call(
    order_id: int,
    session: AsyncSession = Depends(get_session),
    gateway: VapiCallGateway = Depends(get_call_gateway),
    scheduler: FollowUpScheduler = Depends(get_follow_up_scheduler),
) -> calls_schema.CallInitiatedResponse:
    """Place an outbound confirmation call for the order."""

    try:
        return await calls_service.initiate_call(order_id, session, gateway, scheduler)
    except HTTPException:
        raise
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error initiating call for order_id=%s: %s", order_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error initiating call") from exc


@router.get("/call-details/{call_id}")
async def get_call_details(
    call_id: str,
    gateway: VapiCallGateway = Depends(get_call_gateway),
) -> dict[str, Any]:
    """Relay the provider's current call object."""

    try:
        return await calls_service.get_call_details(call_id, gateway)
    except Exception as exc:  # noqa: BLE001 - single 500 path
        logger.exception("Error retrieving call details for call_id=%s: %s", call_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error retrieving call details"
        ) from exc
