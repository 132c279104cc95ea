"""API tests for call initiation and call lookups."""
from __future__ import annotations

from decimal import Decimal

import pytest

from curbside_calls.repositories import calls as calls_repo


@pytest.mark.asyncio
async def test_initiate_call_for_unknown_order_returns_404(client, gateway, session_factory, scheduler):
    response = await client.post("/api/call/9999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Order not found"}
    assert gateway.initiated == []
    assert scheduler.pending() == []
    async with session_factory() as session:
        assert await calls_repo.list_calls(session) == []


@pytest.mark.asyncio
async def test_initiate_call_records_call_and_arms_follow_up(client, gateway, session_factory, scheduler, order):
    response = await client.post(f"/api/call/{order.id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Call initiated successfully", "callId": "call-123"}

    assert len(gateway.initiated) == 1
    context = gateway.initiated[0]
    assert context.phone_number == "555"
    assert context.variable_values() == {
        "customer_name": "A",
        "store_name": "S",
        "order_number": "42",
        "order_items": "2x filter",
        "vehicle_make": "Ford",
        "vehicle_model": "F150",
        "vehicle_color": "Red",
    }

    async with session_factory() as session:
        calls = await calls_repo.list_calls(session)
    assert len(calls) == 1
    call = calls[0]
    assert call.id == "call-123"
    assert call.order_id == order.id
    assert call.customer_number == "555"
    assert call.status == "queued"
    assert call.phone_call_provider == "twilio"
    assert call.assistant_overrides == {"variableValues": {"customer_name": "A"}}
    assert call.monitor_data == {"listenUrl": "wss://example.test/listen"}

    pending = scheduler.pending()
    assert [(item.call_id, item.order_id) for item in pending] == [("call-123", order.id)]


@pytest.mark.asyncio
async def test_initiate_call_defaults_missing_cost(client, gateway, session_factory, order):
    gateway.call_response.pop("cost")

    response = await client.post(f"/api/call/{order.id}")

    assert response.status_code == 200
    async with session_factory() as session:
        (call,) = await calls_repo.list_by_order(session, order.id)
    assert call.cost == Decimal("0.00")


@pytest.mark.asyncio
async def test_provider_failure_returns_500_without_side_effects(client, gateway, session_factory, scheduler, order):
    gateway.fail_initiate = True

    response = await client.post(f"/api/call/{order.id}")

    assert response.status_code == 500
    assert response.json() == {"detail": "Error initiating call"}
    assert scheduler.pending() == []
    async with session_factory() as session:
        assert await calls_repo.list_calls(session) == []


@pytest.mark.asyncio
async def test_provider_response_without_id_returns_500(client, gateway, scheduler, order):
    gateway.call_response.pop("id")

    response = await client.post(f"/api/call/{order.id}")

    assert response.status_code == 500
    assert scheduler.pending() == []


@pytest.mark.asyncio
async def test_list_calls_and_calls_for_order(client, order):
    await client.post(f"/api/call/{order.id}")

    all_calls = await client.get("/api/calls")
    for_order = await client.get(f"/api/orders/{order.id}/calls")
    other_order = await client.get("/api/orders/9999/calls")

    assert all_calls.status_code == 200
    assert [item["id"] for item in all_calls.json()] == ["call-123"]
    assert for_order.json()[0]["order_id"] == order.id
    assert for_order.json()[0]["customer_number"] == "555"
    assert other_order.status_code == 200
    assert other_order.json() == []


@pytest.mark.asyncio
async def test_call_details_are_relayed_verbatim(client, gateway):
    gateway.details_response = {
        "id": "call-9",
        "status": "ended",
        "analysis": {"successEvaluation": "true", "summary": "Customer confirmed."},
        "someNewField": [1, 2, 3],
    }

    response = await client.get("/api/call-details/call-9")

    assert response.status_code == 200
    assert response.json() == gateway.details_response
    assert gateway.fetched == ["call-9"]


@pytest.mark.asyncio
async def test_call_details_failure_returns_500(client, gateway):
    gateway.fail_details = True

    response = await client.get("/api/call-details/call-9")

    assert response.status_code == 500
    assert response.json() == {"detail": "Error retrieving call details"}
