"""Gateway to the hosted voice-call provider (Vapi REST API)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Request

from ..core.config import Settings

logger = logging.getLogger(__name__)


class CallGatewayError(RuntimeError):
    """Raised when the provider cannot be reached or rejects a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider_response: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider_response = provider_response


@dataclass(slots=True)
class CallContext:
    """Customer, order and vehicle attributes read to the customer by the assistant."""

    customer_name: str
    phone_number: str
    store_name: str
    order_number: str
    order_items: Any
    vehicle_make: str
    vehicle_model: str
    vehicle_color: str

    def variable_values(self) -> dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "store_name": self.store_name,
            "order_number": self.order_number,
            "order_items": self.order_items,
            "vehicle_make": self.vehicle_make,
            "vehicle_model": self.vehicle_model,
            "vehicle_color": self.vehicle_color,
        }


class VapiCallGateway:
    """Places outbound calls and reads call status through the provider API.

    Each operation is a single attempt. Transport failures and error statuses are
    raised as :class:`CallGatewayError` with the httpx error chained.
    """

    def __init__(
        self,
        *,
        api_token: str,
        assistant_id: str,
        phone_number_id: str,
        base_url: str = "https://api.vapi.ai",
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_token = api_token
        self._assistant_id = assistant_id
        self._phone_number_id = phone_number_id
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "VapiCallGateway":
        return cls(
            api_token=settings.vapi_api_token,
            assistant_id=settings.vapi_assistant_id,
            phone_number_id=settings.vapi_phone_number_id,
            base_url=settings.vapi_base_url,
            timeout_seconds=settings.vapi_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def initiate(self, context: CallContext) -> dict[str, Any]:
        """Start an outbound call for the order and return the provider's call object."""

        payload = {
            "assistantId": self._assistant_id,
            "assistantOverrides": {"variableValues": context.variable_values()},
            "customer": {"number": context.phone_number},
            "phoneNumberId": self._phone_number_id,
        }
        logger.info("Initiating call for order_number=%s", context.order_number)
        return await self._request("POST", "/call", json=payload)

    async def fetch_details(self, call_id: str) -> dict[str, Any]:
        """Return the provider's current view of a call, including any analysis."""

        return await self._request("GET", f"/call/{call_id}")

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method, path, headers={"Authorization": f"Bearer {self._api_token}"}, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.exception("Transport error calling voice provider %s %s", method, path)
            raise CallGatewayError(f"HTTP error: {exc!s}") from exc

        if response.status_code >= 400:
            error_body = _safe_json(response)
            logger.error(
                "Voice provider rejected %s %s with status %s: %s",
                method,
                path,
                response.status_code,
                error_body,
            )
            raise CallGatewayError(
                f"Voice provider returned {response.status_code}",
                status_code=response.status_code,
                provider_response=error_body,
            )

        data = _safe_json(response)
        if not isinstance(data, dict):
            raise CallGatewayError(
                "Voice provider returned an unexpected payload",
                status_code=response.status_code,
                provider_response=data,
            )
        return data


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def get_call_gateway(request: Request) -> VapiCallGateway:
    """FastAPI dependency returning the gateway created at startup."""

    return request.app.state.call_gateway
