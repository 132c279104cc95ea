"""Schemas for call records and the voice provider's call object."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CallRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: int
    assistant_id: str | None = None
    phone_number_id: str | None = None
    type: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    org_id: str | None = None
    cost: Decimal
    customer_number: str | None = None
    status: str | None = None
    phone_call_provider: str | None = None
    phone_call_provider_id: str | None = None
    phone_call_transport: str | None = None
    assistant_overrides: Any = None
    monitor_data: Any = None


class CallInitiatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    call_id: str = Field(alias="callId")


class _ProviderModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class ProviderCustomer(_ProviderModel):
    number: str | None = None


class ProviderAnalysis(_ProviderModel):
    summary: str | None = None
    success_evaluation: Any = None


class ProviderCall(_ProviderModel):
    """Subset of the provider's call object this service reads.

    Unknown keys are kept so the object can be relayed untouched.
    """

    id: str
    assistant_id: str | None = None
    phone_number_id: str | None = None
    type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    org_id: str | None = None
    cost: Decimal | None = None
    customer: ProviderCustomer | None = None
    status: str | None = None
    phone_call_provider: str | None = None
    phone_call_provider_id: str | None = None
    phone_call_transport: str | None = None
    assistant_overrides: dict[str, Any] | None = None
    monitor: dict[str, Any] | None = None
    analysis: ProviderAnalysis | None = None
