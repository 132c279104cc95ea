"""Schemas for the order API."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    vehicle_make: str
    vehicle_model: str
    vehicle_color: str
    store_name: str
    order_number: str
    items: Any = Field(description="Free-form items payload, stored as JSON")


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_name: str
    phone_number: str
    vehicle_make: str
    vehicle_model: str
    vehicle_color: str
    store_name: str
    order_number: str
    items: Any = None
    success_evaluation: str | None = None
    created_at: datetime
