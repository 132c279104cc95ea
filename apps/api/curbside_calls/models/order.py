"""Order model."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, utcnow

if TYPE_CHECKING:
    from .call import Call


class Order(Base):
    """Customer pickup order that may trigger a confirmation call."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str] = mapped_column(String, nullable=False)
    vehicle_make: Mapped[str] = mapped_column(String, nullable=False)
    vehicle_model: Mapped[str] = mapped_column(String, nullable=False)
    vehicle_color: Mapped[str] = mapped_column(String, nullable=False)
    store_name: Mapped[str] = mapped_column(String, nullable=False)
    order_number: Mapped[str] = mapped_column(String, nullable=False)
    items: Mapped[Any] = mapped_column(JSONType, nullable=True)
    success_evaluation: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    calls: Mapped[list["Call"]] = relationship("Call", back_populates="order", passive_deletes=True)
