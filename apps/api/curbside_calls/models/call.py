"""Call model."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, utcnow

if TYPE_CHECKING:
    from .order import Order


class Call(Base):
    """One outbound voice call placed for an order, keyed by the provider's id."""

    __tablename__ = "calls"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    assistant_id: Mapped[str | None] = mapped_column(String)
    phone_number_id: Mapped[str | None] = mapped_column(String)
    type: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    org_id: Mapped[str | None] = mapped_column(String)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0.00"), nullable=False)
    customer_number: Mapped[str | None] = mapped_column(String)
    status: Mapped[str | None] = mapped_column(String)
    phone_call_provider: Mapped[str | None] = mapped_column(String)
    phone_call_provider_id: Mapped[str | None] = mapped_column(String)
    phone_call_transport: Mapped[str | None] = mapped_column(String)
    assistant_overrides: Mapped[Any] = mapped_column(JSONType, nullable=True)
    monitor_data: Mapped[Any] = mapped_column(JSONType, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="calls")
