"""Expose ORM models."""
from .call import Call
from .order import Order

__all__ = [
    "Call",
    "Order",
]
