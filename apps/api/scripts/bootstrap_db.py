"""Create database schema and optionally seed sample orders for development."""
from __future__ import annotations

import argparse
import asyncio

from sqlalchemy import func, select

from curbside_calls.core.config import get_settings
from curbside_calls.db.session import build_engine, build_session_factory
from curbside_calls.models import Order
from curbside_calls.models.base import Base

ORDERS = [
	{
		"customer_name": "Ava Khan",
		"phone_number": "+15555550101",
		"vehicle_make": "Ford",
		"vehicle_model": "F150",
		"vehicle_color": "Red",
		"store_name": "Main Street Auto Parts",
		"order_number": "1042",
		"items": ["2x oil filter", "1x wiper blade"],
	},
	{
		"customer_name": "Daniel Lee",
		"phone_number": "+15555550102",
		"vehicle_make": "Toyota",
		"vehicle_model": "Camry",
		"vehicle_color": "Silver",
		"store_name": "Main Street Auto Parts",
		"order_number": "1043",
		"items": "1x battery",
	},
]


async def create_schema(engine) -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_orders(session_factory) -> int:
	"""Insert demo orders when the table is empty and return how many were added."""

	async with session_factory() as session:
		async with session.begin():
			existing = (await session.execute(select(func.count(Order.id)))).scalar_one()
			if existing:
				return 0
			for data in ORDERS:
				session.add(Order(**data))
	return len(ORDERS)


async def main(seed: bool) -> None:
	engine = build_engine(get_settings())
	try:
		await create_schema(engine)
		print("Schema ready")
		if seed:
			added = await seed_orders(build_session_factory(engine))
			print(f"Seeded {added} order(s)")
	finally:
		await engine.dispose()


if __name__ == "__main__":
	parser = argparse.ArgumentParser(description=__doc__)
	parser.add_argument("--seed", action="store_true", help="insert demo orders into an empty table")
	args = parser.parse_args()
	asyncio.run(main(args.seed))
