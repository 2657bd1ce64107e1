"""Create the database schema and optionally seed a demo room for development."""
from __future__ import annotations

import argparse
import asyncio
import logging

from roomgate.db.session import SessionLocal, dispose_engine, engine
from roomgate.models.base import Base
from roomgate.repositories.rooms import SqlRoomRepository
from roomgate.services.rooms import RoomLifecycleManager

logger = logging.getLogger(__name__)

DEMO_ROOM = {
	"name": "Standup",
	"capacity": 5,
	"startAt": "2025-01-01T09:00:00Z",
	"endAt": "2025-01-01T09:30:00Z",
	"timezone": "UTC",
	"recurring": True,
}


async def bootstrap(*, reset: bool, seed: bool) -> None:
	async with engine.begin() as conn:
		if reset:
			await conn.run_sync(Base.metadata.drop_all)
		await conn.run_sync(Base.metadata.create_all)
	logger.info("Schema ready (reset=%s)", reset)

	if seed:
		async with SessionLocal() as session:
			room = await RoomLifecycleManager(SqlRoomRepository(session)).create(DEMO_ROOM)
		logger.info("Seeded demo room %s", room.id)

	await dispose_engine()


def main() -> None:
	parser = argparse.ArgumentParser(description=__doc__)
	parser.add_argument("--reset", action="store_true", help="drop existing tables first")
	parser.add_argument("--seed", action="store_true", help="insert a demo room")
	args = parser.parse_args()

	logging.basicConfig(level=logging.INFO)
	asyncio.run(bootstrap(reset=args.reset, seed=args.seed))


if __name__ == "__main__":
	main()
