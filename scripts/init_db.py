"""Create (or with --drop, recreate) the HR star-schema tables."""

import argparse
import asyncio
import logging

from config.settings import settings
from hr_retention.db.connection import engine
from hr_retention.db.models import Base

logger = logging.getLogger("init_db")


async def init(drop: bool = False) -> None:
    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Dropped tables: %s", ", ".join(Base.metadata.tables))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ready: %s", ", ".join(Base.metadata.tables))
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the HR star-schema tables")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(init(drop=args.drop))
