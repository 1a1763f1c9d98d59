"""
Create the tables and load seed data into a development database
"""
import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.config import settings
from app.db.database import AsyncSessionLocal, init_db
from app.db.seed import seed_database
from loguru import logger


async def seed_all():
    if settings.ENVIRONMENT == "production":
        logger.error("❌ Refusing to seed a production database")
        sys.exit(1)

    logger.info(f"🌱 Seeding database for environment {settings.ENVIRONMENT}...")
    await init_db()

    async with AsyncSessionLocal() as db:
        await seed_database(db, with_sample_tasks="--no-tasks" not in sys.argv)

    logger.info("✅ Seeding finished")


if __name__ == "__main__":
    asyncio.run(seed_all())
