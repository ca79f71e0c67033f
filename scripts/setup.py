#!/usr/bin/env python3
"""Setup script for the travel social API: migrate the database and seed sample data."""

import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from travelsocial.core.database import async_session_factory, close_db
from travelsocial.models import Agency, Package, Post, Traveler

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_database():
    """Bring the schema up to the latest migration."""
    logger.info("Setting up database...")

    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data():
    """Create a few travelers, an agency with packages, and a post."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing = await db.execute(select(func.count(Agency.id)))
            if existing.scalar() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            agency = Agency(agency_name="Northern Trails", user_name="northerntrails")
            alice = Traveler(full_name="Alice Rivera", user_name="alice")
            bruno = Traveler(full_name="Bruno Costa", user_name="bruno")
            db.add_all([agency, alice, bruno])
            await db.flush()

            base_date = datetime.now(timezone.utc) + timedelta(days=30)
            for i, (title, slots) in enumerate([
                ("Northern Lights Adventure", 12),
                ("Fjord Kayaking Week", 8),
                ("Glacier Hike Weekend", 5),
            ]):
                start = base_date + timedelta(days=i * 14)
                db.add(Package(
                    agency_id=agency.id,
                    title=title,
                    description=f"{title} with expert local guides",
                    main_location="Iceland",
                    price=149900,
                    start_date=start,
                    end_date=start + timedelta(days=5),
                    max_slots=slots,
                    available_slots=slots,
                ))

            db.add(Post(
                owner_type=alice.actor_type.value,
                owner_id=alice.id,
                content="Counting down the days to Iceland!",
                location="Lisbon",
            ))

            await db.commit()
            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise

    await close_db()


def main():
    """Main setup function."""
    logger.info("Starting travel social API setup...")

    setup_database()
    asyncio.run(create_sample_data())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn travelsocial.main:app --reload")


if __name__ == "__main__":
    main()
