"""
Database management commands: create tables, seed demo data, reset.

Usage:
    python -m portal.migrate create
    python -m portal.migrate seed
    python -m portal.migrate reset --confirm
"""

import argparse
import asyncio
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from portal.config import settings
from portal.database import Base, engine as default_engine, AsyncSessionLocal
from portal.models.property import PropertyCategory
from portal.models.rating import PropertyRating
from portal.models.user import UserRole
from portal.repositories.property import PropertyRepository
from portal.repositories.user import UserRepository

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123456"

SAMPLE_LISTINGS = [
    ("Sea view apartment", "Limassol", PropertyCategory.APARTMENT, "185000", 2, PropertyRating.A),
    ("Old town house", "Nicosia", PropertyCategory.HOUSE, "320000", 3, PropertyRating.B_PLUS),
    ("Hillside villa", "Paphos", PropertyCategory.VILLA, "950000", 5, PropertyRating.A),
    ("Studio near marina", "Larnaca", PropertyCategory.APARTMENT, "98000", 1, PropertyRating.B),
    ("Family house with garden", "Limassol", PropertyCategory.HOUSE, "410000", 4, PropertyRating.C),
    ("Building plot", "Ayia Napa", PropertyCategory.LAND, "150000", 0, PropertyRating.D),
]


class DatabaseManager:
    """Creates, seeds and resets the schema on the configured database."""

    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        session_factory: Optional[async_sessionmaker] = None
    ):
        self.engine = engine or default_engine
        self.session_factory = session_factory or AsyncSessionLocal

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def seed_database(self) -> bool:
        """
        Create the admin account, a demo agent and approved sample listings.

        Returns:
            False if the database was already seeded, True otherwise
        """
        async with self.session_factory() as session:
            user_repo = UserRepository(session)
            if await user_repo.get_by_email(ADMIN_EMAIL):
                logger.info("Admin user already exists, skipping seed")
                return False

            await user_repo.create_user({
                "email": ADMIN_EMAIL,
                "password": ADMIN_PASSWORD,
                "name": "System Administrator",
                "role": UserRole.ADMIN,
            })
            agent = await user_repo.create_user({
                "email": "agent@example.com",
                "password": "agentpass123",
                "name": "Demo Agent",
                "role": UserRole.AGENT,
                "license_number": "DEMO-001",
                "experience": 5,
            })

            await self._seed_listings(session, agent.id)

        logger.info("Database seeded successfully")
        logger.info(f"  Admin: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
        logger.warning("Please change the admin password in production!")
        return True

    async def _seed_listings(self, session: AsyncSession, owner_id) -> None:
        property_repo = PropertyRepository(session)
        for title, location, category, price, bedrooms, rating in SAMPLE_LISTINGS:
            listing = await property_repo.create_property({
                "title": title,
                "description": f"{title} in {location}.",
                "price": Decimal(price),
                "location": location,
                "category": category,
                "bedrooms": bedrooms,
                "bathrooms": max(1, bedrooms - 1) if bedrooms else 0,
                "total_area": 60 + bedrooms * 30,
                "owner_id": owner_id,
            })
            await property_repo.approve(listing.id, rating)

    async def reset_database(self) -> None:
        """
        Drop and recreate every table, then seed.

        Raises:
            RuntimeError: Outside development and testing environments
        """
        if not (settings.is_development or settings.is_testing):
            raise RuntimeError("Database reset is only allowed in development or test mode")

        logger.warning("Resetting database - all data will be lost!")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

        await self.seed_database()
        logger.info("Database reset completed")


def main(argv=None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="Database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("seed", help="Seed database with demo data")
    reset_parser = subparsers.add_parser("reset", help="Reset database (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    manager = DatabaseManager()

    if args.command == "create":
        asyncio.run(manager.create_tables())
    elif args.command == "seed":
        asyncio.run(manager.seed_database())
    elif args.command == "reset":
        if not args.confirm:
            parser.error("Database reset requires --confirm flag")
        asyncio.run(manager.reset_database())


if __name__ == "__main__":
    main()
