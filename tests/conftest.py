"""
Test configuration and fixtures for the estate portal.
Provides database fixtures, test data factories, a fake storage backend and HTTP clients.
"""

import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portal.main import app
from portal.database import Base, build_engine, get_db
from portal.models.user import User, UserRole
from portal.models.property import Property, PropertyCategory
from portal.models.image import PropertyImage
from portal.models.complex import Complex, ComplexCategory
from portal.models.rating import PropertyRating
from portal.repositories.user import UserRepository
from portal.repositories.property import PropertyRepository
from portal.services.storage import StorageClient
from portal.utils.auth import create_access_token
from portal.utils.dependencies import get_storage


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


class FakeS3Client:
    """Records put_object calls instead of talking to S3."""

    def __init__(self):
        self.calls: List[Dict] = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        return {"ETag": '"fake"'}


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def storage(s3_client: FakeS3Client) -> StorageClient:
    return StorageClient(s3_client, "test-bucket", "eu-central-1")


@pytest.fixture
async def async_client(db_session: AsyncSession, storage: StorageClient) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session and storage overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = None,
        password: str = "testpassword123",
        name: str = "Test User",
        role: UserRole = UserRole.BUYER,
        is_active: bool = True,
        **extra
    ) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user({
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "name": name,
            "role": role,
            "is_active": is_active,
            **extra
        })


class PropertyFactory:
    """Factory for creating test properties with explicit moderation state and age."""

    @staticmethod
    def create_property_data(
        owner_id: uuid.UUID,
        title: str = "Test Property",
        price: Decimal = Decimal("150000.00"),
        category: PropertyCategory = PropertyCategory.APARTMENT,
        bedrooms: int = 2,
        location: str = "Limassol",
        moderated: bool = True,
        rejected: bool = False,
        property_rating: Optional[PropertyRating] = None,
        created_at: Optional[datetime] = None,
        **extra
    ) -> dict:
        return {
            "title": title,
            "description": "A bright test property",
            "price": price,
            "location": location,
            "category": category,
            "bedrooms": bedrooms,
            "bathrooms": 1,
            "total_area": 80,
            "moderated": moderated,
            "rejected": rejected,
            "property_rating": property_rating,
            "owner_id": owner_id,
            "created_at": created_at or BASE_TIME,
            "updated_at": created_at or BASE_TIME,
            **extra
        }

    @staticmethod
    async def create_property(
        db_session: AsyncSession,
        owner: User,
        image_urls: Optional[List[str]] = None,
        **kwargs
    ) -> Property:
        """Insert a property directly so moderation flags and timestamps can be chosen."""
        property_obj = Property(**PropertyFactory.create_property_data(owner.id, **kwargs))
        property_obj.images = [
            PropertyImage(url=url, display_order=position)
            for position, url in enumerate(image_urls or [])
        ]
        db_session.add(property_obj)
        await db_session.commit()
        await db_session.refresh(property_obj, attribute_names=["owner", "images"])
        return property_obj

    @staticmethod
    async def create_batch(db_session: AsyncSession, owner: User, count: int, **kwargs) -> List[Property]:
        """Create ``count`` properties, each one hour newer than the previous."""
        return [
            await PropertyFactory.create_property(
                db_session,
                owner,
                title=f"Property {i}",
                created_at=BASE_TIME + timedelta(hours=i),
                **kwargs
            )
            for i in range(count)
        ]


class ComplexFactory:

    @staticmethod
    async def create_complex(
        db_session: AsyncSession,
        owner: User,
        name: str = "Sea Gardens",
        moderated: bool = True,
        rejected: bool = False
    ) -> Complex:
        complex_obj = Complex(
            name=name,
            location="Paphos",
            category=ComplexCategory.APARTMENT,
            owner_id=owner.id,
            moderated=moderated,
            rejected=rejected,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )
        db_session.add(complex_obj)
        await db_session.commit()
        await db_session.refresh(complex_obj, attribute_names=["owner", "properties"])
        return complex_obj


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
async def buyer(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="buyer@example.com", name="Bob Buyer")


@pytest.fixture
async def agent(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="agent@example.com",
        name="Alice Agent",
        role=UserRole.AGENT,
        phone="555-0101",
        country_code="+357",
        license_number="LIC-42",
        experience=7,
    )


@pytest.fixture
async def admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="admin@example.com", name="Ada Admin", role=UserRole.ADMIN
    )
