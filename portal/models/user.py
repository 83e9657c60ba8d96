"""
User model with authentication and role management.
Users own listings, keep favorites and, as agents, collect reviews.
"""

from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, Table, Column, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from portal.models.property import Property
    from portal.models.complex import Complex

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    BUYER = "buyer"
    AGENT = "agent"
    BUILDER = "builder"
    AGENT_BUILDER = "agent-builder"
    INVESTOR = "investor"
    ADMIN = "admin"


AGENT_ROLES = (UserRole.AGENT, UserRole.AGENT_BUILDER)


user_favorite_properties = Table(
    "user_favorite_properties",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    User model for authentication and authorization.
    The same row is projected as a listing owner or as an agent card.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Profile information
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="Avatar URL")
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    country_code: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Agent and builder metadata
    license_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Years of experience")
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.BUYER,
        index=True,
        comment="User role for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the user account is active"
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        cascade="all, delete-orphan"
    )

    complexes: Mapped[List["Complex"]] = relationship(
        "Complex",
        back_populates="owner",
        cascade="all, delete-orphan"
    )

    favorites: Mapped[List["Property"]] = relationship(
        "Property",
        secondary=user_favorite_properties
    )

    reviews_received: Mapped[List["AgentReview"]] = relationship(
        "AgentReview",
        foreign_keys="AgentReview.agent_id",
        back_populates="agent",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """Hash a password using bcrypt."""
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role in AGENT_ROLES

    def can_manage_property(self, property_owner_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific property.

        Admins manage every listing, everyone else only their own.
        """
        if self.is_admin:
            return True
        return self.id == property_owner_id


class AgentReview(Base):
    """A 1-5 star review left for an agent."""

    __tablename__ = "agent_reviews"

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    agent: Mapped["User"] = relationship(
        "User",
        foreign_keys=[agent_id],
        back_populates="reviews_received"
    )

    def validate_rating(self) -> None:
        """
        Raises:
            ValueError: If rating is outside 1..5
        """
        if not 1 <= self.rating <= 5:
            raise ValueError("Review rating must be between 1 and 5")
