"""
Property model for sale and rental listings.
Handles listing data, moderation state and owner/image relationships.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
from portal.models.rating import PropertyRating, RatingType
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from portal.models.user import User
    from portal.models.image import PropertyImage
    from portal.models.complex import Complex


def _enum_values(members):
    return [m.value for m in members]


class ListingStatus(str, enum.Enum):
    FOR_SALE = "for-sale"
    FOR_RENT = "for-rent"


class PropertyCategory(str, enum.Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    LAND = "land"


class Currency(str, enum.Enum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


class Property(Base):
    """
    Property model for managing listings.
    A listing becomes publicly visible once moderated and not rejected.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Listing price in the listing currency"
    )

    currency: Mapped[Currency] = mapped_column(
        SQLEnum(Currency, values_callable=_enum_values),
        nullable=False,
        default=Currency.EUR
    )

    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    status: Mapped[ListingStatus] = mapped_column(
        SQLEnum(ListingStatus, values_callable=_enum_values),
        nullable=False,
        default=ListingStatus.FOR_SALE
    )

    category: Mapped[PropertyCategory] = mapped_column(
        SQLEnum(PropertyCategory, values_callable=_enum_values),
        nullable=False,
        index=True
    )

    # Layout and size
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_area: Mapped[int] = mapped_column(Integer, nullable=False, comment="Total area in square metres")
    living_area: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    building_floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Amenities
    parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    elevator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    swimming_pool: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gym: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    installment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    cover_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Moderation state
    moderated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    rejected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    property_rating: Mapped[Optional[PropertyRating]] = mapped_column(RatingType(), nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who listed this property"
    )

    complex_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("complexes.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    complex: Mapped[Optional["Complex"]] = relationship(
        "Complex",
        back_populates="properties"
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.display_order.asc()"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def is_public(self) -> bool:
        """Whether the listing passed moderation."""
        return self.moderated and not self.rejected

    @property
    def display_image(self) -> Optional[str]:
        """Cover image, falling back to the first gallery image."""
        if self.cover_image:
            return self.cover_image
        return self.images[0].url if self.images else None

    def validate_price(self) -> None:
        """
        Raises:
            ValueError: If price is invalid
        """
        if self.price < 0:
            raise ValueError("Property price cannot be negative")

        if self.price > Decimal('999999999.99'):
            raise ValueError("Property price exceeds maximum allowed value")

    def validate_rooms(self) -> None:
        """
        Raises:
            ValueError: If room counts are invalid
        """
        if (self.bedrooms or 0) < 0 or (self.bathrooms or 0) < 0:
            raise ValueError("Room counts cannot be negative")

    def validate_area(self) -> None:
        """
        Raises:
            ValueError: If area is invalid
        """
        if self.total_area < 0:
            raise ValueError("Property area cannot be negative")

        if self.living_area is not None and self.living_area > self.total_area:
            raise ValueError("Living area cannot exceed total area")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_rooms()
        self.validate_area()


# Featured listings: moderation filter + newest first
moderation_created_index = Index(
    'idx_properties_moderation_created',
    Property.moderated,
    Property.rejected,
    Property.created_at.desc()
)

owner_created_index = Index(
    'idx_properties_owner_created',
    Property.owner_id,
    Property.created_at.desc()
)
