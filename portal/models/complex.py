"""
Complex model for residential developments grouping several listings.
"""

from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
from portal.models.rating import PropertyRating, RatingType
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from portal.models.user import User
    from portal.models.property import Property


class ComplexCategory(str, enum.Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"


class Complex(Base):
    """A residential complex owned by a builder or agent."""

    __tablename__ = "complexes"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    category: Mapped[ComplexCategory] = mapped_column(
        SQLEnum(ComplexCategory, values_callable=lambda members: [m.value for m in members]),
        nullable=False
    )

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    building_area: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    living_area: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_objects: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    floors: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    installment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    swimming_pool: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    elevator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    cover_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    moderated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    rejected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    property_rating: Mapped[Optional[PropertyRating]] = mapped_column(RatingType(), nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="complexes",
        lazy="selectin"
    )

    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="complex",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Complex(id={self.id}, name={self.name})>"

    @property
    def is_public(self) -> bool:
        return self.moderated and not self.rejected
