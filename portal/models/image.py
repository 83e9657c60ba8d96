"""
PropertyImage model for listing gallery images.
Images live in object storage; the row keeps the public URL and storage key.
"""

from sqlalchemy import String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from portal.database import Base
import uuid
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from portal.models.property import Property


class PropertyImage(Base):
    """Gallery image belonging to exactly one property."""

    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public URL of the image"
    )

    storage_key: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Object key inside the storage bucket, if uploaded here"
    )

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Display order for image gallery"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images"
    )

    def __repr__(self) -> str:
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, url={self.url})>"
