"""
Property rating enumeration and its validating column type.
Ratings are a closed set of display grades assigned during moderation.
"""

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator
import enum
from typing import Optional


class InvalidRatingError(ValueError):
    """Raised when a value outside the rating enumeration enters the system."""

    def __init__(self, value):
        self.value = value
        allowed = ", ".join(r.value for r in PropertyRating)
        super().__init__(f"Invalid property rating '{value}'. Allowed values: {allowed}")


class PropertyRating(str, enum.Enum):
    """Display grade of a moderated listing."""
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"

    @classmethod
    def parse(cls, value) -> "PropertyRating":
        """
        Build a rating from external input.

        Args:
            value: Rating symbol or PropertyRating instance

        Returns:
            Matching PropertyRating

        Raises:
            InvalidRatingError: If value is not one of the five symbols
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRatingError(value) from None


class RatingType(TypeDecorator):
    """Stores ratings as their symbol and re-validates them on load."""

    impl = String(2)
    cache_ok = True

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        return PropertyRating.parse(value).value

    def process_result_value(self, value, dialect) -> Optional[PropertyRating]:
        if value is None:
            return None
        return PropertyRating.parse(value)
