"""
Rating badge: maps a property rating to a fixed colour triple.
"""

from typing import Union
from markupsafe import Markup

from portal.models.rating import PropertyRating
from portal.templating import render_component

RATING_COLORS = {
    PropertyRating.A: "bg-green-100 text-green-800 border-green-200",
    PropertyRating.B_PLUS: "bg-blue-100 text-blue-800 border-blue-200",
    PropertyRating.B: "bg-blue-50 text-blue-700 border-blue-100",
    PropertyRating.C: "bg-orange-100 text-orange-800 border-orange-200",
    PropertyRating.D: "bg-red-100 text-red-800 border-red-200",
}


class RatingBadge:
    """
    Raises:
        InvalidRatingError: If ``rating`` is not one of A, B+, B, C, D
    """

    def __init__(self, rating: Union[PropertyRating, str], class_name: str = ""):
        self.rating = PropertyRating.parse(rating)
        self.class_name = class_name

    @property
    def text(self) -> str:
        return f"Rating {self.rating.value}"

    @property
    def color_classes(self) -> str:
        return RATING_COLORS[self.rating]

    def render(self) -> Markup:
        return render_component(
            "rating_badge.html",
            text=self.text,
            color_classes=self.color_classes,
            class_name=self.class_name,
        )

    def __html__(self) -> str:
        return str(self.render())
