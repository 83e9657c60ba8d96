"""
Server-rendered UI components.
"""

from portal.components.button import Button, MapButton, MAP_BUTTON_LABEL
from portal.components.dropdown import Dropdown, DropdownOption
from portal.components.search_bar import SearchBar
from portal.components.rating_badge import RatingBadge, RATING_COLORS
from portal.components.filters import (
    FilterBar,
    PROPERTY_TYPES,
    PRICE_RANGES,
    BEDROOM_OPTIONS,
    SORT_OPTIONS,
)

__all__ = [
    "Button",
    "MapButton",
    "MAP_BUTTON_LABEL",
    "Dropdown",
    "DropdownOption",
    "SearchBar",
    "RatingBadge",
    "RATING_COLORS",
    "FilterBar",
    "PROPERTY_TYPES",
    "PRICE_RANGES",
    "BEDROOM_OPTIONS",
    "SORT_OPTIONS",
]
