"""
Listing filter bar: search text plus dropdowns for type, price, bedrooms and sort order.
"""

from typing import List, Mapping
from markupsafe import Markup

from portal.components.dropdown import Dropdown, DropdownOption
from portal.components.search_bar import SearchBar
from portal.repositories.property import PropertySearchFilters
from portal.templating import render_component

PROPERTY_TYPES = [
    DropdownOption("Apartment", "apartment"),
    DropdownOption("House", "house"),
    DropdownOption("Villa", "villa"),
    DropdownOption("Land", "land"),
]

PRICE_RANGES = [
    DropdownOption("Up to €100k", "0-100000"),
    DropdownOption("€100k - €200k", "100000-200000"),
    DropdownOption("€200k - €300k", "200000-300000"),
    DropdownOption("€300k - €500k", "300000-500000"),
    DropdownOption("€500k - €1M", "500000-1000000"),
    DropdownOption("Over €1M", "1000000"),
]

BEDROOM_OPTIONS = [
    DropdownOption("1 Bedroom", "1"),
    DropdownOption("2 Bedrooms", "2"),
    DropdownOption("3 Bedrooms", "3"),
    DropdownOption("4 Bedrooms", "4"),
    DropdownOption("5+ Bedrooms", "5"),
]

SORT_OPTIONS = [
    DropdownOption("Price: Low to High", "price-asc"),
    DropdownOption("Price: High to Low", "price-desc"),
    DropdownOption("Newest First", "newest"),
    DropdownOption("Oldest First", "oldest"),
]


def _with_any(label: str, options: List[DropdownOption]) -> List[DropdownOption]:
    return [DropdownOption(label, ""), *options]


class FilterBar:
    """
    Binds the search bar and dropdowns to a ``PropertySearchFilters`` instance.

    Query parameters are fed through the components' own callbacks, so only
    values offered by a dropdown ever reach the filters.
    """

    def __init__(self, params: Mapping[str, str]):
        self.filters = PropertySearchFilters()
        self.params = params

        self.search_bar = SearchBar(on_search=self.filters.set_query)
        self.dropdowns = {
            "type": Dropdown(_with_any("Any type", PROPERTY_TYPES), params.get("type", ""),
                             self.filters.set_category, name="type"),
            "price": Dropdown(_with_any("Any price", PRICE_RANGES), params.get("price", ""),
                              self.filters.set_price_range, name="price"),
            "bedrooms": Dropdown(_with_any("Any bedrooms", BEDROOM_OPTIONS), params.get("bedrooms", ""),
                                 self.filters.set_bedrooms, name="bedrooms"),
            "sort": Dropdown(SORT_OPTIONS, params.get("sort", "newest"),
                             self.filters.set_sort, name="sort"),
        }

    def apply(self) -> PropertySearchFilters:
        query = self.params.get("q", "")
        if query:
            self.search_bar.type(query)
            self.search_bar.search()

        for dropdown in self.dropdowns.values():
            offered = {option.value for option in dropdown.options}
            if dropdown.value and dropdown.value in offered:
                dropdown.select(dropdown.value)

        return self.filters

    def render(self) -> Markup:
        return render_component(
            "filter_bar.html",
            search_bar=self.search_bar,
            dropdowns=list(self.dropdowns.values()),
        )

    def __html__(self) -> str:
        return str(self.render())
