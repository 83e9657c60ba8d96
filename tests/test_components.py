"""
Tests for server-rendered UI components.
"""

import pytest
from jinja2 import UndefinedError
from markupsafe import Markup

from portal.components import (
    Button,
    MapButton,
    MAP_BUTTON_LABEL,
    Dropdown,
    DropdownOption,
    SearchBar,
    RatingBadge,
    RATING_COLORS,
    FilterBar,
)
from portal.models.property import PropertyCategory
from portal.models.rating import PropertyRating, InvalidRatingError
from portal.templating import build_environment

OPTIONS = [DropdownOption("Option A", "a"), DropdownOption("Option B", "b")]


class TestDropdown:

    def test_select_reports_value_once(self):
        received = []
        dropdown = Dropdown(OPTIONS, value="a", on_change=received.append)

        dropdown.select("b")

        assert received == ["b"]

    def test_select_does_not_change_own_value(self):
        dropdown = Dropdown(OPTIONS, value="a", on_change=lambda value: None)

        dropdown.select("b")

        assert dropdown.value == "a"
        assert '<option value="a" selected>' in str(dropdown.render())

    def test_render_marks_current_value(self):
        html = str(Dropdown(OPTIONS, value="b", on_change=lambda value: None, name="choice").render())

        assert 'name="choice"' in html
        assert '<option value="b" selected>Option B</option>' in html
        assert '<option value="a">Option A</option>' in html

    def test_unknown_value_selects_nothing(self):
        html = str(Dropdown(OPTIONS, value="z", on_change=lambda value: None).render())

        assert "selected" not in html

    def test_labels_are_escaped(self):
        dropdown = Dropdown([DropdownOption("<b>Bold</b>", "x")], value="", on_change=lambda value: None)

        assert "&lt;b&gt;Bold&lt;/b&gt;" in str(dropdown.render())


class TestSearchBar:

    def test_typing_does_not_search(self):
        searches = []
        search_bar = SearchBar(on_search=searches.append)

        search_bar.type("flat")

        assert searches == []
        assert search_bar.query == "flat"

    def test_search_reports_query_once_and_keeps_it(self):
        searches = []
        search_bar = SearchBar(on_search=searches.append)
        search_bar.type("flat")

        search_bar.search()

        assert searches == ["flat"]
        assert search_bar.query == "flat"

    def test_empty_query_is_still_reported(self):
        searches = []
        SearchBar(on_search=searches.append).search()

        assert searches == [""]

    def test_render(self):
        search_bar = SearchBar(on_search=lambda query: None)
        search_bar.handle_input('sea "view"')

        html = str(search_bar.render())

        assert 'placeholder="Search for properties..."' in html
        assert 'value="sea &#34;view&#34;"' in html
        assert 'type="submit"' in html
        assert ">Search</button>" in html


class TestRatingBadge:

    def test_b_plus_badge(self):
        badge = RatingBadge("B+")

        assert badge.rating is PropertyRating.B_PLUS
        assert badge.text == "Rating B+"
        assert badge.color_classes == "bg-blue-100 text-blue-800 border-blue-200"

    @pytest.mark.parametrize("rating", list(PropertyRating))
    def test_every_rating_has_colors(self, rating):
        html = str(RatingBadge(rating).render())

        assert RATING_COLORS[rating] in html
        assert f"Rating {rating.value}" in html

    def test_class_name_is_appended(self):
        html = str(RatingBadge("A", class_name="ml-2").render())

        assert "border-green-200 ml-2" in html

    def test_invalid_rating_rejected(self):
        with pytest.raises(InvalidRatingError):
            RatingBadge("E")

    def test_embeds_in_templates_as_markup(self):
        assert Markup("{}").format(RatingBadge("C")).startswith("<span")


class TestButton:

    def test_attributes_are_forwarded(self):
        html = str(Button("Go", onclick="go()", disabled=True, data_id="7").render())

        assert 'onclick="go()"' in html
        assert 'disabled=""' in html
        assert 'data-id="7"' in html
        assert 'type="button"' in html
        assert ">Go</button>" in html

    def test_false_attributes_are_dropped(self):
        html = str(Button("Go", disabled=False).render())

        assert "disabled" not in html

    def test_explicit_type_wins(self):
        assert Button("Send", type="submit").attributes["type"] == "submit"

    def test_extra_class_is_merged(self):
        html = str(Button("Go", class_="w-full").render())

        assert html.count("class=") == 1
        assert "w-full" in html

    def test_unknown_variant_rejected(self):
        with pytest.raises(ValueError, match="Unknown button variant"):
            Button("Go", variant="ghost")


class TestMapButton:

    def test_fixed_label_and_secondary_variant(self):
        button = MapButton()

        assert button.label == MAP_BUTTON_LABEL == "Показать на карте"
        assert button.variant == "secondary"
        assert MAP_BUTTON_LABEL in str(button.render())

    def test_forwards_attributes(self):
        html = str(MapButton(data_location="Limassol", aria_label="Map").render())

        assert 'data-location="Limassol"' in html
        assert 'aria-label="Map"' in html

    def test_variant_cannot_be_overridden(self):
        with pytest.raises(TypeError):
            MapButton(variant="primary")


class TestFilterBar:

    def test_params_flow_into_filters(self):
        filters = FilterBar({
            "q": "sea view",
            "type": "villa",
            "price": "1000000",
            "bedrooms": "3",
            "sort": "price-desc",
        }).apply()

        assert filters.query == "sea view"
        assert filters.category is PropertyCategory.VILLA
        assert filters.min_price == 1000000
        assert filters.max_price is None
        assert filters.min_bedrooms == 3
        assert filters.sort == "price-desc"

    def test_values_not_offered_are_ignored(self):
        filters = FilterBar({"type": "castle", "price": "1-2", "bedrooms": "abc", "sort": "random"}).apply()

        assert filters.category is None
        assert filters.min_price is None
        assert filters.min_bedrooms is None
        assert filters.sort == "newest"

    def test_render_keeps_selection(self):
        filter_bar = FilterBar({"type": "house"})
        filter_bar.apply()

        html = str(filter_bar.render())

        assert 'action="/properties"' in html
        assert '<option value="house" selected>House</option>' in html
        assert '<option value="newest" selected>Newest First</option>' in html


class TestTemplateEnvironment:

    def test_strict_environment_raises_on_missing_variable(self):
        with pytest.raises(UndefinedError):
            build_environment(strict=True).from_string("{{ missing }}").render()

    def test_lenient_environment_renders_empty(self):
        assert build_environment(strict=False).from_string("[{{ missing }}]").render() == "[]"
