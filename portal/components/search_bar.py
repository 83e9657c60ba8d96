"""
Search bar with local query text.
"""

from typing import Callable
from markupsafe import Markup

from portal.components.button import Button
from portal.templating import render_component


class SearchBar:
    """
    Holds the query text locally and only calls ``on_search`` on an explicit search.

    Keystrokes update the query without notifying anyone; there is no debounce,
    no minimum length and the query is kept after a search.
    """

    placeholder = "Search for properties..."

    def __init__(self, on_search: Callable[[str], None], name: str = "q"):
        self.on_search = on_search
        self.name = name
        self.query = ""

    def handle_input(self, text: str) -> None:
        self.query = text

    def type(self, text: str) -> None:
        """Feed ``text`` one character at a time, as keystrokes."""
        for char in text:
            self.handle_input(self.query + char)

    def search(self) -> None:
        self.on_search(self.query)

    def render(self) -> Markup:
        return render_component(
            "search_bar.html",
            name=self.name,
            query=self.query,
            placeholder=self.placeholder,
            button=Button("Search", variant="secondary", type="submit"),
        )

    def __html__(self) -> str:
        return str(self.render())
