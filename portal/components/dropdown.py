"""
Controlled single-selection dropdown.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from markupsafe import Markup

from portal.templating import render_component


@dataclass(frozen=True)
class DropdownOption:
    label: str
    value: str


class Dropdown:
    """
    Single-selection control driven entirely by its caller.

    The dropdown never changes its own ``value``; ``select`` only reports the
    new value through ``on_change`` and the caller decides what to render next.
    A ``value`` that is not among the options is rendered with nothing selected.
    """

    def __init__(
        self,
        options: Sequence[DropdownOption],
        value: str,
        on_change: Callable[[str], None],
        name: Optional[str] = None,
    ):
        self.options = list(options)
        self.value = value
        self.on_change = on_change
        self.name = name

    def select(self, value: str) -> None:
        self.on_change(value)

    def render(self) -> Markup:
        return render_component(
            "dropdown.html",
            name=self.name,
            options=self.options,
            value=self.value,
        )

    def __html__(self) -> str:
        return str(self.render())
