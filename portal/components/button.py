"""
Button components.
"""

from typing import Any, Dict
from markupsafe import Markup

from portal.templating import render_component

BUTTON_VARIANTS = {
    "primary": "bg-[#220D6D] text-white hover:bg-[#3a1fa0]",
    "secondary": "bg-white text-[#220D6D] border border-[#220D6D] hover:bg-gray-50",
    "outline": "bg-transparent text-gray-700 border border-gray-300 hover:bg-gray-100",
}

MAP_BUTTON_LABEL = "Показать на карте"


def html_attributes(attrs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert keyword arguments to HTML attribute names and values.

    ``class_`` becomes ``class``, underscores become hyphens (``data_id`` ->
    ``data-id``), ``True`` renders as a bare boolean attribute and ``False``
    or ``None`` drops the attribute.
    """
    converted = {}
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        name = key.rstrip("_").replace("_", "-")
        converted[name] = "" if value is True else value
    return converted


class Button:
    """Base button; every extra keyword is forwarded as an HTML attribute."""

    def __init__(self, label: str, variant: str = "primary", **attrs: Any):
        if variant not in BUTTON_VARIANTS:
            raise ValueError(f"Unknown button variant: {variant}")
        self.label = label
        self.variant = variant
        self.attrs = attrs

    @property
    def attributes(self) -> Dict[str, Any]:
        attributes = html_attributes(self.attrs)
        attributes.setdefault("type", "button")
        return attributes

    def render(self) -> Markup:
        attributes = self.attributes
        extra_class = attributes.pop("class", "")
        return render_component(
            "button.html",
            label=self.label,
            variant_class=BUTTON_VARIANTS[self.variant],
            extra_class=extra_class,
            attributes=attributes,
        )

    def __html__(self) -> str:
        return str(self.render())


class MapButton(Button):
    """Secondary button with the fixed "show on map" label."""

    def __init__(self, **attrs: Any):
        super().__init__(MAP_BUTTON_LABEL, variant="secondary", **attrs)
