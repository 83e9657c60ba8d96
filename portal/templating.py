"""
Jinja2 template environment shared by page routes and UI components.
"""

from pathlib import Path
from typing import Any
from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined, select_autoescape
from markupsafe import Markup

from portal.config import settings

TEMPLATES_DIR = Path(__file__).parent / "templates"


def build_environment(strict: bool = False) -> Environment:
    """
    Create the template environment.

    With ``strict`` enabled a missing template variable raises instead of
    rendering as an empty string.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined if strict else Undefined,
    )


environment = build_environment(settings.strict_templates)
environment.globals["app_name"] = settings.app_name
environment.globals["unoptimized_images"] = settings.unoptimized_images

templates = Jinja2Templates(env=environment)


def render_component(template_name: str, **context: Any) -> Markup:
    """Render a component template to markup that can be embedded in pages."""
    template = environment.get_template(f"components/{template_name}")
    return Markup(template.render(**context))
