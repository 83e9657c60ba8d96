"""
Server-rendered pages: home, listings, complexes, profile, auth forms and generated images.
"""

from functools import lru_cache
from typing import Any, Callable, Optional
import io
import logging
import uuid

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from PIL import Image, ImageDraw, ImageFont
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from portal.components import Button, Dropdown, DropdownOption, FilterBar, MapButton, RatingBadge
from portal.config import settings
from portal.models.user import User, UserRole
from portal.routers.auth import set_session_cookie
from portal.schemas.auth import RegisterRequest
from portal.services.agent import normalize_avatar
from portal.services.auth import AuthService
from portal.services.complex import ComplexService
from portal.services.property import PropertyService
from portal.templating import environment, templates
from portal.utils.dependencies import (
    get_auth_service,
    get_complex_service,
    get_optional_current_user,
    get_property_service
)
from portal.utils.exceptions import (
    ConflictError,
    InactiveUserError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError
)

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)

environment.globals.update(RatingBadge=RatingBadge, MapButton=MapButton)

BRAND_COLOR = "#220D6D"

REGISTER_ROLES = [
    DropdownOption("Buyer", UserRole.BUYER.value),
    DropdownOption("Agent", UserRole.AGENT.value),
    DropdownOption("Builder", UserRole.BUILDER.value),
    DropdownOption("Agent & Builder", UserRole.AGENT_BUILDER.value),
    DropdownOption("Investor", UserRole.INVESTOR.value),
]


def render(
    request: Request,
    name: str,
    current_user: Optional[User],
    status_code: int = status.HTTP_200_OK,
    **context: Any
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        name,
        {"current_user": current_user, **context},
        status_code=status_code,
    )


def _parse_id(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def _role_dropdown(value: str, on_change: Callable[[str], None]) -> Dropdown:
    return Dropdown(REGISTER_ROLES, value, on_change, name="role")


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    properties = await property_service.get_featured()
    return render(request, "home.html", current_user, properties=properties)


@router.get("/properties", response_class=HTMLResponse)
async def properties_index(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    filter_bar = FilterBar(request.query_params)
    filters = filter_bar.apply()
    properties, total = await property_service.search(filters, page=1, page_size=settings.default_page_size)
    return render(
        request,
        "properties/index.html",
        current_user,
        filter_bar=filter_bar,
        properties=properties,
        total=total,
    )


@router.get("/properties/{property_id}", response_class=HTMLResponse)
async def property_detail(
    request: Request,
    property_id: str,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    parsed_id = _parse_id(property_id)
    try:
        if parsed_id is None:
            raise NotFoundError("Property", property_id)
        property_obj = await property_service.get_property(parsed_id, viewer=current_user)
    except NotFoundError:
        return render(
            request,
            "properties/not_found.html",
            current_user,
            status_code=status.HTTP_404_NOT_FOUND,
            back_button=Button("Back to Properties"),
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load property {property_id}: {str(e)}", exc_info=True)
        return render(
            request,
            "properties/error.html",
            current_user,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return render(request, "properties/detail.html", current_user, property=property_obj)


@router.get("/complexes", response_class=HTMLResponse)
async def complexes_index(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_current_user),
    complex_service: ComplexService = Depends(get_complex_service)
):
    complexes = await complex_service.list_public()
    return render(request, "complexes/index.html", current_user, complexes=complexes)


@router.get("/complexes/{complex_id}", response_class=HTMLResponse)
async def complex_detail(
    request: Request,
    complex_id: str,
    current_user: Optional[User] = Depends(get_optional_current_user),
    complex_service: ComplexService = Depends(get_complex_service)
):
    parsed_id = _parse_id(complex_id)
    try:
        if parsed_id is None:
            raise NotFoundError("Complex", complex_id)
        complex_obj = await complex_service.get_complex(parsed_id, viewer=current_user)
    except NotFoundError:
        return render(
            request,
            "complexes/not_found.html",
            current_user,
            status_code=status.HTTP_404_NOT_FOUND,
            back_button=Button("Back to Complexes"),
        )

    properties = [p for p in complex_obj.properties if p.is_public]
    return render(request, "complexes/detail.html", current_user, complex=complex_obj, properties=properties)


@router.get("/profile", response_class=HTMLResponse)
async def profile(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    if current_user is None:
        return RedirectResponse("/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    own_properties = await property_service.list_own(current_user)
    favorites = await property_service.list_favorites(current_user)

    response = render(
        request,
        "profile/index.html",
        current_user,
        avatar=normalize_avatar(current_user.image),
        own_properties=own_properties,
        favorites=favorites,
    )
    response.headers["Cache-Control"] = "no-store"
    return response


@router.get("/auth/login", response_class=HTMLResponse)
async def login_form(request: Request):
    return render(
        request,
        "auth/login.html",
        None,
        email="",
        error=None,
        submit=Button("Sign in", type="submit", class_="w-full"),
    )


@router.post("/auth/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    auth_service: AuthService = Depends(get_auth_service)
):
    try:
        _, access_token = await auth_service.login(email=email.strip().lower(), password=password)
    except (InvalidCredentialsError, InactiveUserError) as e:
        return render(
            request,
            "auth/login.html",
            None,
            status_code=e.status_code,
            email=email,
            error=e.detail,
            submit=Button("Sign in", type="submit", class_="w-full"),
        )

    response = RedirectResponse("/profile", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, access_token)
    return response


@router.get("/auth/register", response_class=HTMLResponse)
async def register_form(request: Request):
    return render(
        request,
        "auth/register.html",
        None,
        name="",
        email="",
        error=None,
        role_dropdown=_role_dropdown(UserRole.BUYER.value, on_change=lambda role: None),
        submit=Button("Create account", type="submit", class_="w-full"),
    )


@router.post("/auth/register", response_class=HTMLResponse)
async def register_submit(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form(UserRole.BUYER.value),
    auth_service: AuthService = Depends(get_auth_service)
):
    form = {"name": name, "email": email, "password": password, "role": UserRole.BUYER.value}
    role_dropdown = _role_dropdown(role, on_change=lambda value: form.update(role=value))
    if role in {option.value for option in REGISTER_ROLES}:
        role_dropdown.select(role)

    try:
        register_data = RegisterRequest(**form)
        user = await auth_service.register(register_data)
        _, access_token = await auth_service.login(email=user.email, password=password)
    except PydanticValidationError as e:
        error = "; ".join(err["msg"] for err in e.errors())
    except (ConflictError, ValidationError) as e:
        error = e.detail
    else:
        response = RedirectResponse("/profile", status_code=status.HTTP_303_SEE_OTHER)
        set_session_cookie(response, access_token)
        return response

    return render(
        request,
        "auth/register.html",
        None,
        status_code=status.HTTP_400_BAD_REQUEST,
        name=name,
        email=email,
        error=error,
        role_dropdown=role_dropdown,
        submit=Button("Create account", type="submit", class_="w-full"),
    )


@router.post("/auth/logout")
async def logout_submit():
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.session_cookie_name)
    return response


@lru_cache()
def render_icon(size: int = 32) -> bytes:
    """Brand favicon: a filled circle with a white "F"."""
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    draw.ellipse((0, 0, size - 1, size - 1), fill=BRAND_COLOR)

    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), "F", font=font)
    x = (size - (right - left)) / 2 - left
    y = (size - (bottom - top)) / 2 - top
    draw.text((x, y), "F", fill="white", font=font)

    buffer = io.BytesIO()
    image.save(buffer, format="ICO", sizes=[(size, size)])
    return buffer.getvalue()


@lru_cache()
def render_default_avatar(size: int = 128) -> bytes:
    """Neutral placeholder avatar for users without a profile image."""
    image = Image.new("RGB", (size, size), "#E5E7EB")
    draw = ImageDraw.Draw(image)
    head = size // 5
    center = size // 2
    draw.ellipse((center - head, size // 4, center + head, size // 4 + 2 * head), fill="#9CA3AF")
    draw.ellipse((center - 2 * head, size * 3 // 5, center + 2 * head, size + 2 * head), fill="#9CA3AF")

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@router.get("/icon")
async def icon() -> Response:
    return Response(content=render_icon(), media_type="image/x-icon")


@router.get("/images/default-avatar.png")
async def default_avatar() -> Response:
    return Response(content=render_default_avatar(), media_type="image/png")
