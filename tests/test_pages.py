"""
Tests for server-rendered pages: shells, profile, auth forms and generated images.
"""

import io
import uuid
import pytest
from httpx import AsyncClient
from PIL import Image
from sqlalchemy.exc import OperationalError

from portal.models.user import UserRole
from portal.repositories.property import PropertyRepository
from portal.repositories.user import UserRepository
from portal.services.complex import ComplexService
from portal.services.property import PropertyService
from portal.utils.auth import create_access_token
from tests.conftest import PropertyFactory, ComplexFactory, UserFactory

HTML = {"Accept": "text/html"}


def session_cookie(user) -> dict:
    return {"Cookie": f"access_token={create_access_token(user)}", **HTML}


class TestHomePage:

    @pytest.mark.asyncio
    async def test_shows_only_approved_featured(self, async_client: AsyncClient, db_session, agent):
        await PropertyFactory.create_property(db_session, agent, title="Approved flat")
        await PropertyFactory.create_property(db_session, agent, title="Pending flat", moderated=False)

        response = await async_client.get("/", headers=HTML)

        assert response.status_code == 200
        assert "Approved flat" in response.text
        assert "Pending flat" not in response.text
        assert '<link rel="icon" href="/icon" type="image/x-icon">' in response.text

    @pytest.mark.asyncio
    async def test_rating_badge_rendered_on_cards(self, async_client: AsyncClient, db_session, agent):
        await PropertyFactory.create_property(db_session, agent, property_rating="B+")

        response = await async_client.get("/")

        assert "Rating B+" in response.text
        assert "bg-blue-100 text-blue-800 border-blue-200" in response.text


class TestPropertyPages:

    @pytest.mark.asyncio
    async def test_listing_filters(self, async_client: AsyncClient, db_session, agent):
        await PropertyFactory.create_property(db_session, agent, title="Cheap flat", price=90000)
        await PropertyFactory.create_property(db_session, agent, title="Grand villa", price=1500000)

        response = await async_client.get("/properties", params={"price": "1000000", "type": "castle"})

        assert response.status_code == 200
        assert "Grand villa" in response.text
        assert "Cheap flat" not in response.text
        assert "1 properties found" in response.text
        assert '<option value="1000000" selected>' in response.text

    @pytest.mark.asyncio
    async def test_detail_shows_map_button(self, async_client: AsyncClient, db_session, agent):
        listing = await PropertyFactory.create_property(db_session, agent, title="Sea flat", location="Limassol")

        response = await async_client.get(f"/properties/{listing.id}")

        assert response.status_code == 200
        assert "Sea flat" in response.text
        assert "Показать на карте" in response.text
        assert 'data-location="Limassol"' in response.text

    @pytest.mark.asyncio
    async def test_missing_property_renders_not_found(self, async_client: AsyncClient):
        response = await async_client.get(f"/properties/{uuid.uuid4()}")

        assert response.status_code == 404
        assert "Property Not Found" in response.text
        assert '<a href="/properties">' in response.text
        assert "Back to Properties" in response.text

    @pytest.mark.asyncio
    async def test_malformed_id_renders_not_found(self, async_client: AsyncClient):
        response = await async_client.get("/properties/not-a-uuid")

        assert response.status_code == 404
        assert "Property Not Found" in response.text

    @pytest.mark.asyncio
    async def test_pending_property_hidden_from_public(self, async_client: AsyncClient, db_session, agent):
        listing = await PropertyFactory.create_property(db_session, agent, moderated=False)

        response = await async_client.get(f"/properties/{listing.id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_pending_property_visible_to_owner(self, async_client: AsyncClient, db_session, agent):
        listing = await PropertyFactory.create_property(db_session, agent, moderated=False)

        response = await async_client.get(f"/properties/{listing.id}", headers=session_cookie(agent))

        assert response.status_code == 200
        assert "Awaiting moderation" in response.text

    @pytest.mark.asyncio
    async def test_database_failure_renders_error_page(self, async_client: AsyncClient, monkeypatch):
        async def failing_get_property(self, property_id, viewer=None):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(PropertyService, "get_property", failing_get_property)

        response = await async_client.get(f"/properties/{uuid.uuid4()}")

        assert response.status_code == 500
        assert "Something went wrong" in response.text
        assert "We couldn't load the property details. Please try again later." in response.text


class TestComplexPages:

    @pytest.mark.asyncio
    async def test_missing_complex_renders_not_found(self, async_client: AsyncClient):
        response = await async_client.get(f"/complexes/{uuid.uuid4()}")

        assert response.status_code == 404
        assert "Complex Not Found" in response.text
        assert '<a href="/complexes">' in response.text

    @pytest.mark.asyncio
    async def test_detail_lists_public_properties(self, async_client: AsyncClient, db_session, agent):
        complex_obj = await ComplexFactory.create_complex(db_session, agent, name="Harbour Heights")
        await PropertyFactory.create_property(db_session, agent, title="Unit 1", complex_id=complex_obj.id)
        await PropertyFactory.create_property(
            db_session, agent, title="Unit 2", complex_id=complex_obj.id, moderated=False
        )

        response = await async_client.get(f"/complexes/{complex_obj.id}")

        assert response.status_code == 200
        assert "Harbour Heights" in response.text
        assert "Unit 1" in response.text
        assert "Unit 2" not in response.text

    @pytest.mark.asyncio
    async def test_index_lists_approved_complexes(self, async_client: AsyncClient, db_session, agent):
        await ComplexFactory.create_complex(db_session, agent, name="Open Complex")
        await ComplexFactory.create_complex(db_session, agent, name="Hidden Complex", moderated=False)

        response = await async_client.get("/complexes")

        assert "Open Complex" in response.text
        assert "Hidden Complex" not in response.text


class TestProfilePage:

    @pytest.mark.asyncio
    async def test_anonymous_redirects_to_login(self, async_client: AsyncClient):
        response = await async_client.get("/profile", headers=HTML)

        assert response.status_code == 303
        assert response.headers["location"] == "/auth/login"

    @pytest.mark.asyncio
    async def test_invalid_cookie_redirects_to_login(self, async_client: AsyncClient):
        response = await async_client.get("/profile", headers={"Cookie": "access_token=garbage"})

        assert response.status_code == 303

    @pytest.mark.asyncio
    async def test_profile_is_not_cached(self, async_client: AsyncClient, buyer):
        response = await async_client.get("/profile", headers=session_cookie(buyer))

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        assert "Bob Buyer" in response.text
        assert "You dont have any objects" in response.text
        assert 'src="/images/default-avatar.png"' in response.text

    @pytest.mark.asyncio
    async def test_profile_lists_own_properties(self, async_client: AsyncClient, db_session, agent):
        await PropertyFactory.create_property(db_session, agent, title="My pending listing", moderated=False)

        response = await async_client.get("/profile", headers=session_cookie(agent))

        assert "My pending listing" in response.text
        assert "You dont have any objects" not in response.text

    @pytest.mark.asyncio
    async def test_favorites_show_only_public_properties(
        self, async_client: AsyncClient, db_session, buyer, agent, user_repository: UserRepository
    ):
        kept = await PropertyFactory.create_property(db_session, agent, title="Kept favorite")
        withdrawn = await PropertyFactory.create_property(db_session, agent, title="Withdrawn favorite")
        await user_repository.set_favorite(buyer.id, kept, True)
        await user_repository.set_favorite(buyer.id, withdrawn, True)
        await PropertyRepository(db_session).reject(withdrawn.id, "Sold")

        response = await async_client.get("/profile", headers=session_cookie(buyer))

        assert "Kept favorite" in response.text
        assert "Withdrawn favorite" not in response.text


class TestAuthPages:

    @pytest.mark.asyncio
    async def test_login_form_uses_auth_layout(self, async_client: AsyncClient):
        response = await async_client.get("/auth/login")

        assert response.status_code == 200
        assert "bg-[#F9F8FF]" in response.text
        assert 'action="/auth/login"' in response.text

    @pytest.mark.asyncio
    async def test_login_sets_cookie_and_redirects(self, async_client: AsyncClient, buyer):
        response = await async_client.post(
            "/auth/login", data={"email": "Buyer@Example.com", "password": "testpassword123"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/profile"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("access_token=")
        assert "HttpOnly" in set_cookie

    @pytest.mark.asyncio
    async def test_invalid_login_rerenders_form(self, async_client: AsyncClient, buyer):
        response = await async_client.post(
            "/auth/login", data={"email": "buyer@example.com", "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert "Invalid email or password" in response.text
        assert 'value="buyer@example.com"' in response.text

    @pytest.mark.asyncio
    async def test_register_offers_roles_without_admin(self, async_client: AsyncClient):
        response = await async_client.get("/auth/register")

        assert '<option value="buyer" selected>Buyer</option>' in response.text
        assert 'value="agent"' in response.text
        assert 'value="admin"' not in response.text

    @pytest.mark.asyncio
    async def test_register_creates_account(self, async_client: AsyncClient, user_repository: UserRepository):
        response = await async_client.post("/auth/register", data={
            "name": "Nina New",
            "email": "nina@example.com",
            "password": "longenough1",
            "role": "agent",
        })

        assert response.status_code == 303
        assert "access_token=" in response.headers["set-cookie"]
        user = await user_repository.get_by_email("nina@example.com")
        assert user.role == UserRole.AGENT

    @pytest.mark.asyncio
    async def test_register_ignores_roles_not_offered(self, async_client: AsyncClient, user_repository: UserRepository):
        response = await async_client.post("/auth/register", data={
            "name": "Sly",
            "email": "sly@example.com",
            "password": "longenough1",
            "role": "admin",
        })

        assert response.status_code == 303
        user = await user_repository.get_by_email("sly@example.com")
        assert user.role == UserRole.BUYER

    @pytest.mark.asyncio
    async def test_register_errors_rerender_form(self, async_client: AsyncClient, buyer):
        response = await async_client.post("/auth/register", data={
            "name": "Again",
            "email": "buyer@example.com",
            "password": "longenough1",
            "role": "investor",
        })

        assert response.status_code == 400
        assert "already exists" in response.text
        assert '<option value="investor" selected>' in response.text

    @pytest.mark.asyncio
    async def test_register_short_password(self, async_client: AsyncClient):
        response = await async_client.post("/auth/register", data={
            "name": "Shorty",
            "email": "short@example.com",
            "password": "short",
        })

        assert response.status_code == 400
        assert "at least 8 characters" in response.text

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, async_client: AsyncClient):
        response = await async_client.post("/auth/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert 'access_token=""' in response.headers["set-cookie"]


class TestGeneratedImages:

    @pytest.mark.asyncio
    async def test_favicon(self, async_client: AsyncClient):
        response = await async_client.get("/icon")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/x-icon"
        image = Image.open(io.BytesIO(response.content))
        assert image.format == "ICO"
        assert image.size == (32, 32)

    @pytest.mark.asyncio
    async def test_favicon_uses_brand_color(self, async_client: AsyncClient):
        response = await async_client.get("/icon")

        image = Image.open(io.BytesIO(response.content)).convert("RGBA")
        assert image.getpixel((16, 3))[:3] == (0x22, 0x0D, 0x6D)
        assert image.getpixel((0, 0))[3] == 0

    @pytest.mark.asyncio
    async def test_default_avatar(self, async_client: AsyncClient):
        response = await async_client.get("/images/default-avatar.png")

        assert response.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(response.content)).size == (128, 128)


class TestErrorPages:

    @pytest.mark.asyncio
    async def test_unknown_page_renders_html_for_browsers(self, async_client: AsyncClient):
        response = await async_client.get("/no-such-page", headers=HTML)

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Not Found" in response.text

    @pytest.mark.asyncio
    async def test_unknown_api_route_returns_json(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/no-such-route", headers=HTML)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "HTTP_404"

    @pytest.mark.asyncio
    async def test_home_query_failure_renders_error_page(self, async_client: AsyncClient, monkeypatch):
        async def failing_get_featured(self, moderation=None):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(PropertyService, "get_featured", failing_get_featured)

        response = await async_client.get("/", headers=HTML)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/html")
        assert "An unexpected error occurred. Please try again later." in response.text
        assert "connection lost" not in response.text

    @pytest.mark.asyncio
    async def test_complex_index_query_failure_renders_error_page(self, async_client: AsyncClient, monkeypatch):
        async def failing_list_public(self):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(ComplexService, "list_public", failing_list_public)

        response = await async_client.get("/complexes", headers=HTML)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/html")

    @pytest.mark.asyncio
    async def test_api_query_failure_stays_json(self, async_client: AsyncClient, monkeypatch):
        async def failing_get_featured(self, moderation=None):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(PropertyService, "get_featured", failing_get_featured)

        response = await async_client.get("/api/v1/properties/featured", headers=HTML)

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "DATABASE_ERROR"
