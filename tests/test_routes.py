"""
Tests for API Routes.

Exercises HTTP status codes and error bodies through the FastAPI app with
the database and services mocked.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.db.models import User
from app.exceptions import EmptyResultError, ResourceError, ResourceKind
from app.models.domain import ProviderWithZones, ZoneData


@pytest.fixture
def provider_service():
    with patch("app.api.provider_routes.ProviderService") as service_cls:
        yield service_cls.return_value


# ============================================================================
# Auth Routes
# ============================================================================


class TestAuthRoutes:
    """Tests for /auth/create and /auth/login."""

    def test_create_user(self, client: TestClient, db_session: AsyncMock):
        response = client.post(
            "/auth/create", json={"client_id": "scraper", "client_secret": "s3cret"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User created successfully"}
        db_session.commit.assert_awaited_once()

    def test_create_existing_user(
        self, client: TestClient, db_session: AsyncMock, result, stored_user: User
    ):
        db_session.execute = AsyncMock(return_value=result(scalar=stored_user))

        response = client.post(
            "/auth/create", json={"client_id": "scraper", "client_secret": "other"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User already exists"}

    def test_create_missing_fields(self, client: TestClient):
        response = client.post("/auth/create", json={"client_id": "scraper"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing credentials"}

    def test_login_success(
        self, client: TestClient, db_session: AsyncMock, result, stored_user: User, token_service
    ):
        db_session.execute = AsyncMock(return_value=result(scalar=stored_user))

        response = client.post(
            "/auth/login", json={"client_id": "scraper", "client_secret": "correct-secret"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "Bearer"
        assert token_service.validate(body["access_token"]).subject == "scraper"

    def test_login_wrong_secret(
        self, client: TestClient, db_session: AsyncMock, result, stored_user: User
    ):
        db_session.execute = AsyncMock(return_value=result(scalar=stored_user))

        response = client.post(
            "/auth/login", json={"client_id": "scraper", "client_secret": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Wrong credentials"}

    def test_login_unknown_user_matches_wrong_secret(self, client: TestClient):
        response = client.post(
            "/auth/login", json={"client_id": "nobody", "client_secret": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Wrong credentials"}


# ============================================================================
# Authorization Gate
# ============================================================================


class TestProtectedRoutes:
    """Write routes require a valid bearer token."""

    body = {"name": "Fuel Co", "url": "https://example.com", "html_element": "span"}

    def test_missing_token(self, client: TestClient, provider_service):
        response = client.post("/providers", json=self.body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing credentials"}
        provider_service.create_provider.assert_not_called()

    def test_invalid_token(self, client: TestClient, provider_service):
        response = client.post(
            "/providers", json=self.body, headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token"}
        provider_service.create_provider.assert_not_called()

    def test_valid_token(self, client: TestClient, provider_service, auth_headers, rows):
        provider_service.create_provider = AsyncMock(return_value=rows.provider(5))

        response = client.post("/providers", json=self.body, headers=auth_headers)

        assert response.status_code == 201
        assert response.json() == {"id": 5, "message": "Created provider with id: 5"}

    def test_reads_are_public(self, client: TestClient, provider_service, rows):
        provider_service.list_all = AsyncMock(return_value=[rows.provider(1)])

        response = client.get("/providers")

        assert response.status_code == 200
        assert response.json()[0]["id"] == 1


# ============================================================================
# Resource Routes
# ============================================================================


class TestProviderRoutes:
    """Tests for /providers."""

    def test_get_missing_provider(self, client: TestClient, provider_service):
        provider_service.fetch_provider = AsyncMock(
            side_effect=ResourceError.not_found(ResourceKind.PROVIDER)
        )

        response = client.get("/providers/99")

        assert response.status_code == 404
        assert response.json() == {"error": "provider not found"}

    def test_delete_provider(self, client: TestClient, provider_service, auth_headers):
        provider_service.delete = AsyncMock()

        response = client.delete("/providers/3", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"id": 3, "message": "Deleted provider with id: 3"}

    def test_add_zones_with_missing_zone(self, client: TestClient, provider_service, auth_headers):
        zone_error = ResourceError.not_found(ResourceKind.DELIVERY_ZONE)
        provider_service.add_zones = AsyncMock(
            side_effect=ResourceError.not_found(ResourceKind.PROVIDER, cause=zone_error)
        )

        response = client.post(
            "/providers/1/zones", json={"zone_ids": [1, 99]}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json() == {"error": "delivery zone not found for provider"}

    def test_add_zones_requires_ids(self, client: TestClient, provider_service, auth_headers):
        response = client.post("/providers/1/zones", json={"zone_ids": []}, headers=auth_headers)

        assert response.status_code == 422

    def test_providers_with_zones(self, client: TestClient, provider_service, rows):
        p = rows.provider(1)
        provider_service.list_with_zones = AsyncMock(
            return_value=[
                ProviderWithZones(
                    id=p.id,
                    name=p.name,
                    url=p.url,
                    html_element=p.html_element,
                    created_at=p.created_at,
                    last_updated=p.last_updated,
                    last_accessed=p.last_accessed,
                    zones=[ZoneData(id=1, name="North", description="")],
                ),
                ProviderWithZones(
                    id=2,
                    name="Empty",
                    url="https://example.com/2",
                    html_element="span",
                    created_at=p.created_at,
                    last_updated=p.last_updated,
                    last_accessed=p.last_accessed,
                ),
            ]
        )

        response = client.get("/providers/zones")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["zones"] == [{"id": 1, "name": "North", "description": ""}]
        assert body[1]["zones"] == []

    def test_price_history_lists_price_and_time(self, client: TestClient, rows):
        with patch("app.api.provider_routes.PriceService") as service_cls:
            service_cls.return_value.list_for_provider = AsyncMock(
                return_value=[rows.price(1, price="1.659")]
            )

            response = client.get("/providers/1/prices", params={"limit": 10})

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert set(body[0]) == {"price", "created_at"}
        window = service_cls.return_value.list_for_provider.await_args.args[1]
        assert window.limit == 10
        assert window.offset == 0

    def test_unknown_provider_price_history_is_empty(self, client: TestClient):
        with patch("app.api.provider_routes.PriceService") as service_cls:
            service_cls.return_value.list_for_provider = AsyncMock(return_value=[])

            response = client.get("/providers/99/prices")

        assert response.status_code == 200
        assert response.json() == []

    def test_price_window_validated(self, client: TestClient):
        response = client.get(
            "/providers/1/prices",
            params={"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
        )

        assert response.status_code == 422

    def test_store_failure_is_500(self, client: TestClient, provider_service):
        provider_service.list_all = AsyncMock(
            side_effect=ResourceError.fetch_error(ResourceKind.PROVIDER, RuntimeError("down"))
        )

        response = client.get("/providers")

        assert response.status_code == 500
        assert response.json() == {"error": "Error while fetching provider: down"}


class TestScrapingRunRoutes:
    """Tests for /scraping-runs."""

    def test_last_run_on_empty_log(self, client: TestClient):
        with patch("app.api.scraping_run_routes.ScrapingRunService") as service_cls:
            service_cls.return_value.get_last = AsyncMock(
                side_effect=ResourceError.fetch_error(
                    ResourceKind.SCRAPING_RUN, EmptyResultError()
                )
            )

            response = client.get("/scraping-runs/last")

        assert response.status_code == 500
        assert response.json()["error"].startswith("Error while fetching scraping run")

    def test_create_run_rejects_inverted_times(self, client: TestClient, auth_headers):
        response = client.post(
            "/scraping-runs",
            json={"start_time": "2026-10-17T12:00:00Z", "end_time": "2026-10-17T11:00:00Z"},
            headers=auth_headers,
        )

        assert response.status_code == 422


# ============================================================================
# Operational Routes
# ============================================================================


class TestOperationalRoutes:
    """Tests for /health and /metrics."""

    def test_health(self, client: TestClient):
        with patch(
            "app.api.status_routes.check_migrations_status",
            return_value={"current_revision": "a", "head_revision": "a", "pending": False},
        ):
            response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["migrations_pending"] is False

    def test_metrics(self, client: TestClient):
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "fuelprice_http_requests_total" in response.text
