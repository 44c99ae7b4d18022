"""Tests for the JSON error envelope."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field

from staffdesk.core.errors import (
    NotFoundError,
    RateLimitError,
    ValidationError,
    register_exception_handlers,
    summarize_errors,
)


pytestmark = pytest.mark.unit


class Payload(BaseModel):
    name: str = Field(..., max_length=5)
    role_ids: list[int]


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundError(resource="role", resource_id=9)

    @app.get("/throttled")
    async def throttled() -> None:
        raise RateLimitError(headers={"Retry-After": "30"})

    @app.get("/taken")
    async def taken() -> None:
        raise ValidationError.for_field("slug", "The slug has already been taken.")

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database password is hunter2")

    @app.post("/payload")
    async def payload(data: Payload) -> dict[str, str]:
        return {"name": data.name}

    return app


@pytest.fixture
async def error_client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=_build_app(), raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


class TestSummarizeErrors:
    """Tests for the top-level validation message."""

    def test_single_error_is_used_verbatim(self):
        assert summarize_errors({"name": ["The name field is required."]}) == (
            "The name field is required."
        )

    def test_remaining_errors_are_counted(self):
        errors = {
            "name": ["The name field is required."],
            "email": ["The email field is required.", "Another."],
        }

        assert summarize_errors(errors) == "The name field is required. (and 2 more errors)"

    def test_singular_noun(self):
        errors = {"a": ["First."], "b": ["Second."]}

        assert summarize_errors(errors) == "First. (and 1 more error)"


class TestExceptionHandlers:
    """Tests for the registered handlers."""

    async def test_not_found(self, error_client: AsyncClient):
        response = await error_client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {"message": "Resource not found."}

    async def test_rate_limit_keeps_headers(self, error_client: AsyncClient):
        response = await error_client.get("/throttled")

        assert response.status_code == 429
        assert response.json() == {"message": "Too many requests. Please retry in a minute."}
        assert response.headers["Retry-After"] == "30"

    async def test_domain_validation_error(self, error_client: AsyncClient):
        response = await error_client.get("/taken")

        assert response.status_code == 422
        assert response.json() == {
            "message": "The slug has already been taken.",
            "errors": {"slug": ["The slug has already been taken."]},
        }

    async def test_request_validation_is_humanized(self, error_client: AsyncClient):
        response = await error_client.post("/payload", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["errors"]["name"] == ["The name field is required."]
        assert body["errors"]["role_ids"] == ["The role ids field is required."]
        assert body["message"] == "The name field is required. (and 1 more error)"

    async def test_length_messages(self, error_client: AsyncClient):
        response = await error_client.post("/payload", json={"name": "toolong", "role_ids": [1]})

        assert response.json()["errors"] == {
            "name": ["The name field must not be greater than 5 characters."]
        }

    async def test_element_paths_are_dotted(self, error_client: AsyncClient):
        response = await error_client.post("/payload", json={"name": "ok", "role_ids": ["x"]})

        assert list(response.json()["errors"]) == ["role_ids.0"]

    async def test_unexpected_errors_do_not_leak(self, error_client: AsyncClient):
        response = await error_client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"message": "Server Error."}

    async def test_unknown_route_is_json(self, error_client: AsyncClient):
        response = await error_client.get("/nowhere", headers={"Accept": "text/html"})

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"message": "Not Found"}
