"""Tests for the chat routes."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from techpack_agent.chat.orchestrator import EditOrchestrator
from techpack_agent.chat.session import SessionRegistry
from techpack_agent.errors import SessionBusyError
from techpack_agent.models.product import Product
from techpack_agent.routes import chat


@pytest.fixture
def products(product: Product) -> AsyncMock:
    products = AsyncMock()
    products.get_product.side_effect = lambda product_id: (
        product if product_id == product.id else None
    )
    products.update_section.return_value = True
    return products


@pytest.fixture
def completion() -> AsyncMock:
    completion = AsyncMock()
    completion.complete.return_value = (
        "Renaming it.\n\n```EDIT_ACTION\n"
        '{"type": "update_field", "section": "productName", "value": "Aria",'
        ' "description": "Rename"}\n```'
    )
    return completion


@pytest.fixture
def app(products: AsyncMock, completion: AsyncMock) -> FastAPI:
    app = FastAPI()
    app.include_router(chat.router)
    app.state.products = products
    app.state.sessions = SessionRegistry()
    app.state.orchestrator = EditOrchestrator(completion, products)
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


class TestChatRoutes:
    """Test the chat endpoints end to end with a mocked completion."""

    def test_transcript_starts_with_welcome(self, client: TestClient) -> None:
        response = client.get("/products/prod-1/chat")

        assert response.status_code == 200
        body = response.json()
        assert len(body["messages"]) == 1
        assert "Aurora Tote" in body["messages"][0]["content"]
        assert body["is_busy"] is False
        assert [a["id"] for a in body["quick_actions"]] == [
            "describe-product",
            "suggest-improvements",
        ]

    def test_send_message_applies_edit(self, client: TestClient, products: AsyncMock) -> None:
        """Verify a turn returns the annotated reply and the new tab."""
        response = client.post(
            "/products/prod-1/chat",
            json={"message": "Change the product name to Aria", "active_section": "materials"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"]["role"] == "assistant"
        assert body["message"]["metadata"]["edit_applied"] is True
        assert body["active_section"] == "overview"
        products.update_section.assert_awaited_once_with("prod-1", "productName", "Aria", None)

        transcript = client.get("/products/prod-1/chat").json()
        assert [m["role"] for m in transcript["messages"]] == ["assistant", "user", "assistant"]

    def test_sessions_are_isolated_by_header(self, client: TestClient) -> None:
        client.post("/products/prod-1/chat", json={"message": "hello"})

        other = client.get("/products/prod-1/chat", headers={"X-Session-Id": "tab-2"})

        assert len(other.json()["messages"]) == 1

    def test_empty_message_rejected(self, client: TestClient) -> None:
        response = client.post("/products/prod-1/chat", json={"message": "  "})

        assert response.status_code == 400

    def test_unknown_product_is_404(self, client: TestClient) -> None:
        response = client.post("/products/missing/chat", json={"message": "hi"})

        assert response.status_code == 404

    def test_busy_session_is_409(self, app: FastAPI, client: TestClient) -> None:
        orchestrator = MagicMock()
        orchestrator.send_message = AsyncMock(side_effect=SessionBusyError("busy"))
        app.state.orchestrator = orchestrator

        response = client.post("/products/prod-1/chat", json={"message": "hi"})

        assert response.status_code == 409

    def test_chat_unconfigured_is_503(self, app: FastAPI, client: TestClient) -> None:
        app.state.orchestrator = None

        response = client.post("/products/prod-1/chat", json={"message": "hi"})

        assert response.status_code == 503

    def test_clear_transcript(self, client: TestClient) -> None:
        client.post("/products/prod-1/chat", json={"message": "hello"})

        response = client.delete("/products/prod-1/chat")

        assert response.status_code == 204
        assert len(client.get("/products/prod-1/chat").json()["messages"]) == 1
