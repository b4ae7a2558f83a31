"""Tests for app runtime wiring and lifecycle."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from techpack_agent.app import create_app
from techpack_agent.chat.orchestrator import EditOrchestrator
from techpack_agent.revisions.enhancement import PromptEnhancer
from techpack_agent.revisions.sequencer import MultiViewSequencer


def _settings(*, env: str = "test") -> SimpleNamespace:
    """Create minimal settings for lifespan wiring tests."""
    return SimpleNamespace(
        app=SimpleNamespace(
            env=env,
            is_development=env == "development",
            log_level="INFO",
            session_idle_seconds=3600,
        ),
        openai=SimpleNamespace(completion_timeout=60),
    )


def _cosmos() -> MagicMock:
    cosmos = MagicMock()
    cosmos.database = MagicMock()
    cosmos.close = AsyncMock()
    return cosmos


def _closable() -> MagicMock:
    resource = MagicMock()
    resource.close = AsyncMock()
    return resource


@pytest.mark.unit
def test_lifespan_wires_all_collaborators() -> None:
    """Lifespan builds the orchestrator and sequencer when everything is configured."""
    cosmos = _cosmos()
    storage = _closable()
    generator = _closable()

    with (
        patch("techpack_agent.app.load_settings", return_value=_settings()),
        patch("techpack_agent.app.configure_logging"),
        patch("techpack_agent.app.check_emulators", new=AsyncMock()) as check,
        patch("techpack_agent.app.init_database", new=AsyncMock(return_value=cosmos)),
        patch("techpack_agent.app.init_storage", new=AsyncMock(return_value=storage)),
        patch("techpack_agent.app.init_chat_client", return_value=MagicMock()),
        patch("techpack_agent.app.init_image_generator", return_value=generator),
    ):
        app = create_app()
        with TestClient(app):
            assert isinstance(app.state.orchestrator, EditOrchestrator)
            assert isinstance(app.state.sequencer, MultiViewSequencer)
            assert isinstance(app.state.sequencer._enhancer, PromptEnhancer)
            assert app.state.storage is storage

    check.assert_not_awaited()
    generator.close.assert_awaited_once()
    storage.close.assert_awaited_once()
    cosmos.close.assert_awaited_once()


@pytest.mark.unit
def test_lifespan_without_optional_services() -> None:
    """Chat and generation are disabled when their clients are unavailable."""
    cosmos = _cosmos()

    with (
        patch("techpack_agent.app.load_settings", return_value=_settings(env="development")),
        patch("techpack_agent.app.configure_logging"),
        patch("techpack_agent.app.check_emulators", new=AsyncMock(return_value=False)) as check,
        patch("techpack_agent.app.init_database", new=AsyncMock(return_value=cosmos)),
        patch("techpack_agent.app.init_storage", new=AsyncMock(return_value=None)),
        patch("techpack_agent.app.init_chat_client", return_value=None),
        patch("techpack_agent.app.init_image_generator", return_value=None),
    ):
        app = create_app()
        with TestClient(app) as client:
            assert app.state.orchestrator is None
            assert app.state.sequencer is None
            response = client.post("/products/prod-1/chat", json={"message": "hi"})
            assert response.status_code == 503

    check.assert_awaited_once()
    cosmos.close.assert_awaited_once()


def test_routes_registered() -> None:
    paths = {route.path for route in create_app().routes}

    assert "/products/{product_id}/chat" in paths
    assert "/products/{product_id}/views/edit" in paths
    assert "/products/{product_id}/views/{view_type}/regenerate" in paths
    assert "/products/{product_id}/revisions/{batch_id}/activate" in paths
