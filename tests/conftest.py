"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agent.memory import InMemoryConversationStore  # noqa: E402
from agent.pipeline import ConversationPipeline  # noqa: E402
from agent.reply import RuleBasedReplyGenerator  # noqa: E402
from infra import InfraBootstrap  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_bootstrap():
    """Each test starts without a process-wide pipeline."""
    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()


@pytest.fixture
def store():
    """Fresh in-memory conversation store."""
    return InMemoryConversationStore()


@pytest.fixture
def pipeline(store):
    """Pipeline over the fresh store with deterministic rule-based replies."""
    return ConversationPipeline(store=store, generator=RuleBasedReplyGenerator())


@pytest.fixture
def app_overrides():
    """
    Dependency overrides on the FastAPI app, cleared after the test.

    Usage: app_overrides[get_pipeline] = lambda: pipeline
    """
    from main import app

    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
def client(pipeline, app_overrides):
    """TestClient wired to the fixture pipeline, webhook signatures off."""
    from fastapi.testclient import TestClient

    from infra import get_pipeline
    from main import app
    from transport.twilio import WebhookSettings, get_webhook_settings

    app_overrides[get_pipeline] = lambda: pipeline
    app_overrides[get_webhook_settings] = lambda: WebhookSettings()
    return TestClient(app)
