"""Tests for default service wiring and settings."""
# pylint: disable=missing-function-docstring

import pytest
from pydantic import ValidationError

from facts_fulfillment import api_factory
from facts_fulfillment.adapters.session_state import SessionStateAdapter
from facts_fulfillment.bootstrap import build_default_service_container
from facts_fulfillment.core.catalog import FactCatalog
from facts_fulfillment.core.config import Settings
from facts_fulfillment.core.intents import IntentType
from facts_fulfillment.core.models import Lifespans
from facts_fulfillment.services import ServiceContainer


def test_default_container_uses_tinydb_adapter(memory_session_db):
    del memory_session_db
    services = build_default_service_container()

    assert isinstance(services.session_state, SessionStateAdapter)
    assert services.intent_router is not None
    assert set(services.intent_router.handlers()) == set(IntentType)
    assert services.context_lifespan == 5


def test_api_factory_builds_app(memory_session_db):
    del memory_session_db
    app = api_factory.create_app()

    assert isinstance(app.state.services.session_state, SessionStateAdapter)


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CONTEXT_LIFESPAN", "3")
    monkeypatch.setenv("FACTS_RANDOM_SEED", "42")

    loaded = Settings()

    assert loaded.CONTEXT_LIFESPAN == 3
    assert loaded.FACTS_RANDOM_SEED == 42
    assert loaded.FACTS_RESPONSES_PATH is None


def test_settings_reject_zero_lifespan(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CONTEXT_LIFESPAN", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_container_default_lifespan_matches_context_default(catalog: FactCatalog):
    assert ServiceContainer(catalog=catalog).context_lifespan == Lifespans.DEFAULT
