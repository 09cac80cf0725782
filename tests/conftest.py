"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so local overrides are honoured.
"""
from __future__ import annotations

import os
import random
import sys
import tempfile
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep session storage and logs out of /data during tests
_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="facts-fulfillment-tests-"))
os.environ.setdefault("DATA_DIR", str(_TEST_DATA_DIR))
os.environ.setdefault("FACTS_LOG_DIR", str(_TEST_DATA_DIR / "logs"))

# pylint: disable=wrong-import-position
from tinydb import TinyDB  # noqa: E402
from tinydb.storages import MemoryStorage  # noqa: E402

from facts_fulfillment.adapters import session_state  # noqa: E402
from facts_fulfillment.core.catalog import FactCatalog, get_catalog  # noqa: E402
from facts_fulfillment.core.models import SessionFactState  # noqa: E402
from facts_fulfillment.services import ServiceContainer, build_default_services  # noqa: E402


@pytest.fixture(name="catalog")
def _catalog() -> FactCatalog:
    """The packaged catalog (history: 4 facts, headquarters: 3, cats: 3)."""
    return get_catalog()


@pytest.fixture(name="state")
def _state() -> SessionFactState:
    """A fresh, untouched session."""
    return SessionFactState()


@pytest.fixture(name="rng")
def _rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(name="memory_session_db")
def _memory_session_db(monkeypatch: pytest.MonkeyPatch):
    """Swap the session TinyDB for an in-memory instance."""
    db = TinyDB(storage=MemoryStorage)
    monkeypatch.setattr(session_state, "_db", db)
    yield db
    db.close()


@pytest.fixture(name="services")
def _services(catalog: FactCatalog, rng: random.Random, memory_session_db) -> ServiceContainer:
    del memory_session_db
    return build_default_services(
        catalog=catalog,
        session_state_port=session_state.SessionStateAdapter(),
        rng=rng,
    )
