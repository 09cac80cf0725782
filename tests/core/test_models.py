"""Tests for core data transfer objects."""

from __future__ import annotations

import dataclasses

import pytest

from facts_fulfillment.core.intents import IntentType, resolve_intent
from facts_fulfillment.core.models import (
    AppContexts,
    ContextUpdate,
    DialogTurnRequest,
    DialogTurnResponse,
    FACTS_KEY,
    SessionFactState,
    SpeechMessage,
)

# pylint: disable=missing-function-docstring


def test_session_state_wraps_existing_bag() -> None:
    data = {"other": 1, FACTS_KEY: {"history": ["a"]}}
    state = SessionFactState(data)

    assert state.data is data
    assert state.touched("history")
    assert not state.touched("headquarters")
    state.remaining["headquarters"] = []
    assert data[FACTS_KEY]["headquarters"] == []


def test_session_state_repairs_corrupt_facts_entry() -> None:
    data = {FACTS_KEY: ["not", "a", "mapping"]}
    state = SessionFactState(data)

    assert state.remaining == {}


def test_snapshot_is_a_copy() -> None:
    state = SessionFactState({FACTS_KEY: {"history": ["a", "b"]}})
    snapshot = state.snapshot()
    snapshot["history"].pop()

    assert state.remaining["history"] == ["a", "b"]


def test_turn_argument_normalises_blank_values() -> None:
    turn = DialogTurnRequest(
        intent_name="tell_fact", arguments={"category": "  ", "other": " history "}
    )

    assert turn.argument("category") is None
    assert turn.argument("missing") is None
    assert turn.argument("other") == "history"


def test_response_is_frozen_and_finds_contexts() -> None:
    response = DialogTurnResponse(
        messages=(SpeechMessage("one"), SpeechMessage("two")),
        context_updates=(
            ContextUpdate(AppContexts.CATS, 0),
            ContextUpdate(AppContexts.FACT, 5, {"category": "history"}),
        ),
    )

    assert response.speech == "one two"
    fact_context = response.context(AppContexts.FACT)
    assert fact_context is not None and fact_context.parameters == {"category": "history"}
    assert response.context("missing") is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        response.expect_user_response = False  # type: ignore[misc]


def test_resolve_intent_by_display_name() -> None:
    assert resolve_intent("tell_fact") is IntentType.TELL_FACT
    assert resolve_intent("Unrecognized Deep Link Fallback") is IntentType.UNRECOGNIZED_DEEP_LINK
    assert resolve_intent("order_pizza") is None
    assert resolve_intent("") is None
    assert resolve_intent(None) is None
