"""Tests for the /dialogflow fulfillment endpoint."""
# pylint: disable=missing-function-docstring,redefined-outer-name

from __future__ import annotations

from http import HTTPStatus
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from facts_fulfillment.adapters import session_state
from facts_fulfillment.apps.api.app import create_app
from facts_fulfillment.apps.api.session_locks import clear_all_locks
from facts_fulfillment.core.api_models import SCREEN_OUTPUT_CAPABILITY
from facts_fulfillment.services import ServiceContainer

SESSION = "projects/facts/agent/sessions/abc123"


@pytest.fixture
def client(services: ServiceContainer) -> Iterator[TestClient]:
    clear_all_locks()
    yield TestClient(create_app(services))
    clear_all_locks()


def _webhook(
    intent: str,
    parameters: dict[str, Any] | None = None,
    *,
    query: str = "",
    screen: bool = False,
    session: str = SESSION,
) -> dict[str, Any]:
    capabilities = [{"name": "actions.capability.AUDIO_OUTPUT"}]
    if screen:
        capabilities.append({"name": SCREEN_OUTPUT_CAPABILITY})
    return {
        "responseId": "resp-1",
        "session": session,
        "queryResult": {
            "queryText": query,
            "parameters": parameters or {},
            "intent": {"name": f"projects/facts/agent/intents/{intent}", "displayName": intent},
            "languageCode": "en",
        },
        "originalDetectIntentRequest": {
            "source": "google",
            "payload": {"surface": {"capabilities": capabilities}},
        },
    }


def _google(body: dict[str, Any]) -> dict[str, Any]:
    return body["payload"]["google"]


def _stored_facts(session: str = SESSION) -> dict[str, list[str]]:
    return session_state.get_session_data(session)["facts"]


def test_tell_fact_on_screen_surface(client: TestClient) -> None:
    payload = _webhook("tell_fact", {"category": "history"}, screen=True)
    resp = client.post("/dialogflow", json=payload)

    assert resp.status_code == HTTPStatus.OK
    body = resp.json()
    google = _google(body)
    assert google["expectUserResponse"] is True
    items = google["richResponse"]["items"]
    assert len(items) == 3
    first = items[0]["simpleResponse"]
    assert first["textToSpeech"].startswith("Sure, here's a history fact.")
    assert first["displayText"] == "Sure, here's a history fact."
    assert items[1]["simpleResponse"]["textToSpeech"] == "Would you like to hear another fact?"
    card = items[2]["basicCard"]
    assert card["buttons"] == [
        {"title": "Learn more", "openUrlAction": {"url": "https://www.google.com/about/"}}
    ]
    assert "image" not in card
    assert google["richResponse"]["suggestions"] == [{"title": "Sure"}, {"title": "No thanks"}]
    assert body["outputContexts"] == []
    assert len(_stored_facts()["history"]) == 3


def test_tell_fact_without_screen_has_no_card(client: TestClient) -> None:
    payload = _webhook("choose_fact", {"category": "headquarters"})
    body = client.post("/dialogflow", json=payload).json()

    items = _google(body)["richResponse"]["items"]
    assert [list(item) for item in items] == [["simpleResponse"], ["simpleResponse"]]
    assert "displayText" not in items[0]["simpleResponse"]
    assert body["fulfillmentText"].startswith("Okay, here's a headquarters fact.")


def test_depleted_category_redirects_with_context(client: TestClient) -> None:
    told = set()
    for _ in range(4):
        resp = client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"}))
        body = resp.json()
        told.add(_google(body)["richResponse"]["items"][0]["simpleResponse"]["textToSpeech"])
    assert len(told) == 4

    body = client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"})).json()

    google = _google(body)
    assert google["expectUserResponse"] is True
    speech = google["richResponse"]["items"][0]["simpleResponse"]["textToSpeech"]
    assert "history of Google" in speech
    assert "its headquarters instead" in speech
    assert "I can tell you about cats too." in speech
    assert google["richResponse"]["suggestions"] == [{"title": "Headquarters"}, {"title": "Cats"}]
    assert body["outputContexts"] == [
        {
            "name": f"{SESSION}/contexts/choose_fact-followup",
            "lifespanCount": 5,
            "parameters": {"category": "headquarters"},
        }
    ]
    assert _stored_facts()["history"] == []


def test_everything_heard_closes_conversation(client: TestClient) -> None:
    for _ in range(5):
        client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"}))
    for _ in range(3):
        client.post("/dialogflow", json=_webhook("tell_fact", {"category": "headquarters"}))

    body = client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"})).json()

    google = _google(body)
    assert google["expectUserResponse"] is False
    assert body["fulfillmentText"] == (
        "Actually it looks like you heard it all. Thanks for listening!"
    )


def test_cat_fact_strips_ssml_from_fulfillment_text(client: TestClient) -> None:
    body = client.post("/dialogflow", json=_webhook("tell_cat_fact")).json()

    speech = _google(body)["richResponse"]["items"][0]["simpleResponse"]["textToSpeech"]
    assert speech.startswith("<speak>Alright, here's a cat fact. <audio src=")
    assert speech.endswith("</speak>")
    assert "<" not in body["fulfillmentText"]
    assert body["fulfillmentText"].startswith("Alright, here's a cat fact.")
    assert len(_stored_facts()["cats"]) == 2


def test_sessions_do_not_share_facts(client: TestClient) -> None:
    other = "projects/facts/agent/sessions/other"
    client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"}))
    client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"}, session=other))

    assert len(_stored_facts()["history"]) == 3
    assert len(_stored_facts(other)["history"]) == 3


def test_unknown_intent_gets_fallback(client: TestClient) -> None:
    body = client.post("/dialogflow", json=_webhook("order_pizza")).json()

    google = _google(body)
    assert google["expectUserResponse"] is True
    assert body["fulfillmentText"].startswith("Sorry, I didn't get that.")
    assert google["richResponse"]["suggestions"][-1] == {"title": "Cats"}


def test_deep_link_mentions_query(client: TestClient) -> None:
    body = client.post(
        "/dialogflow", json=_webhook("Unrecognized Deep Link Fallback", query="the weather")
    ).json()

    assert "rather not talk about the weather" in body["fulfillmentText"]


def test_invalid_json_is_rejected(client: TestClient) -> None:
    resp = client.post(
        "/dialogflow", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.json() == {"error": "Invalid JSON"}


def test_non_utf8_body_is_rejected(client: TestClient) -> None:
    resp = client.post(
        "/dialogflow",
        content=b'{"session": "\xff\xfe"}',
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.json() == {"error": "Invalid JSON"}


@pytest.mark.parametrize(
    "payload",
    [
        {"queryResult": {"intent": {"displayName": "tell_fact"}}},
        {"session": "", "queryResult": {}},
        {"session": SESSION},
    ],
)
def test_malformed_request_is_rejected(client: TestClient, payload: dict[str, Any]) -> None:
    resp = client.post("/dialogflow", json=payload)

    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert resp.json() == {"error": "Malformed webhook request"}


def test_correlation_id_is_echoed(client: TestClient) -> None:
    resp = client.post(
        "/dialogflow",
        json=_webhook("tell_fact", {"category": "history"}),
        headers={"X-Request-ID": "req-42"},
    )

    assert resp.headers["X-Request-ID"] == "req-42"
    assert resp.headers["X-Correlation-ID"] == "req-42"


def test_correlation_id_is_minted_when_missing(client: TestClient) -> None:
    resp = client.get("/")

    assert resp.status_code == HTTPStatus.OK
    assert len(resp.headers["X-Correlation-ID"]) == 32


def test_alive_reports_categories_and_locks(client: TestClient) -> None:
    client.post("/dialogflow", json=_webhook("tell_fact", {"category": "history"}))

    body = client.get("/alive").json()

    assert body["status"] == "ok"
    assert body["categories"] == ["history", "headquarters"]
    assert body["locks"] == {"total_locks": 1, "held_locks": 0}
