"""Dialogflow fulfillment webhook."""

from __future__ import annotations

import re
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from facts_fulfillment.apps.api.session_locks import get_session_lock
from facts_fulfillment.core.api_models import OutputContext, WebhookRequest, WebhookResponse
from facts_fulfillment.core.logging import (
    get_logger,
    log_session_id_context,
    pseudonymize_session_id,
)
from facts_fulfillment.core.models import (
    DialogTurnRequest,
    DialogTurnResponse,
    FactCard,
    SessionFactState,
)
from facts_fulfillment.services import ServiceContainer
from facts_fulfillment.services.fulfillment import handle_turn

from ..dependencies import get_service_container, require_session_state

router = APIRouter()
logger = get_logger(__name__)

_SSML_TAG = re.compile(r"<[^>]+>")


def _strip_ssml(speech: str) -> str:
    return " ".join(_SSML_TAG.sub(" ", speech).split())


def build_turn(webhook: WebhookRequest) -> DialogTurnRequest:
    """Decode the parts of a Dialogflow request the core consumes."""
    result = webhook.query_result
    return DialogTurnRequest(
        intent_name=result.intent.display_name,
        arguments=dict(result.parameters),
        raw_query=result.query_text,
        has_screen_output=webhook.has_screen_output,
    )


def _render_card(card: FactCard) -> dict[str, Any]:
    basic_card: dict[str, Any] = {
        "title": card.title,
        "buttons": [{"title": card.link_title, "openUrlAction": {"url": card.link_url}}],
    }
    if card.image_url:
        basic_card["image"] = {
            "url": card.image_url,
            "accessibilityText": card.image_alt or card.title,
        }
    return {"basicCard": basic_card}


def render_response(session: str, response: DialogTurnResponse) -> WebhookResponse:
    """Serialise a core response into the Dialogflow/Actions on Google shape."""
    items: list[dict[str, Any]] = []
    for message in response.messages:
        simple: dict[str, Any] = {"textToSpeech": message.speech}
        if message.text:
            simple["displayText"] = message.text
        items.append({"simpleResponse": simple})
    if response.card is not None:
        items.append(_render_card(response.card))

    rich_response: dict[str, Any] = {"items": items}
    if response.suggestions:
        rich_response["suggestions"] = [{"title": title} for title in response.suggestions]

    return WebhookResponse(
        fulfillment_text=_strip_ssml(response.speech),
        payload={
            "google": {
                "expectUserResponse": response.expect_user_response,
                "richResponse": rich_response,
            }
        },
        output_contexts=[
            OutputContext(
                name=f"{session}/contexts/{update.name}",
                lifespan_count=update.lifespan,
                parameters=dict(update.parameters),
            )
            for update in response.context_updates
        ],
    )


@router.post("/dialogflow")
async def fulfill_dialogflow(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
):
    """Fulfill one Dialogflow turn, persisting the session's fact state."""
    try:
        payload = await request.json()
    except ValueError:
        # JSONDecodeError and UnicodeDecodeError for bodies that are not UTF-8
        logger.error("Invalid JSON received", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid JSON"},
        )
    try:
        webhook = WebhookRequest.model_validate(payload)
    except ValidationError as exc:
        logger.error("Malformed webhook request: %s", exc.errors(include_url=False))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Malformed webhook request"},
        )

    session_store = require_session_state(services)
    turn = build_turn(webhook)
    with log_session_id_context(pseudonymize_session_id(webhook.session)):
        logger.info("fulfilling intent %r", turn.intent_name)
        lock = await get_session_lock(webhook.session)
        async with lock:
            state = SessionFactState(session_store.load_session_data(webhook.session))
            response = await handle_turn(turn, state, services)
            session_store.save_session_data(webhook.session, dict(state.data))

    body = render_response(webhook.session, response)
    return JSONResponse(body.model_dump(by_alias=True))


__all__ = ["router", "build_turn", "render_response"]
