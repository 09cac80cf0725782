"""Dialogflow v2 webhook request/response models.

Only the fields the fulfillment reads or writes are modelled; everything else
in the platform payload is accepted and ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SCREEN_OUTPUT_CAPABILITY = "actions.capability.SCREEN_OUTPUT"


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IntentInfo(_Lenient):
    """Matched intent as reported by the agent."""

    name: str = ""
    display_name: str = Field(default="", alias="displayName")


class OutputContext(_Lenient):
    """Context attached to the request or emitted in the response."""

    name: str
    lifespan_count: int = Field(default=0, alias="lifespanCount")
    parameters: dict[str, Any] = Field(default_factory=dict)


class QueryResult(_Lenient):
    """Result of conversational query or event processing."""

    query_text: str = Field(default="", alias="queryText")
    parameters: dict[str, Any] = Field(default_factory=dict)
    intent: IntentInfo = Field(default_factory=IntentInfo)
    action: str = ""
    output_contexts: list[OutputContext] = Field(default_factory=list, alias="outputContexts")
    language_code: str = Field(default="en", alias="languageCode")


class OriginalDetectIntentRequest(_Lenient):
    """Raw payload forwarded from the Actions on Google surface."""

    source: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)

    def capabilities(self) -> set[str]:
        """Names of the surface capabilities the device reports."""
        surface = self.payload.get("surface") or {}
        entries = surface.get("capabilities") or []
        return {str(entry.get("name")) for entry in entries if isinstance(entry, dict)}


class WebhookRequest(_Lenient):
    """Body POSTed by Dialogflow for each fulfilled turn."""

    response_id: str = Field(default="", alias="responseId")
    session: str = Field(min_length=1)
    query_result: QueryResult = Field(alias="queryResult")
    original_detect_intent_request: OriginalDetectIntentRequest = Field(
        default_factory=OriginalDetectIntentRequest, alias="originalDetectIntentRequest"
    )

    @property
    def has_screen_output(self) -> bool:
        """True when the originating surface can display cards."""
        return SCREEN_OUTPUT_CAPABILITY in self.original_detect_intent_request.capabilities()


class WebhookResponse(BaseModel):
    """Body returned to Dialogflow; serialised with camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    fulfillment_text: str = Field(alias="fulfillmentText")
    payload: dict[str, Any] = Field(default_factory=dict)
    output_contexts: list[OutputContext] = Field(default_factory=list, alias="outputContexts")


__all__ = [
    "SCREEN_OUTPUT_CAPABILITY",
    "IntentInfo",
    "OutputContext",
    "QueryResult",
    "OriginalDetectIntentRequest",
    "WebhookRequest",
    "WebhookResponse",
]
