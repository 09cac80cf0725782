"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional


@dataclass(slots=True)
class RequestContext:
    """Metadata describing an inbound API request."""

    correlation_id: str
    path: str
    method: str
    user_agent: Optional[str] = None


class AppContexts:  # pylint: disable=too-few-public-methods
    """Follow-up context names defined in the agent."""

    FACT = "choose_fact-followup"
    CATS = "choose_cats-followup"


class Lifespans:  # pylint: disable=too-few-public-methods
    """Context lifespans, in turns."""

    DEFAULT = 5
    END = 0


FACTS_KEY = "facts"


class SessionFactState:
    """Per-session record of the facts not yet told, keyed by category.

    Wraps the session's mutable data bag. Category entries are created lazily
    by the fact store; a missing entry means the category was never touched in
    this session. The owner of ``data`` is responsible for persisting it
    between turns.
    """

    __slots__ = ("data",)

    def __init__(self, data: Optional[MutableMapping[str, Any]] = None) -> None:
        self.data: MutableMapping[str, Any] = data if data is not None else {}
        facts = self.data.get(FACTS_KEY)
        if not isinstance(facts, dict):
            self.data[FACTS_KEY] = {}

    @property
    def remaining(self) -> dict[str, list[str]]:
        """Live mapping of category id to the facts still untold."""
        return self.data[FACTS_KEY]

    def touched(self, category: str) -> bool:
        """Whether ``category`` has been initialised for this session."""
        return category in self.remaining

    def snapshot(self) -> dict[str, list[str]]:
        """Return a deep copy of the remaining facts, for logging and tests."""
        return {key: list(values) for key, values in self.remaining.items()}


@dataclass(frozen=True, slots=True)
class DialogTurnRequest:
    """Decoded intent and arguments for one conversational turn."""

    intent_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    raw_query: str = ""
    has_screen_output: bool = False

    def argument(self, name: str) -> Optional[str]:
        """Return argument ``name`` as a non-empty string, or ``None``."""
        value = self.arguments.get(name)
        if value is None:
            return None
        text = str(value).strip()
        return text or None


@dataclass(frozen=True, slots=True)
class SpeechMessage:
    """One spoken utterance with its optional on-screen text."""

    speech: str
    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ContextUpdate:
    """Set (lifespan > 0) or close (lifespan == 0) a follow-up context."""

    name: str
    lifespan: int
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FactCard:
    """Card shown alongside a fact on surfaces with a screen."""

    title: str
    link_title: str
    link_url: str
    image_url: Optional[str] = None
    image_alt: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DialogTurnResponse:
    """Response directive handed back to the platform adapter."""

    messages: tuple[SpeechMessage, ...]
    suggestions: tuple[str, ...] = ()
    context_updates: tuple[ContextUpdate, ...] = ()
    expect_user_response: bool = True
    card: Optional[FactCard] = None

    @property
    def speech(self) -> str:
        """All spoken messages joined into a single string."""
        return " ".join(message.speech for message in self.messages)

    def context(self, name: str) -> Optional[ContextUpdate]:
        """Return the last update emitted for context ``name``, if any."""
        for update in reversed(self.context_updates):
            if update.name == name:
                return update
        return None


__all__ = [
    "RequestContext",
    "AppContexts",
    "Lifespans",
    "FACTS_KEY",
    "SessionFactState",
    "DialogTurnRequest",
    "SpeechMessage",
    "ContextUpdate",
    "FactCard",
    "DialogTurnResponse",
]
