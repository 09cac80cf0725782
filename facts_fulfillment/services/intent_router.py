"""Intent router and supporting request/response models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Mapping, MutableMapping

from facts_fulfillment.core.intents import IntentType
from facts_fulfillment.core.models import DialogTurnRequest, DialogTurnResponse, SessionFactState

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from . import ServiceContainer


@dataclass(slots=True)
class IntentRequest:
    """One decoded turn routed to an intent handler."""

    intent: IntentType
    turn: DialogTurnRequest
    state: SessionFactState


@dataclass(slots=True)
class IntentResponse:
    """Uniform handler response structure for the platform adapter."""

    intent: IntentType
    result: DialogTurnResponse


IntentHandler = Callable[[IntentRequest, "ServiceContainer"], Awaitable[IntentResponse]]


class IntentRouterError(RuntimeError):
    """Base error for router failures."""


class IntentHandlerNotFoundError(IntentRouterError):
    """Raised when no handler is registered for the requested intent."""


class IntentRouter:
    """Dispatch intents to registered handlers."""

    def __init__(self, handlers: Mapping[IntentType, IntentHandler] | None = None) -> None:
        self._handlers: MutableMapping[IntentType, IntentHandler] = dict(handlers or {})

    def register(self, intent: IntentType, handler: IntentHandler) -> None:
        """Register or replace a handler for ``intent``."""

        self._handlers[intent] = handler

    def alias(self, intent: IntentType, target: IntentType) -> None:
        """Route ``intent`` to whatever handler is registered for ``target``."""

        try:
            self._handlers[intent] = self._handlers[target]
        except KeyError as exc:
            raise IntentHandlerNotFoundError(
                f"cannot alias {intent.value!r}: no handler for {target.value!r}"
            ) from exc

    def unregister(self, intent: IntentType) -> None:
        """Remove a handler if present."""

        self._handlers.pop(intent, None)

    async def dispatch(
        self, request: IntentRequest, services: "ServiceContainer"
    ) -> IntentResponse:
        """Invoke the handler for ``request.intent`` with the provided services."""

        try:
            handler = self._handlers[request.intent]
        except KeyError as exc:
            raise IntentHandlerNotFoundError(
                f"No handler registered for intent {request.intent.value!r}"
            ) from exc
        return await handler(request, services)

    def handlers(self) -> Mapping[IntentType, IntentHandler]:
        """Return a shallow copy of the current intent handler registry."""

        return dict(self._handlers)


__all__ = [
    "IntentRouter",
    "IntentRouterError",
    "IntentHandlerNotFoundError",
    "IntentHandler",
    "IntentRequest",
    "IntentResponse",
]
