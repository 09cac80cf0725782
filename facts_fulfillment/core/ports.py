"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Any, Protocol


class SessionStatePort(Protocol):
    """Port exposing per-session data persistence."""

    def load_session_data(self, session_id: str) -> dict[str, Any]:
        """Return a private copy of the data bag stored for ``session_id``."""
        ...

    def save_session_data(self, session_id: str, data: dict[str, Any]) -> None:
        """Persist the data bag for ``session_id``, replacing what was stored."""
        ...

    def clear_session_data(self, session_id: str) -> None:
        """Drop everything stored for ``session_id``."""
        ...


__all__ = ["SessionStatePort"]
