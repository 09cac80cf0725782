"""Session state adapter implementing the TinyDB-backed port.

Each conversation session owns one document in the ``sessions`` table holding
its opaque data bag (the remaining facts per category, among others).
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

from tinydb import Query, TinyDB

from facts_fulfillment.core.config import settings
from facts_fulfillment.core.ports import SessionStatePort

# Provide a QueryLike alias for static checkers; at runtime use Any.
if TYPE_CHECKING:  # pragma: no cover - typing only
    from tinydb.queries import QueryLike  # type: ignore
else:
    QueryLike = Any  # type: ignore[misc,assignment]

SESSIONS_TABLE = "sessions"

DATA_DIR = Path(getattr(settings, "DATA_DIR", Path("/data")))
DB_PATH = DATA_DIR / "sessions.json"
_db: Optional[TinyDB] = None


def get_session_db() -> TinyDB:
    """Return the process-wide TinyDB instance, opening it on first use."""
    global _db  # pylint: disable=global-statement
    if _db is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _db = TinyDB(str(DB_PATH))
    return _db


def _session_cond(session_id: str) -> QueryLike:
    q = Query()
    return cast(QueryLike, q.session_id == session_id)


def get_session_data(session_id: str) -> Dict[str, Any]:
    """Get a private copy of the data bag stored for a session.

    Args:
        session_id: The platform's opaque session identifier

    Returns:
        The stored data bag, or an empty dict for a new session
    """
    raw = get_session_db().table(SESSIONS_TABLE).get(_session_cond(session_id))
    result = cast(Optional[Dict[str, Any]], raw)
    if not result:
        return {}
    data = result.get("data", {})
    return copy.deepcopy(data) if isinstance(data, dict) else {}


def set_session_data(session_id: str, data: Dict[str, Any]) -> None:
    """Replace the data bag stored for a session."""
    table = get_session_db().table(SESSIONS_TABLE)
    table.upsert(
        {"session_id": session_id, "data": copy.deepcopy(data)},
        _session_cond(session_id),
    )


def delete_session_data(session_id: str) -> None:
    """Remove a session's document if present."""
    get_session_db().table(SESSIONS_TABLE).remove(_session_cond(session_id))


class SessionStateAdapter(SessionStatePort):
    """Concrete adapter wrapping TinyDB helper functions."""

    def load_session_data(self, session_id: str) -> dict[str, Any]:
        return get_session_data(session_id)

    def save_session_data(self, session_id: str, data: dict[str, Any]) -> None:
        set_session_data(session_id, data)

    def clear_session_data(self, session_id: str) -> None:
        delete_session_data(session_id)


__all__ = [
    "SessionStateAdapter",
    "get_session_db",
    "get_session_data",
    "set_session_data",
    "delete_session_data",
]
