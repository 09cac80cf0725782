"""Per-session turn serialisation for the webhook.

The fulfillment core does no locking of its own: a turn loads the session's
data bag, mutates it and writes it back. Two overlapping turns for the same
session (e.g. a platform retry) would otherwise both read the same snapshot
and one removal would be lost. These locks only cover a single process.
"""

from __future__ import annotations

import asyncio
from time import time

from facts_fulfillment.core.config import settings
from facts_fulfillment.core.logging import get_logger

logger = get_logger(__name__)

_session_locks: dict[str, asyncio.Lock] = {}
_session_lock_last_used: dict[str, float] = {}
_meta_lock = asyncio.Lock()

LOCK_TTL_SECONDS = int(getattr(settings, "SESSION_LOCK_TTL_SECONDS", 600))
CLEANUP_INTERVAL_SECONDS = 300


async def get_session_lock(session_id: str) -> asyncio.Lock:
    """Get or create the lock guarding ``session_id``."""
    async with _meta_lock:
        lock = _session_locks.get(session_id)
        if lock is None:
            lock = _session_locks[session_id] = asyncio.Lock()
        _session_lock_last_used[session_id] = time()
        return lock


async def cleanup_stale_locks(ttl_seconds: float = LOCK_TTL_SECONDS) -> int:
    """Drop unheld locks idle for longer than ``ttl_seconds``; return how many."""
    async with _meta_lock:
        now = time()
        stale = [
            sid
            for sid, last in _session_lock_last_used.items()
            if now - last > ttl_seconds and not _session_locks[sid].locked()
        ]
        for sid in stale:
            del _session_locks[sid]
            del _session_lock_last_used[sid]
        return len(stale)


async def lock_cleanup_task() -> None:
    """Periodically prune stale session locks until cancelled."""
    while True:
        await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
        try:
            removed = await cleanup_stale_locks()
            if removed:
                logger.info("Cleaned up %d stale session locks", removed)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Error during session lock cleanup")


def get_lock_stats() -> dict[str, int]:
    """Counts of tracked and currently held session locks."""
    return {
        "total_locks": len(_session_locks),
        "held_locks": sum(1 for lock in _session_locks.values() if lock.locked()),
    }


def clear_all_locks() -> None:
    """Forget every lock. Only for tests."""
    _session_locks.clear()
    _session_lock_last_used.clear()


__all__ = [
    "get_session_lock",
    "cleanup_stale_locks",
    "lock_cleanup_task",
    "get_lock_stats",
    "clear_all_locks",
    "LOCK_TTL_SECONDS",
]
