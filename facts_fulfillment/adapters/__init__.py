"""Infrastructure adapter exports."""

from .session_state import SessionStateAdapter

__all__ = ["SessionStateAdapter"]
