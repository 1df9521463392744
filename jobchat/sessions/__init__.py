"""Bounded in-memory conversation history."""

from .store import SessionStore, Turn

__all__ = ["SessionStore", "Turn"]
