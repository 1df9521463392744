"""Per-session conversation history with fixed bounds.

The store is created once at startup and handed to request handlers; it is
not a module-level global. Two limits keep memory bounded:
- max_turns: messages kept per session, oldest evicted first
- max_sessions: sessions kept overall, least recently used evicted first

Appends for different sessions are independent. Concurrent appends to the
same session are applied atomically but in no guaranteed order.
"""

import logging
import threading
from collections import OrderedDict, deque
from typing import Deque, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Turn = Dict[str, str]

VALID_ROLES = frozenset({"user", "assistant"})


class SessionStore:
    """Maps session ids to their most recent chat turns."""

    def __init__(self, max_turns: int = 24, max_sessions: int = 1000):
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")

        self.max_turns = max_turns
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, Deque[Turn]]" = OrderedDict()
        self._lock = threading.Lock()

    def append(self, session_id: str, role: str, content: str) -> None:
        """Record one turn, evicting the oldest turn past max_turns."""
        self.extend(session_id, [{"role": role, "content": content}])

    def extend(self, session_id: str, turns: Iterable[Turn]) -> None:
        """Record several turns in one step (e.g. a user message and its reply)."""
        new_turns = [self._validate(turn) for turn in turns]

        with self._lock:
            history = self._sessions.get(session_id)
            if history is None:
                history = deque(maxlen=self.max_turns)
                self._sessions[session_id] = history
            self._sessions.move_to_end(session_id)
            history.extend(new_turns)

            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.debug(
                    "Session evicted",
                    extra={"event": "session.evicted", "evicted_session_id": evicted_id},
                )

    def history(self, session_id: Optional[str]) -> List[Turn]:
        """Copy of the session's turns, oldest first (empty for unknown ids)."""
        if not session_id:
            return []
        with self._lock:
            history = self._sessions.get(session_id)
            if history is None:
                return []
            self._sessions.move_to_end(session_id)
            return [dict(turn) for turn in history]

    def clear(self, session_id: str) -> bool:
        """Forget a session. Returns True if it existed."""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    @staticmethod
    def _validate(turn: Turn) -> Turn:
        role = turn.get("role")
        if role not in VALID_ROLES:
            raise ValueError(f"role must be one of {sorted(VALID_ROLES)}, got: {role!r}")
        return {"role": role, "content": str(turn.get("content", ""))}
