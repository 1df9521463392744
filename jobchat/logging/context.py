"""Per-request fields for structured logging.

Fields bound here (request_id, session_id) are attached to every record the
ContextualFilter sees while they are active. Storage is a ContextVar, so
concurrent requests served by different asyncio tasks never see each other's
fields.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator, Mapping, Optional

_fields: ContextVar[Mapping[str, Any]] = ContextVar("jobchat_log_fields", default={})


def get_log_context() -> Dict[str, Any]:
    """Snapshot of the active fields; mutating it has no effect."""
    return dict(_fields.get())


def push_log_context(**fields: Any) -> Token:
    """Bind fields on top of the active ones.

    Use this where a ``with`` block cannot span the work, e.g. inside a
    streaming response body. Otherwise prefer log_context().
    """
    return _fields.set({**_fields.get(), **fields})


def pop_log_context(token: Token) -> None:
    _fields.reset(token)


def clear_log_context() -> None:
    _fields.set({})


def current_request_id() -> Optional[str]:
    """Request id bound by the enclosing handler, if any."""
    return _fields.get().get("request_id")


def new_request_id() -> str:
    """Short random id correlating the log lines of one request."""
    return uuid.uuid4().hex[:12]


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Bind fields for the duration of a block.

    Example:
        >>> with log_context(request_id=new_request_id(), session_id="s-1"):
        ...     engine.search(filters)
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
