"""Tests for logging context propagation."""

import asyncio

import pytest

from jobchat.logging.context import (
    clear_log_context,
    current_request_id,
    get_log_context,
    log_context,
    new_request_id,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    """Test pushing request fields and restoring the previous state."""
    token = push_log_context(request_id="req-1", session_id="s-1")
    assert get_log_context() == {"request_id": "req-1", "session_id": "s-1"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_overrides_and_restores():
    outer = push_log_context(request_id="req-1")
    inner = push_log_context(request_id="req-2", session_id="s-1")
    assert get_log_context() == {"request_id": "req-2", "session_id": "s-1"}

    pop_log_context(inner)
    assert get_log_context() == {"request_id": "req-1"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    """Test that the context is restored even when the block raises."""
    with pytest.raises(ValueError):
        with log_context(request_id="req-1"):
            assert get_log_context() == {"request_id": "req-1"}
            raise ValueError("boom")

    assert get_log_context() == {}


def test_nested_context_managers():
    with log_context(request_id="req-1"):
        with log_context(session_id="s-1"):
            assert get_log_context() == {"request_id": "req-1", "session_id": "s-1"}
        assert get_log_context() == {"request_id": "req-1"}


def test_get_returns_copy():
    """Test that callers cannot mutate the active context."""
    push_log_context(request_id="req-1")
    context = get_log_context()
    context["session_id"] = "tampered"

    assert get_log_context() == {"request_id": "req-1"}


def test_clear_context():
    push_log_context(request_id="req-1", session_id="s-1")
    clear_log_context()
    assert get_log_context() == {}


def test_tasks_do_not_share_context():
    """Test that concurrent request tasks each see only their own fields."""

    async def handle(request_id):
        with log_context(request_id=request_id):
            await asyncio.sleep(0)
            return get_log_context()["request_id"]

    async def main():
        return await asyncio.gather(handle("a"), handle("b"), handle("c"))

    assert asyncio.run(main()) == ["a", "b", "c"]
    assert get_log_context() == {}


def test_new_request_id():
    first, second = new_request_id(), new_request_id()

    assert len(first) == 12
    assert first != second
    int(first, 16)


def test_current_request_id():
    assert current_request_id() is None
    with log_context(request_id="req-7") as fields:
        assert fields == {"request_id": "req-7"}
        assert current_request_id() == "req-7"
    assert current_request_id() is None
