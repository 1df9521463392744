"""Test helper utilities for jobchat tests."""

from .factories import FakeGenerator, make_posting

__all__ = ["FakeGenerator", "make_posting"]
