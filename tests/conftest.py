"""Shared fixtures: a fixed clock and a scripted stand-in for the language model."""

from datetime import datetime, timezone

import pytest

from stampgen.resolver import DateResolver

# Wednesday, 2025-03-05 18:30:15 UTC (13:30:15 in New York)
FIXED_NOW = datetime(2025, 3, 5, 18, 30, 15, tzinfo=timezone.utc)


class FakeFallback:
    """Records prompts and answers with a canned reply (or raises a canned error)."""

    def __init__(self, reply="2025-03-26 00:00:00", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_fallback():
    return FakeFallback


@pytest.fixture
def fallback():
    return FakeFallback()


@pytest.fixture
def resolver(fallback, fixed_clock):
    return DateResolver(fallback=fallback, clock=fixed_clock)
