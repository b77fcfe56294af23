"""Shared fixtures for the tag command tests."""

from __future__ import annotations

import pytest

from extensions.tags.manage import TagManager
from extensions.tags.store import InMemoryTagStore
from tests.fakes import MODERATOR_PATTERN, FakeResolver, FakeResponder


@pytest.fixture
def store() -> InMemoryTagStore:
    return InMemoryTagStore()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def responder() -> FakeResponder:
    return FakeResponder()


@pytest.fixture
def manager(store: InMemoryTagStore, resolver: FakeResolver) -> TagManager:
    return TagManager(store, resolver, MODERATOR_PATTERN)
