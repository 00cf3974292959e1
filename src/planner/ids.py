"""
Identifier providers for planning entries.

Every provider is a callable taking a seed string that describes the entry
being created (goal, sub-goal, date, sequence). Providers may ignore it.
"""

from __future__ import annotations

import uuid
from typing import Protocol

PLANNER_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "study-planner/planning-entry")


class IdProvider(Protocol):
    def __call__(self, seed: str) -> str: ...


class StableIdProvider:
    """
    Derives a UUIDv5 from the seed.

    The same schedule inputs always yield the same ids, which keeps
    regeneration idempotent.
    """

    def __init__(self, namespace: uuid.UUID = PLANNER_NAMESPACE):
        self.namespace = namespace

    def __call__(self, seed: str) -> str:
        return str(uuid.uuid5(self.namespace, seed))


class RandomIdProvider:
    """Fresh UUIDv4 on every call."""

    def __call__(self, seed: str) -> str:
        return str(uuid.uuid4())


class SequentialIdProvider:
    """Predictable ids (``entry-1``, ``entry-2``...) for tests and fixtures."""

    def __init__(self, prefix: str = "entry", start: int = 1):
        self.prefix = prefix
        self._next = start

    def __call__(self, seed: str) -> str:
        value = f"{self.prefix}-{self._next}"
        self._next += 1
        return value


def default_id_provider() -> IdProvider:
    return StableIdProvider()
