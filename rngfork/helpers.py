"""Named-fork helpers for modules that only hold a registry reference."""

from __future__ import annotations

from typing import Sequence, TypeVar

from rngfork.registry import ForkRegistry
from rngfork.stream import Stream

T = TypeVar("T")


class RandomHelpers:
    """Draw from named forks of `registry`.

    Without a registry, each name resolves to a fork of a private fallback
    registry seeded from `fallback_prefix`, so results stay deterministic.
    """

    def __init__(self, registry: ForkRegistry | None = None, *, fallback_prefix: str = "random-helper") -> None:
        self.registry = registry
        self.fallback_prefix = fallback_prefix
        self._fallback: ForkRegistry | None = None

    @property
    def uses_fallback(self) -> bool:
        return self.registry is None

    def _fallback_registry(self) -> ForkRegistry:
        if self._fallback is None:
            self._fallback = ForkRegistry(f"{self.fallback_prefix}:fallback-base", owner=self.fallback_prefix)
        return self._fallback

    def source(self, name: str = "base") -> Stream:
        if self.registry is not None:
            return self.registry.fork(name)
        return self._fallback_registry().fork(f"{self.fallback_prefix}:fallback:{name}")

    def float(self, name: str = "base") -> float:
        return self.source(name).float()

    def range(self, min_value: float, max_value: float, name: str = "base") -> float:
        return self.source(name).range(min_value, max_value)

    def int(self, min_value: int, max_value: int, name: str = "base") -> int:
        return self.source(name).int(min_value, max_value)

    def chance(self, probability: float, name: str = "base") -> bool:
        return self.source(name).chance(probability)

    def centered(self, span: float = 1.0, name: str = "base") -> float:
        return self.source(name).centered(span)

    def pick(self, items: Sequence[T], name: str = "base") -> T:
        return self.source(name).pick(items)
