"""Adapters that route third-party identifier generation through a stream."""

from __future__ import annotations

import logging
from typing import Any, Callable
import uuid as uuid_module

from rngfork.source import RandomSource

logger = logging.getLogger(__name__)

_UUID_MAX = (1 << 128) - 1


def uuid4_factory(source: RandomSource) -> Callable[[], uuid_module.UUID]:
    """Return a zero-argument callable producing version-4 UUIDs from `source`."""

    def generate() -> uuid_module.UUID:
        return uuid_module.UUID(int=source.int(0, _UUID_MAX), version=4)

    return generate


def namespaced_factory(source: RandomSource, namespace: str) -> Callable[[], str]:
    """Return a zero-argument callable producing `source.uuid(namespace)` strings."""

    def generate() -> str:
        return source.uuid(namespace)

    return generate


class IdentifierAdapter:
    """Temporarily replace `target.attribute` with a deterministic id generator.

    The original attribute is captured on `install()` and handed back on
    `teardown()`; nothing else about the target is inspected.

        with IdentifierAdapter(uuid, "uuid4", uuid4_factory(registry.fork("ids"))):
            ...
    """

    def __init__(self, target: Any, attribute: str, generator: Callable[..., Any]) -> None:
        self.target = target
        self.attribute = attribute
        self.generator = generator
        self._original: Any = None
        self.installed = False

    def install(self) -> "IdentifierAdapter":
        if self.installed:
            return self
        if not hasattr(self.target, self.attribute):
            raise AttributeError(f"{self.target!r} has no attribute {self.attribute!r}")
        self._original = getattr(self.target, self.attribute)
        setattr(self.target, self.attribute, self.generator)
        self.installed = True
        logger.debug("Routed %s through a deterministic generator", self.attribute)
        return self

    def teardown(self) -> None:
        """Restore the captured original. Safe to call repeatedly."""

        if not self.installed:
            return
        setattr(self.target, self.attribute, self._original)
        self._original = None
        self.installed = False

    def __enter__(self) -> "IdentifierAdapter":
        return self.install()

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()
