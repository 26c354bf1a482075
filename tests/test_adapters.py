from __future__ import annotations

import types
import uuid

from rngfork.adapters import IdentifierAdapter, namespaced_factory, uuid4_factory
from rngfork.registry import ForkRegistry


def _fake_library() -> types.SimpleNamespace:
    return types.SimpleNamespace(generateUUID=lambda: "ambient-id")


def test_uuid4_adapter_is_deterministic_and_restores() -> None:
    original = uuid.uuid4

    with IdentifierAdapter(uuid, "uuid4", uuid4_factory(ForkRegistry(1337).fork("ids"))):
        first = [uuid.uuid4() for _ in range(3)]
    assert uuid.uuid4 is original

    with IdentifierAdapter(uuid, "uuid4", uuid4_factory(ForkRegistry(1337).fork("ids"))):
        second = [uuid.uuid4() for _ in range(3)]

    assert first == second
    assert all(value.version == 4 for value in first)
    assert len(set(first)) == 3


def test_namespaced_adapter_teardown_is_idempotent() -> None:
    library = _fake_library()
    original = library.generateUUID
    stream = ForkRegistry(7).fork("menu.three-uuid")
    adapter = IdentifierAdapter(library, "generateUUID", namespaced_factory(stream, "menu"))

    adapter.install()
    adapter.install()
    ident = library.generateUUID()
    assert ident.startswith("menu-")

    adapter.teardown()
    adapter.teardown()
    assert library.generateUUID is original
    assert library.generateUUID() == "ambient-id"
