from __future__ import annotations

import logging

import pytest

from rngfork.config import RegistryConfig
from rngfork.derive import derive_seed
from rngfork.registry import ForkRegistry
from rngfork.stream import Stream


def test_fork_returns_same_object() -> None:
    registry = ForkRegistry(1337, owner="terrain")
    stream = registry.fork("starfield")

    assert registry.fork("starfield") is stream
    assert stream.origin_seed == derive_seed(registry.seed, "starfield")
    assert "starfield" in registry
    assert len(registry) == 1
    with pytest.raises(ValueError):
        registry.fork("")


def test_forks_do_not_perturb_each_other() -> None:
    solo = ForkRegistry(99)
    expected = [solo.fork("belt").float() for _ in range(5)]

    mixed = ForkRegistry(99)
    belt = mixed.fork("belt")
    other = mixed.fork("starfield")
    observed = []
    for _ in range(5):
        other.float()
        observed.append(belt.float())
        other.int(0, 10)

    assert observed == expected


def test_seed_1337_scenario() -> None:
    registry = ForkRegistry(1337)
    fork_a = registry.fork("a")
    sequence = [fork_a.float() for _ in range(3)]

    registry.checkpoint()
    fork_b = registry.fork("b")
    for _ in range(5):
        fork_b.float()

    assert registry.replay("a") is True
    assert [fork_a.float() for _ in range(3)] == sequence

    fresh = ForkRegistry(1337)
    assert [fresh.fork("a").float() for _ in range(3)] == sequence


@pytest.mark.parametrize("seed,n,m", [(1, 0, 4), (1337, 3, 5), ("belt", 25, 12), (2**31 + 9, 100, 1)])
def test_replay_from_current_state(seed: object, n: int, m: int) -> None:
    registry = ForkRegistry(seed)
    stream = registry.fork("fragments")
    for _ in range(n):
        stream.draw()

    registry.checkpoint(at_current_state=True)
    recorded = [stream.float() for _ in range(m)]
    registry.replay("fragments")

    assert [stream.float() for _ in range(m)] == recorded


def test_replay_without_checkpoint_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    registry = ForkRegistry(5)
    registry.checkpoint()
    late = registry.fork("late")
    late.float()
    state = late.state

    with caplog.at_level(logging.INFO, logger="rngfork.registry"):
        assert registry.replay("late") is False
        assert registry.replay("missing") is False

    assert late.state == state
    assert "no checkpoint" in caplog.text
    assert "unknown fork" in caplog.text


def test_replay_all_rewinds_checkpointed_forks_only() -> None:
    registry = ForkRegistry(2024)
    first = registry.fork("first")
    expected = [first.float() for _ in range(3)]
    registry.checkpoint()
    second = registry.fork("second")
    second.float()

    assert registry.replay_all() == ["first"]
    assert [first.float() for _ in range(3)] == expected


def test_replay_survives_parent_reseed() -> None:
    registry = ForkRegistry(10)
    belt = registry.fork("belt")
    expected = [belt.float() for _ in range(4)]
    registry.checkpoint()

    registry.reseed(11)
    assert registry.fork("belt") is belt
    registry.replay("belt")
    assert [belt.float() for _ in range(4)] == expected
    assert registry.fork("new").origin_seed == derive_seed(11, "new")


def test_reseed_refresh_rederives_in_place() -> None:
    registry = ForkRegistry(10)
    belt = registry.fork("belt")
    original_origin = belt.origin_seed
    belt.float()

    registry.reseed(11, refresh=True)

    assert registry.fork("belt") is belt
    assert belt.origin_seed == original_origin
    assert belt.state == derive_seed(11, "belt")
    assert registry.origin_seeds["belt"] == derive_seed(11, "belt")
    expected = [belt.float() for _ in range(3)]
    registry.replay("belt")
    assert [belt.float() for _ in range(3)] == expected
    reference = Stream(derive_seed(11, "belt"))
    assert expected == [reference.float() for _ in range(3)]


def test_capture_on_create_records_first_use() -> None:
    registry = ForkRegistry(8, config=RegistryConfig(capture_on_create=True))
    stream = registry.fork("ids")
    first = stream.uuid("scene")

    assert registry.origin_seeds == {"ids": stream.origin_seed}
    assert registry.replay("ids") is True
    assert stream.uuid("scene") == first


def test_child_registries_are_cached_and_distinct() -> None:
    registry = ForkRegistry(1337, owner="game")
    child = registry.child("menu")

    assert registry.child("menu") is child
    assert child.owner == "game/menu"
    assert child.seed != registry.fork("menu").origin_seed
    assert ForkRegistry(1337).child("menu").fork("stars").float() == child.fork("stars").float()


def test_describe_reports_forks() -> None:
    registry = ForkRegistry(3, owner="belt-system")
    registry.fork("belt").int(0, 5)
    registry.checkpoint()
    info = registry.describe()

    assert info["owner"] == "belt-system"
    assert info["forks"]["belt"]["calls"] == {"int": 1}
    assert info["forks"]["belt"]["replay_point"] == registry.fork("belt").origin_seed


def test_injected_logger_receives_diagnostics() -> None:
    class Recorder:
        def __init__(self) -> None:
            self.lines: list[tuple[str, str]] = []

        def info(self, msg: str, *args: object, **kwargs: object) -> None:
            self.lines.append(("info", msg % args))

        def warning(self, msg: str, *args: object, **kwargs: object) -> None:
            self.lines.append(("warning", msg % args))

        def error(self, msg: str, *args: object, **kwargs: object) -> None:
            self.lines.append(("error", msg % args))

    recorder = Recorder()
    registry = ForkRegistry(4, owner="audio", logger=recorder)
    registry.fork("x")
    registry.replay("x")

    assert recorder.lines == [("info", "[audio] fork 'x' has no checkpoint; replay skipped")]
