from __future__ import annotations

import logging
import random

import numpy as np
import pytest

from rngfork.config import GuardConfig
from rngfork.errors import DriftWarning
from rngfork.guard import NonDeterminismGuard, enable_after_bootstrap, install_guard, installed_guard


@pytest.fixture(autouse=True)
def _restore_guard():
    yield
    guard = installed_guard()
    if guard is not None:
        guard.restore()


def _ambient_call() -> float:
    return random.random()


def test_install_is_idempotent_and_restore_unwraps() -> None:
    original_random = random.random
    original_np_rand = np.random.rand

    handles = install_guard()
    assert random.random is not original_random
    assert np.random.rand is not original_np_rand
    assert install_guard() is handles

    handles.restore()
    handles.restore()
    assert random.random is original_random
    assert np.random.rand is original_np_rand
    assert installed_guard() is None


def test_inactive_guard_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    install_guard()
    with caplog.at_level(logging.WARNING, logger="rngfork.guard"):
        _ambient_call()
    assert "[RandomGuard]" not in caplog.text


def test_active_guard_logs_call_site(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="rngfork.guard"):
        handles = enable_after_bootstrap()
        _ambient_call()

    assert "warnings enabled (post-bootstrap)" in caplog.text
    assert "random.random() invoked after deterministic bootstrap" in caplog.text
    assert "_ambient_call" in caplog.text

    guard = installed_guard()
    assert guard is not None
    assert len(guard.events) == 1
    assert isinstance(guard.events[0], DriftWarning)
    assert guard.events[0].function == "random.random"

    handles.deactivate()
    caplog.clear()
    _ambient_call()
    assert "[RandomGuard]" not in caplog.text


def test_repeated_call_site_reported_once(caplog: pytest.LogCaptureFixture) -> None:
    enable_after_bootstrap()
    with caplog.at_level(logging.WARNING, logger="rngfork.guard"):
        for _ in range(5):
            random.randint(0, 10)

    assert caplog.text.count("random.randint() invoked") == 1


def test_warning_limit_suppresses_extra_sites(caplog: pytest.LogCaptureFixture) -> None:
    enable_after_bootstrap(config=GuardConfig(warning_limit=2, include_numpy=False))
    with caplog.at_level(logging.WARNING, logger="rngfork.guard"):
        random.random()
        random.uniform(0.0, 1.0)
        random.choice([1, 2, 3])
        random.gauss(0.0, 1.0)

    assert caplog.text.count("invoked after deterministic bootstrap") == 2
    assert caplog.text.count("Additional ambient random warnings suppressed") == 1


def test_guard_does_not_change_output() -> None:
    random.seed(1234)
    np.random.seed(1234)
    plain = [random.random() for _ in range(200)]
    plain_ints = [random.randint(0, 99) for _ in range(200)]
    plain_np = np.random.rand(50)

    enable_after_bootstrap(logger=logging.getLogger("test.guard.silent"))
    random.seed(1234)
    np.random.seed(1234)
    guarded = [random.random() for _ in range(200)]
    guarded_ints = [random.randint(0, 99) for _ in range(200)]
    guarded_np = np.random.rand(50)

    assert guarded == plain
    assert guarded_ints == plain_ints
    assert np.array_equal(guarded_np, plain_np)


def test_direct_instance_becomes_the_installed_guard() -> None:
    original_random = random.random
    direct = NonDeterminismGuard()
    direct.install()

    handles = install_guard()
    assert installed_guard() is direct
    assert handles is direct.handles()
    with pytest.raises(RuntimeError):
        NonDeterminismGuard().install()

    direct.restore()
    handles.restore()
    assert random.random is original_random
    assert installed_guard() is None


def test_restore_leaves_externally_replaced_functions(caplog: pytest.LogCaptureFixture) -> None:
    original_random = random.random
    handles = install_guard()

    def replacement() -> float:
        return 0.25

    random.random = replacement
    try:
        with caplog.at_level(logging.WARNING, logger="rngfork.guard"):
            handles.restore()

        assert random.random is replacement
        assert "random.random was replaced externally" in caplog.text
    finally:
        random.random = original_random
