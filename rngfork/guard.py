"""Runtime detection of ambient (unseeded) random number use.

Once deterministic bootstrap finishes, any call into the module-level
functions of `random` (or numpy's legacy global `numpy.random` functions)
bypasses the seeded streams and silently breaks reproducibility. The guard
wraps those functions with passthroughs that log each distinct call site while
active. Output is never altered and nothing is raised.

Lifecycle:
    handles = install_guard()
    handles.activate(reason="post-bootstrap")
    ...
    handles.restore()
"""

from __future__ import annotations

from dataclasses import dataclass
import functools
import logging
import random
import traceback
from types import ModuleType
from typing import Any, Callable

import numpy as np

from rngfork.config import GuardConfig
from rngfork.errors import DriftWarning
from rngfork.source import DiagnosticLogger

_PREFIX = "[RandomGuard]"


@dataclass(frozen=True)
class GuardHandles:
    """Controls returned by `install_guard`."""

    activate: Callable[..., None]
    deactivate: Callable[[], None]
    restore: Callable[[], None]


class NonDeterminismGuard:
    """Passthrough wrappers around ambient random functions."""

    def __init__(self, *, logger: DiagnosticLogger | None = None, config: GuardConfig | None = None) -> None:
        self.config = config or GuardConfig()
        self._logger = logger or logging.getLogger(__name__)
        self._originals: list[tuple[ModuleType, str, Any, Any]] = []
        self._seen_stacks: set[tuple[str, ...]] = set()
        self.enabled = False
        self.installed = False
        self.total_warnings = 0
        self.events: list[DriftWarning] = []
        self._handles = GuardHandles(activate=self.activate, deactivate=self.deactivate, restore=self.restore)

    def _targets(self) -> list[tuple[ModuleType, str]]:
        out = [(random, name) for name in self.config.random_functions]
        if self.config.include_numpy:
            out.extend((np.random, name) for name in self.config.numpy_functions)
        return [(module, name) for module, name in out if callable(getattr(module, name, None))]

    def install(self) -> None:
        """Wrap the ambient functions and register as the process-wide guard.

        Raises RuntimeError when a different guard is already installed.
        """

        global _INSTALLED
        if self.installed:
            return
        if _INSTALLED is not None and _INSTALLED is not self:
            raise RuntimeError("another NonDeterminismGuard is already installed")
        for module, name in self._targets():
            original = getattr(module, name)
            wrapper = self._wrap(f"{module.__name__}.{name}", original)
            self._originals.append((module, name, original, wrapper))
            setattr(module, name, wrapper)
        self.installed = True
        _INSTALLED = self

    def _wrap(self, qualname: str, original: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(original)
        def guarded(*args: Any, **kwargs: Any) -> Any:
            if self.enabled:
                self._report(qualname)
            return original(*args, **kwargs)

        return guarded

    def _call_site(self) -> tuple[str, ...]:
        # Drop the guard's own frames (_call_site, _report, guarded).
        frames = traceback.extract_stack()[:-3]
        trimmed = frames[-self.config.stack_depth :] if self.config.stack_depth > 0 else []
        return tuple(f"{frame.filename}:{frame.lineno} in {frame.name}" for frame in reversed(trimmed))

    def _report(self, qualname: str) -> None:
        stack = self._call_site()
        if stack in self._seen_stacks:
            return
        self._seen_stacks.add(stack)

        if self.total_warnings >= self.config.warning_limit:
            if self.total_warnings == self.config.warning_limit:
                self._logger.warning("%s Additional ambient random warnings suppressed.", _PREFIX)
            self.total_warnings += 1
            return

        self.total_warnings += 1
        event = DriftWarning(qualname, stack)
        self.events.append(event)
        context = "\n  ".join(stack)
        self._logger.warning(
            "%s %s Use a seeded stream fork instead.\n  %s",
            _PREFIX,
            event,
            context,
        )

    def activate(self, *, reason: str | None = None) -> None:
        self.enabled = True
        detail = f" ({reason})" if reason else ""
        self._logger.info("%s Ambient random warnings enabled%s.", _PREFIX, detail)

    def deactivate(self) -> None:
        self.enabled = False

    def restore(self) -> None:
        """Put back the original functions. Safe to call repeatedly."""

        global _INSTALLED
        for module, name, original, wrapper in reversed(self._originals):
            if getattr(module, name, None) is not wrapper:
                # Replaced by someone else since install; leave their value alone.
                self._logger.warning("%s %s.%s was replaced externally; not restored.", _PREFIX, module.__name__, name)
                continue
            setattr(module, name, original)
        self._originals.clear()
        self.enabled = False
        self.installed = False
        if _INSTALLED is self:
            _INSTALLED = None

    def handles(self) -> GuardHandles:
        return self._handles


_INSTALLED: NonDeterminismGuard | None = None


def installed_guard() -> NonDeterminismGuard | None:
    """Return the process-wide guard, if one is installed."""

    return _INSTALLED


def install_guard(
    *,
    logger: DiagnosticLogger | None = None,
    config: GuardConfig | None = None,
) -> GuardHandles:
    """Install the process-wide guard, or return the handles of the installed one."""

    if _INSTALLED is not None:
        return _INSTALLED.handles()
    guard = NonDeterminismGuard(logger=logger, config=config)
    guard.install()
    return guard.handles()


def enable_after_bootstrap(
    *,
    logger: DiagnosticLogger | None = None,
    config: GuardConfig | None = None,
) -> GuardHandles:
    """Install the guard and turn warnings on."""

    handles = install_guard(logger=logger, config=config)
    handles.activate(reason="post-bootstrap")
    return handles
