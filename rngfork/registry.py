"""Per-owner registries of named, replayable random forks."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from rngfork.config import RegistryConfig
from rngfork.derive import derive_seed
from rngfork.seed import SeedInput, normalize_seed
from rngfork.source import DiagnosticLogger
from rngfork.stream import Stream

_CHILD_PREFIX = "registry:"


class ForkRegistry:
    """Lazily derived named streams with checkpoint/replay.

    A fork's replay point is the state it had at first use, recorded into the
    replay table by `checkpoint()`. Forks created after the last checkpoint
    have no replay point. Replay rewinds to the stored value rather than
    re-deriving from the root seed, so it survives `reseed()`.
    """

    def __init__(
        self,
        seed: SeedInput = None,
        *,
        owner: str = "root",
        logger: DiagnosticLogger | None = None,
        config: RegistryConfig | None = None,
    ) -> None:
        self.owner = owner
        self.config = config or RegistryConfig()
        self._logger = logger or logging.getLogger(__name__)
        self._seed = normalize_seed(seed)
        self._root = Stream(self._seed, label=owner)
        self._forks: dict[str, Stream] = {}
        self._base_seeds: dict[str, int] = {}
        self._origin_seeds: dict[str, int] = {}
        self._children: dict[str, ForkRegistry] = {}

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def root(self) -> Stream:
        return self._root

    @property
    def origin_seeds(self) -> dict[str, int]:
        return dict(self._origin_seeds)

    def __contains__(self, label: object) -> bool:
        return label in self._forks

    def __len__(self) -> int:
        return len(self._forks)

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels())

    def labels(self) -> list[str]:
        return sorted(self._forks)

    def fork(self, label: str) -> Stream:
        """Return the stream for `label`, deriving it from the root seed on first use."""

        if not label:
            raise ValueError("fork label must be non-empty")
        stream = self._forks.get(label)
        if stream is None:
            stream = Stream(derive_seed(self._seed, label), label=label)
            self._forks[label] = stream
            self._base_seeds[label] = stream.origin_seed
            if self.config.capture_on_create:
                self._origin_seeds[label] = stream.origin_seed
        return stream

    def child(self, label: str) -> "ForkRegistry":
        """Return a nested registry whose root seed is derived from this one."""

        if not label:
            raise ValueError("child label must be non-empty")
        registry = self._children.get(label)
        if registry is None:
            registry = ForkRegistry(
                derive_seed(self._seed, _CHILD_PREFIX + label),
                owner=f"{self.owner}/{label}",
                logger=self._logger,
                config=self.config,
            )
            self._children[label] = registry
        return registry

    def checkpoint(self, *, at_current_state: bool = False) -> dict[str, int]:
        """Record a replay point for every known fork.

        By default the replay point is the fork's first-use state; with
        `at_current_state` it is wherever the fork currently is.
        """

        for label, stream in self._forks.items():
            self._origin_seeds[label] = stream.state if at_current_state else self._base_seeds[label]
        return dict(self._origin_seeds)

    def replay(self, label: str) -> bool:
        """Rewind `label` to its replay point. Returns False when there is none."""

        stream = self._forks.get(label)
        if stream is None:
            self._logger.warning("[%s] replay of unknown fork %r ignored", self.owner, label)
            return False
        stored = self._origin_seeds.get(label)
        if stored is None:
            self._logger.info("[%s] fork %r has no checkpoint; replay skipped", self.owner, label)
            return False
        stream.reset(stored)
        return True

    def replay_all(self) -> list[str]:
        """Replay every known fork; returns the labels that were rewound."""

        return [label for label in self.labels() if self.replay(label)]

    def reseed(self, seed: SeedInput, *, refresh: bool = False) -> int:
        """Change the root seed.

        Without `refresh`, existing forks and replay points are left alone and
        only forks created afterwards see the new seed. With `refresh`, every
        fork is rewound to the seed derived from the new root and checkpointed.
        """

        self._seed = normalize_seed(seed)
        self._root = Stream(self._seed, label=self.owner)
        self._children.clear()
        if refresh:
            for label, stream in self._forks.items():
                self._base_seeds[label] = stream.reset(derive_seed(self._seed, label))
            self.checkpoint()
        self._logger.info("[%s] reseeded to %d (refresh=%s)", self.owner, self._seed, refresh)
        return self._seed

    def describe(self) -> dict[str, Any]:
        """Diagnostic view of the registry."""

        return {
            "owner": self.owner,
            "seed": self._seed,
            "forks": {
                label: {
                    "origin_seed": stream.origin_seed,
                    "state": stream.state,
                    "replay_point": self._origin_seeds.get(label),
                    "calls": dict(stream.calls),
                }
                for label, stream in sorted(self._forks.items())
            },
            "children": sorted(self._children),
        }
