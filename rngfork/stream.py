"""Deterministic Lehmer random streams."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import math
import operator
from typing import Iterable, Mapping, Sequence, TypeVar

import numpy as np

from rngfork.config import MODULUS, MULTIPLIER
from rngfork.derive import derive_seed
from rngfork.errors import EmptyInputError, InvalidRangeError
from rngfork.seed import SeedInput, normalize_seed
from rngfork.source import RandomSource

T = TypeVar("T")

# Number of distinct values `draw()` can return: states 1 .. MODULUS - 1.
_DRAW_SPAN = MODULUS - 1


@dataclass(frozen=True)
class StreamSnapshot:
    """Within-session capture of a stream's position."""

    label: str
    origin_seed: int
    state: int
    calls: tuple[tuple[str, int], ...]


class Stream(RandomSource):
    """Park-Miller minimal standard generator: state := state * 16807 mod (2**31 - 1).

    Two streams built from the same seed return identical values for identical
    call sequences; `state` alone determines everything that follows.
    """

    def __init__(self, seed: SeedInput = None, *, label: str = "root") -> None:
        self._origin_seed = normalize_seed(seed)
        self._state = self._origin_seed
        self._label = str(label)
        self.calls: Counter[str] = Counter()

    @property
    def state(self) -> int:
        return self._state

    @property
    def origin_seed(self) -> int:
        return self._origin_seed

    @property
    def label(self) -> str:
        return self._label

    def __repr__(self) -> str:
        return f"Stream(label={self._label!r}, origin_seed={self._origin_seed}, state={self._state})"

    def draw(self) -> int:
        """Advance the state and return it as a raw value in [1, 2**31 - 2]."""

        self._state = (self._state * MULTIPLIER) % MODULUS
        return self._state

    def _below(self, span: int) -> int:
        # Exact integer in [0, span); wide spans consume several draws.
        value = 0
        scale = 1
        while scale < span:
            value = value * _DRAW_SPAN + (self.draw() - 1)
            scale *= _DRAW_SPAN
        return value * span // scale

    def float(self) -> float:
        """Return a float in [0, 1)."""

        self.calls["float"] += 1
        return (self.draw() - 1) / _DRAW_SPAN

    def range(self, min_value: float, max_value: float) -> float:
        """Return a float in [min_value, max_value)."""

        self.calls["range"] += 1
        if min_value > max_value:
            raise InvalidRangeError(f"range({min_value}, {max_value}): min exceeds max")
        if min_value == max_value:
            return min_value
        return min_value + (max_value - min_value) * ((self.draw() - 1) / _DRAW_SPAN)

    def int(self, min_value: int, max_value: int) -> int:
        """Return an integer in [min_value, max_value], both ends inclusive."""

        self.calls["int"] += 1
        low = operator.index(min_value)
        high = operator.index(max_value)
        if low > high:
            raise InvalidRangeError(f"int({low}, {high}): min exceeds max")
        return low + self._below(high - low + 1)

    def chance(self, probability: float) -> bool:
        """Return True with `probability`, clamped to [0, 1]."""

        self.calls["chance"] += 1
        if not probability > 0.0:
            return False
        if probability >= 1.0:
            return True
        return (self.draw() - 1) / _DRAW_SPAN < probability

    def centered(self, span: float = 1.0) -> float:
        """Return a float in [-span / 2, span / 2)."""

        self.calls["centered"] += 1
        return ((self.draw() - 1) / _DRAW_SPAN - 0.5) * span

    def pick(self, items: Sequence[T]) -> T:
        self.calls["pick"] += 1
        if len(items) == 0:
            raise EmptyInputError("pick() from an empty sequence")
        return items[self._below(len(items))]

    def weighted_pick(self, weights: Mapping[T, float] | Iterable[tuple[T, float]]) -> T:
        """Pick a value with probability proportional to its weight.

        Non-positive weights are skipped.
        """

        self.calls["weighted_pick"] += 1
        entries = list(weights.items()) if isinstance(weights, Mapping) else list(weights)
        usable = [(value, float(weight)) for value, weight in entries if float(weight) > 0.0]
        total = math.fsum(weight for _, weight in usable)
        if not usable or not math.isfinite(total):
            raise EmptyInputError("weighted_pick() needs at least one positive finite weight")

        threshold = total * ((self.draw() - 1) / _DRAW_SPAN)
        for value, weight in usable:
            if threshold < weight:
                return value
            threshold -= weight
        return usable[-1][0]

    def shuffle(self, items: Iterable[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy of `items`."""

        self.calls["shuffle"] += 1
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self._below(i + 1)
            out[i], out[j] = out[j], out[i]
        return out

    def uuid(self, namespace: str = "global") -> str:
        """Return a namespaced identifier built from the next two draws."""

        self.calls["uuid"] += 1
        part_a = self.draw()
        part_b = self.draw()
        return f"{namespace}-{part_a:08x}-{part_b:08x}"

    def floats(self, count: int) -> np.ndarray:
        """Return `count` consecutive float draws as a float64 array."""

        self.calls["floats"] += 1
        if count < 0:
            raise ValueError("count must be >= 0")
        return np.fromiter(
            ((self.draw() - 1) / _DRAW_SPAN for _ in range(count)),
            dtype=np.float64,
            count=count,
        )

    def generator(self) -> np.random.Generator:
        """Consume one draw and seed a numpy generator from it for bulk sampling."""

        self.calls["generator"] += 1
        return np.random.Generator(np.random.PCG64(self.draw()))

    def fork(self, key: str) -> "Stream":
        """Derive a child stream from this stream's origin seed and label without touching its state."""

        if not key:
            raise ValueError("fork key must be non-empty")
        child_label = f"{self._label}/{key}"
        return Stream(derive_seed(self._origin_seed, child_label), label=child_label)

    def reset(self, seed: SeedInput = None) -> int:
        """Rewind to the origin seed, or jump to `seed`. The origin seed never changes."""

        self._state = self._origin_seed if seed is None else normalize_seed(seed)
        return self._state

    def snapshot(self) -> StreamSnapshot:
        return StreamSnapshot(
            label=self._label,
            origin_seed=self._origin_seed,
            state=self._state,
            calls=tuple(sorted(self.calls.items())),
        )

    def restore(self, snapshot: StreamSnapshot) -> None:
        self._state = normalize_seed(snapshot.state)
        self.calls = Counter(dict(snapshot.calls))
