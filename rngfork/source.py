"""Capability interfaces shared by streams and their consumers."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Everything a consumer may ask of a deterministic random stream."""

    def float(self) -> float: ...

    def range(self, min_value: float, max_value: float) -> float: ...

    def int(self, min_value: int, max_value: int) -> int: ...

    def chance(self, probability: float) -> bool: ...

    def pick(self, items: Sequence[T]) -> T: ...

    def uuid(self, namespace: str = "global") -> str: ...


class DiagnosticLogger(Protocol):
    """Minimal logger surface; `logging.Logger` satisfies it."""

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
