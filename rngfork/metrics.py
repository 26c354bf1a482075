"""Statistical checks for stream output quality."""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


@dataclass(frozen=True)
class UniformityMetrics:
    """Chi-square goodness of fit of integer samples against a uniform span."""

    sample_count: int
    bins: int
    chi_square: float
    degrees_of_freedom: int
    min_observed: int
    max_observed: int

    def critical_value(self, z: float = 4.0) -> float:
        """Wilson-Hilferty approximation of the chi-square quantile at `z` sigmas."""

        k = float(self.degrees_of_freedom)
        if k <= 0:
            return 0.0
        term = 2.0 / (9.0 * k)
        return k * (1.0 - term + z * math.sqrt(term)) ** 3

    def within_tolerance(self, z: float = 4.0) -> bool:
        return self.chi_square <= self.critical_value(z)


def chi_square_uniformity(
    samples: np.ndarray,
    low: int,
    high: int,
    bins: int | None = None,
) -> UniformityMetrics:
    """Compare integer `samples` in [low, high] against a uniform distribution.

    By default every integer in the span is its own bin. With `bins`, the span
    is split into that many contiguous buckets and each bucket's expected count
    is proportional to the number of integers it covers.
    """

    if high < low:
        raise ValueError("high must be >= low")
    values = np.asarray(samples, dtype=np.int64)
    if values.ndim != 1 or values.size == 0:
        raise ValueError("samples must be a non-empty 1D array")
    if values.min() < low or values.max() > high:
        raise ValueError("samples fall outside [low, high]")

    span = high - low + 1
    if bins is None:
        bins = span
    if not 1 <= bins <= span:
        raise ValueError("bins must be in [1, high - low + 1]")
    edges = [-(-(b * span) // bins) for b in range(bins + 1)]
    widths = np.diff(np.asarray(edges, dtype=np.float64))
    offsets = values - low
    if bins == span:
        index = offsets
    else:
        index = np.searchsorted(np.asarray(edges[1:-1], dtype=np.int64), offsets, side="right")
    counts = np.bincount(index, minlength=bins).astype(np.float64)
    expected = values.size * widths / span
    chi_square = float(np.sum((counts - expected) ** 2) / expected)
    return UniformityMetrics(
        sample_count=int(values.size),
        bins=int(bins),
        chi_square=chi_square,
        degrees_of_freedom=int(bins - 1),
        min_observed=int(counts.min()),
        max_observed=int(counts.max()),
    )


def bit_agreement(seeds_a: np.ndarray, seeds_b: np.ndarray, *, bits: int = 31) -> np.ndarray:
    """Per-bit fraction of pairs whose bits agree; about 0.5 for unrelated seeds."""

    a = np.asarray(seeds_a, dtype=np.int64)
    b = np.asarray(seeds_b, dtype=np.int64)
    if a.shape != b.shape or a.ndim != 1:
        raise ValueError("seed arrays must be 1D and equally sized")
    shifts = np.arange(bits, dtype=np.int64)
    same = ((a[:, None] >> shifts) & 1) == ((b[:, None] >> shifts) & 1)
    return same.mean(axis=0)
