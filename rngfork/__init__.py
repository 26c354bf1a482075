"""Deterministic, forkable random streams."""

from .config import FALLBACK_SEED, MODULUS, MULTIPLIER, GuardConfig, RegistryConfig, RngConfig, SceneConfig
from .derive import derive_seed, hash_bytes, hash_label
from .errors import DriftWarning, EmptyInputError, InvalidRangeError, InvalidSeedError, RngError
from .guard import GuardHandles, NonDeterminismGuard, enable_after_bootstrap, install_guard
from .registry import ForkRegistry
from .source import RandomSource
from .stream import Stream, StreamSnapshot

__all__ = [
    "FALLBACK_SEED",
    "MODULUS",
    "MULTIPLIER",
    "DriftWarning",
    "EmptyInputError",
    "ForkRegistry",
    "GuardConfig",
    "GuardHandles",
    "InvalidRangeError",
    "InvalidSeedError",
    "NonDeterminismGuard",
    "RandomSource",
    "RegistryConfig",
    "RngConfig",
    "RngError",
    "SceneConfig",
    "Stream",
    "StreamSnapshot",
    "derive_seed",
    "enable_after_bootstrap",
    "hash_bytes",
    "hash_label",
    "install_guard",
]
