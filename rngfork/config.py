"""Constants and configuration models for deterministic random streams."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


MODULUS = 2**31 - 1
MULTIPLIER = 16807

# Seeds congruent to 0 are a fixed point of the generator; they become this.
FALLBACK_SEED = 0x2545F491
DEFAULT_SEED_LABEL = "rngfork:default"


@dataclass(frozen=True)
class RegistryConfig:
    """Controls when fork replay points are captured."""

    capture_on_create: bool = False


@dataclass(frozen=True)
class GuardConfig:
    """Controls the ambient random guard."""

    warning_limit: int = 10
    stack_depth: int = 5
    include_numpy: bool = True
    random_functions: tuple[str, ...] = (
        "random",
        "randint",
        "randrange",
        "uniform",
        "choice",
        "choices",
        "shuffle",
        "sample",
        "gauss",
        "normalvariate",
        "getrandbits",
        "seed",
    )
    numpy_functions: tuple[str, ...] = (
        "random",
        "rand",
        "randn",
        "randint",
        "uniform",
        "normal",
        "choice",
        "shuffle",
        "permutation",
    )


@dataclass(frozen=True)
class SceneConfig:
    """Sizes and weights for the procedural scene."""

    star_count: int = 240
    belt_count: int = 16
    belt_inner_radius: float = 0.55
    belt_outer_radius: float = 0.85
    ore_weights: tuple[tuple[str, float], ...] = (
        ("common", 70.0),
        ("iron", 20.0),
        ("gold", 8.0),
        ("crystal", 2.0),
    )
    fragment_min: int = 2
    fragment_max: int = 6
    fragment_spread: float = 0.08
    terrain_base_res: int = 2
    terrain_octaves: int = 4
    id_namespace: str = "scene"


@dataclass(frozen=True)
class RngConfig:
    """Primary configuration."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    guard: GuardConfig = field(default_factory=GuardConfig)
    scene: SceneConfig = field(default_factory=SceneConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
