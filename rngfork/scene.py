"""Procedural scene assembled entirely from named registry forks."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import math

import numpy as np

from rngfork.config import SceneConfig
from rngfork.noise import fbm_noise
from rngfork.registry import ForkRegistry

SCENE_FORKS = ("starfield", "terrain", "belt", "fragments", "ids")


@dataclass(frozen=True)
class BeltSpawn:
    """One asteroid in the belt, in unit-disc coordinates."""

    uid: str
    x: float
    y: float
    radius: float
    ore: str
    fragments: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class SceneResult:
    """All deterministic outputs of one scene generation."""

    seed: int
    stars: np.ndarray
    terrain: np.ndarray
    belt: tuple[BeltSpawn, ...]

    def digest(self) -> str:
        h = hashlib.sha256()
        h.update(self.seed.to_bytes(4, "big"))
        h.update(np.ascontiguousarray(self.stars).tobytes())
        h.update(np.ascontiguousarray(self.terrain).tobytes())
        for spawn in self.belt:
            h.update(repr(spawn).encode("utf-8"))
        return h.hexdigest()


def generate_starfield(registry: ForkRegistry, count: int) -> np.ndarray:
    """Return `count` stars as rows of (x, y, brightness), all in [0, 1)."""

    rng = registry.fork("starfield").generator()
    positions = rng.random((count, 2))
    brightness = rng.power(3.0, size=(count, 1))
    return np.hstack((positions, brightness)).astype(np.float32)


def generate_terrain(registry: ForkRegistry, width: int, height: int, cfg: SceneConfig) -> np.ndarray:
    return fbm_noise(
        width,
        height,
        registry.fork("terrain"),
        base_res=cfg.terrain_base_res,
        octaves=cfg.terrain_octaves,
    )


def generate_belt(registry: ForkRegistry, cfg: SceneConfig) -> tuple[BeltSpawn, ...]:
    belt = registry.fork("belt")
    fragments = registry.fork("fragments")
    ids = registry.fork("ids")

    spawns: list[BeltSpawn] = []
    for _ in range(cfg.belt_count):
        angle = belt.range(0.0, 2.0 * math.pi)
        distance = belt.range(cfg.belt_inner_radius, cfg.belt_outer_radius)
        radius = belt.range(0.01, 0.04)
        ore = belt.weighted_pick(cfg.ore_weights)
        pieces = tuple(
            (fragments.centered(cfg.fragment_spread), fragments.centered(cfg.fragment_spread))
            for _ in range(fragments.int(cfg.fragment_min, cfg.fragment_max))
        )
        spawns.append(
            BeltSpawn(
                uid=ids.uuid(cfg.id_namespace),
                x=distance * math.cos(angle),
                y=distance * math.sin(angle),
                radius=radius,
                ore=ore,
                fragments=pieces,
            )
        )
    return tuple(spawns)


def generate_scene(
    registry: ForkRegistry,
    width: int,
    height: int,
    *,
    config: SceneConfig | None = None,
) -> SceneResult:
    """Generate starfield, terrain, and belt from independent forks of `registry`."""

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    cfg = config or SceneConfig()
    return SceneResult(
        seed=registry.seed,
        stars=generate_starfield(registry, cfg.star_count),
        terrain=generate_terrain(registry, width, height, cfg),
        belt=generate_belt(registry, cfg),
    )


def rasterize_stars(stars: np.ndarray, width: int, height: int) -> np.ndarray:
    """Plot stars into an 8-bit image; overlapping stars keep the brightest."""

    image = np.zeros((height, width), dtype=np.uint8)
    if stars.size == 0:
        return image
    xs = np.clip((stars[:, 0] * width).astype(np.int32), 0, width - 1)
    ys = np.clip((stars[:, 1] * height).astype(np.int32), 0, height - 1)
    values = np.round(stars[:, 2] * 255.0).astype(np.uint8)
    np.maximum.at(image, (ys, xs), values)
    return image
