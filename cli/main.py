"""CLI entry point for inspecting deterministic random streams."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
import platform
import time

import numpy as np
from rngfork.config import RngConfig
from rngfork.guard import enable_after_bootstrap, installed_guard
from rngfork.io import float_preview_u8, resolve_output_dir, write_json, write_png_u8
from rngfork.registry import ForkRegistry
from rngfork.scene import SCENE_FORKS, generate_scene, rasterize_stars
from rngfork.seed import parse_seed

logger = logging.getLogger("rngfork.cli")

DEFAULT_SCENE_WIDTH = 256
DEFAULT_SCENE_HEIGHT = 128


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic forkable random streams")
    parser.add_argument("--seed", default=None, help="Root seed: integer, hex (0x..), or any text")
    parser.add_argument(
        "--label",
        action="append",
        default=None,
        help="Fork label to sample (repeatable, default: a)",
    )
    parser.add_argument("--draws", type=int, default=3, help="Floats drawn per fork")
    parser.add_argument("--replay", action="store_true", help="Checkpoint, replay, and verify every fork")
    parser.add_argument("--scene", action="store_true", help="Generate the procedural scene and print its digest")
    parser.add_argument("--out", default=None, help="Write scene images and metadata under this directory")
    parser.add_argument("--w", type=int, default=DEFAULT_SCENE_WIDTH, help="Scene width in pixels")
    parser.add_argument("--h", type=int, default=DEFAULT_SCENE_HEIGHT, help="Scene height in pixels")
    parser.add_argument("--guard", action="store_true", help="Warn about ambient random use while running")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Diagnostic log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.draws < 0:
        parser.error("--draws must be >= 0")
    if args.w <= 0 or args.h <= 0:
        parser.error("--w and --h must be positive")

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    parsed_seed = parse_seed(args.seed if args.seed is not None else "")
    config = RngConfig()
    registry = ForkRegistry(parsed_seed.seed, owner="cli", config=config.registry)
    labels = args.label or ["a"]

    guard = enable_after_bootstrap(config=config.guard) if args.guard else None
    try:
        print(f"Seed: {parsed_seed.canonical} -> {parsed_seed.seed}")
        samples = {label: _draw(registry, label, args.draws) for label in labels}
        for label, values in samples.items():
            print(f"{label}: {_format(values)}")

        exit_code = 0
        if args.replay:
            registry.checkpoint()
            registry.replay_all()
            for label in labels:
                again = _draw(registry, label, args.draws)
                status = "match" if again == samples[label] else "MISMATCH"
                print(f"Replay {label}: {status}")
                if again != samples[label]:
                    logger.error("Replay of fork %r diverged", label)
                    exit_code = 1

        if args.scene or args.out:
            _run_scene(args, parsed_seed.canonical, registry, config)

        active = installed_guard()
        if active is not None:
            print(f"Ambient random calls reported: {active.total_warnings}")
    finally:
        if guard is not None:
            guard.restore()
    return exit_code


def _draw(registry: ForkRegistry, label: str, count: int) -> list[float]:
    stream = registry.fork(label)
    return [stream.float() for _ in range(count)]


def _format(values: list[float]) -> str:
    return ", ".join(f"{value:.12f}" for value in values)


def _run_scene(args: argparse.Namespace, canonical: str, registry: ForkRegistry, config: RngConfig) -> None:
    scene_registry = registry.child("scene")
    generation_start = time.perf_counter()
    result = generate_scene(scene_registry, args.w, args.h, config=config.scene)
    generation_seconds = time.perf_counter() - generation_start

    digest = result.digest()
    print(f"Scene digest: {digest}")
    print(f"Belt: {len(result.belt)} spawns; stars: {result.stars.shape[0]}")

    if not args.out:
        return

    out_dir = resolve_output_dir(args.out, canonical, overwrite=args.overwrite)
    write_png_u8(out_dir / "terrain.png", float_preview_u8(result.terrain))
    write_png_u8(out_dir / "starfield.png", rasterize_stars(result.stars, args.w, args.h))

    if args.json:
        deterministic_meta = {
            "canonical_seed": canonical,
            "seed": result.seed,
            "width": args.w,
            "height": args.h,
            "digest": digest,
            "config": config.to_dict(),
            "forks": {
                label: scene_registry.fork(label).origin_seed for label in SCENE_FORKS
            },
            "belt": [
                {"uid": spawn.uid, "ore": spawn.ore, "fragments": len(spawn.fragments)}
                for spawn in result.belt
            ],
        }
        meta = {
            **deterministic_meta,
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "generation_seconds": generation_seconds,
            "python_version": platform.python_version(),
            "numpy_version": np.__version__,
        }
        write_json(out_dir / "deterministic_meta.json", deterministic_meta)
        write_json(out_dir / "meta.json", meta)

    print(f"Wrote scene: {out_dir}")


if __name__ == "__main__":
    raise SystemExit(main())
