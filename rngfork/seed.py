"""Seed parsing, canonicalization, and hashing utilities."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import numbers
import operator
import re

from rngfork.config import DEFAULT_SEED_LABEL, FALLBACK_SEED, MODULUS
from rngfork.derive import hash_bytes, hash_label
from rngfork.errors import InvalidSeedError

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?\d+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

SeedInput = int | float | str | bytes | None


@dataclass(frozen=True)
class ParsedSeed:
    """Validated seed text and the 31-bit seed it maps to."""

    original: str
    canonical: str
    seed: int
    hashed: bool


def validate_seed(value: int | float) -> int:
    """Return `value` reduced into the generator's state space.

    Raises InvalidSeedError for non-finite values and for values congruent to 0.
    """

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidSeedError(f"seed must be finite, got {value!r}")
        value = int(value)
    reduced = int(value) % MODULUS
    if reduced == 0:
        raise InvalidSeedError(f"seed {value!r} is a fixed point of the generator")
    return reduced


def normalize_seed(value: SeedInput) -> int:
    """Map any accepted seed input to a non-zero 31-bit seed.

    Integers (numpy integers included) are reduced modulo 2**31 - 1, strings
    and raw bytes are hashed, and `None` hashes the default seed label.
    Invalid numeric seeds are remapped to FALLBACK_SEED.
    """

    if value is None:
        return hash_label(DEFAULT_SEED_LABEL)
    if isinstance(value, bytes):
        return hash_bytes(value)
    if isinstance(value, str):
        return parse_seed(value).seed
    if isinstance(value, numbers.Real):
        number = operator.index(value) if isinstance(value, numbers.Integral) else float(value)
        try:
            return validate_seed(number)
        except InvalidSeedError as exc:
            logger.info("Remapping seed to fallback: %s", exc)
            return FALLBACK_SEED
    raise TypeError(f"Unsupported seed type: {type(value).__name__}")


def parse_seed(seed_text: str) -> ParsedSeed:
    """Parse `seed_text` as a decimal or hex integer, hashing any other text."""

    raw = seed_text.strip()
    if not raw:
        return ParsedSeed(seed_text, DEFAULT_SEED_LABEL, hash_label(DEFAULT_SEED_LABEL), True)

    if _INT_RE.fullmatch(raw) or _HEX_RE.fullmatch(raw):
        number = int(raw, 0) if _HEX_RE.fullmatch(raw) else int(raw)
        return ParsedSeed(seed_text, str(number), normalize_seed(number), False)

    return ParsedSeed(seed_text, raw, hash_label(raw), True)
