"""Deterministic child seed derivation."""

from __future__ import annotations

from functools import lru_cache

from rngfork.config import FALLBACK_SEED, MODULUS

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF


def _fnv1a(data: bytes, basis: int = _FNV_OFFSET) -> int:
    h = basis
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK32
    return h


def _fmix32(h: int) -> int:
    # murmur3 finalizer; spreads single-bit input changes over the word.
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return h


def _fold31(h: int) -> int:
    folded = h % MODULUS
    return folded if folded else FALLBACK_SEED


def hash_bytes(data: bytes) -> int:
    """Hash raw bytes into a non-zero 31-bit seed without a parent salt."""

    return _fold31(_fmix32(_fnv1a(bytes(data))))


def hash_label(text: str) -> int:
    """Hash `text` into a non-zero 31-bit seed without a parent salt."""

    return hash_bytes(text.encode("utf-8"))


@lru_cache(maxsize=4096)
def derive_seed(parent_seed: int, label: str) -> int:
    """Derive a deterministic non-zero 31-bit child seed from a parent seed and label."""

    salt = (int(parent_seed) & _MASK32).to_bytes(4, byteorder="big", signed=False)
    return _fold31(_fmix32(_fnv1a(salt + label.encode("utf-8"))))
