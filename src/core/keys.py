# src/core/keys.py — v1
"""Request identity: canonical lookup keys, request ids and sampling seeds.

Two inputs that differ only by case or surrounding whitespace share one key,
one id and one seed per purpose.
"""

from __future__ import annotations

import hashlib

KEY_SEPARATOR = "::"

_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619


def normalize_text(value: str | None) -> str:
    """Trim a free-text field; None becomes an empty string."""
    return (value or "").strip()


def request_key(city: str | None, sector: str | None) -> str:
    """Canonical lookup key: ``lower(trim(city))::lower(trim(sector))``."""
    return (
        f"{normalize_text(city).lower()}{KEY_SEPARATOR}"
        f"{normalize_text(sector).lower()}"
    )


def request_id(key: str) -> str:
    """Deterministic request id (SHA-256 hex digest of the key)."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def stable_seed(value: str) -> int:
    """32-bit FNV-1a hash over the UTF-16 code units of ``value``."""
    h = _FNV_OFFSET_BASIS
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def purpose_seed(purpose: str, key: str) -> int:
    """Seed for one generation purpose (validate / match / analysis) and key."""
    return stable_seed(f"{purpose}{KEY_SEPARATOR}{key}")
