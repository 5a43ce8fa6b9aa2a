"""Small utilities shared across the service."""

from __future__ import annotations

import os

_INT63_MASK = 0x7FFFFFFFFFFFFFFF


def rand_int64_positive() -> int:
    """Return a cryptographically random non-negative 64-bit signed integer."""
    return int.from_bytes(os.urandom(8), "little") & _INT63_MASK