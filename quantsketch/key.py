"""Quantized keys used to bucket float values."""

from __future__ import annotations

from dataclasses import dataclass

UV_INF = (1 << 15) - 1
UV_NEG_INF = -UV_INF
# one spot is reserved for +/- infinity
MAX_KEY = UV_INF - 1


@dataclass(frozen=True)
class KeyCount:
    """A key with an associated count."""

    k: int
    n: int


def is_inf(k: int) -> bool:
    """Return True if the key is the positive infinity key."""
    return k == UV_INF or k == -UV_NEG_INF


def key_str(k: int) -> str:
    """Render a key, using +Inf and -Inf for the infinity keys."""
    if k == UV_INF:
        return "+Inf"
    if k == UV_NEG_INF:
        return "-Inf"
    return str(k)


def inf_key(sign: int) -> int:
    """Key for +Inf if ``sign >= 0``, -Inf otherwise."""
    return UV_INF if sign >= 0 else UV_NEG_INF