"""Sketch parameters that map float values to keys and back."""

from __future__ import annotations

import math

from quantsketch.bins import MAX_BIN_WIDTH
from quantsketch.key import MAX_KEY, inf_key, is_inf

DEFAULT_BIN_LIMIT = 4096
DEFAULT_EPS = 1.0 / 128.0
DEFAULT_MIN = 1e-9


class Config:
    """Read-only parameters shared by sketches.

    ``key(x)`` is 0 for ``|x| < norm_min``, 1 for ``x == norm_min``,
    +Inf for ``x > norm_max`` and -Inf for ``x < -norm_max``.
    """

    def __init__(self, eps: float = 0.0, min_value: float = 0.0, bin_limit: int = 0) -> None:
        if bin_limit == 0:
            bin_limit = DEFAULT_BIN_LIMIT
        elif bin_limit < 0:
            raise ValueError(f"binLimit can't be negative: {bin_limit}")
        self.bin_limit = bin_limit

        if eps == 0:
            eps = DEFAULT_EPS
        elif eps > 1 or eps < 0:
            raise ValueError(f"{eps:g}: eps must be between 0 and 1")

        eps *= 2
        self.gamma_v = 1 + eps
        self.gamma_ln = math.log1p(eps)

        if min_value == 0:
            min_value = DEFAULT_MIN
        elif min_value < 0:
            raise ValueError(f"{min_value:g}: min must be > 0")

        emin = int(math.floor(self.log_gamma(min_value)))
        self.norm_bias = -emin + 1
        self.norm_emin = emin
        self.norm_min = self.f64(1)
        self.norm_max = self.f64(MAX_KEY)

        if self.norm_min > min_value:
            raise ValueError(f"{self.norm_min:g} > {min_value:g}")

    def __repr__(self) -> str:
        return (
            f"Config(bin_limit={self.bin_limit}, gamma_v={self.gamma_v!r}, "
            f"norm_min={self.norm_min!r}, norm_max={self.norm_max!r}, "
            f"norm_bias={self.norm_bias})"
        )

    def max_count(self) -> int:
        """Maximum number of values a sketch with these parameters can hold."""
        return self.bin_limit * MAX_BIN_WIDTH

    def f64(self, k: int) -> float:
        """Lower bound of the bucket for key ``k``: gamma**k."""
        if k < 0:
            return -self.f64(-k)
        if is_inf(k):
            return math.inf
        if k == 0:
            return 0.0
        return self.pow_gamma(float(k - self.norm_bias))

    def bin_low(self, k: int) -> float:
        """Lower bound of the bucket for key ``k``."""
        return self.f64(k)

    def key(self, v: float) -> int:
        """Key ``k`` such that gamma**k <= v < gamma**(k+1)."""
        if v < 0:
            return -self.key(-v)
        if v == 0 or (0 < v < self.norm_min):
            return 0

        lg = self.log_gamma(v)
        if math.isinf(lg):
            return inf_key(1)
        # banker's rounding keeps key(f64(k)) == k
        i = round(lg) + self.norm_bias
        if i > MAX_KEY:
            return inf_key(1)
        if i < 1:
            return 1
        return i

    def log_gamma(self, v: float) -> float:
        """Logarithm of ``v`` in base gamma."""
        return math.log(v) / self.gamma_ln

    def pow_gamma(self, y: float) -> float:
        """gamma raised to the power ``y``."""
        try:
            return math.pow(self.gamma_v, y)
        except OverflowError:
            return math.inf


def default_config() -> Config:
    """A new config with default parameters."""
    return Config()