"""A quantile sketch: sparse bins plus a running summary."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterable

from quantsketch.bins import Bin, format_bins
from quantsketch.config import Config, default_config
from quantsketch.store import BIN_SIZE, STORE_SIZE, SparseStore
from quantsketch.summary import Summary

# four float64 fields and one int64
SUMMARY_SIZE = 40

_BYTE_SIZES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")


def rank(count: int, q: float) -> float:
    """Rank of quantile ``q`` among ``count`` items, rounded half to even."""
    return float(round(q * float(count - 1)))


def indent(s: str, level: int) -> str:
    """Indent every line of ``s`` by two spaces per level."""
    space = "  " * level
    out = s.replace("\n", "\n" + space)
    return space + out.strip()


def format_bytes(n: int) -> str:
    """Human readable byte count using SI units, e.g. ``83 MB``."""
    if n < 10:
        return f"{n} B"
    e = int(math.floor(math.log(n) / math.log(1000)))
    suffix = _BYTE_SIZES[e]
    val = math.floor(n / 1000**e * 10 + 0.5) / 10
    if val < 10:
        return f"{val:.1f} {suffix}"
    return f"{val:.0f} {suffix}"


@dataclass(eq=False)
class Sketch:
    """Tracks quantiles of inserted values."""

    store: SparseStore = field(default_factory=SparseStore)
    basic: Summary = field(default_factory=Summary)

    def mem_size(self) -> tuple[int, int]:
        """Memory use in bytes as ``(used, allocated)``."""
        used, allocated = self.store.mem_size()
        return used + SUMMARY_SIZE, allocated + SUMMARY_SIZE

    def insert_many(self, c: Config, values: Iterable[float]) -> None:
        """Insert values into the sketch."""
        keys = []
        for v in values:
            self.basic.insert(v)
            keys.append(c.key(v))
        self.store.insert(c, keys)

    def insert(self, c: Config, *args: float) -> None:
        """Insert one or more values."""
        self.insert_many(c, args)

    def reset(self) -> None:
        """Return the sketch to its empty state."""
        self.basic.reset()
        self.store.count = 0
        self.store.bins = []

    def raw_bins(self) -> tuple[int, str]:
        """The count and the bins rendered on a single line."""
        return self.store.count, format_bins(self.store.bins).replace("\n", "")

    def merge(self, c: Config, o: Sketch) -> None:
        """Merge ``o`` into this sketch without changing ``o``."""
        self.basic.merge(o.basic)
        self.store.merge(c, o.store)

    def quantile(self, c: Config, q: float) -> float:
        """Value ``v`` such that ``count * q`` items are <= ``v``.

        ``q <= 0`` gives the minimum and ``q >= 1`` the maximum.
        """
        if self.store.count == 0:
            return 0.0
        if q <= 0:
            return self.basic.min
        if q >= 1:
            return self.basic.max

        n = 0.0
        r_want = rank(self.store.count, q)

        for i, b in enumerate(self.store.bins):
            n += float(b.n)
            if n <= r_want:
                continue

            weight = (n - r_want) / float(b.n)
            v_low = c.f64(b.k)
            v_high = v_low * c.gamma_v
            if i == 0:
                v_low = self.basic.min
            return v_low * weight + v_high * (1 - weight)

        # the count exceeds the sum of the bins
        return self.basic.max

    def copy_to(self, dst: Sketch) -> None:
        """Make a deep copy of this sketch into ``dst``."""
        dst.store.bins = [Bin(b.k, b.n) for b in self.store.bins]
        dst.store.count = self.store.count
        dst.basic = replace(self.basic)

    def copy(self) -> Sketch:
        """A deep copy of this sketch."""
        dst = Sketch()
        self.copy_to(dst)
        return dst

    def equals(self, o: Sketch) -> bool:
        """True if both sketches hold the same summary, count and bins."""
        return (
            self.basic == o.basic
            and self.store.count == o.store.count
            and self.store.bins == o.store.bins
        )

    def approx_equals(self, o: Sketch, e: float) -> bool:
        """Like ``equals``, allowing an error of ``e`` for sum and average."""
        a, b = self.basic, o.basic
        if abs(a.sum - b.sum) > e or abs(a.avg - b.avg) > e:
            return False
        if a.min != b.min or a.max != b.max or a.cnt != b.cnt:
            return False
        return self.store.count == o.store.count and self.store.bins == o.store.bins

    def render(self, c: Config) -> str:
        """Multi-line description of the bins, memory use and statistics."""
        used, allocated = self.mem_size()
        _, store_allocated = self.store.mem_size()
        capacity = (store_allocated - STORE_SIZE) // BIN_SIZE
        stats = " ".join(
            f"{p:02g}={self.quantile(c, p / 100):.2f}" for p in (1.0, 50.0, 75.0, 90.0, 95.0, 99.0)
        )
        lines = [
            "sketch:",
            indent("bins:", 1),
            indent(format_bins(self.store.bins), 2),
            indent("size:", 1),
            indent(
                f"used={format_bytes(used)} allocated={format_bytes(allocated)} "
                f"{used / allocated * 100:3.2f}%",
                2,
            ),
            indent(f"len={len(self.store.bins)} cap={capacity}", 2),
            indent("stats:", 1),
            "    " + stats,
            indent(str(self.basic), 2),
        ]
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render(default_config())