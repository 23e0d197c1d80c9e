"""Counted bins and their text rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MAX_BIN_WIDTH = 65535
DEFAULT_BIN_PER_LINE = 32


@dataclass
class Bin:
    """A key with a count that fits in 16 bits."""

    k: int
    n: int = 0

    def incr_safe(self, by: int) -> int:
        """Add ``by`` to the count, saturating at the maximum.

        Returns the amount that did not fit.
        """
        nxt = by + self.n
        if nxt > MAX_BIN_WIDTH:
            self.n = MAX_BIN_WIDTH
            return nxt - MAX_BIN_WIDTH
        self.n = nxt
        return 0


def append_safe(bins: list[Bin], k: int, n: int) -> None:
    """Append bins for key ``k`` holding ``n`` in total.

    Counts beyond the bin width are split over several bins with the same
    key: the partial bin first, the full bins after it.
    """
    if n <= MAX_BIN_WIDTH:
        bins.append(Bin(k, n))
        return

    r = n % MAX_BIN_WIDTH
    if r:
        bins.append(Bin(k, r))
    bins.extend(Bin(k, MAX_BIN_WIDTH) for _ in range(n // MAX_BIN_WIDTH))


def n_sum(bins: Iterable[Bin]) -> int:
    """Total count held by the bins."""
    return sum(b.n for b in bins)


def format_bins(bins: Iterable[Bin], max_per_line: int = DEFAULT_BIN_PER_LINE) -> str:
    """Render bins as ``<k>:<n>`` separated by spaces, wrapping lines.

    A ``max_per_line`` of 0 or less disables wrapping.
    """
    parts = []
    for i, b in enumerate(bins):
        if i == 0:
            prefix = ""
        elif max_per_line > 0 and i % max_per_line == 0:
            prefix = "\n"
        else:
            prefix = " "
        parts.append(f"{prefix}{b.k}:{b.n}")
    return "".join(parts)