"""Sparse, sorted storage of counted bins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from quantsketch.bins import MAX_BIN_WIDTH, Bin, append_safe
from quantsketch.config import Config
from quantsketch.key import KeyCount

# Byte sizes of one bin (two 16-bit fields) and of the store header
# (a slice header plus an int count).
BIN_SIZE = 4
STORE_SIZE = 32


def _clone(b: Bin) -> Bin:
    return Bin(b.k, b.n)


def trim_left(bins: list[Bin], max_bucket_cap: int) -> list[Bin]:
    """Fold the lowest bins together so that at most ``max_bucket_cap`` keys remain.

    Counts of the removed bins move into the lowest kept bin; counts that do
    not fit are kept in extra bins. A cap of 0 disables trimming.
    """
    if max_bucket_cap == 0 or len(bins) <= max_bucket_cap:
        return bins

    n_remove = len(bins) - max_bucket_cap
    missing = 0
    overflow: list[Bin] = []

    for b in bins[:n_remove]:
        missing += b.n
        if missing > MAX_BIN_WIDTH:
            overflow.append(Bin(b.k, MAX_BIN_WIDTH))
            missing -= MAX_BIN_WIDTH

    pivot = bins[n_remove]
    missing = pivot.incr_safe(missing)
    if missing > 0:
        append_safe(overflow, pivot.k, missing)

    return overflow + bins[n_remove:]


def count_leading_equal(keys: Sequence[int], start: int) -> int:
    """Number of consecutive keys in ``keys[start:]`` equal to ``keys[start]``."""
    if start == len(keys) - 1:
        return 1
    first = keys[start]
    i = start
    while i < len(keys) and keys[i] == first:
        i += 1
    return i - start


@dataclass
class SparseStore:
    """Bins sorted by key, together with the total count they hold."""

    bins: list[Bin] = field(default_factory=list)
    count: int = 0
    _capacity: int = field(default=0, compare=False, repr=False)

    def _set_bins(self, bins: list[Bin]) -> None:
        self.bins = bins
        self._capacity = max(self._capacity, len(bins))

    def cols(self) -> tuple[list[int], list[int]]:
        """Keys and counts of the bins as two parallel lists."""
        return [b.k for b in self.bins], [b.n for b in self.bins]

    def mem_size(self) -> tuple[int, int]:
        """Memory use in bytes as ``(used, allocated)``."""
        capacity = max(self._capacity, len(self.bins))
        used = STORE_SIZE + len(self.bins) * BIN_SIZE
        allocated = STORE_SIZE + capacity * BIN_SIZE
        return used, allocated

    def merge(self, c: Config, o: SparseStore) -> None:
        """Merge ``o`` into this store without changing ``o``."""
        self.count += o.count
        own = self.bins
        tmp: list[Bin] = []
        s_idx = 0

        for ob in o.bins:
            while s_idx < len(own) and own[s_idx].k < ob.k:
                tmp.append(_clone(own[s_idx]))
                s_idx += 1

            if s_idx >= len(own) or own[s_idx].k > ob.k:
                tmp.append(_clone(ob))
            elif own[s_idx].k == ob.k:
                append_safe(tmp, ob.k, ob.n + own[s_idx].n)
                s_idx += 1

        tmp.extend(_clone(b) for b in own[s_idx:])
        self._set_bins(trim_left(tmp, c.bin_limit))

    def insert_counts(self, c: Config, kcs: Iterable[KeyCount]) -> None:
        """Insert keys, each with its own count."""
        pending = sorted(kcs, key=lambda kc: kc.k)
        own = self.bins
        tmp: list[Bin] = []
        s_idx = key_idx = 0

        while s_idx < len(own) and key_idx < len(pending):
            b = own[s_idx]
            vk = pending[key_idx].k
            kn = pending[key_idx].n

            if b.k < vk:
                tmp.append(_clone(b))
                s_idx += 1
            elif b.k > vk:
                append_safe(tmp, vk, kn)
                self.count += kn
                key_idx += 1
            else:
                append_safe(tmp, b.k, b.n + kn)
                self.count += kn
                s_idx += 1
                key_idx += 1

        tmp.extend(_clone(b) for b in own[s_idx:])

        for kc in pending[key_idx:]:
            append_safe(tmp, kc.k, kc.n)
            self.count += kc.n

        self._set_bins(trim_left(tmp, c.bin_limit))

    def insert(self, c: Config, keys: Iterable[int]) -> None:
        """Insert each key once."""
        ordered = sorted(keys)
        self.count += len(ordered)
        own = self.bins
        tmp: list[Bin] = []
        s_idx = key_idx = 0

        while s_idx < len(own) and key_idx < len(ordered):
            b = own[s_idx]
            vk = ordered[key_idx]

            if b.k < vk:
                tmp.append(_clone(b))
                s_idx += 1
            elif b.k > vk:
                # equal keys must land in the same bucket
                kn = count_leading_equal(ordered, key_idx)
                append_safe(tmp, vk, kn)
                key_idx += kn
            else:
                kn = count_leading_equal(ordered, key_idx)
                append_safe(tmp, b.k, b.n + kn)
                s_idx += 1
                key_idx += kn

        tmp.extend(_clone(b) for b in own[s_idx:])

        while key_idx < len(ordered):
            kn = count_leading_equal(ordered, key_idx)
            append_safe(tmp, ordered[key_idx], kn)
            key_idx += kn

        self._set_bins(trim_left(tmp, c.bin_limit))