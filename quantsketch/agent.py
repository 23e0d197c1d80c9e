"""An insert-optimised sketch that buffers keys before flushing them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from quantsketch.config import default_config
from quantsketch.key import KeyCount
from quantsketch.sketch import Sketch

AGENT_BUF_CAP = 512

_AGENT_CONFIG = default_config()


@dataclass
class Agent:
    """A sketch with buffered inserts, flushed in batches."""

    sketch: Sketch = field(default_factory=Sketch)
    buf: list[int] = field(default_factory=list)
    count_buf: list[KeyCount] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True if nothing has been inserted."""
        return self.sketch.basic.cnt == 0 and not self.buf

    def finish(self) -> Optional[Sketch]:
        """Flush pending inserts and return a deep copy, or None when empty."""
        self._flush()
        if self.is_empty():
            return None
        return self.sketch.copy()

    def _flush(self) -> None:
        if self.buf:
            self.sketch.store.insert(_AGENT_CONFIG, self.buf)
            self.buf = []
        if self.count_buf:
            self.sketch.store.insert_counts(_AGENT_CONFIG, self.count_buf)
            self.count_buf = []

    def reset(self) -> None:
        """Return the agent to its empty state."""
        self.sketch.reset()
        self.buf = []

    def insert(self, v: float, sample_rate: float = 1.0) -> None:
        """Insert ``v``; a sample rate below 1 counts it ``1 / sample_rate`` times."""
        k = _AGENT_CONFIG.key(v)
        if sample_rate <= 0 or sample_rate > 1:
            sample_rate = 1.0

        if sample_rate == 1:
            self.sketch.basic.insert(v)
            self.buf.append(k)
            if len(self.buf) < AGENT_BUF_CAP:
                return
        else:
            # truncated 1 / sample_rate matches histogram counts
            n = 1 / sample_rate
            self.sketch.basic.insert_n(v, n)
            self.count_buf.append(KeyCount(k, int(n)))
        self._flush()

    def insert_interpolate(self, lower: float, upper: float, count: int) -> None:
        """Spread ``count`` linearly over the buckets from ``lower`` to ``upper``."""
        keys = list(range(_AGENT_CONFIG.key(lower), _AGENT_CONFIG.key(upper) + 1))
        whats_left = int(count)
        distance = upper - lower
        start_idx = 0
        lower_b = _AGENT_CONFIG.bin_low(keys[start_idx])
        remainder = 0.0

        for end_idx in range(1, len(keys)):
            if whats_left <= 0:
                break
            upper_b = _AGENT_CONFIG.bin_low(keys[end_idx])
            # share of the remaining count that falls between the two bounds
            fkn = ((upper_b - lower_b) / distance) * float(count)
            # only small fractions are carried, to avoid many empty buckets
            if fkn > 1:
                remainder += fkn - math.trunc(fkn)
            kn = int(fkn)
            if remainder > 1:
                kn += 1
                remainder -= 1
            if kn > 0:
                kn = min(kn, whats_left)
                self.sketch.basic.insert_n(lower_b, float(kn))
                self.count_buf.append(KeyCount(keys[start_idx], kn))
                whats_left -= kn
                start_idx = end_idx
                lower_b = upper_b

        if whats_left > 0:
            self.sketch.basic.insert_n(
                _AGENT_CONFIG.bin_low(keys[start_idx]), float(whats_left)
            )
            self.count_buf.append(KeyCount(keys[start_idx], whats_left))
        self._flush()