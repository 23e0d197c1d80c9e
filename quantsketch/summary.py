"""Incremental summary statistics: min, max, sum, average and count."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Summary:
    """Basic incremental statistics over inserted values."""

    min: float = 0.0
    max: float = 0.0
    sum: float = 0.0
    avg: float = 0.0
    cnt: int = 0

    def reset(self) -> None:
        """Return the summary to its empty state."""
        self.min = 0.0
        self.max = 0.0
        self.sum = 0.0
        self.avg = 0.0
        self.cnt = 0

    def __str__(self) -> str:
        return (
            f"min={self.min:.4f} max={self.max:.4f} avg={self.avg:.4f} "
            f"sum={self.sum:.4f} cnt={self.cnt}"
        )

    def insert_n(self, v: float, n: float) -> None:
        """Insert ``v`` as if it had been inserted ``n`` times."""
        self.merge(Summary(min=v, max=v, sum=n * v, avg=v, cnt=int(n)))

    def insert(self, v: float) -> None:
        """Add a single value."""
        if v > self.max or self.cnt == 0:
            self.max = v
        if v < self.min or self.cnt == 0:
            self.min = v

        self.cnt += 1
        self.sum += v
        # incremental average limits precision loss
        self.avg += (v - self.avg) / float(self.cnt)

    def merge(self, o: Summary) -> None:
        """Merge another summary into this one without changing ``o``."""
        if self.cnt == 0:
            self.min, self.max, self.sum, self.avg, self.cnt = (
                o.min,
                o.max,
                o.sum,
                o.avg,
                o.cnt,
            )
            return
        if o.cnt == 0:
            return

        if o.max > self.max:
            self.max = o.max
        if o.min < self.min:
            self.min = o.min

        self.cnt += o.cnt
        self.sum += o.sum
        self.avg = self.avg + (o.avg - self.avg) * float(o.cnt) / float(self.cnt)