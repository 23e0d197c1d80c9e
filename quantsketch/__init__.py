"""Mergeable quantile sketches with bounded relative error."""

__version__ = "0.1.0"

__all__ = ["agent", "bins", "config", "equal", "key", "sketch", "store", "summary"]