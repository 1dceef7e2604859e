"""
Histogram binning against caller-supplied bin edges.

Independent of the engine pipe: the session feeds the resulting counts to
plot_xy() as a boxes plot. Bins are the half-open intervals
[edges[i], edges[i+1]); a sample equal to an edge belongs to the bin above it.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class OverflowPolicy(str, Enum):
    """What to do with samples outside [edges[0], edges[-1])."""

    CLAMP = "clamp"    # fold into the first / last bin
    STRICT = "strict"  # drop


def _coerce_policy(overflow) -> OverflowPolicy:
    if isinstance(overflow, OverflowPolicy):
        return overflow
    if isinstance(overflow, bool):
        return OverflowPolicy.CLAMP if overflow else OverflowPolicy.STRICT
    return OverflowPolicy(str(overflow).lower())


def bin_counts(edges, samples, overflow=OverflowPolicy.CLAMP) -> np.ndarray:
    """Count samples per bin.

    Args:
        edges: Ascending bin edges, length ``nbins``.
        samples: Raw sample values. Every value is counted, including 0.0;
            NaN values are ignored. None yields all-zero counts.
        overflow: OverflowPolicy (or ``True`` for CLAMP, ``False`` for STRICT).
            Under CLAMP, samples <= edges[0] go to bin 0 and samples >=
            edges[-1] go to the last bin. Under STRICT they are dropped.

    Returns:
        int64 array of length ``nbins``. The last bin only ever receives
        clamped samples, since no interval starts at the final edge.

    Raises:
        ValueError: if edges are not ascending.
    """
    policy = _coerce_policy(overflow)
    edges = np.asarray(edges, dtype=np.float64).ravel()
    nbins = edges.size
    counts = np.zeros(nbins, dtype=np.int64)

    if nbins == 0 or samples is None:
        return counts
    if np.any(np.diff(edges) < 0):
        raise ValueError("bin edges must be ascending")

    values = np.asarray(samples, dtype=np.float64).ravel()
    values = values[~np.isnan(values)]
    if values.size == 0:
        return counts

    # Interval index i such that edges[i] <= v < edges[i+1]
    index = np.searchsorted(edges, values, side="right") - 1
    inside = (values >= edges[0]) & (values < edges[-1])
    counts += np.bincount(index[inside], minlength=nbins)[:nbins]

    if policy is OverflowPolicy.CLAMP:
        low = values <= edges[0]
        high = (values >= edges[-1]) & ~low
        # A sample equal to edges[0] is already inside when nbins > 1
        counts[0] += np.count_nonzero(low & ~inside)
        counts[-1] += np.count_nonzero(high)

    return counts


@dataclass
class BinSet:
    """Bin edges and the aligned per-bin counts."""

    edges: np.ndarray
    counts: np.ndarray

    @classmethod
    def from_samples(cls, edges, samples, overflow=OverflowPolicy.CLAMP) -> "BinSet":
        counts = bin_counts(edges, samples, overflow)
        return cls(edges=np.asarray(edges, dtype=np.float64).ravel(), counts=counts)

    def __len__(self) -> int:
        return int(self.edges.size)

    @property
    def total(self) -> int:
        return int(self.counts.sum())
