"""Split the global sample indices {1, ..., n} among the ranks.

The first ``n % size`` ranks take one extra sample, so loads never differ
by more than one. Two index conventions are available:

* ``strided`` interleaves the indices, rank r owns r+1, r+1+size, ...
  This is the reference convention. On a single lane it reproduces the
  reference per-rank sums bit for bit.
* ``block`` hands every rank one contiguous run of indices.

Both cover every index exactly once, so the total is the same up to
floating-point reassociation.
"""
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class LocalShare:
    """One rank's samples: global index of local offset ``i`` is ``start + i*stride``."""
    count: int
    start: int
    stride: int

    def index(self, offsets):
        return np.asarray(offsets, dtype=np.int64) * self.stride + self.start

    def indices(self):
        return self.index(np.arange(self.count, dtype=np.int64))


def local_count(n, rank, size):
    return n // size + (1 if rank < n % size else 0)


def _check(n, rank, size):
    if size < 1:
        raise ValueError(f"size must be at least 1, got {size}")
    if not 0 <= rank < size:
        raise ValueError(f"rank must be in [0, {size}), got {rank}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")


def strided_share(n, rank, size):
    _check(n, rank, size)
    return LocalShare(local_count(n, rank, size), rank + 1, size)


def block_share(n, rank, size):
    _check(n, rank, size)
    start = rank * (n // size) + min(rank, n % size)
    return LocalShare(local_count(n, rank, size), start + 1, 1)


_POLICIES = {
    "strided": strided_share,
    "block": block_share,
}


def partition(n, rank, size, policy="strided"):
    try:
        share = _POLICIES[policy]
    except KeyError:
        raise ValueError(f"unknown partition policy {policy!r}") from None
    return share(n, rank, size)
