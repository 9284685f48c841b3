"""Midpoint-rule partial sums over one rank's share, optionally on a thread pool.

Every lane works on its own range of local offsets and returns a plain
float, so nothing writable is shared between threads. numpy drops the GIL
inside its ufunc loops, which is what lets the lanes run concurrently.

Within a pass the terms are added strictly left to right, so a single lane
reproduces a plain sequential loop exactly. The parallel paths add the
per-task sums in a different order, so they agree with the single-lane
path only up to rounding in the last few bits.
"""
import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from hybrid_pi.config import DEFAULT_BATCH_SIZE, DEFAULT_MIN_LEN
from hybrid_pi.integrand import four_over_one_plus_square

logger = logging.getLogger(__name__)


def step_width(n):
    if n == 0:
        return 0.0
    return 1.0 / n


def _range_sum(share, h, f, lo, hi, slice_len):
    #Left-to-right sum of f at the bin centres for local offsets [lo, hi), not yet scaled by h.
    #Walks the range slice_len samples at a time so memory stays bounded
    total = 0.0
    for start in range(lo, hi, slice_len):
        stop = min(start + slice_len, hi)
        x = h * (share.index(np.arange(start, stop, dtype=np.int64)) - 0.5)
        #cumsum adds strictly in order, np.sum would pair the terms up
        total = float(np.cumsum(np.concatenate(([total], f(x))))[-1])
    return total


def sequential_sum(share, h, f=four_over_one_plus_square, slice_len=DEFAULT_BATCH_SIZE):
    return _range_sum(share, h, f, 0, share.count, slice_len) * h


def batched_sum(share, h, lanes, batch_size=DEFAULT_BATCH_SIZE, f=four_over_one_plus_square):
    num_batches = share.count // batch_size
    num_remain = share.count % batch_size

    def batch(b):
        return _range_sum(share, h, f, b * batch_size, (b + 1) * batch_size, batch_size)

    with ThreadPoolExecutor(max_workers=lanes) as pool:
        batch_total = sum(pool.map(batch, range(num_batches)))

    #The tail shorter than one batch is summed here, not on the pool
    remainder = _range_sum(share, h, f, num_batches * batch_size, share.count, batch_size) if num_remain else 0.0
    return (batch_total + remainder) * h


def chunk_bounds(count, lanes, min_len):
    """Split [0, count) into at most ``lanes`` contiguous chunks of at least ``min_len``."""
    chunks = max(1, min(lanes, count // min_len))
    base, extra = divmod(count, chunks)
    bounds = []
    lo = 0
    for c in range(chunks):
        hi = lo + base + (1 if c < extra else 0)
        bounds.append((lo, hi))
        lo = hi
    return bounds


def chunked_sum(share, h, lanes, min_len=DEFAULT_MIN_LEN, f=four_over_one_plus_square):
    bounds = chunk_bounds(share.count, lanes, min_len)
    with ThreadPoolExecutor(max_workers=lanes) as pool:
        total = sum(pool.map(lambda b: _range_sum(share, h, f, b[0], b[1], min_len), bounds))
    return total * h


def local_reduce(
    share,
    h,
    lanes=1,
    batch_size=DEFAULT_BATCH_SIZE,
    strategy="batched",
    min_len=DEFAULT_MIN_LEN,
    f=four_over_one_plus_square,
):
    """Return ``h * sum(f(h * (index(i) - 0.5)))`` over the share's local offsets.

    An empty share gives exactly 0.0 and never calls ``f``. With a single
    lane the sum is one left-to-right pass, streamed ``batch_size`` samples
    at a time. Otherwise ``strategy`` picks between fixed-size batches
    (``"batched"``) and one chunk per lane (``"chunked"``).
    """
    if share.count == 0:
        return 0.0

    if lanes <= 1:
        logger.debug("Summing %d samples on a single lane", share.count)
        return sequential_sum(share, h, f, batch_size)

    if strategy == "batched":
        logger.debug("Summing %d samples in batches of %d on %d lanes", share.count, batch_size, lanes)
        return batched_sum(share, h, lanes, batch_size, f)
    if strategy == "chunked":
        logger.debug("Summing %d samples in chunks of at least %d on %d lanes", share.count, min_len, lanes)
        return chunked_sum(share, h, lanes, min_len, f)
    raise ValueError(f"unknown strategy {strategy!r}")
