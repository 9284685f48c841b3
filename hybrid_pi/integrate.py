"""Two-level decomposition: ranks split the samples, lanes split each rank's share."""
import logging

from hybrid_pi.aggregator import aggregate
from hybrid_pi.comm import SerialCommunicator
from hybrid_pi.config import Settings
from hybrid_pi.integrand import four_over_one_plus_square
from hybrid_pi.partition import partition
from hybrid_pi.reduction import local_reduce, step_width

logger = logging.getLogger(__name__)


def compute_partial(n, rank, size, settings=None, f=four_over_one_plus_square):
    if settings is None:
        settings = Settings()
    share = partition(n, rank, size, settings.partition_policy)
    logger.debug(
        "Rank %d of %d: %d samples (%s), %d lanes",
        rank, size, share.count, settings.partition_policy, settings.lanes,
    )
    return local_reduce(
        share,
        step_width(n),
        lanes=settings.lanes,
        batch_size=settings.batch_size,
        strategy=settings.strategy,
        min_len=settings.min_len,
        f=f,
    )


def integrate(n, comm, settings=None, f=four_over_one_plus_square):
    """Run the whole computation on this rank.

    ``n`` is read on the root only (other ranks may pass ``None``); every
    rank takes the root's value from the broadcast. Returns the integral
    on the root and ``None`` elsewhere.
    """
    if comm.is_root and n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    n = comm.broadcast(n)
    partial = compute_partial(n, comm.rank, comm.size, settings, f)
    return aggregate(partial, comm)


def estimate_pi(n, lanes=1, batch_size=None, strategy=None, partition_policy=None, min_len=None):
    settings = Settings().override(
        lanes=lanes,
        batch_size=batch_size,
        min_len=min_len,
        strategy=strategy,
        partition_policy=partition_policy,
    )
    return integrate(n, SerialCommunicator(), settings)
