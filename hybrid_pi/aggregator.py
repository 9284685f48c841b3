import logging

logger = logging.getLogger(__name__)


def aggregate(local_partial, comm):
    """Sum every rank's partial on the root.

    Returns the total on the root and ``None`` on every other rank. If a
    rank never reports, ``comm.reduce`` raises ``CommunicationError`` and
    no partial total is produced.
    """
    logger.debug("Rank %d submitting partial %r", comm.rank, local_partial)
    total = comm.reduce(float(local_partial))
    if comm.is_root:
        logger.debug("Rank %d received total %r from %d ranks", comm.rank, total, comm.size)
        return total
    return None
