"""Collective operations as explicit message-passing contracts.

A communicator knows its rank and the world size and offers the two
collectives the integrator needs:

* ``broadcast(value)`` returns the root's value on every rank;
* ``reduce(local)`` returns the sum of every rank's value on the root and
  ``None`` elsewhere.

Both block until every rank has taken part. A collective that cannot
complete raises ``CommunicationError``; callers must let it propagate.

``SerialCommunicator`` is a world of one. ``ThreadGroup`` runs a world of
several ranks as threads of one process, which is how the multi-rank
behaviour is exercised without ``mpiexec``. The mpi4py transport lives in
``hybrid_pi.mpi_comm``.
"""
import logging
import threading

from hybrid_pi.config import ROOT

logger = logging.getLogger(__name__)


class CommunicationError(RuntimeError):
    """A collective did not complete. Fatal for the whole computation."""


class Communicator:
    rank = 0
    size = 1
    root = ROOT

    @property
    def is_root(self):
        return self.rank == self.root

    def broadcast(self, value):
        raise NotImplementedError

    def reduce(self, local):
        raise NotImplementedError


class SerialCommunicator(Communicator):
    def broadcast(self, value):
        return value

    def reduce(self, local):
        return local


class LocalCommunicator(Communicator):
    """One rank's handle on a ``ThreadGroup``."""

    def __init__(self, group, rank):
        self._group = group
        self.rank = rank
        self.size = group.size

    def broadcast(self, value):
        return self._group._broadcast(self.rank, value)

    def reduce(self, local):
        return self._group._reduce(self.rank, local)

    def __repr__(self):
        return f"LocalCommunicator(rank={self.rank}, size={self.size})"


class ThreadGroup:
    """An in-process world of ``size`` ranks, one thread each.

    If any rank raises, the shared barrier is aborted so that every other
    rank's pending collective fails instead of waiting forever. ``timeout``
    bounds each barrier wait in seconds (``None`` waits indefinitely).
    """

    def __init__(self, size, timeout=None):
        if size < 1:
            raise ValueError(f"size must be at least 1, got {size}")
        self.size = size
        self.timeout = timeout
        self._reset()

    def _reset(self):
        self._barrier = threading.Barrier(self.size, timeout=self.timeout)
        self._value = None
        self._slots = [None] * self.size

    def _wait(self, rank, what):
        try:
            self._barrier.wait()
        except threading.BrokenBarrierError:
            raise CommunicationError(f"rank {rank}: {what} did not complete") from None

    def _broadcast(self, rank, value):
        if rank == ROOT:
            self._value = value
        self._wait(rank, "broadcast")
        result = self._value
        #Second wait keeps the root from starting another collective before everyone has read
        self._wait(rank, "broadcast")
        return result

    def _reduce(self, rank, local):
        self._slots[rank] = local
        self._wait(rank, "reduce")
        total = sum(self._slots) if rank == ROOT else None
        self._wait(rank, "reduce")
        return total

    def communicators(self):
        return [LocalCommunicator(self, rank) for rank in range(self.size)]

    def run(self, fn):
        """Call ``fn(comm)`` on every rank concurrently and return the results by rank.

        The first exception raised by any rank is re-raised here once all
        threads have finished.
        """
        self._reset()
        results = [None] * self.size
        errors = []
        lock = threading.Lock()

        def target(comm):
            try:
                results[comm.rank] = fn(comm)
            except BaseException as exc:
                with lock:
                    errors.append(exc)
                logger.debug("Rank %d failed: %r", comm.rank, exc)
                self._barrier.abort()

        threads = [
            threading.Thread(target=target, args=(comm,), name=f"rank-{comm.rank}")
            for comm in self.communicators()
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        if errors:
            raise errors[0]
        return results
