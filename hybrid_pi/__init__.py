"""Hybrid MPI + thread-pool midpoint quadrature of 4/(1+x^2) over [0, 1]."""

from hybrid_pi.aggregator import aggregate
from hybrid_pi.comm import (
    CommunicationError,
    LocalCommunicator,
    SerialCommunicator,
    ThreadGroup,
)
from hybrid_pi.config import Settings
from hybrid_pi.integrand import four_over_one_plus_square
from hybrid_pi.integrate import compute_partial, estimate_pi, integrate
from hybrid_pi.partition import LocalShare, local_count, partition
from hybrid_pi.reduction import local_reduce

__all__ = [
    "CommunicationError",
    "LocalCommunicator",
    "LocalShare",
    "SerialCommunicator",
    "Settings",
    "ThreadGroup",
    "aggregate",
    "compute_partial",
    "estimate_pi",
    "four_over_one_plus_square",
    "integrate",
    "local_count",
    "local_reduce",
    "partition",
]
