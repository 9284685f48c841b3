"""Estimate pi with MPI ranks and a thread pool per rank.

    mpiexec -n 4 hybrid-pi 1000000 --threads 8
"""
import argparse
import logging
import sys

import numpy as np
from mpi4py import MPI

from hybrid_pi.config import DEFAULT_N, PARTITION_POLICIES, STRATEGIES, Settings
from hybrid_pi.integrate import integrate
from hybrid_pi.mpi_comm import MPICommunicator, install_excepthook

#Set this to true to get a CSV friendly output
CSV_OUT = False

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="hybrid-pi", description=__doc__.splitlines()[0])
    parser.add_argument("n", type=int, nargs="?", default=DEFAULT_N, help="Number of quadrature samples")
    parser.add_argument("--threads", type=int, help="Lanes per rank (default: HYBRID_PI_NUM_THREADS or CPU count)")
    parser.add_argument("--batch-size", type=int, help="Samples per thread-pool task")
    parser.add_argument("--min-len", type=int, help="Smallest chunk for the chunked strategy")
    parser.add_argument("--strategy", choices=STRATEGIES)
    parser.add_argument("--partition", choices=PARTITION_POLICIES)
    parser.add_argument("--csv", action="store_true", default=CSV_OUT, help="Print elapsed,value,error")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.n < 0:
        parser.error("n must be a non-negative integer")
    try:
        settings = Settings.from_env().override(
            lanes=args.threads,
            batch_size=args.batch_size,
            min_len=args.min_len,
            strategy=args.strategy,
            partition_policy=args.partition,
        )
    except ValueError as exc:
        parser.error(str(exc))
    return args, settings


def report(value, elapsed, csv):
    if csv:
        print(f"{elapsed},{value:.17g},{abs(value - np.pi)}")
    else:
        print("PI is something like: ", value)
        print("Error: ", abs(value - np.pi))
        print("Time Taken: ", elapsed)


def main(argv=None, comm=None):
    comm = MPICommunicator(comm)
    if comm.size > 1:
        install_excepthook()

    args, settings = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=f"%(asctime)s rank {comm.rank} %(name)s %(levelname)s: %(message)s",
    )
    logger.info("Rank %d: Num threads = %d", comm.rank, settings.lanes)

    #Every rank sees the same argv, so a bad n fails on all of them at once instead of
    #leaving the others in the broadcast. Only the root's value is used though
    n = args.n if comm.is_root else None
    start = MPI.Wtime()
    value = integrate(n, comm, settings)
    elapsed = MPI.Wtime() - start

    if comm.is_root:
        report(value, elapsed, args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
