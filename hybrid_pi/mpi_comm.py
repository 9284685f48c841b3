import sys

from mpi4py import MPI

from hybrid_pi.comm import CommunicationError, Communicator
from hybrid_pi.config import ROOT


class MPICommunicator(Communicator):
    """Collectives over an mpi4py communicator (``MPI.COMM_WORLD`` by default)."""

    def __init__(self, comm=None, root=ROOT):
        self.comm = MPI.COMM_WORLD if comm is None else comm
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()
        self.root = root

    def broadcast(self, value):
        try:
            return self.comm.bcast(value, root=self.root)
        except MPI.Exception as exc:
            raise CommunicationError(f"rank {self.rank}: broadcast failed: {exc}") from exc

    def reduce(self, local):
        try:
            return self.comm.reduce(local, op=MPI.SUM, root=self.root)
        except MPI.Exception as exc:
            raise CommunicationError(f"rank {self.rank}: reduce failed: {exc}") from exc


#Kept so the MPI hook can still print the traceback before aborting
sys_excepthook = sys.excepthook
def mpi_excepthook(type, value, traceback):
    sys_excepthook(type, value, traceback)
    if MPI.COMM_WORLD.size > 1:
        MPI.COMM_WORLD.Abort(1)


def install_excepthook():
    #This will kill all processes when one rank dies instead of leaving the rest stuck in a collective
    sys.excepthook = mpi_excepthook
