"""Run settings for the hybrid integrator.

Defaults live in the module constants below. They can be overridden from
the environment (``Settings.from_env``) or from the command line.
"""
import os
from dataclasses import dataclass, replace

#Quadrature resolution when none is given on the command line
DEFAULT_N = 100

#Samples per thread-pool task. Performance knob only, results do not depend on it
DEFAULT_BATCH_SIZE = 2000

#Smallest chunk handed to a lane by the chunked strategy
DEFAULT_MIN_LEN = 2000

ROOT = 0

STRATEGIES = ("batched", "chunked")
PARTITION_POLICIES = ("strided", "block")

ENV_PREFIX = "HYBRID_PI_"


def _env_int(environ, name, default):
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{ENV_PREFIX}{name} must be at least 1, got {value}")
    return value


def _env_choice(environ, name, choices, default):
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip()
    if value not in choices:
        raise ValueError(f"{ENV_PREFIX}{name} must be one of {choices}, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    lanes: int = 1
    batch_size: int = DEFAULT_BATCH_SIZE
    min_len: int = DEFAULT_MIN_LEN
    strategy: str = "batched"
    partition_policy: str = "strided"

    def __post_init__(self):
        if self.lanes < 1:
            raise ValueError(f"lanes must be at least 1, got {self.lanes}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.min_len < 1:
            raise ValueError(f"min_len must be at least 1, got {self.min_len}")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {self.strategy!r}, expected one of {STRATEGIES}")
        if self.partition_policy not in PARTITION_POLICIES:
            raise ValueError(
                f"unknown partition policy {self.partition_policy!r}, expected one of {PARTITION_POLICIES}"
            )

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from ``HYBRID_PI_*`` variables.

        The lane count defaults to the number of CPUs, like a work-stealing
        pool sized to the machine.
        """
        if environ is None:
            environ = os.environ
        return cls(
            lanes=_env_int(environ, "NUM_THREADS", os.cpu_count() or 1),
            batch_size=_env_int(environ, "BATCH_SIZE", DEFAULT_BATCH_SIZE),
            min_len=_env_int(environ, "MIN_LEN", DEFAULT_MIN_LEN),
            strategy=_env_choice(environ, "STRATEGY", STRATEGIES, "batched"),
            partition_policy=_env_choice(environ, "PARTITION", PARTITION_POLICIES, "strided"),
        )

    def override(self, **changes):
        """Copy with the non-None entries of ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
