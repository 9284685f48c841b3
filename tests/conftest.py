"""Shared fixtures for the hybrid_pi tests."""
import numpy as np
import pytest

from hybrid_pi.config import Settings

#Relative tolerance for anything that went through a reassociated sum
RTOL = 1e-9


@pytest.fixture
def rtol():
    return RTOL


@pytest.fixture
def single_lane():
    return Settings(lanes=1)


@pytest.fixture
def four_lanes():
    return Settings(lanes=4, batch_size=2000)


@pytest.fixture
def exploding_integrand():
    def f(x):
        raise AssertionError("integrand must not be evaluated")
    return f


@pytest.fixture
def counting_integrand():
    """Integrand that records how many samples it was asked for."""
    calls = []

    def f(x):
        calls.append(np.size(x))
        return 4.0 / (1.0 + x * x)

    f.calls = calls
    return f
