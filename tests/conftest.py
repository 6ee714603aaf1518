import numpy as np
import pytest

from torus_rlwe import NumpyRandomSource, Parameters, SecretKey


class FixedNoiseSource(NumpyRandomSource):
    """Uniform masks and key bits as usual, but every noise sample is `value`."""

    def __init__(self, value: float, seed: int = 0):
        super().__init__(seed)
        self.value = value

    def next_gaussian(self, sigma: float) -> float:
        return self.value

    def gaussian_vector(self, sigma: float, n: int) -> np.ndarray:
        return np.full(n, self.value, dtype=np.float64)


@pytest.fixture
def rng():
    return NumpyRandomSource(seed=1)


@pytest.fixture
def small_params():
    return Parameters(k=2, n=4, bits=4, sigma=128.0)


@pytest.fixture
def small_key(small_params, rng):
    return SecretKey(small_params, rng=rng)
