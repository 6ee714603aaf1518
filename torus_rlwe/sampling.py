# torus_rlwe/sampling.py
# ------------------------------------------------------------
# Randomness capability injected into SecretKey.
#
# Key generation needs bits, encryption needs uniform 32-bit words and
# Gaussian noise. Anything implementing next_u32 / next_bit /
# next_gaussian can be plugged in; the vector helpers default to
# calling those one at a time and are overridden where a backend can
# sample in bulk.
#
# NumpyRandomSource is NOT cryptographically secure. SystemRandomSource
# draws from the operating system (os.urandom) and is the one to use
# outside tests, as far as the OS entropy pool can be trusted.
# ------------------------------------------------------------

from __future__ import annotations

import random
from typing import Optional

import numpy as np

U32_MAX = 0xFFFFFFFF


class RandomSource:
    """Randomness capability: uniform 32-bit words, bits, Gaussian samples."""

    def next_u32(self) -> int:
        raise NotImplementedError

    def next_bit(self) -> int:
        raise NotImplementedError

    def next_gaussian(self, sigma: float) -> float:
        raise NotImplementedError

    # -------------------------
    # Vector helpers
    # -------------------------

    def u32_vector(self, n: int) -> np.ndarray:
        return np.fromiter((self.next_u32() for _ in range(n)), dtype=np.uint32, count=n)

    def bit_vector(self, n: int) -> np.ndarray:
        return np.fromiter((self.next_bit() for _ in range(n)), dtype=np.uint32, count=n)

    def gaussian_vector(self, sigma: float, n: int) -> np.ndarray:
        return np.fromiter((self.next_gaussian(sigma) for _ in range(n)), dtype=np.float64, count=n)


class NumpyRandomSource(RandomSource):
    """
    numpy Generator backed source (PCG64). Seedable, fast, insecure.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def next_u32(self) -> int:
        return int(self.rng.integers(0, U32_MAX, endpoint=True, dtype=np.uint64))

    def next_bit(self) -> int:
        return int(self.rng.integers(0, 2))

    def next_gaussian(self, sigma: float) -> float:
        return float(self.rng.normal(0.0, sigma))

    def u32_vector(self, n: int) -> np.ndarray:
        return self.rng.integers(0, U32_MAX, size=n, endpoint=True, dtype=np.uint32)

    def bit_vector(self, n: int) -> np.ndarray:
        return self.rng.integers(0, 2, size=n, dtype=np.uint32)

    def gaussian_vector(self, sigma: float, n: int) -> np.ndarray:
        return self.rng.normal(0.0, sigma, size=n)

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed!r})"


class SystemRandomSource(RandomSource):
    """Source backed by random.SystemRandom (os.urandom)."""

    def __init__(self):
        self._sys = random.SystemRandom()

    def next_u32(self) -> int:
        return self._sys.getrandbits(32)

    def next_bit(self) -> int:
        return self._sys.getrandbits(1)

    def next_gaussian(self, sigma: float) -> float:
        return self._sys.gauss(0.0, sigma)

    def u32_vector(self, n: int) -> np.ndarray:
        # one urandom call for the whole vector
        if n == 0:
            return np.zeros(0, dtype=np.uint32)
        raw = self._sys.getrandbits(32 * n).to_bytes(4 * n, "little")
        return np.frombuffer(raw, dtype="<u4").astype(np.uint32)

    def __repr__(self) -> str:
        return "SystemRandomSource()"
