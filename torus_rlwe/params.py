from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

WORD_BITS = 32


@dataclass(frozen=True)
class Parameters:
    """
    Scheme parameters.

    k:     number of mask components (key polynomials)
    n:     ring dimension, ring is Z_{2^32}[x]/(x^n + 1)
    bits:  plaintext bit width b, messages live in [0, 2^b)
    sigma: standard deviation of the rounded Gaussian encryption noise
    """
    k: int
    n: int
    bits: int = 8
    sigma: float = float(1 << 7)

    def __post_init__(self):
        if self.k < 1:
            raise ValueError(f"k must be at least 1, got k={self.k}")
        if self.n < 1:
            raise ValueError(f"n must be at least 1, got n={self.n}")
        if not 1 <= self.bits < WORD_BITS:
            raise ValueError(f"bits must be in [1, {WORD_BITS - 1}], got bits={self.bits}")
        if not math.isfinite(self.sigma) or self.sigma < 0:
            raise ValueError(f"sigma must be a finite non-negative number, got sigma={self.sigma}")

        if self.sigma * 8 > self.half_step:
            logger.warning(
                f"sigma={self.sigma} is large for bits={self.bits} "
                f"(decoding threshold {self.half_step}); fresh ciphertexts may decrypt wrongly."
            )
        if self.n * self.k < 512:
            logger.warning(f"k*n={self.k * self.n} is far too small to be secure; use only for testing.")

    @property
    def shift(self) -> int:
        """Encoding shift 32 - b."""
        return WORD_BITS - self.bits

    @property
    def half_step(self) -> int:
        """Decoding threshold 2^(31 - b)."""
        return 1 << (self.shift - 1)

    @property
    def plaintext_modulus(self) -> int:
        return 1 << self.bits


# Error parameter associated with TFHE1024 (cf. the lattice estimator).
TFHE1024 = Parameters(k=1, n=1024, bits=8, sigma=float(1 << 7))
