from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .ciphertext import Ciphertext
from .errors import DimensionMismatchError, PlaintextRangeError
from .params import Parameters
from .ring import RingElement
from .sampling import NumpyRandomSource, RandomSource

logger = logging.getLogger(__name__)


class SecretKey:
    """
    Symmetric key: k ring elements with coefficients in {0, 1}.

    encrypt puts a b-bit message into the top bits of each coefficient,
    adds rounded Gaussian noise in the low bits and masks the result with
    sum_i s_i * a_i for fresh uniform a_i. decrypt removes the mask and
    rounds to the nearest multiple of 2^(32-b).

    The randomness source is consumed by key generation and by every
    encrypt call. It is not thread safe; give each key its own source or
    synchronize access externally.
    """

    def __init__(
        self,
        params: Parameters,
        rng: Optional[RandomSource] = None,
        multiplier: Optional[object] = None,
    ):
        self.params = params
        self.rng = rng if rng is not None else NumpyRandomSource()
        self.multiplier = multiplier

        self._key = [
            RingElement.exact(self.rng.bit_vector(params.n)) for _ in range(params.k)
        ]
        logger.debug(f"Generated secret key with k={params.k}, n={params.n}")

    @classmethod
    def generate(
        cls,
        k: int,
        n: int,
        bits: int = 8,
        sigma: float = float(1 << 7),
        rng: Optional[RandomSource] = None,
        multiplier: Optional[object] = None,
    ) -> "SecretKey":
        return cls(Parameters(k=k, n=n, bits=bits, sigma=sigma), rng=rng, multiplier=multiplier)

    @property
    def k(self) -> int:
        return self.params.k

    @property
    def n(self) -> int:
        return self.params.n

    def __repr__(self) -> str:
        # never print key material
        return f"SecretKey(k={self.k}, n={self.n}, bits={self.params.bits})"

    # -------------------------
    # Helpers
    # -------------------------

    def _masked(self, mask: Sequence[RingElement]) -> RingElement:
        """sum_i s_i * a_i"""
        acc = RingElement(self.n)
        for s, a in zip(self._key, mask):
            acc = acc + s.multiply(a, self.multiplier)
        return acc

    def encode(self, plaintext) -> np.ndarray:
        """Validate a plaintext and shift it into the high bits."""
        m = np.asarray(plaintext)
        if m.ndim != 1 or m.shape[0] != self.n:
            raise DimensionMismatchError(
                f"Plaintext must have n={self.n} entries, got shape {m.shape}"
            )
        if m.dtype.kind not in "biu":
            raise TypeError(f"Plaintext values must be integers, got dtype {m.dtype}")

        m = m.astype(np.int64)
        if ((m < 0) | (m >= self.params.plaintext_modulus)).any():
            raise PlaintextRangeError(
                f"Plaintext values must be in [0, {self.params.plaintext_modulus})"
            )
        return m.astype(np.uint32) << np.uint32(self.params.shift)

    def sample_noise(self) -> np.ndarray:
        """Rounded Gaussian noise as uint32 (negative values wrap)."""
        e = np.rint(self.rng.gaussian_vector(self.params.sigma, self.n)).astype(np.int64)
        return e.astype(np.uint32)

    def residual(self, ciphertext: Ciphertext) -> RingElement:
        """b - sum_i s_i * a_i, i.e. encode(m) + noise."""
        if (ciphertext.k, ciphertext.n) != (self.k, self.n):
            raise DimensionMismatchError(
                f"Ciphertext (k, n)=({ciphertext.k}, {ciphertext.n}) "
                f"does not match key (k, n)=({self.k}, {self.n})"
            )
        return ciphertext.phase - self._masked(ciphertext.mask)

    # -------------------------
    # Encrypt / Decrypt
    # -------------------------

    def encrypt(self, plaintext) -> Ciphertext:
        """
        Encrypt n integers in [0, 2^bits).

        Fresh masks and fresh noise are drawn on every call, so encrypting
        the same plaintext twice gives different ciphertexts.
        """
        encoded = self.encode(plaintext)

        mask = [RingElement.exact(self.rng.u32_vector(self.n)) for _ in range(self.k)]
        phase = self._masked(mask)

        noisy = encoded + self.sample_noise()
        phase = phase + RingElement.exact(noisy)

        return Ciphertext(mask, phase)

    def decrypt(self, ciphertext: Ciphertext) -> np.ndarray:
        """
        Recover the n plaintext integers (uint32 array).

        Correct as long as the accumulated noise is below 2^(31-bits);
        past that the result is silently wrong.
        """
        noisy = self.residual(ciphertext).coefficients
        # center the value inside its interval, then rounding is a shift
        centered = noisy + np.uint32(self.params.half_step)
        return centered >> np.uint32(self.params.shift)
