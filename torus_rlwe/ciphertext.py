from __future__ import annotations

from typing import Iterable

from .errors import DimensionMismatchError
from .ring import RingElement


class Ciphertext:
    """
    k mask components a_0..a_{k-1} and one phase component b.

    b = sum_i s_i * a_i + encode(m) + e for a secret key s. Adding two
    ciphertexts adds the underlying plaintexts (mod 2^bits) as long as the
    summed noise stays below the decoding threshold.
    """

    __hash__ = None

    def __init__(self, mask: Iterable[RingElement], phase: RingElement):
        self.mask = list(mask)
        self.phase = phase
        if not self.mask:
            raise ValueError("A ciphertext needs at least one mask component")
        for a in self.mask:
            if a.n != phase.n:
                raise DimensionMismatchError(
                    f"Mask component has n={a.n} but phase has n={phase.n}"
                )

    @property
    def k(self) -> int:
        return len(self.mask)

    @property
    def n(self) -> int:
        return self.phase.n

    def _check(self, other: "Ciphertext") -> None:
        if (self.k, self.n) != (other.k, other.n):
            raise DimensionMismatchError(
                f"Ciphertext shape mismatch: (k, n)=({self.k}, {self.n}) vs ({other.k}, {other.n})"
            )

    def copy(self) -> "Ciphertext":
        # ring elements are immutable, a new list is enough
        return Ciphertext(list(self.mask), self.phase)

    def __add__(self, other: "Ciphertext") -> "Ciphertext":
        if not isinstance(other, Ciphertext):
            return NotImplemented
        self._check(other)
        return Ciphertext(
            [a + b for a, b in zip(self.mask, other.mask)],
            self.phase + other.phase,
        )

    def __iadd__(self, other: "Ciphertext") -> "Ciphertext":
        if not isinstance(other, Ciphertext):
            return NotImplemented
        self._check(other)
        for i, a in enumerate(other.mask):
            self.mask[i] = self.mask[i] + a
        self.phase = self.phase + other.phase
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ciphertext):
            return NotImplemented
        if (self.k, self.n) != (other.k, other.n):
            return False
        return self.phase == other.phase and all(
            a == b for a, b in zip(self.mask, other.mask)
        )

    def equals(self, other: "Ciphertext") -> bool:
        return self == other

    def __repr__(self) -> str:
        return f"Ciphertext(k={self.k}, n={self.n})"
