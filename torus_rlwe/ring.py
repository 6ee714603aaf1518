# torus_rlwe/ring.py
# ------------------------------------------------------------
# Ring arithmetic in Z_{2^32}[x]/(x^n + 1).
#
# Coefficients live in numpy uint32 arrays. Array arithmetic on uint32
# wraps modulo 2^32 silently, which is exactly the coefficient ring we
# want (it approximates the torus R/Z used by TFHE).
# ------------------------------------------------------------

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from .errors import DimensionMismatchError

MASK32 = 0xFFFFFFFF


def as_u32(values) -> np.ndarray:
    """Convert an integer sequence to a flat uint32 array, reducing mod 2^32."""
    if isinstance(values, np.ndarray):
        arr = values.reshape(-1)
        if arr.dtype.kind in "biu":
            # integer casts wrap (two's complement for negative values)
            return arr.astype(np.uint32)
        if arr.dtype.kind != "O":
            raise TypeError(f"Ring coefficients must be integers, got dtype {arr.dtype}")
        values = arr.tolist()

    out = []
    for v in values:
        if not isinstance(v, (int, np.integer)):
            raise TypeError(f"Ring coefficients must be integers, got {type(v).__name__}")
        out.append(int(v) & MASK32)
    return np.array(out, dtype=np.uint32)


def fold_coefficients(values, n: int) -> np.ndarray:
    """
    Reduce an arbitrary-length coefficient list modulo (x^n + 1).

    Entry i lands at position i mod 2n of a 2n buffer (later entries
    overwrite earlier ones), then result[i] = buf[i] - buf[i + n].
    """
    src = as_u32(values)
    buf = np.zeros(2 * n, dtype=np.uint32)

    start = max(0, src.shape[0] - 2 * n)
    idx = np.arange(start, src.shape[0]) % (2 * n)
    buf[idx] = src[start:]

    return buf[:n] - buf[n:]


# ------------------------------------------------------------
# Multiplication strategies
# ------------------------------------------------------------

class SchoolbookMultiplier:
    """
    Reference negacyclic convolution, O(n^2).

    result[i] = sum_{j<=i} a[j]*b[i-j] - sum_{j>i} a[j]*b[n-(j-i)]
    """

    name = "schoolbook"

    def __call__(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        n = a.shape[0]
        product = np.zeros(2 * n, dtype=np.uint32)
        for i in range(n):
            # uint32 scalar * uint32 array stays uint32 and wraps
            product[i:i + n] += a[i] * b
        return product[:n] - product[n:]

    def __repr__(self) -> str:
        return "SchoolbookMultiplier()"


SCHOOLBOOK = SchoolbookMultiplier()


# ------------------------------------------------------------
# Ring element
# ------------------------------------------------------------

class RingElement:
    """
    A polynomial modulo x^n + 1 with coefficients in Z_{2^32}.

    RingElement(n) is zero, RingElement(n, coeffs) folds coeffs of any
    length into the ring, RingElement.exact(coeffs) takes exactly n
    coefficients as they are. Values are immutable.
    """

    __slots__ = ("_coeffs",)

    def __init__(self, n: int, coefficients: Iterable[int] = ()):
        n = int(n)
        if n < 1:
            raise ValueError(f"Ring dimension must be positive, got n={n}")
        self._coeffs = fold_coefficients(coefficients, n)
        self._coeffs.flags.writeable = False

    @classmethod
    def exact(cls, coefficients) -> "RingElement":
        coeffs = as_u32(coefficients)
        if coeffs.shape[0] < 1:
            raise ValueError("An exact ring element needs at least one coefficient")
        return cls._wrap(coeffs)

    @classmethod
    def _wrap(cls, coeffs: np.ndarray) -> "RingElement":
        # trusted path: coeffs is a fresh uint32 array of the right length
        obj = cls.__new__(cls)
        coeffs.flags.writeable = False
        obj._coeffs = coeffs
        return obj

    # -------------------------
    # Accessors
    # -------------------------

    @property
    def n(self) -> int:
        return self._coeffs.shape[0]

    @property
    def coefficients(self) -> np.ndarray:
        """Read-only uint32 view of the coefficients."""
        return self._coeffs

    def to_list(self) -> list[int]:
        return [int(c) for c in self._coeffs]

    def __len__(self) -> int:
        return self.n

    def _check(self, other: "RingElement") -> None:
        if not isinstance(other, RingElement):
            raise TypeError(f"Expected RingElement, got {type(other).__name__}")
        if other.n != self.n:
            raise DimensionMismatchError(
                f"Ring dimension mismatch: n={self.n} vs n={other.n}"
            )

    # -------------------------
    # Arithmetic
    # -------------------------

    def add(self, other: "RingElement") -> "RingElement":
        self._check(other)
        return RingElement._wrap(self._coeffs + other._coeffs)

    def subtract(self, other: "RingElement") -> "RingElement":
        self._check(other)
        return RingElement._wrap(self._coeffs - other._coeffs)

    def multiply(self, other: "RingElement", multiplier: Optional[object] = None) -> "RingElement":
        self._check(other)
        mul = multiplier if multiplier is not None else SCHOOLBOOK
        return RingElement._wrap(np.asarray(mul(self._coeffs, other._coeffs), dtype=np.uint32))

    def __add__(self, other: "RingElement") -> "RingElement":
        if not isinstance(other, RingElement):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "RingElement") -> "RingElement":
        if not isinstance(other, RingElement):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: "RingElement") -> "RingElement":
        if not isinstance(other, RingElement):
            return NotImplemented
        return self.multiply(other)

    def __neg__(self) -> "RingElement":
        return RingElement._wrap(np.zeros_like(self._coeffs) - self._coeffs)

    # -------------------------
    # Comparison
    # -------------------------

    def equals(self, other: "RingElement") -> bool:
        return (
            isinstance(other, RingElement)
            and other.n == self.n
            and bool(np.array_equal(self._coeffs, other._coeffs))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RingElement):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.n, self._coeffs.tobytes()))

    def __repr__(self) -> str:
        if self.n <= 8:
            body = ", ".join(str(int(c)) for c in self._coeffs)
        else:
            head = ", ".join(str(int(c)) for c in self._coeffs[:4])
            body = f"{head}, ..."
        return f"RingElement(n={self.n}, [{body}])"
