"""
Symmetric, additively homomorphic encryption over Z_{2^32}[x]/(x^n + 1).

    >>> key = SecretKey(Parameters(k=2, n=4, bits=4))
    >>> c = key.encrypt([1, 2, 3, 4]) + key.encrypt([5, 8, 15, 0])
    >>> key.decrypt(c).tolist()
    [6, 10, 2, 4]

Not a production cryptosystem: the default randomness source is numpy's
PCG64. Pass SystemRandomSource() (or your own RandomSource) for anything
beyond experiments.
"""

from .ciphertext import Ciphertext
from .errors import DimensionMismatchError, PlaintextRangeError, TorusRLWEError
from .ntt import NTTMultiplier
from .params import TFHE1024, Parameters
from .ring import RingElement, SchoolbookMultiplier
from .sampling import NumpyRandomSource, RandomSource, SystemRandomSource
from .secret_key import SecretKey

__all__ = [
    "Ciphertext",
    "DimensionMismatchError",
    "NTTMultiplier",
    "NumpyRandomSource",
    "Parameters",
    "PlaintextRangeError",
    "RandomSource",
    "RingElement",
    "SchoolbookMultiplier",
    "SecretKey",
    "SystemRandomSource",
    "TFHE1024",
    "TorusRLWEError",
]
