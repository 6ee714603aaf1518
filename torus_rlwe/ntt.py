# torus_rlwe/ntt.py
# ------------------------------------------------------------
# NTT-based negacyclic multiplication, bit-identical to the
# schoolbook product in Z_{2^32}[x]/(x^n + 1).
#
# Z_{2^32} has no useful roots of unity, so we compute the exact
# integer convolution over a prime field and reduce mod 2^32 afterwards:
#
# - split every coefficient into four 8-bit limbs,
# - a*b mod 2^32 = sum_{s+t<4} 2^(8(s+t)) * (a_s * b_t)   (x^n + 1 ring)
# - each group C_d = sum_{s+t=d} a_s * b_t has |coeff| <= 4 * n * 255^2,
#   so it is recovered exactly from its residue mod a prime q > 2*bound
#   (centered lift),
# - q < 2^31 keeps every butterfly product inside int64.
#
# Negacyclic wrap uses the usual twist by powers of psi, a primitive
# 2n-th root of unity (needs 2n | q - 1).
# ------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from .ring import MASK32

logger = logging.getLogger(__name__)

LIMB_BITS = 8
LIMBS = 32 // LIMB_BITS
PRIME_CEILING = 1 << 31


def is_prime(x: int) -> bool:
    if x < 2:
        return False
    if x % 2 == 0:
        return x == 2
    d = 3
    while d * d <= x:
        if x % d == 0:
            return False
        d += 2
    return True


def _factorize(n: int) -> list[int]:
    """Prime factorization (distinct primes) of n."""
    factors = []
    x = n
    p = 2
    while p * p <= x:
        if x % p == 0:
            factors.append(p)
            while x % p == 0:
                x //= p
        p += 1 if p == 2 else 2
    if x > 1:
        factors.append(x)
    return factors


def _find_generator_mod_prime(q: int) -> int:
    """
    Find a primitive generator g of multiplicative group Z_q^* (q prime).
    """
    phi = q - 1
    primes = _factorize(phi)
    for g in range(2, q):
        if all(pow(g, phi // p, q) != 1 for p in primes):
            return g
    raise ValueError(f"No generator found for q={q} (unexpected if prime).")


def _bit_reverse_indices(n: int) -> np.ndarray:
    """Return bit-reversal permutation indices for n (power of two)."""
    logn = n.bit_length() - 1
    rev = np.zeros(n, dtype=np.int64)
    for i in range(n):
        x = i
        r = 0
        for _ in range(logn):
            r = (r << 1) | (x & 1)
            x >>= 1
        rev[i] = r
    return rev


def limb_product_bound(n: int) -> int:
    """Largest |coefficient| of a grouped limb convolution."""
    limb_max = (1 << LIMB_BITS) - 1
    return LIMBS * n * limb_max * limb_max


def find_ntt_prime(n: int) -> int:
    """
    Largest prime q < 2^31 with q = 1 (mod 2n) and q > 2 * limb_product_bound(n).
    """
    step = 2 * n
    floor = 2 * limb_product_bound(n)
    q = ((PRIME_CEILING - 2) // step) * step + 1
    while q > floor:
        if is_prime(q):
            return q
        q -= step
    raise ValueError(
        f"No NTT prime below 2^31 for n={n}: need q = 1 (mod {step}) and q > {floor}"
    )


@dataclass
class NTTPlan:
    n: int
    q: int

    n_inv: int
    psi_pows: np.ndarray
    psi_pows_inv: np.ndarray

    rev: np.ndarray
    stage_roots: list[np.ndarray]
    stage_roots_inv: list[np.ndarray]


@lru_cache(maxsize=None)
def make_ntt_plan(n: int) -> NTTPlan:
    """
    Build a negacyclic NTT plan for Z_q[x]/(x^n + 1) with q = find_ntt_prime(n).

    Requirements:
    - n must be power of two
    """
    if n < 1 or n & (n - 1) != 0:
        raise ValueError(f"NTT requires n to be a power of two, got n={n}.")

    q = find_ntt_prime(n)
    g = _find_generator_mod_prime(q)

    # psi is a primitive 2n-th root of unity, omega = psi^2 a primitive n-th root
    psi = pow(g, (q - 1) // (2 * n), q)
    omega = (psi * psi) % q
    psi_inv = pow(psi, q - 2, q)
    omega_inv = pow(omega, q - 2, q)

    psi_pows = np.empty(n, dtype=np.int64)
    psi_pows_inv = np.empty(n, dtype=np.int64)
    w = 1
    w_inv = 1
    for i in range(n):
        psi_pows[i] = w
        psi_pows_inv[i] = w_inv
        w = (w * psi) % q
        w_inv = (w_inv * psi_inv) % q

    # Precompute roots for each stage (DIT Cooley-Tukey).
    logn = n.bit_length() - 1
    stage_roots: list[np.ndarray] = []
    stage_roots_inv: list[np.ndarray] = []

    for s in range(1, logn + 1):
        m = 1 << s
        half = m >> 1

        w_m = pow(omega, n // m, q)
        w_m_inv = pow(omega_inv, n // m, q)

        roots = np.empty(half, dtype=np.int64)
        roots_inv = np.empty(half, dtype=np.int64)

        w = 1
        w_inv = 1
        for j in range(half):
            roots[j] = w
            roots_inv[j] = w_inv
            w = (w * w_m) % q
            w_inv = (w_inv * w_m_inv) % q

        stage_roots.append(roots)
        stage_roots_inv.append(roots_inv)

    logger.debug(f"NTT plan for n={n}: q={q}, generator={g}")

    return NTTPlan(
        n=n,
        q=q,
        n_inv=pow(n, q - 2, q),
        psi_pows=psi_pows,
        psi_pows_inv=psi_pows_inv,
        rev=_bit_reverse_indices(n),
        stage_roots=stage_roots,
        stage_roots_inv=stage_roots_inv,
    )


def _butterflies(a: np.ndarray, rev: np.ndarray, roots_per_stage: list[np.ndarray], q: int) -> None:
    a[:] = a[rev]
    for s, roots in enumerate(roots_per_stage, start=1):
        m = 1 << s
        half = m >> 1

        blocks = a.reshape(-1, m)
        u = blocks[:, :half].copy()
        v = blocks[:, half:]

        t = (v * roots) % q
        blocks[:, :half] = (u + t) % q
        blocks[:, half:] = (u - t) % q


def ntt_inplace(a: np.ndarray, plan: NTTPlan) -> None:
    """In-place forward NTT (DIT), vectorized per stage."""
    _butterflies(a, plan.rev, plan.stage_roots, plan.q)


def intt_inplace(a: np.ndarray, plan: NTTPlan) -> None:
    """In-place inverse NTT (DIT with inverse roots), vectorized per stage."""
    _butterflies(a, plan.rev, plan.stage_roots_inv, plan.q)
    a[:] = (a * plan.n_inv) % plan.q


def forward(a: np.ndarray, plan: NTTPlan) -> np.ndarray:
    """Twist by psi^i and transform."""
    fa = (np.asarray(a, dtype=np.int64) * plan.psi_pows) % plan.q
    ntt_inplace(fa, plan)
    return fa


def inverse(fa: np.ndarray, plan: NTTPlan) -> np.ndarray:
    """Inverse transform, untwist and lift to the centered range (-q/2, q/2]."""
    out = np.array(fa, dtype=np.int64, copy=True)
    intt_inplace(out, plan)
    out = (out * plan.psi_pows_inv) % plan.q
    return np.where(out > plan.q // 2, out - plan.q, out)


class NTTMultiplier:
    """
    Drop-in replacement for SchoolbookMultiplier on power-of-two n.

    Produces exactly the same uint32 coefficients as the schoolbook
    negacyclic convolution.
    """

    name = "ntt"

    def __init__(self, n: int):
        self.n = int(n)
        self.plan = make_ntt_plan(self.n)

    def _limbs(self, x: np.ndarray) -> list[np.ndarray]:
        x = np.asarray(x, dtype=np.uint32)
        if x.shape[0] != self.n:
            raise ValueError(
                f"Polynomial length mismatch: expected n={self.n}, got {x.shape[0]}"
            )
        limb_mask = (1 << LIMB_BITS) - 1
        return [
            forward(((x >> (LIMB_BITS * s)) & limb_mask).astype(np.int64), self.plan)
            for s in range(LIMBS)
        ]

    def __call__(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        q = self.plan.q
        fa = self._limbs(a)
        fb = self._limbs(b)

        total = np.zeros(self.n, dtype=np.int64)
        for d in range(LIMBS):
            acc = np.zeros(self.n, dtype=np.int64)
            for s in range(d + 1):
                acc = (acc + fa[s] * fb[d - s]) % q
            total += inverse(acc, self.plan) << (LIMB_BITS * d)

        return (total & MASK32).astype(np.uint32)

    def __repr__(self) -> str:
        return f"NTTMultiplier(n={self.n}, q={self.plan.q})"
