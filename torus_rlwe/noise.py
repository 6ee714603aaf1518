# torus_rlwe/noise.py
# ------------------------------------------------------------
# Noise diagnostics. Nothing in here changes how encryption or
# addition behave; it only predicts or measures how much of the
# noise budget a ciphertext has used.
#
# A fresh ciphertext carries rounded Gaussian noise with variance
# about sigma^2 + 1/12. Summing `terms` fresh ciphertexts adds the
# variances. A coefficient decodes correctly while its noise lies in
# [-2^(31-b), 2^(31-b)).
# ------------------------------------------------------------

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .ciphertext import Ciphertext
from .params import Parameters
from .secret_key import SecretKey

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 2.0 ** -40
ROUNDING_VARIANCE = 1.0 / 12.0


def decoding_threshold(bits: int) -> int:
    return 1 << (31 - bits)


def noise_std(params: Parameters, terms: int = 1) -> float:
    """Expected noise standard deviation of a sum of `terms` fresh ciphertexts."""
    if terms < 0:
        raise ValueError(f"terms must be non-negative, got {terms}")
    if params.sigma == 0:
        return 0.0
    return math.sqrt(terms * (params.sigma ** 2 + ROUNDING_VARIANCE))


def failure_probability(params: Parameters, terms: int = 1) -> float:
    """
    Probability that at least one of the n coefficients decodes wrongly
    (Gaussian tail, union bound over coefficients).
    """
    std = noise_std(params, terms)
    if std == 0.0:
        return 0.0
    per_coeff = math.erfc(params.half_step / (std * math.sqrt(2.0)))
    return min(1.0, params.n * per_coeff)


def max_safe_additions(params: Parameters, target: float = DEFAULT_TARGET) -> int:
    """
    Largest number of fresh ciphertexts that can be summed while the
    failure probability stays at or below `target`. Returns 0 when even a
    single fresh ciphertext exceeds it.
    """
    if not 0.0 < target < 1.0:
        raise ValueError(f"target must be in (0, 1), got {target}")
    if failure_probability(params, 1) > target:
        return 0
    if params.sigma == 0:
        raise ValueError("sigma=0 gives a noiseless scheme with no addition limit")

    lo, hi = 1, 2
    while failure_probability(params, hi) <= target:
        lo, hi = hi, hi * 2

    # invariant: lo is safe, hi is not
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if failure_probability(params, mid) <= target:
            lo = mid
        else:
            hi = mid
    return lo


@dataclass
class NoiseBudget:
    """
    Running estimate for a ciphertext built from `terms` fresh encryptions.

    Mirror every ciphertext addition with `+` or `absorb` on the budgets.
    """
    params: Parameters
    terms: int = 1

    def __add__(self, other: "NoiseBudget") -> "NoiseBudget":
        if other.params != self.params:
            raise ValueError("Cannot combine noise budgets for different parameters")
        return NoiseBudget(self.params, self.terms + other.terms)

    def absorb(self, other: "NoiseBudget") -> "NoiseBudget":
        if other.params != self.params:
            raise ValueError("Cannot combine noise budgets for different parameters")
        self.terms += other.terms
        return self

    @property
    def std(self) -> float:
        return noise_std(self.params, self.terms)

    @property
    def failure_probability(self) -> float:
        return failure_probability(self.params, self.terms)

    def remaining(self, target: float = DEFAULT_TARGET) -> int:
        return max(0, max_safe_additions(self.params, target) - self.terms)

    def exhausted(self, target: float = DEFAULT_TARGET) -> bool:
        return self.failure_probability > target


def measure_noise(key: SecretKey, ciphertext: Ciphertext, plaintext) -> np.ndarray:
    """Actual signed noise per coefficient, given the plaintext it should decrypt to."""
    residual = key.residual(ciphertext).coefficients
    diff = residual - key.encode(plaintext)
    return diff.view(np.int32).astype(np.int64)


def evaluate_chained_additions(key: SecretKey, plaintext, count: int) -> dict:
    """
    Sum `count` fresh encryptions of `plaintext` and check the result.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    params = key.params
    m = np.asarray(plaintext, dtype=np.int64)

    acc = key.encrypt(m)
    for _ in range(count - 1):
        acc += key.encrypt(m)

    expected = (m * count) % params.plaintext_modulus
    dec = np.asarray(key.decrypt(acc), dtype=np.int64)

    matches = dec == expected
    correct = int(matches.sum())
    noise = measure_noise(key, acc, expected)

    result = {
        "additions": int(count),
        "total_coefficients": int(params.n),
        "correct_coefficients": correct,
        "coefficient_accuracy": correct / params.n,
        "success": correct == params.n,
        "max_abs_noise": int(np.abs(noise).max()),
        "predicted_std": noise_std(params, count),
        "threshold": params.half_step,
        "mismatch_positions": np.where(~matches)[0].tolist()[:20],
    }
    logger.info(
        f"{count} additions: accuracy={result['coefficient_accuracy']:.4f}, "
        f"max |noise|={result['max_abs_noise']} (threshold {params.half_step})"
    )
    return result
