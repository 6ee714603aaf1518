import numpy as np
import pytest

from torus_rlwe import DimensionMismatchError, RingElement, SchoolbookMultiplier

U32_MAX = 2**32 - 1


def reference_negacyclic(a, b):
    """Direct transcription of the negacyclic convolution with Python ints."""
    n = len(a)
    out = []
    for i in range(n):
        acc = 0
        for j in range(i + 1):
            acc += a[j] * b[i - j]
        for j in range(i + 1, n):
            acc -= a[j] * b[n - (j - i)]
        out.append(acc % 2**32)
    return out


# ------------------------------------------------------------
# Construction
# ------------------------------------------------------------

def test_default_is_zero():
    assert RingElement(4) == RingElement(4, [0, 0, 0, 0])
    assert RingElement(4).to_list() == [0, 0, 0, 0]


def test_empty_sequence_is_zero():
    assert RingElement(2, []) == RingElement(2, [0, 0])


def test_short_sequence_is_zero_padded():
    p = RingElement(4, [1, 2, 3])
    assert p == RingElement(4, [1, 2, 3, 0])
    assert p != RingElement(4, [0])


def test_folding_subtracts_upper_half():
    p1 = RingElement(8, [10, 9, 8, 7, 6, 5, 4, 3, 2, 1])
    p2 = RingElement(8, [8, 8, 8, 7, 6, 5, 4, 3])
    assert p1 == p2


def test_folding_full_double_length():
    c = [5, 1, 7, 0]
    d = [2, 3, 7, 9]
    expected = [(x - y) % 2**32 for x, y in zip(c, d)]
    assert RingElement(4, c + d).to_list() == expected


def test_longer_than_double_length_aliases_mod_2n():
    # positions 0..3 end up holding 5, 6, 3, 4
    assert RingElement(2, [1, 2, 3, 4, 5, 6]).to_list() == [2, 2]


def test_negative_and_large_values_wrap():
    assert RingElement(2, [-1]) == RingElement(2, [U32_MAX])
    assert RingElement(2, [2**32 + 7, 2**70]).to_list() == [7, 0]


def test_numpy_input():
    arr = np.array([1, 2, 3, 4, 5], dtype=np.int64)
    assert RingElement(4, arr).to_list() == [1 - 5 + 2**32, 2, 3, 4]


def test_float_coefficients_rejected():
    with pytest.raises(TypeError):
        RingElement(4, [1.5, 2.0])
    with pytest.raises(TypeError):
        RingElement(4, np.array([1.0, 2.0]))


def test_invalid_dimension():
    with pytest.raises(ValueError):
        RingElement(0)


def test_exact_keeps_coefficients():
    p = RingElement.exact([1, 2, 3, 4, 5])
    assert p.n == 5
    assert p.to_list() == [1, 2, 3, 4, 5]


def test_values_are_immutable():
    p = RingElement(4, [1, 2, 3])
    with pytest.raises(ValueError):
        p.coefficients[0] = 9


# ------------------------------------------------------------
# Arithmetic
# ------------------------------------------------------------

def test_addition():
    p1 = RingElement(4, [1, 2, 3])
    p2 = RingElement(4, [4, 5, 6])
    assert p1 + p2 == RingElement(4, [5, 7, 9])
    assert p1.add(p2) == p2 + p1


def test_addition_wraps_around():
    p1 = RingElement(4, [U32_MAX, U32_MAX])
    p2 = RingElement(4, [1, 1])
    assert p1 + p2 == RingElement(4, [0, 0])


def test_subtraction_wraps_around():
    p1 = RingElement(4, [0, 5])
    p2 = RingElement(4, [1, 2])
    assert p1 - p2 == RingElement(4, [U32_MAX, 3])
    assert (p1 - p2) + p2 == p1


def test_compound_subtraction_rebinds():
    p = RingElement(4, [5, 5, 5, 5])
    original = p
    p -= RingElement(4, [1, 2, 3, 4])
    assert p == RingElement(4, [4, 3, 2, 1])
    assert original == RingElement(4, [5, 5, 5, 5])


def test_negation():
    p = RingElement(4, [1, 0, 3])
    assert p + (-p) == RingElement(4)


def test_multiplication():
    p1 = RingElement(4, [1, 2, 3])
    p2 = RingElement(4, [4, 5, 6])
    # the constructor reduces modulo x^4 + 1, so this is the expected product
    expected = RingElement(4, [4, 13, 28, 27, 18])
    assert p1 * p2 == expected
    assert (p1 * p2).to_list() == [2**32 - 14, 13, 28, 27]


def test_x_to_the_n_is_minus_one():
    x_last = RingElement(4, [0, 0, 0, 1])
    x = RingElement(4, [0, 1])
    assert x_last * x == RingElement(4, [U32_MAX])


def test_multiplication_matches_reference(rng):
    for n in (1, 3, 8, 17):
        a = rng.u32_vector(n)
        b = rng.u32_vector(n)
        got = RingElement.exact(a) * RingElement.exact(b)
        assert got.to_list() == reference_negacyclic([int(v) for v in a], [int(v) for v in b])


def test_multiplication_with_explicit_strategy():
    p1 = RingElement(4, [1, 2, 3])
    p2 = RingElement(4, [4, 5, 6])
    assert p1.multiply(p2, SchoolbookMultiplier()) == p1 * p2


def test_ring_laws(rng):
    a, b, c = (RingElement.exact(rng.u32_vector(8)) for _ in range(3))
    zero = RingElement(8)
    one = RingElement(8, [1])
    assert a + b == b + a
    assert (a + b) + c == a + (b + c)
    assert a + zero == a
    assert a * one == a
    assert a * b == b * a
    assert a * (b + c) == a * b + a * c


def test_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        RingElement(4) + RingElement(8)
    with pytest.raises(DimensionMismatchError):
        RingElement(4) * RingElement(2)


def test_equality_with_other_types():
    assert RingElement(2, [1]) != [1, 0]
    assert RingElement(2) != RingElement(4)


def test_hashable():
    assert len({RingElement(4, [1]), RingElement(4, [1, 0]), RingElement(4, [2])}) == 2
