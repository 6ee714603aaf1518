import pytest

from torus_rlwe import Ciphertext, DimensionMismatchError, RingElement


def make(mask_values, phase_values, n=4):
    return Ciphertext([RingElement(n, m) for m in mask_values], RingElement(n, phase_values))


def test_shape():
    c = make([[1], [2], [3]], [4])
    assert (c.k, c.n) == (3, 4)


def test_addition_is_componentwise():
    c1 = make([[1, 2], [3]], [2**32 - 1, 5])
    c2 = make([[4, 5], [6]], [1, 5])
    assert c1 + c2 == make([[5, 7], [9]], [0, 10])


def test_in_place_addition_updates_all_components():
    c1 = make([[1, 2], [3]], [7])
    c2 = make([[4, 5], [6]], [1])
    alias = c1
    c1 += c2
    assert c1 is alias
    assert c1 == make([[5, 7], [9]], [8])
    assert c2 == make([[4, 5], [6]], [1])


def test_addition_leaves_operands_untouched():
    c1 = make([[1]], [1])
    c2 = make([[2]], [2])
    c1 + c2
    assert c1 == make([[1]], [1])
    assert c2 == make([[2]], [2])


def test_copy_is_independent():
    c = make([[1]], [1])
    d = c.copy()
    d += make([[1]], [1])
    assert c == make([[1]], [1])
    assert d == make([[2]], [2])


def test_equality_compares_every_component():
    base = make([[1], [2]], [3])
    assert base == make([[1], [2]], [3])
    assert base.equals(make([[1], [2]], [3]))
    assert base != make([[1], [9]], [3])
    assert base != make([[1], [2]], [9])
    assert base != make([[1]], [3])
    assert base != "ciphertext"


def test_mismatched_k_rejected():
    with pytest.raises(DimensionMismatchError):
        make([[1], [2]], [3]) + make([[1]], [3])


def test_mismatched_n_rejected():
    with pytest.raises(DimensionMismatchError):
        c = make([[1]], [1])
        c += make([[1]], [1], n=8)


def test_inconsistent_components_rejected():
    with pytest.raises(DimensionMismatchError):
        Ciphertext([RingElement(8)], RingElement(4))
    with pytest.raises(ValueError):
        Ciphertext([], RingElement(4))


def test_not_hashable():
    with pytest.raises(TypeError):
        hash(make([[1]], [1]))
