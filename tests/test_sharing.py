import math
import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fieldmat.field import FieldConfig, GaussianNoise
from fieldmat.matrix import Mat, Order
from fieldmat.sharing import poly_eval, random_neg, secret_share, truncated_normal


def _reconstruct(points, modulus):
    """Lagrange interpolation at zero."""
    total = 0
    for xi, yi in points:
        num, den = 1, 1
        for xj, _ in points:
            if xj != xi:
                num = num * (-xj) % modulus
                den = den * (xi - xj) % modulus
        total += yi * num * pow(den, -1, modulus)
    return total % modulus


def test_poly_eval_constant():
    assert poly_eval([7], 123) == 7


def test_poly_eval_lowest_first():
    assert poly_eval([1, 2, 3], 2) == 17


def test_poly_eval_empty_raises():
    with pytest.raises(ValueError):
        poly_eval([], 3)


def test_threshold_one_gives_copies():
    mat = Mat.from_rows([[1, 2], [3, 4]])
    shares = secret_share(mat, 3, 1, random.Random(0))
    assert len(shares) == 3
    assert all(s.to_rows() == [[1, 2], [3, 4]] for s in shares)


@settings(max_examples=20)
@given(st.lists(st.integers(min_value=0, max_value=(1 << 61) - 2), min_size=1, max_size=6),
       st.integers(min_value=0, max_value=1000))
def test_shares_reconstruct(values, seed):
    cfg = FieldConfig()
    mat = Mat.from_rows([values], cfg)
    shares = secret_share(mat, 5, 3, random.Random(seed))
    for j, secret in enumerate(values):
        points = [(k + 2, shares[k][0, j]) for k in (0, 2, 4)]
        assert _reconstruct(points, cfg.modulus) == secret


def test_shares_are_in_field_and_keep_order():
    mat = Mat(2, 3, 5, order=Order.ROW_MAJOR)
    shares = secret_share(mat, 2, 2, random.Random(1))
    m = mat.config.modulus
    for s in shares:
        assert s.order is Order.ROW_MAJOR
        assert all(0 <= v < m for v in s.values())


def test_invalid_threshold_raises():
    with pytest.raises(ValueError):
        secret_share(Mat(1, 1), 2, 0)


def test_truncated_normal_zero_stddev():
    mat = Mat(2, 2)
    truncated_normal(mat, 0.5, 0.0, GaussianNoise(random.Random(3)))
    assert mat.values() == [mat.config.ie // 2] * 4


def test_truncated_normal_follows_noise_row_by_row():
    mat = Mat(2, 3)
    truncated_normal(mat, 0.0, 1.0, GaussianNoise(random.Random(9)))
    reference = GaussianNoise(random.Random(9))
    expected = [[math.floor(reference.sample(0.0, 1.0) * mat.config.ie) for _ in range(3)]
                for _ in range(2)]
    assert mat.to_rows() == expected


def test_random_neg_values_are_small_magnitude():
    mat = Mat(4, 5)
    random_neg(mat, random.Random(5))
    cfg = mat.config
    for v in mat.values():
        assert v < cfg.ie or v > cfg.modulus - cfg.ie


def test_random_neg_is_deterministic_and_column_major():
    a = Mat(3, 3, order=Order.ROW_MAJOR)
    b = Mat(3, 3)
    random_neg(a, random.Random(11))
    random_neg(b, random.Random(11))
    assert a.order is Order.COL_MAJOR
    assert a.values() == b.values()