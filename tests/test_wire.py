import struct

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fieldmat.matrix import Mat, Order
from fieldmat.wire import add_from_bytes, encoded_length, from_bytes, to_bytes, to_text


def test_encoded_length_matches_bytes():
    mat = Mat(3, 4, 7)
    assert encoded_length(mat) == 12 + 12 * 8
    assert len(to_bytes(mat)) == encoded_length(mat)


def test_header_layout():
    mat = Mat(2, 3, order=Order.ROW_MAJOR)
    assert to_bytes(mat)[:12] == struct.pack("<iii", 2, 3, 1)


@settings(max_examples=30)
@given(st.integers(min_value=1, max_value=4), st.integers(min_value=1, max_value=4),
       st.sampled_from(list(Order)), st.data())
def test_round_trip(rows, cols, order, data):
    m = (1 << 61) - 1
    values = data.draw(st.lists(st.integers(min_value=-m + 1, max_value=m - 1),
                                min_size=rows * cols, max_size=rows * cols))
    mat = Mat(rows, cols, 0, order=order)
    for k, v in enumerate(values):
        mat[k // cols, k % cols] = v
    back = from_bytes(to_bytes(mat))
    assert back.order is order
    assert back.to_rows() == mat.to_rows()


def test_truncated_data_raises():
    with pytest.raises(ValueError):
        from_bytes(to_bytes(Mat(2, 2, 1))[:-1])


def test_add_from_bytes_adds():
    a = Mat.from_rows([[1, 2], [3, 4]])
    b = Mat.from_rows([[10, 20], [30, 40]])
    add_from_bytes(a, to_bytes(b))
    assert a.to_rows() == [[11, 22], [33, 44]]


def test_add_from_bytes_reorders_to_match():
    a = Mat.from_rows([[1, 2], [3, 4]])
    b = Mat.from_rows([[1, 1], [1, 1]])
    b.reorder()
    add_from_bytes(a, to_bytes(b))
    assert a.order is Order.ROW_MAJOR
    assert a.to_rows() == [[2, 3], [4, 5]]


def test_add_from_bytes_wraps():
    a = Mat(1, 1)
    m = a.config.modulus
    a[0, 0] = m - 1
    b = Mat(1, 1, 5)
    add_from_bytes(a, to_bytes(b))
    assert a[0, 0] == 4


def test_add_from_bytes_shape_mismatch():
    with pytest.raises(ValueError):
        add_from_bytes(Mat(2, 2), to_bytes(Mat(1, 4)))


def test_to_text():
    assert to_text(Mat.from_rows([[3, 4]])) == "1 2 3 4 "