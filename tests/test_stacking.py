import pytest

from fieldmat.field import FieldConfig
from fieldmat.matrix import Mat, Order
from fieldmat.stacking import (
    concat,
    fill_nonzero,
    hstack,
    merge,
    re_hstack,
    reconcat,
)

CFG = FieldConfig()


def test_concat_stacks_rows():
    a = Mat.from_rows([[1, 2]], CFG)
    b = Mat.from_rows([[3, 4], [5, 6]], CFG)
    res = Mat(3, 2, 0, CFG)
    concat(res, a, b)
    assert res.to_rows() == a.to_rows() + b.to_rows()


def test_concat_shape_mismatch():
    a = Mat.from_rows([[1, 2]], CFG)
    b = Mat.from_rows([[3, 4, 5]], CFG)
    with pytest.raises(ValueError):
        concat(Mat(2, 2, 0, CFG), a, b)


def test_reconcat_adds_selected_parts():
    res = Mat.from_rows([[1, 2], [3, 4], [5, 6]], CFG)
    a = Mat.from_rows([[10, 20]], CFG)
    b = Mat(2, 2, 0, CFG)
    reconcat(res, a, b, True, False)
    assert a.to_rows() == [[11, 22]]
    assert b.to_rows() == [[0, 0], [0, 0]]


def test_reconcat_into_b_takes_lower_rows():
    res = Mat.from_rows([[1, 2], [3, 4], [5, 6]], CFG)
    a = Mat(1, 2, 0, CFG)
    b = Mat(2, 2, 0, CFG)
    reconcat(res, a, b, False, True)
    assert b.to_rows() == res.to_rows()[1:]
    assert a.to_rows() == [[0, 0]]


def test_reconcat_shape_mismatch():
    with pytest.raises(ValueError):
        reconcat(Mat(2, 2, 0, CFG), Mat(1, 2, 0, CFG), Mat(2, 2, 0, CFG), True, True)


def test_hstack_round_trip():
    a = Mat.from_rows([[1, 2], [3, 4]], CFG)
    b = Mat.from_rows([[5], [6]], CFG)
    res = Mat(2, 3, 0, CFG)
    hstack(res, a, b)
    assert res.values() == a.values() + b.values()
    a2, b2 = Mat(2, 2, 0, CFG), Mat(2, 1, 0, CFG)
    re_hstack(res, a2, b2, True, True)
    assert a2 == a
    assert b2 == b


def test_hstack_size_mismatch():
    with pytest.raises(ValueError):
        hstack(Mat(2, 2, 0, CFG), Mat(1, 1, 0, CFG), Mat(1, 1, 0, CFG))


def test_re_hstack_respects_flags():
    res = Mat.from_rows([[1, 2, 3]], CFG)
    a, b = Mat(1, 1, 0, CFG), Mat(1, 2, 0, CFG)
    re_hstack(res, a, b, False, True)
    assert a.values() == [0]
    assert b.values() == res.values()[1:]


def test_fill_nonzero_skips_zeros():
    a_src = Mat.from_rows([[0, 5, 0, 7, 9]], CFG)
    b_src = Mat.from_rows([[1, 2, 3, 4, 5]], CFG)
    a, b = Mat(1, 3, 0, CFG), Mat(1, 3, 0, CFG)
    assert fill_nonzero(a, a_src, b, b_src) is True
    assert a.values() == [5, 7, 9]
    assert b.values() == [2, 4, 5]


def test_fill_nonzero_reports_shortage():
    a_src = Mat.from_rows([[0, 5, 0]], CFG)
    b_src = Mat.from_rows([[1, 2, 3]], CFG)
    a, b = Mat(1, 2, 0, CFG), Mat(1, 2, 0, CFG)
    assert fill_nonzero(a, a_src, b, b_src) is False
    assert a.values()[0] == 5


def test_fill_nonzero_rejects_short_partner():
    with pytest.raises(ValueError):
        fill_nonzero(Mat(1, 1, 0, CFG), Mat(1, 3, 1, CFG), Mat(1, 1, 0, CFG), Mat(1, 2, 1, CFG))


def test_merge_joins_columns():
    left = Mat.from_rows([[1], [2]], CFG)
    right = Mat.from_rows([[3, 4], [5, 6]], CFG)
    merged = merge([left, right])
    assert merged.shape == (2, 3)
    assert merged.to_rows() == [l + r for l, r in zip(left.to_rows(), right.to_rows())]


def test_merge_handles_row_major_inputs():
    left = Mat.from_rows([[1, 2], [3, 4]], CFG)
    left.reorder()
    assert left.order is Order.ROW_MAJOR
    merged = merge([left, Mat.from_rows([[7], [8]], CFG)])
    assert merged.to_rows() == [r + [x] for r, x in zip(left.to_rows(), [7, 8])]


def test_merge_rejects_row_mismatch():
    with pytest.raises(ValueError):
        merge([Mat(2, 1, 0, CFG), Mat(3, 1, 0, CFG)])


def test_merge_rejects_empty():
    with pytest.raises(ValueError):
        merge([])