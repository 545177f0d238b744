"""Joining and splitting matrices."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fieldmat.matrix import Mat, Order


def _store(mat: Mat, values: Iterable[int]) -> None:
    """Write ``values`` into ``mat`` in its storage order."""
    rows, cols = mat.shape
    for k, value in enumerate(values):
        if mat.order is Order.COL_MAJOR:
            mat[k % rows, k // rows] = value
        else:
            mat[k // cols, k % cols] = value


def _check_vertical(res: Mat, a: Mat, b: Mat) -> None:
    (rr, rc), (ar, ac), (br, bc) = res.shape, a.shape, b.shape
    if rr != ar + br or rc != ac or rc != bc:
        raise ValueError(
            f"cannot stack {a.shape} over {b.shape} into {res.shape}"
        )


def concat(res: Mat, a: Mat, b: Mat) -> None:
    """Write ``a`` into the top rows of ``res`` and ``b`` below it."""
    _check_vertical(res, a, b)
    a_rows, cols = a.shape
    for i, row in enumerate(a.to_rows()):
        for j in range(cols):
            res[i, j] = row[j]
    for i, row in enumerate(b.to_rows()):
        for j in range(cols):
            res[i + a_rows, j] = row[j]


def reconcat(res: Mat, a: Mat, b: Mat, into_a: bool, into_b: bool) -> None:
    """Add the top part of ``res`` to ``a`` and the bottom part to ``b``."""
    _check_vertical(res, a, b)
    a_rows, cols = a.shape
    b_rows = b.shape[0]
    if into_a:
        for i in range(a_rows):
            for j in range(cols):
                a[i, j] = a[i, j] + res[i, j]
    if into_b:
        for i in range(b_rows):
            for j in range(cols):
                b[i, j] = b[i, j] + res[i + a_rows, j]


def hstack(res: Mat, a: Mat, b: Mat) -> None:
    """Fill ``res`` with the storage of ``a`` followed by that of ``b``."""
    if res.size != a.size + b.size:
        raise ValueError("result size must equal the two input sizes together")
    _store(res, a.values() + b.values())


def re_hstack(res: Mat, a: Mat, b: Mat, into_a: bool, into_b: bool) -> None:
    """Split the storage of ``res`` back into ``a`` and ``b``."""
    if res.size != a.size + b.size:
        raise ValueError("result size must equal the two input sizes together")
    values = res.values()
    if into_a:
        _store(a, values[:a.size])
    if into_b:
        _store(b, values[a.size:])


def fill_nonzero(a: Mat, a_src: Mat, b: Mat, b_src: Mat) -> bool:
    """Fill ``a`` with the non-zero values of ``a_src`` and ``b`` with their partners.

    The values of ``b_src`` at the same storage positions go into ``b``.
    Returns False when ``a_src`` runs out of non-zero values; what was
    filled so far stays written.
    """
    if b_src.size < a_src.size:
        raise ValueError("b_src is smaller than a_src")
    if b.size < a.size:
        raise ValueError("b is smaller than a")
    src_a, src_b = a_src.values(), b_src.values()
    pairs = ((x, y) for x, y in zip(src_a, src_b) if x != 0)
    out_a, out_b = a.values(), b.values()
    complete = True
    for i in range(a.size):
        pair = next(pairs, None)
        if pair is None:
            complete = False
            break
        out_a[i], out_b[i] = pair
    _store(a, out_a)
    _store(b, out_b)
    return complete


def merge(mats: Sequence[Mat]) -> Mat:
    """Join matrices with equal row counts side by side."""
    if not mats:
        raise ValueError("nothing to merge")
    rows = mats[0].shape[0]
    if any(m.shape[0] != rows for m in mats):
        raise ValueError("all matrices must have the same number of rows")
    cols = sum(m.shape[1] for m in mats)
    ret = Mat(rows, cols, 0, mats[0].config)
    values = [m[i, j] for m in mats for j in range(m.shape[1]) for i in range(rows)]
    _store(ret, values)
    return ret