"""Binary and text encodings of field matrices.

The binary form is a header of three little-endian 32-bit integers
(rows, cols, storage order) followed by every element as a little-endian
signed 64-bit integer, in storage order.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable

from fieldmat.field import FieldConfig
from fieldmat.matrix import Mat, Order

_HEADER = struct.Struct("<iii")
_VALUE = struct.Struct("<q")


def _store(mat: Mat, values: Iterable[int]) -> None:
    """Write ``values`` into ``mat`` in its storage order."""
    rows, cols = mat.shape
    for k, value in enumerate(values):
        if mat.order is Order.COL_MAJOR:
            mat[k % rows, k // rows] = value
        else:
            mat[k // cols, k % cols] = value


def _parse(data: bytes) -> tuple[int, int, Order, list[int]]:
    if len(data) < _HEADER.size:
        raise ValueError("data is too short for a matrix header")
    rows, cols, order = _HEADER.unpack_from(data, 0)
    if rows < 0 or cols < 0:
        raise ValueError("matrix dimensions must not be negative")
    if order not in (Order.COL_MAJOR, Order.ROW_MAJOR):
        raise ValueError(f"unknown storage order {order}")
    count = rows * cols
    expected = _HEADER.size + count * _VALUE.size
    if len(data) < expected:
        raise ValueError(f"data holds {len(data)} bytes, {expected} needed")
    values = [v for (v,) in _VALUE.iter_unpack(data[_HEADER.size:expected])]
    return rows, cols, Order(order), values


def encoded_length(mat: Mat) -> int:
    """Number of bytes ``to_bytes`` produces for ``mat``."""
    return _HEADER.size + mat.size * _VALUE.size


def to_bytes(mat: Mat) -> bytes:
    """Encode ``mat`` with its shape, storage order and values."""
    rows, cols = mat.shape
    parts = [_HEADER.pack(rows, cols, int(mat.order))]
    try:
        parts.extend(_VALUE.pack(v) for v in mat.values())
    except struct.error as exc:
        raise ValueError("a matrix value does not fit in 64 bits") from exc
    return b"".join(parts)


def from_bytes(data: bytes, config: FieldConfig | None = None) -> Mat:
    """Decode a matrix written by ``to_bytes``."""
    rows, cols, order, values = _parse(data)
    mat = Mat(rows, cols, 0, config, order)
    _store(mat, values)
    return mat


def add_from_bytes(mat: Mat, data: bytes) -> None:
    """Add an encoded matrix of the same shape to ``mat`` in place.

    If the encoded storage order differs, ``mat`` is reordered to match it
    first. Sums are kept within ``(-modulus, modulus)``.
    """
    rows, cols, order, values = _parse(data)
    if (rows, cols) != mat.shape:
        raise ValueError(f"cannot add a {(rows, cols)} matrix to {mat.shape}")
    if mat.order != order:
        mat.reorder()
    m = mat.config.modulus
    sums = []
    for current, incoming in zip(mat.values(), values):
        v = current + incoming
        if v >= m:
            v -= m
        if v <= -m:
            v += m
        sums.append(v)
    _store(mat, sums)


def to_text(mat: Mat) -> str:
    """Shape and values as decimal numbers, each followed by a space."""
    rows, cols = mat.shape
    return "".join(f"{n} " for n in [rows, cols, *mat.values()])