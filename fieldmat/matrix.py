"""Dense matrices over a prime field with fixed-point helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from enum import IntEnum
from operator import mul

from fieldmat.field import FieldConfig


class Order(IntEnum):
    """Storage layout of a matrix."""

    COL_MAJOR = 0
    ROW_MAJOR = 1


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _trem(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _tdiv(a, b)


class Mat:
    """A rows x cols matrix of field elements.

    Element-wise additions keep values in ``(-modulus, modulus)``; products,
    shifts and the other field operations reduce their results to
    ``[0, modulus)``.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        fill: int = 0,
        config: FieldConfig | None = None,
        order: Order = Order.COL_MAJOR,
    ) -> None:
        if rows < 0 or cols < 0:
            raise ValueError("matrix dimensions must not be negative")
        self._rows = rows
        self._cols = cols
        self.config = config if config is not None else FieldConfig()
        self.order = Order(order)
        self._values = [fill] * (rows * cols)

    # construction and conversion

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], config: FieldConfig | None = None) -> Mat:
        """Build a matrix from a list of equally long rows."""
        cols = len(rows[0]) if rows else 0
        if any(len(r) != cols for r in rows):
            raise ValueError("rows must all have the same length")
        mat = cls(len(rows), cols, 0, config)
        for i, row in enumerate(rows):
            for j, value in enumerate(row):
                mat[i, j] = value
        return mat

    def to_rows(self) -> list[list[int]]:
        """The matrix as a list of rows."""
        return [self.row(i) for i in range(self._rows)]

    def _new(self, values: Iterable[int], rows: int | None = None, cols: int | None = None,
             order: Order | None = None) -> Mat:
        mat = Mat(
            self._rows if rows is None else rows,
            self._cols if cols is None else cols,
            0,
            self.config,
            self.order if order is None else order,
        )
        mat._values = list(values)
        return mat

    def _map(self, fn: Callable[[int], int]) -> Mat:
        return self._new(fn(v) for v in self._values)

    def _positions(self) -> Iterator[tuple[int, int]]:
        """Logical positions in storage order."""
        if self.order is Order.COL_MAJOR:
            for j in range(self._cols):
                for i in range(self._rows):
                    yield i, j
        else:
            for i in range(self._rows):
                for j in range(self._cols):
                    yield i, j

    def _index(self, row: int, col: int) -> int:
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError(f"position ({row}, {col}) is out of range")
        if self.order is Order.COL_MAJOR:
            return col * self._rows + row
        return row * self._cols + col

    def _get(self, row: int, col: int) -> int:
        return self._values[self._index(row, col)]

    def _aligned(self, other: Mat) -> list[int]:
        """Values of ``other`` laid out like this matrix."""
        if other.shape != self.shape:
            raise ValueError(f"shape mismatch: {self.shape} and {other.shape}")
        if other.order == self.order:
            return other._values
        return [other._get(i, j) for i, j in self._positions()]

    def _wrap_add(self, v: int) -> int:
        m = self.config.modulus
        if v >= m:
            v -= m
        if v <= -m:
            v += m
        return v

    def _wrap_sub(self, v: int) -> int:
        m = self.config.modulus
        if v > m:
            v -= m
        if v < -m:
            v += m
        return v

    # element access

    def __getitem__(self, pos: tuple[int, int]) -> int:
        row, col = pos
        return self._get(row, col)

    def __setitem__(self, pos: tuple[int, int], value: int) -> None:
        row, col = pos
        self._values[self._index(row, col)] = value

    def __repr__(self) -> str:
        return f"Mat({self._rows}x{self._cols}, order={self.order.name})"

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, cols)."""
        return self._rows, self._cols

    @property
    def size(self) -> int:
        """Number of elements."""
        return self._rows * self._cols

    def values(self) -> list[int]:
        """A copy of the raw storage, in storage order."""
        return list(self._values)

    def copy(self) -> Mat:
        """An independent copy with the same layout."""
        return self._new(self._values)

    # comparison

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mat):
            return NotImplemented
        return self._values == self._aligned(other)

    __hash__ = None  # type: ignore[assignment]

    # arithmetic

    def __add__(self, other: Mat | int) -> Mat:
        if isinstance(other, Mat):
            return self._new(self._wrap_add(a + b) for a, b in zip(self._values, self._aligned(other)))
        if isinstance(other, int):
            return self._map(lambda v: self._wrap_add(v + other))
        return NotImplemented

    def __iadd__(self, other: Mat) -> Mat:
        if not isinstance(other, Mat):
            return NotImplemented
        self._values = [self._wrap_add(a + b) for a, b in zip(self._values, self._aligned(other))]
        return self

    def __sub__(self, other: Mat | int) -> Mat:
        if isinstance(other, Mat):
            return self._new(self._wrap_sub(a - b) for a, b in zip(self._values, self._aligned(other)))
        if isinstance(other, int):
            ret = self._map(lambda v: self._wrap_sub(v - other))
            ret.residual()
            return ret
        return NotImplemented

    def __mul__(self, other: Mat | int) -> Mat:
        m = self.config.modulus
        if isinstance(other, Mat):
            if self._cols != other._rows:
                raise ValueError(f"cannot multiply {self.shape} by {other.shape}")
            left = self.to_rows()
            right = [[other._get(k, j) for k in range(other._rows)] for j in range(other._cols)]
            values = (sum(map(mul, left[i], right[j])) % m
                      for j in range(other._cols) for i in range(self._rows))
            return self._new(values, self._rows, other._cols, Order.COL_MAJOR)
        if isinstance(other, int):
            return self._map(lambda v: v * other % m)
        return NotImplemented

    def __truediv__(self, other: Mat | int) -> Mat:
        m = self.config.modulus
        if isinstance(other, Mat):
            return self._new(_tdiv(a, b) % m for a, b in zip(self._values, self._aligned(other)))
        if isinstance(other, int):
            half = self.config.half
            return self._map(lambda v: _tdiv(v - m if v > half else v, other) % m)
        return NotImplemented

    def __lshift__(self, bits: int) -> Mat:
        m = self.config.modulus
        return self._map(lambda v: (v << bits) % m)

    def __rshift__(self, bits: int) -> Mat:
        m, half = self.config.modulus, self.config.half
        return self._map(lambda v: (v - m if v > half else v) >> bits)

    def __and__(self, other: Mat | int) -> Mat:
        if isinstance(other, Mat):
            return self._new(a & b for a, b in zip(self._values, self._aligned(other)))
        if isinstance(other, int):
            return self._map(lambda v: v & other)
        return NotImplemented

    # element-wise field operations

    def transpose(self) -> Mat:
        """The transposed matrix, stored column-major."""
        values = (self._get(i, j) for i in range(self._rows) for j in range(self._cols))
        return self._new(values, self._cols, self._rows, Order.COL_MAJOR)

    def one_minus(self) -> Mat:
        """``1 - x`` for every element."""
        m = self.config.modulus
        return self._map(lambda v: (1 - v) % m)

    def one_minus_ie(self) -> Mat:
        """``ie - x`` for every element: one minus x in fixed point."""
        m, ie = self.config.modulus, self.config.ie
        return self._map(lambda v: (ie - v) % m)

    def dot(self, other: Mat) -> Mat:
        """Element-wise product of two matrices of the same shape and layout."""
        if other.order != self.order:
            raise ValueError("dot needs matrices with the same storage order")
        m = self.config.modulus
        return self._new(a * b % m for a, b in zip(self._values, self._aligned(other)))

    def row(self, index: int) -> list[int]:
        """The elements of one row."""
        if not 0 <= index < self._rows:
            raise IndexError(f"row {index} is out of range")
        return [self._get(index, j) for j in range(self._cols)]

    def set_row(self, index: int, values: Sequence[int]) -> None:
        """Overwrite one row with the first ``cols`` items of ``values``."""
        if not 0 <= index < self._rows:
            raise IndexError(f"row {index} is out of range")
        if len(values) < self._cols:
            raise ValueError("not enough values for the row")
        for j in range(self._cols):
            self[index, j] = values[j]

    def resize(self, rows: int, cols: int) -> Mat:
        """A rows x cols matrix of the first elements taken row by row."""
        if rows < 0 or cols < 0 or rows * cols > self.size:
            raise ValueError(f"cannot resize {self.shape} to {(rows, cols)}")
        flat = [v for r in self.to_rows() for v in r]
        return Mat.from_rows(
            [flat[i * cols:(i + 1) * cols] for i in range(rows)], self.config
        ) if rows else Mat(0, cols, 0, self.config)

    def argmax(self) -> Mat:
        """1 x cols matrix with the row index of each column's signed maximum."""
        ret = Mat(1, self._cols, 0, self.config)
        to_signed = self.config.to_signed
        for j in range(self._cols):
            best = 0
            for i in range(1, self._rows):
                if to_signed(self._get(i, j)) > to_signed(self._get(best, j)):
                    best = i
            ret[0, j] = best
        return ret

    def equal(self, other: Mat) -> Mat:
        """1 where two fixed-point values differ by less than one half, else 0."""
        cfg = self.config
        limit = cfg.ie // 2
        return self._new(
            1 if abs(cfg.to_signed(a - b)) < limit else 0
            for a, b in zip(self._values, self._aligned(other))
        )

    def eq(self, other: Mat) -> Mat:
        """1 where elements are exactly equal, else 0."""
        return self._new(1 if a == b else 0 for a, b in zip(self._values, self._aligned(other)))

    def signed(self) -> Mat:
        """Elements above ``modulus // 2`` shifted down into the negative range."""
        m, half = self.config.modulus, self.config.half
        return self._map(lambda v: v - m if v > half else v)

    def sqrt(self) -> Mat:
        """Field square root of every element."""
        return self._map(self.config.sqrt)

    def inverse(self) -> Mat:
        """Field inverse of every element (not the matrix inverse)."""
        return self._map(self.config.inverse)

    def sqrt_inv(self) -> Mat:
        """Inverse square root of every element, by one exponentiation."""
        m, e = self.config.modulus, self.config.sqrt_inv_exponent
        return self._map(lambda v: pow(v, e, m))

    def divide_by_2(self) -> Mat:
        """Every element times the field inverse of 2."""
        m, inv2 = self.config.modulus, self.config.inv2
        return self._map(lambda v: v * inv2 % m)

    def to_floats(self) -> list[float]:
        """Fixed-point values decoded to floats, column by column."""
        m, half, ie = self.config.modulus, self.config.half, self.config.ie
        return [
            ((v - m) if v > half else v) / ie
            for v in (self._get(i, j) for j in range(self._cols) for i in range(self._rows))
        ]

    def not_eqz(self) -> Mat:
        """1 for non-zero elements, else 0."""
        return self._map(lambda v: 1 if v != 0 else 0)

    def row_range(self, start: int, end: int) -> Mat:
        """Rows ``[start, end)``, wrapping around when ``start > end``."""
        r = self._rows
        if r == 0 or not (0 <= start <= r and 0 <= end <= r) or (end - start) % r == 0:
            raise IndexError(f"row range [{start}, {end}) is not valid for {r} rows")
        picked = [(start + k) % r for k in range(((end - start) % r))]
        values = (self._get(i, j) for j in range(self._cols) for i in picked)
        return self._new(values, len(picked), self._cols, Order.COL_MAJOR)

    def get_bit(self, bit: int) -> Mat:
        """Bit ``bit`` (0 is the lowest) of every element."""
        return self._map(lambda v: v >> bit & 1)

    def opposite(self) -> Mat:
        """``modulus - x`` for every element."""
        m = self.config.modulus
        return self._map(lambda v: m - v)

    def to_one_hot(self, classes: int = 10) -> Mat:
        """One-hot columns (value ``ie``) from the fixed-point labels in row 0."""
        ret = Mat(classes, self._cols, 0, self.config)
        for j in range(self._cols):
            label = self._get(0, j) >> self.config.decimal_places
            ret[label, j] = self.config.ie
        return ret

    def mod(self, modulus: int) -> Mat:
        """Remainder of every element, with the sign of the element."""
        return self._map(lambda v: _trem(v, modulus))

    # counting

    def count_sum(self) -> int:
        """Sum of all stored values."""
        return sum(self._values)

    def count(self, value: int = 1) -> int:
        """Number of elements equal to ``value``."""
        return self._values.count(value)

    def count_ne(self, value: int) -> int:
        """Number of elements not equal to ``value``."""
        return self.size - self._values.count(value)

    def count_not_eqz(self) -> int:
        """Number of non-zero elements."""
        return self.count_ne(0)

    def has_zero(self) -> bool:
        """Whether any element is zero."""
        return 0 in self._values

    # in-place updates

    def fill_from(self, source: Mat) -> None:
        """Fill row by row with the successive non-zero values of ``source``'s first row."""
        nonzero = (v for v in source.row(0) if v != 0)
        for i in range(self._rows):
            for j in range(self._cols):
                value = next(nonzero, None)
                if value is None:
                    raise ValueError("source has too few non-zero values")
                self[i, j] = value

    def fill_value(self, value: int) -> None:
        """Set every element to ``value``."""
        self._values = [value] * self.size

    def residual(self) -> None:
        """Reduce every element onto ``[0, modulus)``."""
        m = self.config.modulus
        self._values = [v % m for v in self._values]

    def reorder(self) -> None:
        """Switch the storage layout, keeping the logical contents."""
        new_order = Order(self.order ^ 1)
        if new_order is Order.ROW_MAJOR:
            values = [self._get(i, j) for i in range(self._rows) for j in range(self._cols)]
        else:
            values = [self._get(i, j) for j in range(self._cols) for i in range(self._rows)]
        self._values = values
        self.order = new_order

    def transorder(self) -> None:
        """Transpose in place by reinterpreting the storage."""
        self._rows, self._cols = self._cols, self._rows
        self.order = Order(self.order ^ 1)

    def clear(self) -> None:
        """Set every element to zero."""
        self._values = [0] * self.size

    def format(self, signed: bool = False) -> str:
        """Text dump of the matrix; a column vector is printed on one line."""
        conv = self.config.to_signed if signed else int
        lines = []
        if not (signed and self._cols == 1):
            lines.append(f"r: {self._rows} c: {self._cols}")
        if self._cols == 1:
            lines.append("".join(f"{conv(self._get(i, 0))} " for i in range(self._rows)))
        else:
            lines.extend("".join(f"{conv(v)} " for v in row) for row in self.to_rows())
        return "\n".join(lines) + "\n"