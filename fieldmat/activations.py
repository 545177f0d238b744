"""Element-wise activation functions on fixed-point field matrices."""

from __future__ import annotations

import math
from collections.abc import Callable

from fieldmat.field import FieldConfig
from fieldmat.matrix import Mat

_TANH_COEFFICIENTS = (10, 0, -652, 0, 15392, 0, -164163, 0, 971505)
_CHEBYSHEV_COEFFICIENTS = (
    0.00901040601686517,
    -0.04476498296490821,
    0.1303347756923826,
    -0.33297383540025915,
    0.9999928678521409,
)


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _elementwise(mat: Mat, fn: Callable[[int], int]) -> Mat:
    """A column-major matrix of ``fn`` applied to each element of ``mat``."""
    rows, cols = mat.shape
    ret = Mat(rows, cols, 0, mat.config)
    for i in range(rows):
        for j in range(cols):
            ret[i, j] = fn(mat[i, j])
    return ret


def _to_real(cfg: FieldConfig, value: int) -> float:
    return cfg.to_signed(value) / cfg.ie


def _piecewise_half(cfg: FieldConfig, value: int) -> int:
    """0 below -1/2, ``x + 1/2`` in between, 1 above 1/2, in fixed point."""
    m, half_ie = cfg.modulus, cfg.ie // 2
    u = value % m
    non_negative = u < m // 2
    small_negative = u > m - half_ie
    out = u + half_ie if (non_negative or small_negative) else 0
    if non_negative and u > half_ie:
        out -= u - half_ie
    return out % m


def relu(mat: Mat) -> Mat:
    """Keep positive elements, zero out the rest."""
    to_signed = mat.config.to_signed
    return _elementwise(mat, lambda v: v if to_signed(v) > 0 else 0)


def d_relu(mat: Mat) -> Mat:
    """1 where the element is positive, else 0."""
    to_signed = mat.config.to_signed
    return _elementwise(mat, lambda v: 1 if to_signed(v) > 0 else 0)


def sigmoid(mat: Mat) -> Mat:
    """Piecewise-linear sigmoid: 0 below -1/2, x + 1/2 in between, 1 above 1/2."""
    cfg = mat.config
    return _elementwise(mat, lambda v: _piecewise_half(cfg, v))


def cross_entropy(mat: Mat) -> Mat:
    """The piecewise-linear activation used with the cross-entropy loss."""
    cfg = mat.config
    return _elementwise(mat, lambda v: _piecewise_half(cfg, v))


def hard_tanh(mat: Mat) -> Mat:
    """Clamp to [-1, 1] and map onto [0, 1] as ``(x + 1) / 2``."""
    cfg = mat.config

    def fn(v: int) -> int:
        x = _to_real(cfg, v)
        if x > 1:
            ans = 1.0
        elif x < -1:
            ans = 0.0
        else:
            ans = (x + 1) / 2
        return cfg.residual(int(ans * cfg.ie))

    return _elementwise(mat, fn)


def tanh(mat: Mat) -> Mat:
    """Integer polynomial approximation of ``(tanh(x) + 1) / 2``."""
    cfg = mat.config
    m, ie = cfg.modulus, cfg.ie

    def fn(v: int) -> int:
        u = v % m
        acc = 0
        for coefficient in _TANH_COEFFICIENTS:
            acc = _tdiv((acc + coefficient) * u, ie) % m
        return (acc + ie) // 2

    return _elementwise(mat, fn)


def chebyshev_tanh(mat: Mat) -> Mat:
    """Polynomial ``(tanh(x) + 1) / 2`` on [-1, 1], clamped to 0 and 1 outside."""
    cfg = mat.config

    def fn(v: int) -> int:
        x = _to_real(cfg, v)
        if x > 1:
            ans = 1.0
        elif x < -1:
            ans = 0.0
        else:
            first, *rest = _CHEBYSHEV_COEFFICIENTS
            ans = first
            for coefficient in rest:
                ans = coefficient + ans * x * x
            ans = (ans * x + 1) / 2
        return cfg.residual(int(ans * cfg.ie))

    return _elementwise(mat, fn)


def raw_tanh(mat: Mat) -> Mat:
    """Exact hyperbolic tangent of every element, in fixed point."""
    cfg = mat.config
    return _elementwise(
        mat, lambda v: cfg.residual(int(math.tanh(_to_real(cfg, v)) * cfg.ie))
    )


def ltz(mat: Mat) -> Mat:
    """``ie`` where the element is negative, else 0."""
    cfg = mat.config
    return _elementwise(mat, lambda v: cfg.ie if cfg.residual(v) > cfg.half else 0)


def smooth_level(mat: Mat, max_level: int) -> Mat:
    """``floor(log(ie // x))`` of every element, capped at ``max_level``.

    Raises ZeroDivisionError for a zero element and ValueError for an
    element larger than ``ie``.
    """
    cfg = mat.config

    def fn(v: int) -> int:
        r = cfg.residual(v)
        if r == 0:
            raise ZeroDivisionError("smoothing level of zero is undefined")
        level = int(math.log(cfg.ie // r))
        return min(level, max_level)

    return _elementwise(mat, fn)