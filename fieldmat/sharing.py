"""Shamir secret sharing and random initialisation of field matrices."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence

from fieldmat.field import GaussianNoise
from fieldmat.matrix import Mat, Order


def poly_eval(coefficients: Sequence[int], x: int) -> int:
    """Evaluate ``sum(c_i * x**i)`` with Horner's rule, lowest coefficient first."""
    if not coefficients:
        raise ValueError("a polynomial needs at least one coefficient")
    *lower, result = coefficients
    for coefficient in reversed(lower):
        result = result * x + coefficient
    return result


def secret_share(
    mat: Mat,
    parties: int,
    threshold: int,
    rng: random.Random | None = None,
) -> list[Mat]:
    """Split ``mat`` into Shamir shares, one matrix per party.

    Every element is the constant term of a random polynomial with
    ``threshold`` coefficients; party ``k`` receives its value at ``k + 2``,
    reduced into the field. Any ``threshold`` shares determine the secret.
    """
    if threshold < 1:
        raise ValueError("threshold must be at least 1")
    if parties < 0:
        raise ValueError("number of parties must not be negative")
    rng = rng if rng is not None else random.Random()
    cfg = mat.config
    m = cfg.modulus
    rows, cols = mat.shape
    shares = [Mat(rows, cols, 0, cfg, mat.order) for _ in range(parties)]
    for i in range(rows):
        for j in range(cols):
            coefficients = [mat[i, j]]
            coefficients.extend(rng.randrange(m) for _ in range(threshold - 1))
            for k, share in enumerate(shares):
                share[i, j] = poly_eval(coefficients, k + 2) % m
    return shares


def truncated_normal(
    mat: Mat,
    mean: float,
    stddev: float,
    noise: GaussianNoise | None = None,
) -> None:
    """Fill ``mat`` row by row with fixed-point normal samples, ``floor(x * ie)``."""
    noise = noise if noise is not None else GaussianNoise()
    ie = mat.config.ie
    rows, cols = mat.shape
    for i in range(rows):
        for j in range(cols):
            mat[i, j] = math.floor(noise.sample(mean, stddev) * ie)


def random_neg(mat: Mat, rng: random.Random | None = None) -> None:
    """Replace ``mat`` with small random values of random sign.

    Each element is drawn from ``[0, ie)`` and, with probability one half,
    stored as ``modulus - value``. The matrix ends up column-major.
    """
    rng = rng if rng is not None else random.Random()
    cfg = mat.config
    if mat.order is not Order.COL_MAJOR:
        mat.reorder()
    rows, cols = mat.shape
    for j in range(cols):
        for i in range(rows):
            value = rng.randrange(cfg.ie)
            if rng.randrange(2):
                value = cfg.modulus - value
            mat[i, j] = value