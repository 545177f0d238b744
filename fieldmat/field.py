"""Prime-field arithmetic and fixed-point encoding shared by the matrix types."""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass, field

DEFAULT_MODULUS = (1 << 61) - 1
DEFAULT_DECIMAL_PLACES = 20


@dataclass(frozen=True)
class FieldConfig:
    """Parameters of the prime field and of the fixed-point encoding.

    Values are stored as residues modulo ``modulus``; a real number ``x`` is
    encoded as ``floor(x * ie)`` with ``ie == 2 ** decimal_places``.
    The modulus must be an odd prime congruent to 3 modulo 4 so that square
    roots and inverse square roots are single exponentiations.
    """

    modulus: int = DEFAULT_MODULUS
    decimal_places: int = DEFAULT_DECIMAL_PLACES

    def __post_init__(self) -> None:
        if self.modulus < 3 or self.modulus % 4 != 3:
            raise ValueError("modulus must be a prime congruent to 3 mod 4")
        if self.decimal_places < 0:
            raise ValueError("decimal_places must not be negative")
        if (1 << self.decimal_places) >= self.modulus // 2:
            raise ValueError("fixed-point scale does not fit in the field")

    @property
    def ie(self) -> int:
        """The fixed-point scale, ``2 ** decimal_places``."""
        return 1 << self.decimal_places

    @property
    def half(self) -> int:
        """Largest residue that still counts as non-negative."""
        return self.modulus // 2

    @property
    def inv2(self) -> int:
        """The multiplicative inverse of 2 in the field."""
        return (self.modulus + 1) // 2

    @property
    def sqrt_inv_exponent(self) -> int:
        """Exponent ``e`` such that ``(a*a) ** e * a`` is the Legendre symbol of ``a``."""
        return (self.modulus - 3) // 4

    def residual(self, value: int) -> int:
        """Map an integer onto ``[0, modulus)``."""
        return value % self.modulus

    def to_signed(self, value: int) -> int:
        """Map an integer onto the symmetric range around zero."""
        r = self.residual(value)
        return r - self.modulus if r > self.half else r

    def inverse(self, value: int) -> int:
        """Multiplicative inverse of ``value`` in the field."""
        r = self.residual(value)
        if r == 0:
            raise ZeroDivisionError("zero has no inverse in the field")
        return pow(r, -1, self.modulus)

    def sqrt(self, value: int) -> int:
        """A square root of ``value`` in the field.

        Raises ValueError when ``value`` is not a quadratic residue.
        """
        r = self.residual(value)
        root = pow(r, (self.modulus + 1) // 4, self.modulus)
        if root * root % self.modulus != r:
            raise ValueError(f"{value} has no square root in the field")
        return root

    def encode(self, value: float) -> int:
        """Encode a real number as a fixed-point field element."""
        return self.residual(math.floor(value * self.ie))

    def decode(self, value: int) -> float:
        """Decode a fixed-point field element back to a real number."""
        return self.to_signed(value) / self.ie


@dataclass
class GaussianNoise:
    """Box-Muller normal sampler that hands out both values of each pair."""

    rng: random.Random = field(default_factory=random.Random)
    _pending: float | None = field(default=None, init=False, repr=False)

    def sample(self, mu: float, sigma: float) -> float:
        """Draw one sample from N(mu, sigma**2)."""
        if self._pending is not None:
            z1, self._pending = self._pending, None
            return z1 * sigma + mu
        u1 = self.rng.random()
        while u1 <= sys.float_info.min:
            u1 = self.rng.random()
        u2 = self.rng.random()
        radius = math.sqrt(-2.0 * math.log(u1))
        angle = 2.0 * math.pi * u2
        self._pending = radius * math.sin(angle)
        return radius * math.cos(angle) * sigma + mu