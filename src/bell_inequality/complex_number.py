"""Immutable complex amplitudes for the two-qubit state vector."""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt


@dataclass(frozen=True, slots=True)
class Complex:
    r"""Complex number :math:`\mathrm{real} + \mathrm{imag}\,i`.

    Every operation returns a new value; instances are never mutated.
    The named methods are the primary interface and the arithmetic
    operators are thin aliases of them.
    """

    real: float
    imag: float = 0.0

    @classmethod
    def from_builtin(cls, value: complex) -> Complex:
        """Build a :class:`Complex` from a Python ``complex`` (or real) value."""

        value = complex(value)
        return cls(value.real, value.imag)

    def to_builtin(self) -> complex:
        return complex(self.real, self.imag)

    def add(self, other: Complex) -> Complex:
        return Complex(self.real + other.real, self.imag + other.imag)

    def subtract(self, other: Complex) -> Complex:
        return Complex(self.real - other.real, self.imag - other.imag)

    def multiply(self, other: Complex) -> Complex:
        """Return :math:`(a+bi)(c+di) = (ac-bd) + (ad+bc)i`."""

        real = self.real * other.real - self.imag * other.imag
        imag = self.real * other.imag + self.imag * other.real
        return Complex(real, imag)

    def scale(self, scalar: float) -> Complex:
        return Complex(self.real * scalar, self.imag * scalar)

    def conjugate(self) -> Complex:
        return Complex(self.real, -self.imag)

    def magnitude(self) -> float:
        return sqrt(self.magnitude_squared())

    def magnitude_squared(self) -> float:
        """Return :math:`|z|^2` without taking a square root."""

        return self.real * self.real + self.imag * self.imag

    def is_approximately_equal(self, other: Complex, epsilon: float = 1e-10) -> bool:
        """Return ``True`` if both components differ by less than ``epsilon``."""

        return abs(self.real - other.real) < epsilon and abs(self.imag - other.imag) < epsilon

    def __add__(self, other: Complex) -> Complex:
        return self.add(other)

    def __sub__(self, other: Complex) -> Complex:
        return self.subtract(other)

    def __mul__(self, other: Complex | float) -> Complex:
        if isinstance(other, Complex):
            return self.multiply(other)
        return self.scale(other)

    __rmul__ = __mul__

    def __neg__(self) -> Complex:
        return self.scale(-1.0)

    def __abs__(self) -> float:
        return self.magnitude()

    def __str__(self) -> str:
        # adding 0.0 turns a negative zero into "0.0000"
        real = self.real + 0.0
        imag = self.imag + 0.0
        if imag >= 0:
            return f"{real:.4f} + {imag:.4f}i"
        return f"{real:.4f} - {abs(imag):.4f}i"
