r"""Normalised pure states of a two-qubit system.

A state is stored as the four complex amplitudes of the computational basis
in the fixed order :math:`|00\rangle, |01\rangle, |10\rangle, |11\rangle`.
The leftmost label refers to qubit 0 (Alice), the rightmost to qubit 1 (Bob).

The amplitudes are normalised once, in :meth:`QuantumState.__post_init__`,
so that

.. math::

   \sum_{k=0}^{3} |c_k|^2 = 1,

and the instance is frozen afterwards.  The two factories build the four
canonical Bell states

.. math::

   |\Phi^\pm\rangle = \frac{|00\rangle \pm |11\rangle}{\sqrt{2}}, \qquad
   |\Psi^\pm\rangle = \frac{|01\rangle \pm |10\rangle}{\sqrt{2}},

and separable states :math:`|a\rangle \otimes |b\rangle` with amplitudes
:math:`c_{2i+j} = a_i b_j`.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from math import sqrt
from typing import Literal, Sequence

import numpy as np

from .complex_number import Complex
from .errors import DegenerateStateError, IndexOutOfRangeError, InvalidDimensionError

BellStateKind = Literal["phi+", "phi-", "psi+", "psi-"]

BASIS_LABELS = ("00", "01", "10", "11")
NUM_AMPLITUDES = 4
NORM_THRESHOLD = 1e-10

_INV_SQRT2 = 1.0 / sqrt(2.0)
_BELL_COEFFICIENTS: dict[str, tuple[float, float, float, float]] = {
    "phi+": (_INV_SQRT2, 0.0, 0.0, _INV_SQRT2),
    "phi-": (_INV_SQRT2, 0.0, 0.0, -_INV_SQRT2),
    "psi+": (0.0, _INV_SQRT2, _INV_SQRT2, 0.0),
    "psi-": (0.0, _INV_SQRT2, -_INV_SQRT2, 0.0),
}
BELL_STATE_KINDS: tuple[str, ...] = tuple(_BELL_COEFFICIENTS)


def _as_complex(value: Complex | complex | float) -> Complex:
    if isinstance(value, Complex):
        return value
    return Complex.from_builtin(value)


def _normalise(amplitudes: tuple[Complex, ...]) -> tuple[Complex, ...]:
    """Return ``amplitudes`` divided by their Euclidean norm."""

    total = sum(amp.magnitude_squared() for amp in amplitudes)
    if total < NORM_THRESHOLD:
        raise DegenerateStateError(
            f"Cannot normalise a zero state: total squared magnitude {total:.3e} is below {NORM_THRESHOLD:.0e}."
        )
    inv_norm = 1.0 / sqrt(total)
    return tuple(amp.scale(inv_norm) for amp in amplitudes)


@dataclass(frozen=True, slots=True)
class QuantumState:
    """Two-qubit pure state over the basis ``00, 01, 10, 11``.

    Parameters
    ----------
    amplitudes : sequence of Complex
        Exactly four amplitudes.  They need not be normalised; the stored
        tuple is the normalised copy.  Builtin ``complex``/``float`` entries
        are converted to :class:`Complex`.

    Raises
    ------
    InvalidDimensionError
        If the number of amplitudes is not four.
    DegenerateStateError
        If the total squared magnitude is below ``1e-10``.
    """

    amplitudes: tuple[Complex, Complex, Complex, Complex]

    def __post_init__(self) -> None:
        amplitudes = tuple(_as_complex(amp) for amp in self.amplitudes)
        if len(amplitudes) != NUM_AMPLITUDES:
            raise InvalidDimensionError(
                f"A two-qubit state requires {NUM_AMPLITUDES} amplitudes, got {len(amplitudes)}."
            )
        object.__setattr__(self, "amplitudes", _normalise(amplitudes))

    @classmethod
    def create_bell_state(cls, kind: BellStateKind) -> QuantumState:
        """Return one of the four maximally entangled Bell states.

        ``kind`` is one of ``"phi+"``, ``"phi-"``, ``"psi+"`` or ``"psi-"``.
        """

        try:
            coefficients = _BELL_COEFFICIENTS[kind]
        except KeyError:
            raise ValueError(
                f"Unknown Bell state {kind!r}; expected one of {', '.join(BELL_STATE_KINDS)}."
            ) from None
        return cls(tuple(Complex(c, 0.0) for c in coefficients))

    @classmethod
    def create_product_state(
        cls,
        qubit_a: Sequence[Complex],
        qubit_b: Sequence[Complex],
    ) -> QuantumState:
        r"""Return the separable state :math:`|a\rangle \otimes |b\rangle`.

        Each qubit is given as its ``(|0>, |1>)`` amplitude pair.  The pairs do
        not have to be normalised individually.
        """

        pair_a = [_as_complex(amp) for amp in qubit_a]
        pair_b = [_as_complex(amp) for amp in qubit_b]
        for name, pair in (("qubit_a", pair_a), ("qubit_b", pair_b)):
            if len(pair) != 2:
                raise InvalidDimensionError(f"{name} requires 2 amplitudes, got {len(pair)}.")
        return cls(tuple(pair_a[i].multiply(pair_b[j]) for i in range(2) for j in range(2)))

    def get_probability(self, index: int) -> float:
        """Return :math:`|c_{index}|^2` for a basis index in ``0..3``."""

        try:
            position = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(f"State index must be an integer between 0 and 3, got {index!r}.") from None
        if not 0 <= position < NUM_AMPLITUDES:
            raise IndexOutOfRangeError(f"State index must be between 0 and 3, got {index}.")
        return self.amplitudes[position].magnitude_squared()

    def probabilities(self) -> np.ndarray:
        return np.array([amp.magnitude_squared() for amp in self.amplitudes], dtype=float)

    def to_array(self) -> np.ndarray:
        """Return the amplitudes as a complex numpy vector (a copy)."""

        return np.array([amp.to_builtin() for amp in self.amplitudes], dtype=complex)

    def __str__(self) -> str:
        lines = ["QuantumState:"]
        for index, label in enumerate(BASIS_LABELS):
            lines.append(
                f"  |{label}⟩: {self.amplitudes[index]} (P={self.get_probability(index):.4f})"
            )
        return "\n".join(lines)
