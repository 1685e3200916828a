"""Exceptions raised when a two-qubit state cannot be built or read."""

from __future__ import annotations


class QuantumStateError(ValueError):
    """Base class for invalid two-qubit state input."""


class InvalidDimensionError(QuantumStateError):
    """The amplitude list does not have exactly four entries."""


class DegenerateStateError(QuantumStateError):
    """The amplitudes have (numerically) zero norm and cannot be normalised."""


class IndexOutOfRangeError(QuantumStateError, IndexError):
    """A basis index outside ``0..3`` was requested."""


class InvalidAmplitudesError(QuantumStateError):
    """An object handed to the evaluator does not carry four complex amplitudes."""
