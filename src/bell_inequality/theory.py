r"""Analytical reference values for Bell/CHSH tests.

* :math:`E_{qm}(\Delta) = \cos\Delta` for a maximally entangled state measured
  at analyzer difference :math:`\Delta = a - b`.
* :math:`E_{cl}(\Delta) = 1 - 2|\Delta|/\pi` on :math:`[0, \pi]`, mirrored,
  the linear correlation of the simplest local hidden-variable model.
* CHSH bounds: :math:`S \le 2` classically, :math:`S \le 2\sqrt{2}` in
  quantum mechanics (Tsirelson).

The sampling helpers treat an empirical correlation as the mean of ``trials``
independent :math:`\pm 1` products, whose variance is :math:`1 - E^2`.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

CLASSICAL_BOUND = 2.0
TSIRELSON_BOUND = 2.0 * np.sqrt(2.0)


def quantum_correlation(delta: np.ndarray | float) -> np.ndarray:
    """E_qm(Δ) = cos(Δ)."""

    return np.cos(delta)


def classical_correlation(delta: np.ndarray | float) -> np.ndarray:
    """E_cl(Δ) = 1 - 2|Δ|/π for Δ ∈ [0, π], mirrored onto [π, 2π]."""

    t = np.asarray(delta, dtype=float) % (2.0 * np.pi)
    t = np.where(t > np.pi, 2.0 * np.pi - t, t)
    return 1.0 - 2.0 * t / np.pi


def violates_classical_bound(s_value: float, tolerance: float = 0.0) -> bool:
    """Return ``True`` if ``s_value`` exceeds the local hidden-variable bound."""

    return s_value > CLASSICAL_BOUND + tolerance


def correlation_standard_error(correlation: float, trials: int) -> float:
    r"""Standard error :math:`\sqrt{(1 - E^2)/N}` of an empirical correlation."""

    if trials < 1:
        raise ValueError(f"trials must be a positive integer, got {trials}.")
    variance = max(1.0 - correlation * correlation, 0.0)
    return float(np.sqrt(variance / trials))


def correlation_confidence_interval(
    correlation: float,
    trials: int,
    confidence: float = 0.95,
) -> tuple[float, float]:
    """Normal-approximation confidence interval for a correlation, clipped to [-1, 1]."""

    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must lie strictly between 0 and 1, got {confidence}.")
    z = float(norm.ppf(0.5 + confidence / 2.0))
    half_width = z * correlation_standard_error(correlation, trials)
    return max(correlation - half_width, -1.0), min(correlation + half_width, 1.0)
