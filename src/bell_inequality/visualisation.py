"""Plot helpers for correlation curves."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np

from .bell_test import DEFAULT_TRIALS, calculate_quantum_correlation, run_empirical_correlation
from .quantum_state import QuantumState
from .theory import classical_correlation


def plot_correlation_curve(
    state: QuantumState,
    angle_a: float = 0.0,
    n_points: int = 200,
    empirical_deltas: Optional[Iterable[float]] = None,
    trials: int = DEFAULT_TRIALS,
    rng: Optional[np.random.Generator] = None,
    filename: Optional[str | Path] = None,
):
    """Plot E(a, a - Δ) for Δ in [0, 2π] against the classical linear model.

    When ``empirical_deltas`` is given, Monte-Carlo estimates with ``trials``
    pairs each are drawn at those analyzer differences.  Returns the figure's
    data as ``(deltas, theoretical, empirical)`` where ``empirical`` is
    ``None`` if no points were requested.
    """

    deltas = np.linspace(0.0, 2.0 * np.pi, n_points)
    theoretical = np.array([calculate_quantum_correlation(state, angle_a, angle_a - d) for d in deltas])

    fig, ax = plt.subplots(figsize=(8.0, 4.5))
    ax.plot(deltas, theoretical, color="#00b8d4", linewidth=2.0, label="Quantum (closed form)")
    ax.plot(deltas, classical_correlation(deltas), color="#666666", linestyle="--", label="Classical (linear LHV)")

    empirical = None
    if empirical_deltas is not None:
        if rng is None:
            rng = np.random.default_rng()
        points = np.asarray(list(empirical_deltas), dtype=float)
        empirical = np.array(
            [run_empirical_correlation(state, angle_a, angle_a - d, trials, rng) for d in points]
        )
        ax.scatter(points, empirical, color="#ff5a5a", zorder=3, label=f"Empirical ({trials} pairs)")

    ax.axhline(0.0, color="black", linewidth=0.5)
    ax.set_xlim(0.0, 2.0 * np.pi)
    ax.set_ylim(-1.05, 1.05)
    ax.set_xlabel("Analyzer difference Δ = a - b (rad)")
    ax.set_ylabel("Correlation E(a, b)")
    ax.set_title("Two-qubit correlation vs. analyzer angle")
    ax.legend()
    fig.tight_layout()

    if filename is not None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=300)
    plt.close(fig)

    return deltas, theoretical, empirical
