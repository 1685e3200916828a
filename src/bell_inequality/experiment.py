"""Configuration and reporting for a complete CHSH test run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .bell_test import (
    CHSHAngles,
    DEFAULT_TRIALS,
    calculate_chsh,
    calculate_quantum_correlation,
    chsh_from_correlations,
    get_optimal_chsh_angles,
    run_empirical_correlation,
    run_empirical_correlation_parallel,
)
from .quantum_state import BELL_STATE_KINDS, BellStateKind, QuantumState
from .theory import correlation_confidence_interval, correlation_standard_error, violates_classical_bound

logger = logging.getLogger(__name__)

PAIR_LABELS = ("E(a, b)", "E(a, b')", "E(a', b)", "E(a', b')")


@dataclass(slots=True)
class BellTestConfig:
    """Parameters of a CHSH test run."""

    state: BellStateKind = "phi+"
    angles: CHSHAngles = field(default_factory=get_optimal_chsh_angles)
    trials: int = DEFAULT_TRIALS
    seed: Optional[int] = None
    workers: int = 1
    progress: bool = False

    def __post_init__(self):
        if self.state not in BELL_STATE_KINDS:
            raise ValueError(f"Unknown Bell state {self.state!r}; expected one of {', '.join(BELL_STATE_KINDS)}.")
        if len(self.angles) != 4:
            raise ValueError(f"angles must hold four values (a, a', b, b'), got {len(self.angles)}.")
        if self.trials < 1:
            raise ValueError(f"trials must be a positive integer, got {self.trials}.")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}.")
        self.angles = tuple(float(angle) for angle in self.angles)


@dataclass(slots=True)
class CHSHReport:
    """Theoretical and empirical CHSH results for one state."""

    angles: CHSHAngles
    theoretical_correlations: tuple[float, float, float, float]
    theoretical_s: float
    empirical_correlations: tuple[float, float, float, float]
    empirical_s: float
    standard_errors: tuple[float, float, float, float]
    trials: int

    @property
    def theoretical_violation(self) -> bool:
        return violates_classical_bound(self.theoretical_s)

    @property
    def empirical_violation(self) -> bool:
        return violates_classical_bound(self.empirical_s)

    @property
    def empirical_s_error(self) -> float:
        """Standard error of S, assuming the four correlations are independent."""

        return float(np.sqrt(np.sum(np.square(self.standard_errors))))

    def confidence_intervals(self, confidence: float = 0.95) -> list[tuple[float, float]]:
        """Normal-approximation interval for each empirical correlation."""

        return [
            correlation_confidence_interval(value, self.trials, confidence)
            for value in self.empirical_correlations
        ]


def _angle_pairs(angles: CHSHAngles) -> list[tuple[float, float]]:
    a, a_prime, b, b_prime = angles
    return [(a, b), (a, b_prime), (a_prime, b), (a_prime, b_prime)]


def run_chsh_experiment(state: QuantumState, config: BellTestConfig) -> CHSHReport:
    """Evaluate the closed-form and sampled CHSH statistic of ``state``.

    ``config.state`` is only used by callers that build the state from the
    configuration; the ``state`` argument is what gets measured.
    """

    pairs = _angle_pairs(config.angles)
    theoretical = tuple(calculate_quantum_correlation(state, a, b) for a, b in pairs)

    if config.workers > 1:
        seeds = np.random.SeedSequence(config.seed).generate_state(len(pairs))
        empirical = tuple(
            run_empirical_correlation_parallel(state, a, b, config.trials, config.workers, int(pair_seed))
            for (a, b), pair_seed in zip(pairs, seeds)
        )
    else:
        rng = np.random.default_rng(config.seed)
        empirical = tuple(
            run_empirical_correlation(state, a, b, config.trials, rng, config.progress) for a, b in pairs
        )

    report = CHSHReport(
        angles=config.angles,
        theoretical_correlations=theoretical,
        theoretical_s=chsh_from_correlations(*theoretical),
        empirical_correlations=empirical,
        empirical_s=chsh_from_correlations(*empirical),
        standard_errors=tuple(correlation_standard_error(e, config.trials) for e in empirical),
        trials=config.trials,
    )
    logger.info(
        "CHSH run: S_theory=%.4f, S_empirical=%.4f ± %.4f (%d trials per pair)",
        report.theoretical_s, report.empirical_s, report.empirical_s_error, config.trials,
    )
    return report


def survey_bell_states(angles: Optional[CHSHAngles] = None) -> dict[str, float]:
    """Theoretical S for each of the four Bell states."""

    if angles is None:
        angles = get_optimal_chsh_angles()
    return {kind: calculate_chsh(QuantumState.create_bell_state(kind), angles) for kind in BELL_STATE_KINDS}
