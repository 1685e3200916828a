"""Command-line entry point for the :mod:`bell_inequality` package."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .bell_test import DEFAULT_TRIALS, calculate_chsh
from .complex_number import Complex
from .experiment import PAIR_LABELS, BellTestConfig, run_chsh_experiment, survey_bell_states
from .quantum_state import BELL_STATE_KINDS, QuantumState
from .theory import CLASSICAL_BOUND, TSIRELSON_BOUND
from .visualisation import plot_correlation_curve

STATE_NAMES = {
    "phi+": "|Φ+⟩ = (|00⟩ + |11⟩)/√2",
    "phi-": "|Φ-⟩ = (|00⟩ - |11⟩)/√2",
    "psi+": "|Ψ+⟩ = (|01⟩ + |10⟩)/√2",
    "psi-": "|Ψ-⟩ = (|01⟩ - |10⟩)/√2",
}
RULE = "=" * 70


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Evaluate the CHSH inequality for a two-qubit Bell state, both in "
            "closed form and by Monte-Carlo sampling of projective measurements."
        )
    )
    parser.add_argument(
        "--state",
        choices=BELL_STATE_KINDS,
        default="phi+",
        help="Bell state to test (default: phi+).",
    )
    parser.add_argument(
        "--trials",
        type=_positive_int,
        default=DEFAULT_TRIALS,
        help=f"Measurement pairs per correlation (default: {DEFAULT_TRIALS}).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random number generator (default: None).",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=1,
        help="Worker processes for the empirical estimate (default: 1).",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while sampling.",
    )
    parser.add_argument(
        "--save-plot",
        type=Path,
        default=None,
        metavar="PATH",
        help="Save the correlation curve of the tested state to this path.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log diagnostic messages to stderr.",
    )
    return parser.parse_args(argv)


def _verdict(s_value: float) -> str:
    return "✓ VIOLATES" if s_value > CLASSICAL_BOUND else "✗ No violation"


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = BellTestConfig(
        state=args.state,
        trials=args.trials,
        seed=args.seed,
        workers=args.workers,
        progress=args.progress,
    )
    state = QuantumState.create_bell_state(config.state)

    print(RULE)
    print("Bell's Inequality Test - Quantum Entanglement Demonstration")
    print(RULE)
    print()
    print(f"Bell state {STATE_NAMES[config.state]}")
    print(state)
    print()

    a, a_prime, b, b_prime = config.angles
    print("Optimal measurement angles for CHSH test:")
    print(f"  Alice's angles:  a = {a:.4f} rad,  a' = {a_prime:.4f} rad")
    print(f"  Bob's angles:    b = {b:.4f} rad,  b' = {b_prime:.4f} rad")
    print()

    report = run_chsh_experiment(state, config)

    print("Theoretical quantum correlations:")
    for label, value in zip(PAIR_LABELS, report.theoretical_correlations):
        print(f"  {label:<10} = {value:.4f}")
    print()

    print("CHSH inequality test:")
    print(f"  Theoretical S = |E(a,b) - E(a,b') + E(a',b) + E(a',b')| = {report.theoretical_s:.4f}")
    print(f"  Classical bound: S ≤ {CLASSICAL_BOUND:.0f}")
    print(f"  Quantum maximum: S ≤ 2√2 ≈ {TSIRELSON_BOUND:.4f}")
    if report.theoretical_violation:
        print(f"  ✓ VIOLATION DETECTED! S = {report.theoretical_s:.4f} > 2")
    else:
        print(f"  ✗ No violation: S = {report.theoretical_s:.4f} ≤ 2")
    print()

    print(f"Empirical Bell test ({config.trials} measurement pairs per correlation):")
    intervals = report.confidence_intervals()
    for label, value, error, (low, high) in zip(
        PAIR_LABELS, report.empirical_correlations, report.standard_errors, intervals
    ):
        print(f"  {label:<10} = {value:+.4f} ± {error:.4f}  (95% CI [{low:+.4f}, {high:+.4f}])")
    print(f"  Empirical S ≈ {report.empirical_s:.4f} ± {report.empirical_s_error:.4f}")
    print(f"  Difference from theoretical: {abs(report.empirical_s - report.theoretical_s):.4f}")
    print()

    print("Testing all four Bell states:")
    for kind, s_value in survey_bell_states(config.angles).items():
        print(f"  {STATE_NAMES[kind]}: S = {s_value:.4f} {_verdict(s_value)}")
    print()

    product = QuantumState.create_product_state([Complex(1.0), Complex(0.0)], [Complex(1.0), Complex(0.0)])
    s_product = calculate_chsh(product, config.angles)
    print("Comparison with separable (non-entangled) state:")
    print(f"  Product state |00⟩: S = {s_product:.4f} {_verdict(s_product)}")
    print(RULE)

    if args.save_plot is not None:
        plot_correlation_curve(state, filename=args.save_plot)
        print(f"Saved correlation curve to {args.save_plot}")

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
