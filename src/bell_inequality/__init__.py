"""Two-qubit state simulation and Bell/CHSH inequality evaluation."""

from . import bell_test, experiment, theory, visualisation
from .bell_test import (
    calculate_chsh,
    calculate_independent_correlation,
    calculate_marginal_expectation,
    calculate_measurement_probability,
    calculate_quantum_correlation,
    get_optimal_chsh_angles,
    measure_qubit,
    run_empirical_chsh,
    run_empirical_correlation,
    run_empirical_correlation_parallel,
)
from .complex_number import Complex
from .errors import (
    DegenerateStateError,
    IndexOutOfRangeError,
    InvalidAmplitudesError,
    InvalidDimensionError,
    QuantumStateError,
)
from .experiment import BellTestConfig, CHSHReport, run_chsh_experiment, survey_bell_states
from .quantum_state import BASIS_LABELS, BELL_STATE_KINDS, QuantumState

__all__ = [
    "BASIS_LABELS",
    "BELL_STATE_KINDS",
    "BellTestConfig",
    "CHSHReport",
    "Complex",
    "DegenerateStateError",
    "IndexOutOfRangeError",
    "InvalidAmplitudesError",
    "InvalidDimensionError",
    "QuantumState",
    "QuantumStateError",
    "bell_test",
    "calculate_chsh",
    "calculate_independent_correlation",
    "calculate_marginal_expectation",
    "calculate_measurement_probability",
    "calculate_quantum_correlation",
    "experiment",
    "get_optimal_chsh_angles",
    "measure_qubit",
    "run_chsh_experiment",
    "run_empirical_chsh",
    "run_empirical_correlation",
    "run_empirical_correlation_parallel",
    "survey_bell_states",
    "theory",
    "visualisation",
]
