r"""Projective measurements, correlations and the CHSH statistic.

All functions are stateless and only read the amplitudes of the
:class:`~bell_inequality.quantum_state.QuantumState` they receive.

Measurement model
~~~~~~~~~~~~~~~~~

A qubit measured at analyzer angle :math:`\theta` gives outcome :math:`+1`
when it is projected onto :math:`|+_\theta\rangle = \cos\theta|0\rangle +
\sin\theta|1\rangle` and :math:`-1` otherwise.  For qubit 0 the probability of
:math:`+1` is

.. math::

   P_0(+1) = |c_{00}\cos\theta + c_{10}\sin\theta|^2
           + |c_{01}\cos\theta + c_{11}\sin\theta|^2,

and for qubit 1 the pairs :math:`(c_{00}, c_{01})` and :math:`(c_{10}, c_{11})`
are combined instead.  :math:`P(-1) = 1 - P(+1)`.

Correlations
~~~~~~~~~~~~

:func:`calculate_quantum_correlation` is a closed form valid for the four
canonical Bell states only: it returns :math:`\pm\cos(a - b)` for states whose
probabilities match the :math:`\Phi` or :math:`\Psi` pattern and exactly ``0``
for every other state.

:func:`run_empirical_correlation` averages the products of independent
single-qubit samples, one for Alice at angle ``a`` and one for Bob at angle
``b`` per trial.  Its limit for ``trials -> inf`` is
:func:`calculate_independent_correlation`, the product of the two marginal
expectations.

The CHSH combination is

.. math::

   S = |E(a,b) - E(a,b') + E(a',b) + E(a',b')|.
"""

from __future__ import annotations

import logging
import operator
import os
from concurrent.futures import ProcessPoolExecutor
from math import cos, pi, sin
from typing import Literal, Optional, Sequence

import numpy as np
from tqdm import tqdm

from .complex_number import Complex
from .errors import InvalidAmplitudesError
from .quantum_state import NUM_AMPLITUDES, QuantumState

logger = logging.getLogger(__name__)

Outcome = Literal[1, -1]
CHSHAngles = tuple[float, float, float, float]

DEFAULT_TRIALS = 10_000
BATCH_SIZE = 4096
BELL_PATTERN_TOLERANCE = 1e-6


def _amplitudes(state: QuantumState) -> tuple[Complex, ...]:
    amplitudes = getattr(state, "amplitudes", None)
    amplitudes = () if amplitudes is None else tuple(amplitudes)
    if len(amplitudes) != NUM_AMPLITUDES or not all(isinstance(amp, Complex) for amp in amplitudes):
        raise InvalidAmplitudesError("Invalid state amplitudes: expected four Complex values.")
    return amplitudes


def _check_qubit_index(qubit_index: int) -> None:
    if qubit_index not in (0, 1):
        raise ValueError(f"qubit_index must be 0 or 1, got {qubit_index}.")


def _check_trials(trials: int) -> int:
    try:
        count = operator.index(trials)
    except TypeError:
        raise ValueError(f"trials must be a positive integer, got {trials!r}.") from None
    if count < 1:
        raise ValueError(f"trials must be a positive integer, got {count}.")
    return count


def _unpack_angles(angles: Sequence[float]) -> CHSHAngles:
    if len(angles) != 4:
        raise ValueError(f"CHSH needs four angles (a, a', b, b'), got {len(angles)}.")
    a, a_prime, b, b_prime = (float(angle) for angle in angles)
    return a, a_prime, b, b_prime


def calculate_measurement_probability(
    state: QuantumState,
    qubit_index: int,
    angle: float,
    outcome: Outcome = 1,
) -> float:
    """Probability of ``outcome`` when qubit ``qubit_index`` is measured at ``angle``.

    Parameters
    ----------
    state : QuantumState
        The two-qubit state; only its amplitudes are read.
    qubit_index : {0, 1}
        0 for Alice's (left) qubit, 1 for Bob's (right) qubit.
    angle : float
        Analyzer angle in radians.  Any real value is accepted.
    outcome : {+1, -1}
        The spin outcome whose probability is returned.

    Raises
    ------
    InvalidAmplitudesError
        If ``state`` does not expose exactly four :class:`Complex` amplitudes.
    """

    _check_qubit_index(qubit_index)
    if outcome not in (1, -1):
        raise ValueError(f"outcome must be +1 or -1, got {outcome}.")
    amp00, amp01, amp10, amp11 = _amplitudes(state)

    if outcome == -1:
        return 1.0 - calculate_measurement_probability(state, qubit_index, angle, 1)

    c = cos(angle)
    s = sin(angle)
    if qubit_index == 0:
        proj0 = amp00.scale(c).add(amp10.scale(s))
        proj1 = amp01.scale(c).add(amp11.scale(s))
    else:
        proj0 = amp00.scale(c).add(amp01.scale(s))
        proj1 = amp10.scale(c).add(amp11.scale(s))
    return proj0.magnitude_squared() + proj1.magnitude_squared()


def _outcomes_from_draws(prob_plus: float, draws):
    """Map uniform draws to outcomes: +1 where the draw is below ``prob_plus``, else -1."""

    return np.where(np.asarray(draws, dtype=float) < prob_plus, 1, -1)


def _sample_outcome(prob_plus: float, rng: np.random.Generator) -> Outcome:
    return int(_outcomes_from_draws(prob_plus, rng.random()))


def measure_qubit(
    state: QuantumState,
    qubit_index: int,
    angle: float,
    rng: Optional[np.random.Generator] = None,
) -> Outcome:
    """Sample one projective measurement outcome (+1 or -1).

    ``rng`` is the uniform random source; any object with a numpy-compatible
    ``random()`` method works.  A fresh generator is created when it is
    ``None``.  The state is not collapsed, so repeated calls are independent.
    """

    if rng is None:
        rng = np.random.default_rng()
    prob_plus = calculate_measurement_probability(state, qubit_index, angle, 1)
    return _sample_outcome(prob_plus, rng)


def calculate_marginal_expectation(state: QuantumState, qubit_index: int, angle: float) -> float:
    """Expected single-qubit outcome ``P(+1) - P(-1)``."""

    return 2.0 * calculate_measurement_probability(state, qubit_index, angle, 1) - 1.0


def calculate_independent_correlation(state: QuantumState, angle_a: float, angle_b: float) -> float:
    """Limit of :func:`run_empirical_correlation`: product of the marginal expectations."""

    return calculate_marginal_expectation(state, 0, angle_a) * calculate_marginal_expectation(
        state, 1, angle_b
    )


def _close(value: float, target: float) -> bool:
    return abs(value - target) < BELL_PATTERN_TOLERANCE


def calculate_quantum_correlation(state: QuantumState, angle_a: float, angle_b: float) -> float:
    """Closed-form correlation E(a, b) for the canonical Bell states.

    Returns ``sign * cos(angle_a - angle_b)`` when the probabilities match the
    Phi pattern ``(0.5, 0, 0, 0.5)`` (sign of ``Re c11``) or the Psi pattern
    ``(0, 0.5, 0.5, 0)`` (sign of ``Re c10``), within ``1e-6``.  Any other
    state, product states included, gives exactly ``0.0``.
    """

    amp00, amp01, amp10, amp11 = _amplitudes(state)
    p00, p01, p10, p11 = (amp.magnitude_squared() for amp in (amp00, amp01, amp10, amp11))

    is_phi = _close(p00, 0.5) and _close(p11, 0.5) and _close(p01, 0.0) and _close(p10, 0.0)
    is_psi = _close(p01, 0.5) and _close(p10, 0.5) and _close(p00, 0.0) and _close(p11, 0.0)

    if is_phi:
        sign = 1.0 if amp11.real >= 0 else -1.0
        return sign * cos(angle_a - angle_b)
    if is_psi:
        sign = 1.0 if amp10.real >= 0 else -1.0
        return sign * cos(angle_a - angle_b)

    logger.debug("State %s matches no Bell pattern; closed-form correlation is 0.", state.amplitudes)
    return 0.0


def chsh_from_correlations(e_ab: float, e_ab_prime: float, e_a_prime_b: float, e_a_prime_b_prime: float) -> float:
    """S = |E(a,b) - E(a,b') + E(a',b) + E(a',b')|."""

    return abs(e_ab - e_ab_prime + e_a_prime_b + e_a_prime_b_prime)


def calculate_chsh(state: QuantumState, angles: Sequence[float]) -> float:
    """Theoretical CHSH value for analyzer angles ``(a, a', b, b')``."""

    a, a_prime, b, b_prime = _unpack_angles(angles)
    return chsh_from_correlations(
        calculate_quantum_correlation(state, a, b),
        calculate_quantum_correlation(state, a, b_prime),
        calculate_quantum_correlation(state, a_prime, b),
        calculate_quantum_correlation(state, a_prime, b_prime),
    )


def _sum_outcome_products(prob_a: float, prob_b: float, size: int, rng: np.random.Generator) -> int:
    """Draw ``size`` measurement pairs and return the sum of the outcome products."""

    draws = np.asarray(rng.random((size, 2)), dtype=float)
    outcomes_a = _outcomes_from_draws(prob_a, draws[:, 0])
    outcomes_b = _outcomes_from_draws(prob_b, draws[:, 1])
    return int(np.dot(outcomes_a, outcomes_b))


def _batch_sizes(trials: int, batch_size: int = BATCH_SIZE) -> list[int]:
    return [min(batch_size, trials - start) for start in range(0, trials, batch_size)]


def run_empirical_correlation(
    state: QuantumState,
    angle_a: float,
    angle_b: float,
    trials: int = DEFAULT_TRIALS,
    rng: Optional[np.random.Generator] = None,
    progress: bool = False,
) -> float:
    """Monte-Carlo estimate of E(a, b) from ``trials`` measurement pairs.

    Each trial measures qubit 0 at ``angle_a`` and qubit 1 at ``angle_b`` with
    the rule of :func:`measure_qubit` and multiplies the two outcomes.  The
    mean product is returned; its standard error is about ``1/sqrt(trials)``.

    Parameters
    ----------
    trials : int
        Number of measurement pairs.  Must be at least 1.
    rng : numpy.random.Generator, optional
        Uniform random source.  A fresh generator is created when ``None``.
    progress : bool
        Show a ``tqdm`` progress bar over sampling batches.
    """

    trials = _check_trials(trials)
    if rng is None:
        rng = np.random.default_rng()

    prob_a = calculate_measurement_probability(state, 0, angle_a, 1)
    prob_b = calculate_measurement_probability(state, 1, angle_b, 1)
    batches = _batch_sizes(trials)
    logger.debug(
        "Sampling %d pairs in %d batches (P_a(+1)=%.4f, P_b(+1)=%.4f).",
        trials, len(batches), prob_a, prob_b,
    )

    total = 0
    for size in tqdm(batches, desc="Sampling measurement pairs", disable=not progress):
        total += _sum_outcome_products(prob_a, prob_b, size, rng)
    return total / trials


def _product_sum_worker(prob_a: float, prob_b: float, trials: int, seed: np.random.SeedSequence) -> int:
    """Process-pool entry point: sample ``trials`` pairs from an independent stream."""

    rng = np.random.default_rng(seed)
    return sum(_sum_outcome_products(prob_a, prob_b, size, rng) for size in _batch_sizes(trials))


def _split_trials(trials: int, n_chunks: int) -> list[int]:
    base, extra = divmod(trials, n_chunks)
    chunks = [base + (1 if index < extra else 0) for index in range(n_chunks)]
    return [chunk for chunk in chunks if chunk > 0]


def run_empirical_correlation_parallel(
    state: QuantumState,
    angle_a: float,
    angle_b: float,
    trials: int = DEFAULT_TRIALS,
    max_workers: Optional[int] = None,
    seed: Optional[int] = None,
) -> float:
    """Parallel variant of :func:`run_empirical_correlation`.

    The trials are split into one chunk per worker.  Every chunk gets its own
    stream spawned from ``numpy.random.SeedSequence(seed)``, so a fixed
    ``seed`` and ``max_workers`` reproduce the same estimate.
    """

    trials = _check_trials(trials)
    if max_workers is None:
        max_workers = os.cpu_count() or 1
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}.")

    prob_a = calculate_measurement_probability(state, 0, angle_a, 1)
    prob_b = calculate_measurement_probability(state, 1, angle_b, 1)
    chunks = _split_trials(trials, max_workers)
    seeds = np.random.SeedSequence(seed).spawn(len(chunks))
    logger.debug("Splitting %d pairs over %d workers: %s", trials, len(chunks), chunks)

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_product_sum_worker, prob_a, prob_b, chunk, chunk_seed)
            for chunk, chunk_seed in zip(chunks, seeds)
        ]
        total = sum(future.result() for future in futures)
    return total / trials


def run_empirical_chsh(
    state: QuantumState,
    angles: Sequence[float],
    trials: int = DEFAULT_TRIALS,
    rng: Optional[np.random.Generator] = None,
    progress: bool = False,
) -> float:
    """CHSH value built from four empirical correlations of ``trials`` pairs each."""

    a, a_prime, b, b_prime = _unpack_angles(angles)
    if rng is None:
        rng = np.random.default_rng()
    return chsh_from_correlations(
        run_empirical_correlation(state, a, b, trials, rng, progress),
        run_empirical_correlation(state, a, b_prime, trials, rng, progress),
        run_empirical_correlation(state, a_prime, b, trials, rng, progress),
        run_empirical_correlation(state, a_prime, b_prime, trials, rng, progress),
    )


def get_optimal_chsh_angles() -> CHSHAngles:
    """Angles ``(a, a', b, b') = (0, π/2, π/4, 3π/4)`` maximising S for Φ-type states."""

    return 0.0, pi / 2, pi / 4, 3 * pi / 4
