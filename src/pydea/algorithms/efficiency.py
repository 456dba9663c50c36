"""CCR efficiency scoring (Data Envelopment Analysis, multiplier form).

For every entity o the engine solves one linear program over the weights
u (outputs) and v (inputs):

    Maximize:   sum_k u_k * y[o, k]
    Subject to: sum_i v_i * x[o, i] = 1
                sum_k u_k * y[j, k] - sum_i v_i * x[j, i] <= 0   for all j
                u_k >= epsilon,  v_i >= epsilon

The optimum is the efficiency score of o. Entities scoring 1.0 lie on the
efficient frontier; several entities can share it.

When the population has no inputs at all (pure-output ranking, e.g. page
popularity from social counts), a constant synthetic input of 1 is used for
every entity, which turns the ratio into a weighted output sum capped by
the frontier.

References:
    Charnes, A., Cooper, W. W., & Rhodes, E. (1978). Measuring the
    efficiency of decision making units. European Journal of Operational
    Research, 2(6), 429-444.
"""

from __future__ import annotations

import logging
import os
import threading
import time
import warnings
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydea.algorithms.solver import HighsSolver, LinearProgram, LPSolver
from pydea.config import (
    DEFAULT_EPSILON,
    DEFAULT_MAX_WORKERS,
    FRONTIER_TOLERANCE,
    SCORE_DECIMALS,
    SCORE_TOLERANCE,
)
from pydea.core.exceptions import (
    DataQualityWarning,
    DataValidationError,
    DegenerateInputError,
    NumericalInstabilityWarning,
    SolverError,
)
from pydea.core.population import EntityRecord, Population
from pydea.core.result import EfficiencyResult
from pydea.core.types import ScoreMap

logger = logging.getLogger(__name__)


def as_population(records: Any) -> Population:
    """
    Coerce `records` into a Population.

    Accepts a Population, a mapping id -> EntityRecord, or a mapping
    id -> (outputs, inputs) / id -> outputs. A value is read as an
    (outputs, inputs) pair only when it is a 2-tuple of vectors, so
    {"p": (3, 4)} is a page with two outputs. Invalid measurements are
    reported as DegenerateInputError, since no LP can be built from them.
    """
    if isinstance(records, Population):
        return records

    if not isinstance(records, Mapping):
        raise DegenerateInputError(
            f"Expected a Population or a mapping of entity id -> record, "
            f"got {type(records).__name__}."
        )

    try:
        built = []
        for entity_id, value in records.items():
            if isinstance(value, EntityRecord):
                built.append(value)
            elif _is_vector_pair(value):
                built.append(EntityRecord(entity_id, outputs=value[0], inputs=value[1]))
            else:
                built.append(EntityRecord(entity_id, outputs=value))
        return Population(built)
    except DegenerateInputError:
        raise
    except DataValidationError as e:
        raise DegenerateInputError(f"Invalid measurements: {e}") from e


def _is_vector_pair(value: Any) -> bool:
    """True for an (outputs, inputs) tuple of two 1D vectors."""
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and all(np.ndim(part) == 1 for part in value)
    )


def _validate_population(population: Population) -> None:
    """Reject populations that cannot be scored."""
    if population.num_entities < 2:
        raise DegenerateInputError(
            f"Need at least 2 entities for DEA, got {population.num_entities}. "
            f"Hint: The frontier is formed by the other entities; load a "
            f"reference population first."
        )
    if population.num_outputs < 1:
        raise DegenerateInputError(
            "Entities have no output measures. "
            "Hint: DEA needs at least one output per entity."
        )


def _prepare_matrices(
    population: Population,
    normalize: bool,
) -> tuple[NDArray[np.float64], NDArray[np.float64], bool]:
    """Return (outputs, inputs, synthetic_input) ready for LP construction."""
    Y = np.array(population.output_matrix, dtype=np.float64)
    synthetic = population.num_inputs == 0
    if synthetic:
        X = np.ones((population.num_entities, 1))
    else:
        X = np.array(population.input_matrix, dtype=np.float64)

    for name, M in (("output", Y), ("input", X)):
        zero_cols = np.flatnonzero(np.all(M == 0, axis=0))
        if len(zero_cols) > 0:
            warnings.warn(
                f"{len(zero_cols)} {name} measure(s) are zero for every entity "
                f"(columns {zero_cols.tolist()}); they cannot discriminate between entities.",
                DataQualityWarning,
                stacklevel=3,
            )

    zero_rows = np.flatnonzero(np.all(Y == 0, axis=1))
    if len(zero_rows) > 0:
        ids = [population.ids[i] for i in zero_rows[:5]]
        warnings.warn(
            f"{len(zero_rows)} entities have all-zero outputs and will score 0 "
            f"(e.g. {ids}).",
            DataQualityWarning,
            stacklevel=3,
        )

    if normalize:
        # CCR is units-invariant; scaling keeps epsilon relative to the data
        Y = _scale_columns(Y)
        X = _scale_columns(X)

    return Y, X, synthetic


def _scale_columns(M: NDArray[np.float64]) -> NDArray[np.float64]:
    """Divide every column by its maximum, leaving all-zero columns alone."""
    col_max = M.max(axis=0)
    col_max[col_max == 0] = 1.0
    return M / col_max


def build_ccr_program(
    outputs: NDArray[np.float64],
    inputs: NDArray[np.float64],
    index: int,
    epsilon: float = DEFAULT_EPSILON,
) -> LinearProgram:
    """
    Build the multiplier-form CCR linear program of entity `index`.

    Variables are ordered [u_1..u_K, v_1..v_M].

    Args:
        outputs: N x K output matrix
        inputs: N x M input matrix (M >= 1)
        index: Row of the entity being scored
        epsilon: Lower bound on every weight

    Returns:
        LinearProgram with N inequality rows and one normalization row
    """
    N, K = outputs.shape
    M = inputs.shape[1]

    objective = np.concatenate([outputs[index], np.zeros(M)])

    # Domination: u @ y_j - v @ x_j <= 0 for every entity j (including o)
    A_ub = np.hstack([outputs, -inputs])
    b_ub = np.zeros(N)

    # Normalization: v @ x_o = 1
    A_eq = np.concatenate([np.zeros(K), inputs[index]]).reshape(1, K + M)
    b_eq = np.array([1.0])

    bounds: list[tuple[float | None, float | None]] = [(epsilon, None)] * (K + M)

    return LinearProgram(
        objective=objective,
        A_ub=A_ub,
        b_ub=b_ub,
        A_eq=A_eq,
        b_eq=b_eq,
        bounds=bounds,
    )


def _finalize_score(raw: float, entity_id: str) -> float:
    """
    Clip an LP optimum into [0, 1] and remove solver noise.

    Values near 1 snap to exactly 1.0; everything else is rounded to
    SCORE_DECIMALS so equal efficiencies group together when ranked.
    """
    if raw > 1.0 + SCORE_TOLERANCE or raw < -SCORE_TOLERANCE:
        warnings.warn(
            f"LP objective for entity '{entity_id}' is {raw:.8g}, outside [0, 1]; clipping.",
            NumericalInstabilityWarning,
            stacklevel=4,
        )
    if raw >= 1.0 - FRONTIER_TOLERANCE:
        return 1.0
    return round(float(max(raw, 0.0)), SCORE_DECIMALS)


def _resolve_workers(max_workers: int | None) -> int:
    """Bound the requested worker count by the available cores."""
    cores = os.cpu_count() or 1
    if max_workers is None:
        return DEFAULT_MAX_WORKERS
    if max_workers == -1:
        return cores
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1 or -1, got {max_workers}")
    return min(max_workers, cores)


def compute_efficiency(
    population: Population | Mapping[str, Any],
    epsilon: float = DEFAULT_EPSILON,
    solver: LPSolver | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
    normalize: bool = True,
    cancel_event: threading.Event | None = None,
) -> EfficiencyResult:
    """
    Compute the CCR efficiency score of every entity in a population.

    One LP with (K_out + K_in) variables and N + 1 constraints is solved per
    entity. The solves share no state, so they can run in a thread pool.

    Args:
        population: Population (or mapping accepted by as_population)
        epsilon: Lower bound on every weight; keeps an entity from ignoring
            a measure entirely
        solver: LP backend; defaults to HighsSolver()
        max_workers: Threads used for the N solves (None = serial,
            -1 = one per core)
        timeout: Deadline in seconds for the whole call
        normalize: Scale each measure by its maximum before solving
        cancel_event: If set while scoring, remaining solves are abandoned

    Returns:
        EfficiencyResult with the score map and frontier ids

    Raises:
        DegenerateInputError: Fewer than 2 entities, inconsistent shapes,
            no outputs, or invalid measurements
        SolverError: An LP had no optimum, timed out or was cancelled; the
            error carries the entity id and the failure kind. No partial
            scores are returned.

    Example:
        >>> from pydea import Population, compute_efficiency
        >>> population = Population.from_vectors([[10], [20], [30]])
        >>> result = compute_efficiency(population)
        >>> result.efficient_ids
        ['2']
        >>> round(result.scores['0'], 4)
        0.3333
    """
    start_time = time.perf_counter()

    population = as_population(population)
    _validate_population(population)
    if epsilon <= 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")

    solver = solver if solver is not None else HighsSolver()
    workers = _resolve_workers(max_workers)
    deadline = time.monotonic() + timeout if timeout is not None else None

    Y, X, synthetic = _prepare_matrices(population, normalize)
    ids = population.ids

    logger.debug(
        "Scoring %d entities (%d outputs, %d inputs%s) with %d worker(s)",
        len(ids), Y.shape[1], X.shape[1], ", synthetic" if synthetic else "", workers,
    )

    def solve_one(index: int) -> float:
        entity_id = ids[index]
        if cancel_event is not None and cancel_event.is_set():
            raise SolverError(
                f"Scoring cancelled before entity '{entity_id}' was solved.",
                entity_id=entity_id,
                kind="cancelled",
            )
        time_limit = None
        if deadline is not None:
            time_limit = deadline - time.monotonic()
            if time_limit <= 0:
                raise SolverError(
                    f"Deadline of {timeout}s expired before entity '{entity_id}' was solved.",
                    entity_id=entity_id,
                    kind="timeout",
                )

        program = build_ccr_program(Y, X, index, epsilon)
        try:
            raw = solver.solve(program, time_limit=time_limit)
        except SolverError as e:
            raise e.with_entity(entity_id) from e

        score = _finalize_score(raw, entity_id)
        logger.debug("Entity %s: efficiency %.6f", entity_id, score)
        return score

    scores: ScoreMap = {}
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pydea-lp") as executor:
            futures = {executor.submit(solve_one, i): ids[i] for i in range(len(ids))}
            try:
                for future in as_completed(futures):
                    scores[futures[future]] = future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
    else:
        for i, entity_id in enumerate(ids):
            scores[entity_id] = solve_one(i)

    scores = {entity_id: scores[entity_id] for entity_id in ids}
    efficient_ids = [entity_id for entity_id in ids if scores[entity_id] >= 1.0]

    computation_time = (time.perf_counter() - start_time) * 1000

    return EfficiencyResult(
        scores=scores,
        efficient_ids=efficient_ids,
        epsilon=epsilon,
        num_inputs=population.num_inputs,
        num_outputs=population.num_outputs,
        synthetic_input=synthetic,
        computation_time_ms=computation_time,
    )


def score_population(
    population: Population | Mapping[str, Any],
    **kwargs: Any,
) -> ScoreMap:
    """
    Return the raw efficiency score map (id -> score), ordered by id.

    Thin wrapper over compute_efficiency(); accepts the same keyword
    arguments.
    """
    return compute_efficiency(population, **kwargs).to_dict()
