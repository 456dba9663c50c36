"""PopularityEvaluator: score new observations against a reference population.

The evaluator holds a reference population (the "knowledge base", e.g.
social counts of many pages) and answers one question: how popular is a new
page compared to them? Answering it runs DEA over the reference set plus the
candidate and converts the candidate's score to a percentile.

The reference population is an immutable snapshot. Each evaluation builds
its own augmented copy (snapshot + candidate) and discards it afterwards,
so concurrent evaluations never see each other's candidates and a failed
evaluation cannot leave the reference modified. Loading a new reference
replaces the snapshot in a single assignment under a lock.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import numpy as np

from pydea.algorithms.efficiency import as_population, compute_efficiency
from pydea.algorithms.percentile import estimate_percentiles
from pydea.algorithms.solver import LPSolver
from pydea.config import (
    CANDIDATE_ID_PREFIX,
    DEFAULT_EPSILON,
    DEFAULT_TIE_METHOD,
    PERCENTILE_DECIMALS,
    SOCIAL_COUNT_FIELDS,
)
from pydea.core.exceptions import (
    DataValidationError,
    DegenerateInputError,
    EvaluationFailedError,
    SolverError,
    ValueRangeError,
)
from pydea.core.population import EntityRecord, Population
from pydea.core.result import PopularityResult
from pydea.datasets import load_population

logger = logging.getLogger(__name__)


def round_percentile(value: float, decimals: int = PERCENTILE_DECIMALS) -> float:
    """Round half-up to `decimals` digits (73.125 -> 73.13)."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def evaluate_popularity(
    reference: Population | Mapping[str, Any] | None,
    candidate_vector: Any,
    epsilon: float = DEFAULT_EPSILON,
    solver: LPSolver | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
    tie_method: str = DEFAULT_TIE_METHOD,
) -> PopularityResult:
    """
    Score one candidate against a reference population.

    The candidate's measurements are all treated as outputs with no inputs.
    A fresh id that cannot collide with any reference id is generated for
    it, the augmented population reference + {candidate} is scored with DEA,
    scores are converted to percentiles, and the candidate's percentile is
    returned. `reference` itself is never modified.

    Args:
        reference: Reference population (or mapping accepted by as_population)
        candidate_vector: Output measurements of the candidate
        epsilon, solver, max_workers, timeout: Passed to compute_efficiency()
        tie_method: Passed to estimate_percentiles()

    Returns:
        PopularityResult with the rounded and raw percentile

    Raises:
        EvaluationFailedError: Wrapping DegenerateInputError, SolverError or
            a validation error of the candidate vector
    """
    start_time = time.perf_counter()

    if reference is None:
        cause = DegenerateInputError(
            "No reference population loaded. Hint: Call load() or load_file() first."
        )
        raise EvaluationFailedError(f"Evaluation failed: {cause}", cause=cause) from cause

    candidate_id = f"{CANDIDATE_ID_PREFIX}{uuid.uuid4().hex}"
    try:
        snapshot = as_population(reference)
        candidate = EntityRecord(candidate_id, outputs=candidate_vector)
        augmented = snapshot.with_record(candidate)

        efficiency = compute_efficiency(
            augmented,
            epsilon=epsilon,
            solver=solver,
            max_workers=max_workers,
            timeout=timeout,
        )
        ranking = estimate_percentiles(efficiency.scores, tie_method=tie_method)
    except (DataValidationError, SolverError) as e:
        raise EvaluationFailedError(f"Evaluation failed: {e}", cause=e) from e

    raw_percentile = ranking.percentiles[candidate_id]
    computation_time = (time.perf_counter() - start_time) * 1000

    return PopularityResult(
        candidate_id=candidate_id,
        percentile=round_percentile(raw_percentile),
        raw_percentile=raw_percentile,
        efficiency_score=efficiency.scores[candidate_id],
        reference_size=snapshot.num_entities,
        computation_time_ms=computation_time,
    )


def _social_counts(*counts: Any) -> list[float]:
    """Validate social counts: non-negative integers."""
    values = []
    for name, count in zip(SOCIAL_COUNT_FIELDS, counts):
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
            raise DataValidationError(
                f"{name} must be an integer count, got {count!r}."
            )
        if count < 0:
            raise ValueRangeError(f"{name} must be non-negative, got {count}.")
        values.append(float(count))
    return values


class PopularityEvaluator:
    """
    Scores candidates against a shared reference population.

    Args:
        reference: Initial reference population (optional)
        epsilon: Weight lower bound for the DEA programs
        solver: LP backend (default: HighsSolver)
        max_workers: Threads per evaluation for the per-entity LPs
        timeout: Deadline in seconds for each evaluation
        tie_method: Percentile tie policy ("min" or "average")

    Example:
        >>> from pydea import PopularityEvaluator
        >>> evaluator = PopularityEvaluator()
        >>> evaluator.load_file("socialcounts.txt")
        >>> popularity = evaluator.get_popularity(135, 337, 9079)
        >>> 0.0 <= popularity <= 100.0
        True
    """

    def __init__(
        self,
        reference: Population | Mapping[str, Any] | None = None,
        epsilon: float = DEFAULT_EPSILON,
        solver: LPSolver | None = None,
        max_workers: int | None = None,
        timeout: float | None = None,
        tie_method: str = DEFAULT_TIE_METHOD,
    ) -> None:
        self.epsilon = epsilon
        self.solver = solver
        self.max_workers = max_workers
        self.timeout = timeout
        self.tie_method = tie_method
        self._lock = threading.Lock()
        self._reference: Population | None = (
            as_population(reference) if reference is not None else None
        )

    @property
    def reference(self) -> Population | None:
        """The current reference population snapshot."""
        with self._lock:
            return self._reference

    def load(self, population: Population | Mapping[str, Any]) -> int:
        """
        Replace the reference population.

        Evaluations already running keep using the snapshot they started
        with; later evaluations see the new one.

        Returns:
            Number of records in the new reference population
        """
        snapshot = as_population(population)
        with self._lock:
            self._reference = snapshot
        logger.info("Reference population replaced (%d records)", snapshot.num_entities)
        return snapshot.num_entities

    def load_file(self, source: Any, **kwargs: Any) -> int:
        """
        Load the reference population from a tab-separated file or URL.

        Keyword arguments are passed to load_population(). If parsing fails
        the ParseError propagates and the previous reference stays in place.

        Returns:
            Number of records loaded
        """
        return self.load(load_population(source, **kwargs))

    def evaluate_detailed(self, candidate_vector: Any) -> PopularityResult:
        """Score a candidate and return the full PopularityResult."""
        result = evaluate_popularity(
            self.reference,
            candidate_vector,
            epsilon=self.epsilon,
            solver=self.solver,
            max_workers=self.max_workers,
            timeout=self.timeout,
            tie_method=self.tie_method,
        )
        logger.info(
            "Candidate scored %.2f (efficiency %.6f) against %d records",
            result.percentile, result.efficiency_score, result.reference_size,
        )
        return result

    def evaluate(self, candidate_vector: Any) -> float:
        """Return the candidate's percentile in [0, 100], rounded to 2 decimals."""
        return self.evaluate_detailed(candidate_vector).percentile

    def get_popularity(self, likes: int, shares: int, mentions: int) -> float:
        """
        Popularity (0-100 percentile) of a page from its social counts.

        Args:
            likes: Like count
            shares: Share count
            mentions: Mention count

        Returns:
            Percentile rounded to 2 decimals

        Raises:
            EvaluationFailedError: Invalid counts or failed scoring
        """
        try:
            counts = _social_counts(likes, shares, mentions)
        except DataValidationError as e:
            raise EvaluationFailedError(f"Evaluation failed: {e}", cause=e) from e
        return self.evaluate(counts)

    def __repr__(self) -> str:
        size = self.reference.num_entities if self.reference is not None else 0
        return f"PopularityEvaluator(reference_size={size}, epsilon={self.epsilon})"
