"""
PyDEA: Data Envelopment Analysis for efficiency and popularity ranking.

Scores entities (web pages, organizational units, ...) against the frontier
formed by their peers and converts the scores into tie-aware percentiles.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydea.core.population import EntityRecord, Population
from pydea.core.result import EfficiencyResult, PercentileResult, PopularityResult
from pydea.core.exceptions import (
    PyDEAError,
    DataValidationError,
    ValueRangeError,
    NaNInfError,
    DegenerateInputError,
    EmptyInputError,
    ParseError,
    SolverError,
    EvaluationFailedError,
    DataQualityWarning,
    NumericalInstabilityWarning,
)
from pydea.algorithms.solver import LinearProgram, LPSolver, HighsSolver
from pydea.algorithms.efficiency import compute_efficiency, score_population
from pydea.algorithms.percentile import estimate_percentiles, rank_scores
from pydea.datasets import load_population
from pydea.evaluator import PopularityEvaluator, evaluate_popularity

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Data structures
    "EntityRecord",
    "Population",
    # Result types
    "EfficiencyResult",
    "PercentileResult",
    "PopularityResult",
    # LP solving
    "LinearProgram",
    "LPSolver",
    "HighsSolver",
    # Core algorithms
    "compute_efficiency",
    "score_population",
    "estimate_percentiles",
    "rank_scores",
    # Popularity
    "PopularityEvaluator",
    "evaluate_popularity",
    # Loading
    "load_population",
    # Exceptions
    "PyDEAError",
    "DataValidationError",
    "ValueRangeError",
    "NaNInfError",
    "DegenerateInputError",
    "EmptyInputError",
    "ParseError",
    "SolverError",
    "EvaluationFailedError",
    # Warnings
    "DataQualityWarning",
    "NumericalInstabilityWarning",
    # Convenience
    "estimate_efficiency",
    "get_popularity",
]


def estimate_efficiency(
    records: Population | Mapping[str, Any],
    **kwargs: Any,
) -> dict[str, float]:
    """
    Convenience function returning raw DEA efficiency scores.

    Classic multi-input/multi-output benchmarking: no percentile conversion
    is applied, and the synthetic constant input is only used when no
    entity has inputs.

    Args:
        records: Population, or mapping name -> (outputs, inputs)
        **kwargs: Passed to compute_efficiency()

    Returns:
        Mapping name -> efficiency score in [0, 1], ordered by name

    Example:
        >>> scores = estimate_efficiency({
        ...     "Depot1": ([40, 55, 30], [3.0, 5.0]),
        ...     "Depot2": ([45, 50, 40], [2.5, 4.5]),
        ... })
    """
    return score_population(records, **kwargs)


def get_popularity(
    likes: int,
    shares: int,
    mentions: int,
    reference: Population | Mapping[str, Any],
    **kwargs: Any,
) -> float:
    """
    Convenience function to get the popularity percentile of a page.

    Args:
        likes: Like count
        shares: Share count
        mentions: Mention count
        reference: Reference population of social counts
        **kwargs: Passed to PopularityEvaluator

    Returns:
        Percentile in [0, 100] rounded to 2 decimals
    """
    return PopularityEvaluator(reference, **kwargs).get_popularity(likes, shares, mentions)
