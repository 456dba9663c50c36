"""Tie-aware conversion of efficiency scores to percentiles.

DEA scores are on a linear scale: a single outlier (a page with huge social
counts) pushes every other score towards zero and makes them hard to read.
Percentiles fix that: a popularity of 70 means the entity is at least as
popular as 70% of the population.

Ranks are assigned by descending score. Entities with identical scores form
one group and all receive the same percentile:

    percentile = 100 * (N - (r - 1)) / N

where r is the group's minimum rank (tie_method="min", the default) or its
average rank (tie_method="average"). The minimum-rank policy keeps ties from
being split apart, which reads better on a popularity scale; the averaged
rank is the usual choice for ordinal statistics.
"""

from __future__ import annotations

import time
from collections.abc import Mapping

from pydea.config import DEFAULT_TIE_METHOD, TIE_METHODS
from pydea.core.exceptions import DataValidationError, EmptyInputError
from pydea.core.result import PercentileResult


def estimate_percentiles(
    scores: Mapping[str, float],
    tie_method: str = DEFAULT_TIE_METHOD,
) -> PercentileResult:
    """
    Convert a score map into a percentile map.

    Args:
        scores: Mapping entity id -> score (higher is better)
        tie_method: "min" (every tie gets the group's best rank) or
            "average" (every tie gets the group's average rank)

    Returns:
        PercentileResult. Percentiles lie in (0, 100]; the best group gets
        exactly 100 and no group falls below 100 / N with tie_method="min".

    Raises:
        EmptyInputError: If `scores` is empty
        DataValidationError: If tie_method is unknown

    Example:
        >>> result = estimate_percentiles({"a": 0.5, "b": 1.0, "c": 0.5})
        >>> result.percentiles
        {'b': 100.0, 'a': 66.66666666666667, 'c': 66.66666666666667}
    """
    start_time = time.perf_counter()

    if tie_method not in TIE_METHODS:
        raise DataValidationError(
            f"Unknown tie_method {tie_method!r}. Expected one of {TIE_METHODS}."
        )
    if not scores:
        raise EmptyInputError(
            "Cannot rank an empty score map. "
            "Hint: Score a population with at least one entity first."
        )

    n = len(scores)

    # Group ids by identical score
    groups: dict[float, list[str]] = {}
    for entity_id, score in scores.items():
        groups.setdefault(score, []).append(entity_id)

    percentiles: dict[str, float] = {}
    ranks: dict[str, float] = {}
    num_ties = 0
    rank = 1
    for score in sorted(groups, reverse=True):
        ids = sorted(groups[score])
        ties = len(ids)
        if ties > 1:
            num_ties += 1

        if tie_method == "average":
            group_rank = rank + (ties - 1) / 2.0
        else:
            group_rank = float(rank)

        percentile = 100.0 * (n - (group_rank - 1)) / n
        for entity_id in ids:
            percentiles[entity_id] = percentile
            ranks[entity_id] = group_rank

        rank += ties

    computation_time = (time.perf_counter() - start_time) * 1000

    return PercentileResult(
        percentiles=percentiles,
        ranks=ranks,
        tie_method=tie_method,
        num_ties=num_ties,
        computation_time_ms=computation_time,
    )


def rank_scores(
    scores: Mapping[str, float],
    tie_method: str = DEFAULT_TIE_METHOD,
) -> dict[str, float]:
    """Return the percentile map (id -> percentile), ordered by id."""
    return estimate_percentiles(scores, tie_method=tie_method).to_dict()
