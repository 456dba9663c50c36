"""DEA scoring algorithms."""

from pydea.algorithms.solver import LinearProgram, LPSolver, HighsSolver
from pydea.algorithms.efficiency import (
    as_population,
    build_ccr_program,
    compute_efficiency,
    score_population,
)
from pydea.algorithms.percentile import estimate_percentiles, rank_scores

__all__ = [
    # LP solving
    "LinearProgram",
    "LPSolver",
    "HighsSolver",
    # Efficiency engine
    "as_population",
    "build_ccr_program",
    "compute_efficiency",
    "score_population",
    # Percentile ranking
    "estimate_percentiles",
    "rank_scores",
]
