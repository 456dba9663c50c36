"""Result dataclasses for DEA scoring.

This module provides result containers for the efficiency engine, the
percentile ranker and the popularity evaluator:

    - EfficiencyResult: Raw DEA efficiency score per entity
    - PercentileResult: Tie-aware percentile per entity
    - PopularityResult: Percentile of one candidate against a reference set
"""

from __future__ import annotations

from dataclasses import dataclass

from pydea.core.mixins import ResultSummaryMixin
from pydea.core.types import PercentileMap, ScoreMap


@dataclass(frozen=True)
class EfficiencyResult:
    """
    Result of CCR efficiency scoring over a population.

    Attributes:
        scores: Mapping entity id -> efficiency score in [0, 1]
        efficient_ids: Sorted ids of entities on the frontier (score 1.0)
        epsilon: Lower bound used for every weight
        num_inputs: Number of input measures in the data (0 means the
            synthetic constant input was used)
        num_outputs: Number of output measures
        synthetic_input: True if a constant input of 1 was substituted
        computation_time_ms: Time taken to compute result in milliseconds
    """

    scores: ScoreMap
    efficient_ids: list[str]
    epsilon: float
    num_inputs: int
    num_outputs: int
    synthetic_input: bool
    computation_time_ms: float

    @property
    def num_entities(self) -> int:
        """Number of scored entities."""
        return len(self.scores)

    @property
    def num_efficient(self) -> int:
        """Number of entities on the frontier."""
        return len(self.efficient_ids)

    @property
    def mean_efficiency(self) -> float:
        """Average efficiency score."""
        if not self.scores:
            return 0.0
        return sum(self.scores.values()) / len(self.scores)

    @property
    def min_efficiency(self) -> float:
        """Lowest efficiency score."""
        return min(self.scores.values()) if self.scores else 0.0

    def to_dict(self) -> ScoreMap:
        """Return the score map ordered by entity id."""
        return {entity_id: self.scores[entity_id] for entity_id in sorted(self.scores)}

    def score(self) -> float:
        """Return scikit-learn style score in [0, 1]. Higher is better.

        Returns the mean efficiency across all entities.
        """
        return self.mean_efficiency

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("DEA EFFICIENCY REPORT (CCR)")]

        lines.append(m._format_section("Model"))
        lines.append(m._format_metric("Entities", self.num_entities))
        lines.append(m._format_metric("Outputs", self.num_outputs))
        lines.append(
            m._format_metric(
                "Inputs", "1 (synthetic)" if self.synthetic_input else self.num_inputs
            )
        )
        lines.append(m._format_metric("Epsilon", self.epsilon))

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Efficient Entities", self.num_efficient))
        lines.append(m._format_metric("Mean Efficiency", self.mean_efficiency))
        lines.append(m._format_metric("Min Efficiency", self.min_efficiency))

        lines.append(m._format_section("Frontier"))
        lines.append(m._format_list(self.efficient_ids, item_name="entity"))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  Mean: {m._format_interpretation(self.mean_efficiency)}")

        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"EfficiencyResult(entities={self.num_entities}, "
            f"efficient={self.num_efficient}, mean={self.mean_efficiency:.4f})"
        )


@dataclass(frozen=True)
class PercentileResult:
    """
    Result of converting efficiency scores to percentiles.

    Attributes:
        percentiles: Mapping entity id -> percentile in (0, 100]
        ranks: Mapping entity id -> rank used for the percentile (1 = best;
            the group's minimum rank, or its average rank for tie_method
            "average")
        tie_method: "min" or "average"
        num_ties: Number of score groups holding more than one entity
        computation_time_ms: Time taken to compute result in milliseconds
    """

    percentiles: PercentileMap
    ranks: dict[str, float]
    tie_method: str
    num_ties: int
    computation_time_ms: float

    @property
    def num_entities(self) -> int:
        """Number of ranked entities."""
        return len(self.percentiles)

    def to_dict(self) -> PercentileMap:
        """Return the percentile map ordered by entity id."""
        return {
            entity_id: self.percentiles[entity_id]
            for entity_id in sorted(self.percentiles)
        }

    def top(self, n: int = 5) -> list[tuple[str, float]]:
        """Return the n best (id, percentile) pairs, ties broken by id."""
        ordered = sorted(self.percentiles.items(), key=lambda kv: (-kv[1], kv[0]))
        return ordered[:n]

    def score(self) -> float:
        """Return scikit-learn style score in [0, 1].

        Returns the mean percentile divided by 100.
        """
        if not self.percentiles:
            return 0.0
        return sum(self.percentiles.values()) / (100.0 * len(self.percentiles))

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("PERCENTILE RANKING REPORT")]

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Entities", self.num_entities))
        lines.append(m._format_metric("Tie Method", self.tie_method))
        lines.append(m._format_metric("Tie Groups", self.num_ties))

        lines.append(m._format_section("Top Entities"))
        lines.append(
            m._format_list(
                [f"{entity_id}: {pct:.2f}" for entity_id, pct in self.top()],
                item_name="entity",
            )
        )

        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)


@dataclass(frozen=True)
class PopularityResult:
    """
    Result of scoring one candidate against a reference population.

    Attributes:
        candidate_id: Temporary id given to the candidate during scoring
        percentile: Candidate percentile rounded to 2 decimals (half-up)
        raw_percentile: Unrounded candidate percentile
        efficiency_score: Candidate DEA efficiency score in [0, 1]
        reference_size: Number of reference entities it was compared against
        computation_time_ms: Time taken to compute result in milliseconds
    """

    candidate_id: str
    percentile: float
    raw_percentile: float
    efficiency_score: float
    reference_size: int
    computation_time_ms: float

    @property
    def is_efficient(self) -> bool:
        """True if the candidate lies on the efficient frontier."""
        return self.efficiency_score >= 1.0

    def score(self) -> float:
        """Return the percentile scaled to [0, 1]."""
        return self.percentile / 100.0

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("POPULARITY REPORT")]

        lines.append(f"\nPopularity: {self.percentile:.2f} / 100")

        lines.append(m._format_section("Metrics"))
        lines.append(m._format_metric("Percentile", self.percentile))
        lines.append(m._format_metric("Efficiency Score", self.efficiency_score))
        lines.append(m._format_metric("On Frontier", self.is_efficient))
        lines.append(m._format_metric("Reference Size", self.reference_size))

        lines.append(m._format_section("Interpretation"))
        lines.append(f"  {m._format_interpretation(self.percentile, 'percentile')}")

        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)
