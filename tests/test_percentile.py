"""Tests for tie-aware percentile ranking."""

import numpy as np
import pytest

from pydea import (
    DataValidationError,
    EmptyInputError,
    PercentileResult,
    compute_efficiency,
    estimate_percentiles,
    rank_scores,
)


class TestMinimumRank:
    """Default tie policy: every tie gets the group's best rank."""

    def test_distinct_scores(self):
        """Without ties percentiles step down by 100 / N."""
        result = estimate_percentiles({"p1": 1 / 3, "p2": 2 / 3, "p3": 1.0})

        assert result.percentiles["p3"] == 100.0
        assert result.percentiles["p2"] == pytest.approx(200 / 3)
        assert result.percentiles["p1"] == pytest.approx(100 / 3)

    def test_three_pages_end_to_end(self, three_page_population):
        """The least efficient of three pages lands at 100 / 3."""
        scores = compute_efficiency(three_page_population).scores
        percentiles = estimate_percentiles(scores).percentiles

        assert scores["p3"] == 1.0
        assert percentiles["p3"] == 100.0
        assert percentiles["p1"] == pytest.approx(33.333, abs=1e-3)
        assert min(percentiles, key=percentiles.get) == "p1"

    def test_tied_group_shares_best_rank(self):
        """Two tied entities both receive the higher percentile."""
        result = estimate_percentiles({"a": 0.5, "b": 0.5, "c": 1.0, "d": 0.1})

        assert result.percentiles == {"c": 100.0, "a": 75.0, "b": 75.0, "d": 25.0}
        assert result.ranks == {"c": 1.0, "a": 2.0, "b": 2.0, "d": 4.0}

    def test_tied_population_end_to_end(self, tied_population):
        """Identical vectors get the same score and the minimum-rank percentile."""
        scores = compute_efficiency(tied_population).scores
        percentiles = estimate_percentiles(scores).percentiles

        assert percentiles["a"] == percentiles["b"] == 75.0
        assert percentiles["a"] != 62.5
        assert percentiles["c"] == 100.0
        assert percentiles["d"] == 25.0

    def test_rank_skips_after_tie(self):
        """The group after a tie starts at rank r + t."""
        result = estimate_percentiles({"a": 1.0, "b": 1.0, "c": 1.0, "d": 0.2})

        assert result.percentiles["a"] == 100.0
        assert result.ranks["d"] == 4.0
        assert result.percentiles["d"] == 25.0

    def test_all_tied(self):
        """When every entity ties, all get 100."""
        result = estimate_percentiles({"a": 0.7, "b": 0.7, "c": 0.7})
        assert set(result.percentiles.values()) == {100.0}
        assert result.num_ties == 1

    def test_single_entity(self):
        """A single entity is at the top."""
        assert estimate_percentiles({"only": 0.3}).percentiles == {"only": 100.0}


class TestAverageRank:
    """Optional averaged-rank tie policy."""

    def test_tied_group_average(self):
        """Two entities tied at ranks 2 and 3 share rank 2.5."""
        result = estimate_percentiles(
            {"a": 0.5, "b": 0.5, "c": 1.0, "d": 0.1}, tie_method="average"
        )

        assert result.ranks["a"] == 2.5
        assert result.percentiles["a"] == 62.5
        assert result.percentiles["b"] == 62.5
        assert result.percentiles["c"] == 100.0
        assert result.percentiles["d"] == 25.0
        assert result.tie_method == "average"

    def test_no_ties_matches_min(self):
        """Without ties both policies agree."""
        scores = {"a": 0.1, "b": 0.4, "c": 0.9}
        assert rank_scores(scores, tie_method="average") == rank_scores(scores)

    def test_unknown_method(self):
        """Unsupported tie methods are rejected."""
        with pytest.raises(DataValidationError, match="tie_method"):
            estimate_percentiles({"a": 1.0}, tie_method="dense")


class TestPercentileProperties:
    """Range and monotonicity."""

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_range_and_monotonic(self, seed):
        """Percentiles lie in [100/N, 100] and never rise as scores fall."""
        rng = np.random.default_rng(seed)
        # Rounded values force some ties
        values = np.round(rng.uniform(0.0, 1.0, 40), 1)
        scores = {f"e{i}": float(v) for i, v in enumerate(values)}
        n = len(scores)

        percentiles = estimate_percentiles(scores).percentiles

        assert max(percentiles.values()) == 100.0
        assert min(percentiles.values()) >= 100.0 / n
        ordered = sorted(scores, key=scores.get, reverse=True)
        for hi, lo in zip(ordered, ordered[1:]):
            assert percentiles[hi] >= percentiles[lo]
            if scores[hi] == scores[lo]:
                assert percentiles[hi] == percentiles[lo]

    def test_depot_percentiles(self, depot_population):
        """Efficient depots share the top percentile."""
        scores = compute_efficiency(depot_population).scores
        percentiles = estimate_percentiles(scores).percentiles

        for entity_id, score in scores.items():
            if score == 1.0:
                assert percentiles[entity_id] == 100.0
            assert 100.0 / 20 <= percentiles[entity_id] <= 100.0


class TestErrors:
    """Error handling."""

    def test_empty_raises(self):
        """An empty score map cannot be ranked."""
        with pytest.raises(EmptyInputError):
            estimate_percentiles({})

    def test_empty_caught_as_value_error(self):
        """EmptyInputError is a ValueError."""
        with pytest.raises(ValueError):
            rank_scores({})


class TestPercentileResult:
    """Result object."""

    def test_result_type(self):
        """estimate_percentiles returns a PercentileResult."""
        result = estimate_percentiles({"a": 1.0, "b": 0.5})
        assert isinstance(result, PercentileResult)
        assert result.num_entities == 2
        assert result.tie_method == "min"
        assert result.num_ties == 0

    def test_to_dict_sorted(self):
        """to_dict() orders by id."""
        result = estimate_percentiles({"z": 0.1, "a": 0.5, "m": 1.0})
        assert list(result.to_dict()) == ["a", "m", "z"]

    def test_top(self):
        """top() lists the best entities, ties broken by id."""
        result = estimate_percentiles({"b": 1.0, "a": 1.0, "c": 0.2})
        assert result.top(2) == [("a", 100.0), ("b", 100.0)]

    def test_score(self):
        """score() is the mean percentile on a 0-1 scale."""
        result = estimate_percentiles({"a": 1.0, "b": 0.5})
        assert result.score() == pytest.approx(0.75)

    def test_summary(self):
        """summary() names the tie policy."""
        text = estimate_percentiles({"a": 1.0, "b": 1.0, "c": 0.2}).summary()
        assert "PERCENTILE RANKING REPORT" in text
        assert "Tie Method" in text

    def test_input_not_modified(self):
        """The score map is left untouched."""
        scores = {"a": 0.3, "b": 0.9}
        estimate_percentiles(scores)
        assert scores == {"a": 0.3, "b": 0.9}
