"""
Tests for decay propagation.
"""

import pandas as pd
import pytest

from grn_influence.network.graph import RegulatoryGraph
from grn_influence.scoring.propagation import (
    DecayConfig,
    DecayPropagator,
    adjust_scores_multilevel_decay,
)


@pytest.fixture
def scores():
    return {"TF1": 2.0, "TF2": 1.5, "TF3": 3.0}


@pytest.fixture
def grn():
    return {"TF1": ["TF2"], "TF2": ["TF3"], "TF3": []}


class TestAdjustScoresMultilevelDecay:
    """Tests for the functional interface."""

    def test_worked_example(self, scores, grn):
        """TF1 = 2 + 1.5 * 0.5 + (1.5 + 3) / 2 * 0.25 = 3.3125."""
        df = adjust_scores_multilevel_decay(scores, grn, max_depth=2, decay_factor=0.5)
        adjusted = dict(zip(df["tf"], df["adjusted_score"]))

        assert adjusted["TF1"] == 3.3125
        # TF2 reaches TF3 at depth 1 and nothing new at depth 2
        assert adjusted["TF2"] == 1.5 + 3.0 * 0.5 + 3.0 * 0.25
        # TF3 has no targets
        assert adjusted["TF3"] == 3.0

    def test_output_columns_and_index(self, scores, grn):
        df = adjust_scores_multilevel_decay(scores, grn)

        assert list(df.columns) == ["tf", "original_score", "adjusted_score"]
        assert list(df.index) == [0, 1, 2]

    def test_every_scored_node_once_with_original_unchanged(self, grn):
        scores = {"TF3": 3.0, "TF1": 2.0, "Orphan": -1.0, "TF2": 1.5}
        df = adjust_scores_multilevel_decay(scores, grn)

        assert list(df["tf"]) == ["TF3", "TF1", "Orphan", "TF2"]
        assert dict(zip(df["tf"], df["original_score"])) == scores

    def test_input_not_mutated(self, scores, grn):
        before = dict(scores)
        adjust_scores_multilevel_decay(scores, grn)
        assert scores == before

    @pytest.mark.parametrize("max_depth", [0, -2])
    def test_max_depth_below_one_keeps_scores(self, scores, grn, max_depth):
        df = adjust_scores_multilevel_decay(scores, grn, max_depth=max_depth)
        assert list(df["adjusted_score"]) == list(df["original_score"])

    def test_unscored_targets_ignored(self):
        grn = {"TF1": ["GeneA", "TF2"], "TF2": ["GeneB"]}
        df = adjust_scores_multilevel_decay({"TF1": 1.0, "TF2": 2.0}, grn, max_depth=1)

        # Only TF2 is scored among TF1's targets
        assert df.loc[0, "adjusted_score"] == 1.0 + 2.0 * 0.5

    def test_depths_are_normalised_independently(self):
        """Each depth averages everything reachable within that many hops."""
        grn = {"A": ["B"], "B": ["C"]}
        scores = {"A": 0.0, "B": 4.0, "C": 2.0}
        df = adjust_scores_multilevel_decay(scores, grn, max_depth=2, decay_factor=1.0)

        # depth 1: mean(B) = 4; depth 2: mean(B, C) = 3
        assert df.loc[0, "adjusted_score"] == 7.0

    def test_self_loop_counts_at_depth_one(self):
        df = adjust_scores_multilevel_decay({"A": 2.0}, {"A": ["A"]}, max_depth=3)
        # Reached set is {A} at every depth
        assert df.loc[0, "adjusted_score"] == 2.0 + 2.0 * (0.5 + 0.25 + 0.125)

    def test_cycle(self):
        grn = {"A": ["B"], "B": ["A"]}
        df = adjust_scores_multilevel_decay({"A": 1.0, "B": 3.0}, grn, max_depth=2, decay_factor=0.5)

        # depth 1: {B} -> 3 * 0.5; depth 2: {A, B} -> 2 * 0.25
        assert df.loc[0, "adjusted_score"] == 1.0 + 1.5 + 0.5

    def test_accepts_series(self, grn):
        scores = pd.Series({"TF1": 2.0, "TF2": 1.5, "TF3": 3.0})
        df = adjust_scores_multilevel_decay(scores, grn, max_depth=2)
        assert df.loc[0, "adjusted_score"] == 3.3125


class TestDecayPropagator:
    """Tests for the class interface."""

    def test_default_config(self):
        config = DecayConfig()
        assert config.max_depth == 3
        assert config.decay_factor == 0.5

    def test_contributions(self, scores, grn):
        result = DecayPropagator(DecayConfig(max_depth=2)).propagate(
            scores, RegulatoryGraph.from_mapping(grn)
        )

        assert result.contributions["TF1"] == {1: 0.75, 2: 0.5625}
        assert result.contributions["TF3"] == {}
        assert result.metadata == {"max_depth": 2, "decay_factor": 0.5}

    def test_to_dataframe_matches_function(self, scores, grn):
        result = DecayPropagator(DecayConfig(max_depth=3, decay_factor=0.6)).propagate(scores, grn)
        expected = adjust_scores_multilevel_decay(scores, grn, max_depth=3, decay_factor=0.6)

        pd.testing.assert_frame_equal(result.to_dataframe(), expected)
