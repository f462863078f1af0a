"""
Tests for blended (direct/indirect) scoring.
"""

import pytest

from grn_influence.scoring.blending import (
    BlendConfig,
    BlendedScorer,
    adjust_scores_target_average,
)


@pytest.fixture
def scores():
    return {"TF1": 2.0, "TF2": 1.5, "TF3": 3.0, "TF4": -1.0}


@pytest.fixture
def grn():
    return {
        "TF1": ["TF2", "TF3", "GeneA"],
        "TF2": ["TF3"],
        "TF3": ["GeneB"],
        "TF4": ["TF4"],
    }


class TestAdjustScoresTargetAverage:
    """Tests for adjust_scores_target_average."""

    def test_scores(self, scores, grn):
        df = adjust_scores_target_average(scores, grn, alpha=0.5).set_index("tf")

        assert df.loc["TF1", "direct"] == 2.0
        assert df.loc["TF1", "indirect"] == pytest.approx((1.5 + 3.0) / 2)
        assert df.loc["TF1", "combined"] == pytest.approx(0.5 * 2.0 + 0.5 * 2.25)
        # No scored targets
        assert df.loc["TF3", "indirect"] == 0.0
        # Self-loop counts as a scored direct target
        assert df.loc["TF4", "indirect"] == -1.0

    def test_only_direct_targets(self, scores):
        grn = {"TF1": ["TF2"], "TF2": ["TF3"]}
        df = adjust_scores_target_average(scores, grn).set_index("tf")
        assert df.loc["TF1", "indirect"] == 1.5

    def test_columns(self, scores, grn):
        df = adjust_scores_target_average(scores, grn)
        assert list(df.columns) == ["tf", "direct", "indirect", "combined"]
        assert list(df["tf"]) == list(scores)

    def test_alpha_one_is_direct(self, scores, grn):
        df = adjust_scores_target_average(scores, grn, alpha=1.0)
        assert list(df["combined"]) == list(df["direct"])

    def test_alpha_zero_is_indirect(self, scores, grn):
        df = adjust_scores_target_average(scores, grn, alpha=0.0)
        assert list(df["combined"]) == list(df["indirect"])

    def test_direct_equals_input(self, scores, grn):
        df = adjust_scores_target_average(scores, grn, alpha=0.3)
        assert dict(zip(df["tf"], df["direct"])) == scores

    @pytest.mark.parametrize("alpha", [-0.1, 1.5])
    def test_invalid_alpha(self, scores, grn, alpha):
        with pytest.raises(ValueError, match="alpha"):
            adjust_scores_target_average(scores, grn, alpha=alpha)

    def test_empty_scores(self, grn):
        df = adjust_scores_target_average({}, grn)
        assert df.empty


class TestBlendedScorer:
    """Tests for the class interface."""

    def test_default_alpha(self):
        assert BlendedScorer().config.alpha == 0.5

    def test_config_validation(self):
        with pytest.raises(ValueError):
            BlendConfig(alpha=2.0)
