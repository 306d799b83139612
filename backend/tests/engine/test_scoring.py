"""Tests for the composite credit score."""
import math

import pytest

from engine.credit.benchmarks import CreditThresholds
from engine.credit.parameters import CreditStats
from engine.credit.scoring import NOT_RATED, RATING_BANDS, compute_score, rating_band

THRESHOLDS = CreditThresholds(min_dscr=1.2, target_icr=2.0, max_nd_to_ebitda=3.5)
BAND_ORDER = ["B", "BB", "BBB", "A", "AA"]


class TestComputeScore:
    def test_full_compliance_no_leverage(self):
        stats = CreditStats(min_dscr=2.0, min_icr=4.0, max_leverage=0.0)
        result = compute_score(stats, THRESHOLDS)
        assert result.score == 90
        assert result.band == "AA"

    def test_weighted_terms(self):
        stats = CreditStats(min_dscr=1.45, min_icr=3.2, max_leverage=2.8)
        result = compute_score(stats, THRESHOLDS)
        points = {d.category: d.points for d in result.details}
        assert points["DSCR Coverage"] == pytest.approx(40.0)
        assert points["Interest Coverage"] == pytest.approx(30.0)
        assert points["Leverage"] == pytest.approx(4.0)
        assert result.score == 74
        assert result.band == "BBB"

    def test_partial_coverage(self):
        # DSCR 0.6/1.2 -> 20, ICR 1.0/2.0 -> 15, leverage at limit -> 0
        stats = CreditStats(min_dscr=0.6, min_icr=1.0, max_leverage=3.5)
        result = compute_score(stats, THRESHOLDS)
        assert result.score == 35
        assert result.band == "B"

    def test_detail_maxima(self):
        result = compute_score(CreditStats(min_dscr=1.0), THRESHOLDS)
        assert [(d.category, d.max) for d in result.details] == [
            ("DSCR Coverage", 40.0),
            ("Interest Coverage", 30.0),
            ("Leverage", 20.0),
        ]

    def test_no_debt_is_not_rated(self):
        result = compute_score(CreditStats(), THRESHOLDS, has_debt=False)
        assert result.score == 0
        assert result.band == NOT_RATED
        assert result.details == []

    def test_unobserved_icr_is_rescaled_out(self):
        # (40 + 4) of 60 available points, rescaled to 90
        stats = CreditStats(min_dscr=1.45, max_leverage=2.8, icr_available=False)
        result = compute_score(stats, THRESHOLDS)
        assert [d.category for d in result.details] == ["DSCR Coverage", "Leverage"]
        assert result.score == 66
        assert result.band == "BB"

    def test_unobserved_dscr_is_rescaled_out(self):
        # (30 + 4) of 50 available points, rescaled to 90
        stats = CreditStats(min_icr=3.2, max_leverage=2.8, dscr_available=False)
        result = compute_score(stats, THRESHOLDS)
        assert [d.category for d in result.details] == ["Interest Coverage", "Leverage"]
        assert result.score == 61

    def test_no_observed_coverage_is_not_rated(self):
        stats = CreditStats(max_leverage=0.8, dscr_available=False, icr_available=False)
        result = compute_score(stats, THRESHOLDS)
        assert result.score == 0
        assert result.band == NOT_RATED
        assert result.details == []

    @pytest.mark.parametrize("stats", [
        CreditStats(),
        CreditStats(min_dscr=100.0, min_icr=100.0, max_leverage=-50.0),
        CreditStats(min_dscr=-3.0, min_icr=-3.0, max_leverage=40.0),
        CreditStats(min_dscr=math.nan, min_icr=math.inf, max_leverage=math.nan),
    ])
    def test_score_is_bounded(self, stats):
        result = compute_score(stats, THRESHOLDS)
        assert 0 <= result.score <= 100


class TestRatingBand:
    @pytest.mark.parametrize("score,band", [
        (100, "AA"), (90, "AA"), (89, "A"), (80, "A"), (79, "BBB"),
        (70, "BBB"), (69, "BB"), (60, "BB"), (59, "B"), (0, "B"),
    ])
    def test_band_boundaries(self, score, band):
        assert rating_band(score) == band

    def test_monotonic(self):
        ranks = [BAND_ORDER.index(rating_band(s)) for s in range(0, 101)]
        assert ranks == sorted(ranks)

    def test_band_table_is_best_first(self):
        floors = [floor for floor, _ in RATING_BANDS]
        assert floors == sorted(floors, reverse=True)
