"""Composite credit score and rating band.

Weighted blend of covenant compliance into a 0-100 score:

* DSCR: up to 40 points, scaled by ``min_dscr / covenant``
* ICR: up to 30 points, scaled by ``min_icr / target``
* Leverage: up to 20 points, ``(1 - max_leverage / limit)`` as a 0-100
  percentage scaled by 0.2

Each term is clamped before summing and the total is clamped to [0, 100].
A coverage ratio without observations drops out of the blend.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from engine.credit.benchmarks import CreditThresholds
from engine.credit.numeric import clamp, safe_divide
from engine.credit.parameters import CreditStats

DSCR_WEIGHT = 40.0
ICR_WEIGHT = 30.0
LEVERAGE_WEIGHT = 20.0
MAX_POINTS = DSCR_WEIGHT + ICR_WEIGHT + LEVERAGE_WEIGHT

# (minimum score, band), best first
RATING_BANDS: tuple[tuple[float, str], ...] = (
    (90, "AA"),
    (80, "A"),
    (70, "BBB"),
    (60, "BB"),
)
FLOOR_BAND = "B"
NOT_RATED = "N/A"


@dataclass
class ScoreDetail:
    category: str
    points: float
    max: float


@dataclass
class CreditScore:
    score: int
    band: str
    details: list[ScoreDetail] = field(default_factory=list)


def rating_band(score: float) -> str:
    for floor, band in RATING_BANDS:
        if score >= floor:
            return band
    return FLOOR_BAND


def compute_score(
    stats: CreditStats,
    thresholds: CreditThresholds,
    has_debt: bool = True,
) -> CreditScore:
    """Score *stats* against *thresholds*.

    A coverage ratio with no observed year is left out rather than scored
    as zero, and the remaining terms are rescaled to the full 90 points.
    With neither coverage ratio observed the credit is not rated.
    """
    if not has_debt or not (stats.dscr_available or stats.icr_available):
        return CreditScore(score=0, band=NOT_RATED)

    # (category, points, weight)
    terms: list[tuple[str, float, float]] = []

    if stats.dscr_available:
        dscr_pts = clamp(safe_divide(stats.min_dscr, thresholds.min_dscr), 0.0, 1.0) * DSCR_WEIGHT
        terms.append(("DSCR Coverage", dscr_pts, DSCR_WEIGHT))
    if stats.icr_available:
        icr_pts = clamp(safe_divide(stats.min_icr, thresholds.target_icr), 0.0, 1.0) * ICR_WEIGHT
        terms.append(("Interest Coverage", icr_pts, ICR_WEIGHT))

    lev_ratio = safe_divide(stats.max_leverage, thresholds.max_nd_to_ebitda)
    lev_pct = clamp((1.0 - lev_ratio) * 100.0, 0.0, 100.0)
    lev_pts = lev_pct * (LEVERAGE_WEIGHT / 100.0)
    terms.append(("Leverage", lev_pts, LEVERAGE_WEIGHT))

    earned = sum(pts for _, pts, _ in terms)
    available = sum(weight for _, _, weight in terms)
    if available < MAX_POINTS:
        earned *= MAX_POINTS / available

    total = clamp(earned, 0.0, 100.0)
    score = int(round(total))

    return CreditScore(
        score=score,
        band=rating_band(score),
        details=[ScoreDetail(name, round(pts, 2), weight) for name, pts, weight in terms],
    )
