"""End-to-end credit analysis.

parameters + projection -> debt aggregation -> ratio statistics ->
{sanity checks, rationale, covenants, score, capacity}.

Pure and idempotent: identical inputs always give identical outputs.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from engine.credit.benchmarks import CreditThresholds, thresholds_from_params
from engine.credit.capacity import DebtCapacity, compute_debt_capacity
from engine.credit.checks import CheckLimits, SanityCheck, run_sanity_checks
from engine.credit.debt import DebtInfo, aggregate_debt, debt_scenario, has_any_debt
from engine.credit.parameters import CreditStats, FinancialParameters, Projection
from engine.credit.rationale import RationaleBullet, build_covenants, build_rationale
from engine.credit.ratios import CovenantBreaches, count_breaches, extract_credit_stats
from engine.credit.scoring import CreditScore, compute_score

logger = logging.getLogger(__name__)


@dataclass
class CreditAnalysis:
    scenario: str
    has_debt: bool
    thresholds: CreditThresholds
    debt: DebtInfo
    stats: CreditStats
    breaches: CovenantBreaches
    checks: list[SanityCheck]
    rationale: list[RationaleBullet]
    covenants: list[str]
    score: CreditScore
    capacity: DebtCapacity


def _reference_ebitda(params: FinancialParameters, projection: Projection) -> float:
    if params.ebitda > 0:
        return params.ebitda
    if projection.rows:
        return projection.rows[0].ebitda
    return 0.0


def analyze_credit(
    params: FinancialParameters,
    projection: Projection,
    limits: CheckLimits = CheckLimits(),
) -> CreditAnalysis:
    thresholds = thresholds_from_params(params)

    debt = aggregate_debt(params, projection)
    has_debt = has_any_debt(debt, projection)

    stats = extract_credit_stats(projection, has_debt)
    breaches = count_breaches(projection, thresholds) if has_debt else CovenantBreaches()

    checks = run_sanity_checks(stats, debt, params, thresholds, has_debt, limits)
    rationale = build_rationale(params, stats, debt, projection, thresholds, has_debt)
    covenants = build_covenants(params, stats, thresholds, has_debt)
    score = compute_score(stats, thresholds, has_debt)
    capacity = compute_debt_capacity(debt, _reference_ebitda(params, projection), thresholds)

    analysis = CreditAnalysis(
        scenario=debt_scenario(debt),
        has_debt=has_debt,
        thresholds=thresholds,
        debt=debt,
        stats=stats,
        breaches=breaches,
        checks=checks,
        rationale=rationale,
        covenants=covenants,
        score=score,
        capacity=capacity,
    )

    logger.debug(
        "Credit analysis: scenario=%s total_debt=%.0f blended=%.4f min_dscr=%.2f "
        "score=%d band=%s checks=%d",
        analysis.scenario,
        debt.total_debt,
        debt.blended_rate,
        stats.min_dscr,
        score.score,
        score.band,
        len(checks),
    )
    return analysis


def analysis_to_dict(analysis: CreditAnalysis) -> dict[str, Any]:
    """Plain, JSON-ready representation of *analysis*."""
    data = asdict(analysis)
    data["breaches"]["total"] = analysis.breaches.total
    return data
