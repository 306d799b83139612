"""Credit analysis endpoints."""
import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from app.config import settings
from app.schemas.credit import (
    CreditAnalysisRequest,
    CreditAnalysisResponse,
    DebtSummaryRequest,
    DebtSummaryResponse,
    FinancialParametersIn,
    IndustryBenchmarkResponse,
    ProjectionIn,
)

from engine.credit import analysis_to_dict, analyze_credit, normalize_parameters, normalize_projection
from engine.credit.benchmarks import INDUSTRY_BENCHMARKS, CreditThresholds, find_industry
from engine.credit.checks import CheckLimits
from engine.credit.debt import aggregate_debt, debt_scenario, has_any_debt
from engine.credit.parameters import FinancialParameters, Projection

logger = logging.getLogger(__name__)

router = APIRouter()


def _parameters(body: FinancialParametersIn) -> FinancialParameters:
    raw = body.model_dump(exclude_none=True)
    raw.setdefault("min_dscr", settings.default_min_dscr)
    raw.setdefault("target_icr", settings.default_target_icr)
    raw.setdefault("max_nd_to_ebitda", settings.default_max_nd_to_ebitda)
    return normalize_parameters(raw)


def _projection(body: ProjectionIn | None) -> Projection:
    if body is None:
        return Projection()
    return normalize_projection(body.model_dump(exclude_none=True))


def _benchmark(industry: str, thresholds: CreditThresholds) -> IndustryBenchmarkResponse:
    return IndustryBenchmarkResponse(
        industry=industry,
        min_dscr=thresholds.min_dscr,
        target_icr=thresholds.target_icr,
        max_nd_to_ebitda=thresholds.max_nd_to_ebitda,
        description=thresholds.description,
    )


@router.post(
    "/analysis",
    response_model=CreditAnalysisResponse,
    summary="Credit analysis",
    description="Aggregate debt, extract coverage ratios, run covenant checks and score the credit.",
)
async def credit_analysis(body: CreditAnalysisRequest):
    params = _parameters(body.parameters)
    projection = _projection(body.projection)
    limits = CheckLimits(
        ltv_warning_pct=settings.ltv_warning_pct,
        dscr_warning_buffer=settings.dscr_warning_buffer,
    )

    analysis = analyze_credit(params, projection, limits)
    logger.info(
        "Credit analysis %s: score %d (%s)",
        analysis.scenario,
        analysis.score.score,
        analysis.score.band,
        extra={
            "scenario": analysis.scenario,
            "score": analysis.score.score,
            "band": analysis.score.band,
        },
    )
    return analysis_to_dict(analysis)


@router.post(
    "/debt",
    response_model=DebtSummaryResponse,
    summary="Debt summary",
    description="Resolve existing debt, tranches and the proposed facility into one debt position.",
)
async def debt_summary(body: DebtSummaryRequest):
    params = _parameters(body.parameters)
    projection = _projection(body.projection)
    debt = aggregate_debt(params, projection)
    return {
        "scenario": debt_scenario(debt),
        "has_debt": has_any_debt(debt, projection),
        "debt": asdict(debt),
    }


@router.get(
    "/benchmarks",
    response_model=list[IndustryBenchmarkResponse],
    summary="List industry benchmarks",
    description="Return the lending benchmarks (min DSCR, target ICR, max ND/EBITDA) for every industry.",
)
async def list_benchmarks():
    return [_benchmark(name, t) for name, t in INDUSTRY_BENCHMARKS.items()]


@router.get(
    "/benchmarks/{industry}",
    response_model=IndustryBenchmarkResponse,
    summary="Industry benchmark",
    description="Return the lending benchmarks for one industry (case-insensitive).",
)
async def get_industry_benchmark(industry: str):
    name = find_industry(industry)
    if name is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown industry: {industry}",
        )
    return _benchmark(name, INDUSTRY_BENCHMARKS[name])
