"""Underwriting rationale bullets and recommended covenant conditions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from engine.credit.benchmarks import CreditThresholds
from engine.credit.debt import DebtInfo
from engine.credit.numeric import safe_divide
from engine.credit.parameters import CreditStats, FinancialParameters, Projection

PENDING_RATIONALE = "Credit assessment pending facility disbursement"
PENDING_COVENANTS = "Financial covenants will be established upon disbursement of the facility."

MAX_BALLOON_PCT = 50.0
# Collateral of at least 2.0x debt
MAX_COLLATERAL_USAGE = 0.5
# Headroom over the DSCR covenant below which the tighter terms apply
DSCR_HEADROOM = 0.2
LEVERAGE_HEADROOM = 0.3
# DSRA sizing when there is no observed DSCR to tier on
STANDARD_DSRA_MONTHS = 6


@dataclass
class RationaleBullet:
    text: str
    passed: bool | None


@dataclass
class _Criterion:
    text: str
    show: Callable[[], bool]
    passed: Callable[[], bool]


def _fmt(value: float) -> str:
    return f"{value:,.2f}"


def ebitda_cagr(projection: Projection) -> float:
    """Compound annual EBITDA growth from first to last projection year."""
    rows = projection.rows
    if len(rows) < 2 or rows[0].ebitda <= 0:
        return 0.0
    ratio = safe_divide(rows[-1].ebitda, rows[0].ebitda)
    if ratio <= 0:
        return -1.0
    return ratio ** (1.0 / (len(rows) - 1)) - 1.0


def build_rationale(
    params: FinancialParameters,
    stats: CreditStats,
    debt: DebtInfo,
    projection: Projection,
    thresholds: CreditThresholds,
    has_debt: bool,
) -> list[RationaleBullet]:
    """Pass/fail bullets for the credit memo.

    Each criterion carries a ``show`` predicate (e.g. the balloon bullet only
    appears when a balloon is configured).  Without debt the list collapses
    to a single placeholder.
    """
    if not has_debt:
        return [RationaleBullet(text=PENDING_RATIONALE, passed=None)]

    history = params.credit_history.lower()
    management = params.management_experience.lower()
    cagr = ebitda_cagr(projection)

    criteria = [
        _Criterion(
            "Manageable risk with current balloon structure",
            show=lambda: params.has_balloon,
            passed=lambda: params.balloon_percentage <= MAX_BALLOON_PCT,
        ),
        _Criterion(
            "Debt service coverage above benchmark",
            show=lambda: stats.dscr_available,
            passed=lambda: stats.min_dscr >= thresholds.min_dscr,
        ),
        _Criterion(
            "Leverage below internal maximum",
            show=lambda: True,
            passed=lambda: stats.max_leverage <= thresholds.max_nd_to_ebitda,
        ),
        _Criterion(
            "Strong collateral coverage (≥ 2.0x)",
            show=lambda: params.collateral_value > 0,
            passed=lambda: safe_divide(debt.total_debt, params.collateral_value) <= MAX_COLLATERAL_USAGE,
        ),
        _Criterion(
            "Interest coverage above target",
            show=lambda: stats.icr_available,
            passed=lambda: stats.min_icr >= thresholds.target_icr,
        ),
        _Criterion(
            "Positive EBITDA trajectory",
            show=lambda: len(projection.rows) > 1 and projection.rows[0].ebitda > 0,
            passed=lambda: cagr > 0,
        ),
        _Criterion(
            "Clean credit history",
            show=lambda: bool(history),
            passed=lambda: history == "clean",
        ),
        _Criterion(
            "Experienced management",
            show=lambda: bool(management),
            passed=lambda: management == "strong",
        ),
    ]

    return [
        RationaleBullet(text=c.text, passed=c.passed())
        for c in criteria
        if c.show()
    ]


def dsra_months(min_dscr: float, covenant: float) -> int:
    """Debt Service Reserve Account size, in months of debt service."""
    if min_dscr < covenant:
        return 12
    if min_dscr < covenant + DSCR_HEADROOM:
        return 6
    return 3


def build_covenants(
    params: FinancialParameters,
    stats: CreditStats,
    thresholds: CreditThresholds,
    has_debt: bool,
) -> list[str]:
    """Recommended covenant package, tightening as coverage weakens."""
    if not has_debt:
        return [PENDING_COVENANTS]

    covenants: list[str] = []

    if params.has_balloon:
        covenants.append(
            "Refinancing plan required 18 months before maturity "
            f"(Balloon: {_fmt(params.balloon_percentage)}%)."
        )

    if stats.dscr_available:
        months = dsra_months(stats.min_dscr, thresholds.min_dscr)
    else:
        months = STANDARD_DSRA_MONTHS
    covenants.append(
        f"Debt Service Reserve Account (DSRA): {months} months of scheduled debt service."
    )
    covenants.append(f"Net Debt/EBITDA ≤ {_fmt(thresholds.max_nd_to_ebitda)}x (tested quarterly).")
    covenants.append(f"Interest Coverage Ratio ≥ {_fmt(thresholds.target_icr)}x (tested quarterly).")

    if stats.max_leverage > thresholds.max_nd_to_ebitda - LEVERAGE_HEADROOM:
        covenants.append("Capital Expenditure limit subject to lender consent.")
    else:
        covenants.append("Capital Expenditure limit customary for sector.")

    if stats.dscr_available and stats.min_dscr < thresholds.min_dscr + DSCR_HEADROOM:
        covenants.append(
            "Dividend/Distribution lock-up if DSCR < covenant for two consecutive quarters."
        )

    return covenants
