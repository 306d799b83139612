"""
Covenant and sanity checks.

Compares credit statistics and the debt picture against the covenant
thresholds and returns classified findings (critical / warning / info).
Every check is evaluated independently against the same snapshot; no
finding suppresses another.

Pure arithmetic, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.credit.benchmarks import CreditThresholds
from engine.credit.debt import NEW_FACILITY_NAME, DebtInfo
from engine.credit.numeric import safe_divide
from engine.credit.parameters import CreditStats, FinancialParameters

# A component within this distance of the requested amount is taken to be the facility
FACILITY_MATCH_TOLERANCE = 1_000.0


@dataclass
class SanityCheck:
    type: str       # "critical" | "warning" | "info"
    code: str
    title: str
    message: str


@dataclass(frozen=True)
class CheckLimits:
    ltv_warning_pct: float = 80.0
    dscr_warning_buffer: float = 1.1


def _x(value: float) -> str:
    return f"{value:,.2f}x"


def _facility_in_components(debt: DebtInfo, requested: float) -> bool:
    for c in debt.components:
        if c.name.strip().lower() == NEW_FACILITY_NAME.lower():
            return True
        if abs(c.amount - requested) < FACILITY_MATCH_TOLERANCE:
            return True
    return False


def run_sanity_checks(
    stats: CreditStats,
    debt: DebtInfo,
    params: FinancialParameters,
    thresholds: CreditThresholds,
    has_debt: bool,
    limits: CheckLimits = CheckLimits(),
) -> list[SanityCheck]:
    checks: list[SanityCheck] = []

    # Coverage and leverage only mean something when there is debt to cover,
    # and a coverage ratio with no observed year is not tested at all
    if has_debt and stats.dscr_available:
        if stats.min_dscr < thresholds.min_dscr:
            checks.append(SanityCheck(
                type="critical",
                code="DSCR_BELOW_COVENANT",
                title="DSCR Below Covenant",
                message=(
                    f"Minimum DSCR of {_x(stats.min_dscr)} is below the "
                    f"{_x(thresholds.min_dscr)} covenant."
                ),
            ))
        elif stats.min_dscr < thresholds.min_dscr * limits.dscr_warning_buffer:
            headroom = (limits.dscr_warning_buffer - 1.0) * 100
            checks.append(SanityCheck(
                type="warning",
                code="DSCR_NEAR_COVENANT",
                title="Thin DSCR Headroom",
                message=(
                    f"Minimum DSCR of {_x(stats.min_dscr)} is within {headroom:.0f}% "
                    f"of the {_x(thresholds.min_dscr)} covenant."
                ),
            ))

    if has_debt:
        if stats.icr_available and stats.min_icr < thresholds.target_icr:
            checks.append(SanityCheck(
                type="critical",
                code="ICR_BELOW_TARGET",
                title="Interest Coverage Below Target",
                message=(
                    f"Minimum ICR of {_x(stats.min_icr)} is below the "
                    f"{_x(thresholds.target_icr)} target."
                ),
            ))

        if stats.max_leverage > thresholds.max_nd_to_ebitda:
            checks.append(SanityCheck(
                type="critical",
                code="LEVERAGE_ABOVE_LIMIT",
                title="Leverage Above Limit",
                message=(
                    f"Peak Net Debt/EBITDA of {_x(stats.max_leverage)} exceeds the "
                    f"{_x(thresholds.max_nd_to_ebitda)} limit."
                ),
            ))

    if params.collateral_value > 0:
        ltv_pct = safe_divide(debt.total_debt, params.collateral_value) * 100
        if ltv_pct > limits.ltv_warning_pct:
            checks.append(SanityCheck(
                type="warning",
                code="HIGH_LTV",
                title="High Loan-to-Value",
                message=(
                    f"Pro-forma LTV of {ltv_pct:.1f}% exceeds "
                    f"{limits.ltv_warning_pct:.0f}% of collateral value."
                ),
            ))

    if debt.existing_debt > 0 and debt.new_facility == 0:
        checks.append(SanityCheck(
            type="info",
            code="EXISTING_DEBT_ONLY",
            title="Existing Debt Only",
            message=(
                "No new facility is requested; the analysis reflects the "
                "existing debt only."
            ),
        ))

    requested = params.requested_loan_amount
    if requested > 0 and not _facility_in_components(debt, requested):
        checks.append(SanityCheck(
            type="warning",
            code="FACILITY_NOT_IN_DEBT",
            title="New Facility Missing From Debt",
            message=(
                f"The requested facility of {requested:,.0f} does not appear in the "
                "debt breakdown. Re-run the projection to include it."
            ),
        ))

    return checks
