"""Debt capacity: how much debt the cash flow can carry at the DSCR covenant.

Point-in-time coverage uses a single EBITDA figure (the parameter record's,
or the first projection year's) against the aggregated annual debt service.
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.credit.benchmarks import CreditThresholds
from engine.credit.debt import DebtInfo
from engine.credit.numeric import safe_divide
from engine.credit.ratios import RATIO_SENTINEL

# Comfortable structure sits 20% above the covenant
SAFETY_BUFFER = 1.20
FALLBACK_TENOR_YEARS = 5.0


@dataclass
class DebtCapacity:
    ebitda: float
    target_dscr: float
    dscr: float
    icr: float
    leverage: float
    max_sustainable_debt: float
    safe_debt: float
    available_capacity: float
    excess_debt: float
    utilization_pct: float
    is_within_capacity: bool
    recommendation: str
    risk_level: str


def max_sustainable_debt(
    ebitda: float,
    target_dscr: float,
    rate: float,
    tenor_years: float,
) -> float:
    """Largest principal whose annuity keeps ``EBITDA / service >= target``."""
    if ebitda <= 0 or target_dscr <= 0 or tenor_years <= 0:
        return 0.0

    max_service = ebitda / target_dscr
    if rate <= 0:
        return max_service * tenor_years

    growth = (1 + rate) ** tenor_years
    payment_factor = rate * growth / (growth - 1)
    return max_service / payment_factor


def _capacity_tenor(debt: DebtInfo) -> float:
    # New facility terms drive capacity when a facility is requested
    for c in reversed(debt.components):
        if c.tenor_years > 0:
            return c.tenor_years
    return FALLBACK_TENOR_YEARS


def compute_debt_capacity(
    debt: DebtInfo,
    ebitda: float,
    thresholds: CreditThresholds,
) -> DebtCapacity:
    dscr = (
        safe_divide(ebitda, debt.total_debt_service)
        if debt.total_debt_service > 0 else RATIO_SENTINEL
    )
    icr = (
        safe_divide(ebitda, debt.total_interest)
        if debt.total_interest > 0 else RATIO_SENTINEL
    )
    leverage = safe_divide(debt.total_debt, ebitda) if ebitda > 0 else 0.0

    tenor = _capacity_tenor(debt)
    target = thresholds.min_dscr
    max_debt = max_sustainable_debt(ebitda, target, debt.blended_rate, tenor)
    safe_debt = max_sustainable_debt(ebitda, target * SAFETY_BUFFER, debt.blended_rate, tenor)

    available = max(0.0, max_debt - debt.existing_debt)
    excess = max(0.0, debt.new_facility - available)
    if available > 0:
        utilization = debt.new_facility / available * 100
    elif debt.new_facility > 0:
        utilization = RATIO_SENTINEL
    else:
        utilization = 0.0

    if debt.total_debt > max_debt:
        recommendation, risk = "REDUCE DEBT", "HIGH"
    elif debt.total_debt > safe_debt:
        recommendation, risk = "APPROVE WITH CONDITIONS", "MEDIUM"
    else:
        recommendation, risk = "APPROVE", "LOW"

    return DebtCapacity(
        ebitda=ebitda,
        target_dscr=target,
        dscr=dscr,
        icr=icr,
        leverage=leverage,
        max_sustainable_debt=max_debt,
        safe_debt=safe_debt,
        available_capacity=available,
        excess_debt=excess,
        utilization_pct=utilization,
        is_within_capacity=debt.new_facility <= available,
        recommendation=recommendation,
        risk_level=risk,
    )
