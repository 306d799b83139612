"""Debt aggregation: existing debt, new facility, tranches and blended rate.

Resolves the parameter record (and, where available, the projection
engine's own multi-tranche summary) into one :class:`DebtInfo`.

The existing-debt toggle is authoritative: when ``has_existing_debt`` is
off, any non-zero ``opening_debt`` left over in the parameters is ignored
in the totals *and* in the component list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from engine.credit.numeric import safe_divide, safe_number
from engine.credit.parameters import (
    BULLET,
    INTEREST_ONLY,
    DebtTranche,
    FinancialParameters,
    MultiTrancheInfo,
    Projection,
)

logger = logging.getLogger(__name__)

FROM_PARAMETERS = "From Parameters"
FROM_PROJECTION = "From Projection"

SOURCE_PROJECTION_TRANCHES = "Multi-Tranche (From Projection)"
SOURCE_PARAMETER_TRANCHES = "Multi-Tranche (From Parameters)"
SOURCE_SINGLE = "Single/Combined Debt"
SOURCE_NONE = "No Debt"

# Projection vs. parameter totals may differ by rounding; beyond this they disagree
DEBT_MISMATCH_TOLERANCE = 1_000.0

NEW_FACILITY_NAME = "New Facility"


@dataclass
class DebtComponent:
    name: str
    amount: float
    rate: float
    seniority: str = "Senior"
    source: str = FROM_PARAMETERS
    tenor_years: float = 0.0
    amortization_type: str = "amortizing"
    annual_service: float = 0.0
    annual_interest: float = 0.0


@dataclass
class DebtInfo:
    total_debt: float = 0.0
    existing_debt: float = 0.0
    new_facility: float = 0.0
    components: list[DebtComponent] = field(default_factory=list)
    blended_rate: float = 0.0
    source: str = SOURCE_NONE
    total_debt_service: float = 0.0
    total_interest: float = 0.0


# ======================================================================
# Debt service
# ======================================================================

def annual_debt_service(
    principal: float,
    rate: float,
    tenor_years: float,
    amortization_type: str = "amortizing",
) -> float:
    """Annual payment on a loan.

    Amortizing loans use the annuity (PMT) formula
    ``P * r(1+r)^n / ((1+r)^n - 1)``; a zero rate spreads principal evenly.
    Interest-only and bullet loans pay interest only.
    """
    if principal <= 0 or tenor_years <= 0:
        return 0.0

    if amortization_type in (INTEREST_ONLY, BULLET):
        return principal * max(rate, 0.0)

    if rate <= 0:
        return principal / tenor_years

    r = rate
    n = tenor_years
    growth = (1 + r) ** n
    return principal * r * growth / (growth - 1)


def _component(
    name: str,
    amount: float,
    rate: float,
    tenor: float,
    amortization_type: str,
    source: str,
    seniority: str = "Senior",
) -> DebtComponent:
    return DebtComponent(
        name=name,
        amount=amount,
        rate=rate,
        seniority=seniority,
        source=source,
        tenor_years=tenor,
        amortization_type=amortization_type,
        annual_service=annual_debt_service(amount, rate, tenor, amortization_type),
        annual_interest=amount * rate,
    )


def _tranche_component(tranche: DebtTranche, source: str) -> DebtComponent:
    return _component(
        name=tranche.name,
        amount=tranche.amount,
        rate=tranche.rate,
        tenor=tranche.tenor_years,
        amortization_type=tranche.amortization_type,
        source=source,
        seniority=tranche.seniority,
    )


def blended_rate(components: list[DebtComponent]) -> float:
    """Amount-weighted average rate; 0 when there is no debt."""
    total = sum(c.amount for c in components)
    return safe_divide(sum(c.amount * c.rate for c in components), total)


# ======================================================================
# Scenario helpers
# ======================================================================

def effective_existing_debt(params: FinancialParameters) -> float:
    """Existing debt after applying the toggle."""
    if params.has_existing_debt is not True:
        return 0.0
    if params.has_multiple_tranches and params.debt_tranches:
        return sum(max(t.amount, 0.0) for t in params.debt_tranches)
    return max(params.existing_principal, 0.0)


def debt_scenario(info: DebtInfo) -> str:
    """Classify as ``none``, ``new_only``, ``existing_only`` or ``both``.

    Reads the resolved debt picture, so projection tranches count the same
    way parameter debt does.
    """
    has_existing = info.existing_debt > 0
    has_new = info.new_facility > 0

    if has_new and has_existing:
        return "both"
    if has_new:
        return "new_only"
    if has_existing:
        return "existing_only"
    return "none"


# ======================================================================
# Aggregation
# ======================================================================

def _from_projection(params: FinancialParameters, mti: MultiTrancheInfo) -> DebtInfo:
    components = [
        _tranche_component(t, FROM_PROJECTION) for t in mti.tranches if t.amount > 0
    ]
    total = mti.total_debt if mti.total_debt > 0 else sum(c.amount for c in components)
    rate = mti.blended_rate if mti.blended_rate > 0 else blended_rate(components)

    new_facility = min(max(params.requested_loan_amount, 0.0), total)
    return DebtInfo(
        total_debt=total,
        existing_debt=total - new_facility,
        new_facility=new_facility,
        components=components,
        blended_rate=rate,
        source=SOURCE_PROJECTION_TRANCHES,
        total_debt_service=sum(c.annual_service for c in components),
        total_interest=sum(c.annual_interest for c in components),
    )


def _from_parameters(params: FinancialParameters) -> DebtInfo:
    components: list[DebtComponent] = []
    source = SOURCE_SINGLE

    existing = effective_existing_debt(params)
    if existing > 0:
        if params.has_multiple_tranches and params.debt_tranches:
            source = SOURCE_PARAMETER_TRANCHES
            components.extend(
                _tranche_component(t, FROM_PARAMETERS)
                for t in params.debt_tranches
                if t.amount > 0
            )
        else:
            components.append(_component(
                name="Existing Debt",
                amount=existing,
                rate=params.existing_rate,
                tenor=params.existing_debt_tenor,
                amortization_type=params.existing_debt_amortization_type,
                source=FROM_PARAMETERS,
            ))

    new_facility = max(params.requested_loan_amount, 0.0)
    if new_facility > 0:
        components.append(_component(
            name=NEW_FACILITY_NAME,
            amount=new_facility,
            rate=params.facility_rate,
            tenor=params.proposed_tenor,
            amortization_type=params.facility_amortization_type,
            source=FROM_PARAMETERS,
        ))

    total = existing + new_facility
    if total <= 0:
        source = SOURCE_NONE

    return DebtInfo(
        total_debt=total,
        existing_debt=existing,
        new_facility=new_facility,
        components=components,
        blended_rate=blended_rate(components),
        source=source,
        total_debt_service=sum(c.annual_service for c in components),
        total_interest=sum(c.annual_interest for c in components),
    )


def aggregate_debt(
    params: FinancialParameters,
    projection: Projection | None = None,
) -> DebtInfo:
    """Resolve the effective debt picture for *params*.

    The projection's multi-tranche summary is used verbatim only when the
    existing-debt toggle is explicitly on; otherwise totals are derived
    from the parameters.
    """
    if (
        projection is not None
        and projection.multi_tranche_info is not None
        and projection.multi_tranche_info.tranches
        and params.has_existing_debt is True
    ):
        return _from_projection(params, projection.multi_tranche_info)

    info = _from_parameters(params)

    if projection is not None and projection.final_debt > 0:
        gap = abs(info.total_debt - projection.final_debt)
        if gap > DEBT_MISMATCH_TOLERANCE:
            logger.warning(
                "Debt mismatch: parameters give %.0f, projection carries %.0f",
                info.total_debt,
                projection.final_debt,
            )

    return info


def has_any_debt(info: DebtInfo, projection: Projection | None = None) -> bool:
    """True when any debt is present.

    Checks the toggle-respecting total, the component list and the
    projection's precomputed total; upstream projection data may carry debt
    the parameter record does not.
    """
    if info.total_debt > 0:
        return True
    if any(c.amount > 0 for c in info.components):
        return True
    if projection is not None and safe_number(projection.final_debt) > 0:
        return True
    return False
