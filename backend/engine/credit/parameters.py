"""Canonical input records for the credit pipeline.

Financial parameters arrive from the modelling front end as a loose bag of
camelCase fields, several of which have had more than one name over time
(``openingDebt`` / ``existingDebtAmount``, ``proposedTenor`` /
``debtTenorYears`` ...).  :func:`normalize_parameters` and
:func:`normalize_projection` resolve those legacy shapes once, at the
boundary, so the rest of the engine only ever sees the dataclasses below.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from engine.credit.numeric import normalize_rate, safe_number


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_MIN_DSCR = 1.2
DEFAULT_TARGET_ICR = 2.0
DEFAULT_MAX_ND_TO_EBITDA = 3.5
DEFAULT_TENOR_YEARS = 5

# Projection engine's marker for "no debt service / no interest" (an infinite ratio)
RATIO_SENTINEL: float = 999.0

AMORTIZING = "amortizing"
INTEREST_ONLY = "interest_only"
BULLET = "bullet"

_AMORTIZATION_ALIASES = {
    "amortizing": AMORTIZING,
    "amortising": AMORTIZING,
    "interest_only": INTEREST_ONLY,
    "interestonly": INTEREST_ONLY,
    "interest-only": INTEREST_ONLY,
    "bullet": BULLET,
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
@dataclass
class DebtTranche:
    name: str
    amount: float
    rate: float
    seniority: str = "Senior"
    maturity_date: str | None = None
    amortization_type: str = AMORTIZING
    tenor_years: float = DEFAULT_TENOR_YEARS
    interest_only_years: float = 0.0


@dataclass
class FinancialParameters:
    # Existing debt (only counted when the toggle is on)
    has_existing_debt: bool = False
    opening_debt: float = 0.0
    existing_debt_amount: float = 0.0
    existing_debt_rate: float = 0.0
    existing_debt_tenor: float = DEFAULT_TENOR_YEARS
    existing_debt_amortization_type: str = AMORTIZING
    has_multiple_tranches: bool = False
    debt_tranches: list[DebtTranche] = field(default_factory=list)

    # Proposed new facility
    requested_loan_amount: float = 0.0
    proposed_pricing: float = 0.0
    proposed_tenor: float = DEFAULT_TENOR_YEARS
    facility_amortization_type: str = AMORTIZING
    interest_only_years: float = 0.0
    interest_rate: float = 0.0          # legacy rate used when a specific one is absent
    balloon_percentage: float = 0.0
    use_balloon_payment: bool = False

    # Covenant thresholds
    min_dscr: float = DEFAULT_MIN_DSCR
    target_icr: float = DEFAULT_TARGET_ICR
    max_nd_to_ebitda: float = DEFAULT_MAX_ND_TO_EBITDA

    # Qualitative / balance sheet
    collateral_value: float = 0.0
    credit_history: str = ""
    management_experience: str = ""
    industry: str = ""
    ebitda: float = 0.0
    opening_cash: float = 0.0

    @property
    def existing_principal(self) -> float:
        """Raw existing-debt amount, ignoring the toggle."""
        return self.opening_debt or self.existing_debt_amount or 0.0

    @property
    def existing_rate(self) -> float:
        return self.existing_debt_rate or self.interest_rate or 0.0

    @property
    def facility_rate(self) -> float:
        return self.proposed_pricing or self.interest_rate or 0.0

    @property
    def has_balloon(self) -> bool:
        return self.balloon_percentage > 0


@dataclass
class ProjectionRow:
    year: int
    ebitda: float = 0.0
    dscr: float = 0.0
    icr: float = 0.0
    nd_to_ebitda: float = 0.0
    fcf_to_equity: float = 0.0
    principal_payment: float = 0.0
    interest_expense: float = 0.0
    debt_balance: float = 0.0
    debt_service: float = 0.0


@dataclass
class MultiTrancheInfo:
    tranches: list[DebtTranche]
    total_debt: float
    blended_rate: float


@dataclass
class CreditStats:
    min_dscr: float = 0.0
    max_dscr: float = 0.0
    avg_dscr: float = 0.0
    min_icr: float = 0.0
    max_icr: float = 0.0
    avg_icr: float = 0.0
    min_leverage: float = 0.0
    max_leverage: float = 0.0
    avg_leverage: float = 0.0
    # False when no year carries a usable ratio (all sentinel, missing or no rows)
    dscr_available: bool = True
    icr_available: bool = True


@dataclass
class Projection:
    rows: list[ProjectionRow] = field(default_factory=list)
    credit_stats: CreditStats | None = None
    multi_tranche_info: MultiTrancheInfo | None = None
    final_debt: float = 0.0


# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------
def _camel_to_snake(key: str) -> str:
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).lstrip("_")


def _snake_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    # Acronym-bearing legacy names do not survive a mechanical conversion
    special = {
        "minDSCR": "min_dscr",
        "targetICR": "target_icr",
        "maxNDToEBITDA": "max_nd_to_ebitda",
        "targetDSCR": "target_dscr",
        "ndToEbitda": "nd_to_ebitda",
        "minICR": "min_icr",
        "maxICR": "max_icr",
        "avgICR": "avg_icr",
        "maxDSCR": "max_dscr",
        "avgDSCR": "avg_dscr",
    }
    out: dict[str, Any] = {}
    for key, value in raw.items():
        snake = special.get(key) or _camel_to_snake(key)
        # First spelling wins so explicit snake_case is not clobbered
        out.setdefault(snake, value)
    return out


def _first(d: Mapping[str, Any], *keys: str, default: float = 0.0) -> float:
    """First non-zero numeric value among *keys* (JS ``a || b || c``)."""
    for key in keys:
        v = safe_number(d.get(key))
        if v:
            return v
    return default


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    if isinstance(value, bool):
        return value
    return safe_number(value) != 0


def _ratio(value: Any) -> float:
    """Coerce a ratio but keep non-finite values as NaN/inf.

    The ratio extractor filters on finiteness, so a missing or infinite
    ratio must not be turned into a plausible-looking 0 here.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_amortization_type(value: Any) -> str:
    if not isinstance(value, str):
        return AMORTIZING
    key = value.strip().lower().replace(" ", "_")
    return _AMORTIZATION_ALIASES.get(key, AMORTIZING)


def normalize_tranche(raw: Mapping[str, Any], index: int = 0) -> DebtTranche:
    d = _snake_keys(raw)
    return DebtTranche(
        name=_text(d.get("name")) or f"Tranche {index + 1}",
        amount=safe_number(d.get("amount", d.get("principal"))),
        rate=normalize_rate(d.get("rate")),
        seniority=_text(d.get("seniority")) or "Senior",
        maturity_date=_text(d.get("maturity_date")) or None,
        amortization_type=normalize_amortization_type(d.get("amortization_type")),
        tenor_years=_first(d, "tenor_years", "tenor", default=DEFAULT_TENOR_YEARS),
        interest_only_years=safe_number(d.get("interest_only_years")),
    )


def normalize_parameters(raw: Mapping[str, Any] | None) -> FinancialParameters:
    """Build :class:`FinancialParameters` from a camelCase or snake_case mapping."""
    if not raw:
        return FinancialParameters()
    d = _snake_keys(raw)

    tranches = [
        normalize_tranche(t, i)
        for i, t in enumerate(d.get("debt_tranches") or [])
        if isinstance(t, Mapping)
    ]

    return FinancialParameters(
        has_existing_debt=_flag(d.get("has_existing_debt", False)),
        opening_debt=safe_number(d.get("opening_debt")),
        existing_debt_amount=safe_number(d.get("existing_debt_amount")),
        existing_debt_rate=normalize_rate(
            _first(d, "existing_debt_rate", "opening_debt_rate")
        ),
        existing_debt_tenor=_first(
            d, "existing_debt_tenor", "opening_debt_tenor", "existing_debt_remaining_tenor",
            default=DEFAULT_TENOR_YEARS,
        ),
        existing_debt_amortization_type=normalize_amortization_type(
            d.get("existing_debt_amortization_type") or d.get("opening_debt_amortization_type")
        ),
        has_multiple_tranches=_flag(d.get("has_multiple_tranches", False)),
        debt_tranches=tranches,
        requested_loan_amount=safe_number(d.get("requested_loan_amount")),
        proposed_pricing=normalize_rate(_first(d, "proposed_pricing", "new_facility_rate")),
        proposed_tenor=_first(
            d, "proposed_tenor", "debt_tenor_years", "new_facility_tenor",
            default=DEFAULT_TENOR_YEARS,
        ),
        facility_amortization_type=normalize_amortization_type(
            d.get("facility_amortization_type")
            or d.get("amortization_type")
            or d.get("new_facility_amortization_type")
        ),
        interest_only_years=_first(d, "interest_only_years", "interest_only_period"),
        interest_rate=normalize_rate(d.get("interest_rate")),
        balloon_percentage=safe_number(d.get("balloon_percentage")),
        use_balloon_payment=_flag(d.get("use_balloon_payment", False)),
        min_dscr=_first(d, "min_dscr", default=DEFAULT_MIN_DSCR),
        target_icr=_first(d, "target_icr", default=DEFAULT_TARGET_ICR),
        max_nd_to_ebitda=_first(d, "max_nd_to_ebitda", default=DEFAULT_MAX_ND_TO_EBITDA),
        collateral_value=safe_number(d.get("collateral_value")),
        credit_history=_text(d.get("credit_history")),
        management_experience=_text(d.get("management_experience")),
        industry=_text(d.get("industry")),
        ebitda=_first(d, "ebitda", "annual_ebitda"),
        opening_cash=safe_number(d.get("opening_cash")),
    )


def normalize_row(raw: Mapping[str, Any], index: int = 0) -> ProjectionRow:
    d = _snake_keys(raw)
    year = safe_number(d.get("year"), default=float(index + 1))
    return ProjectionRow(
        year=int(year),
        ebitda=safe_number(d.get("ebitda")),
        dscr=_ratio(d.get("dscr")),
        icr=_ratio(d.get("icr")),
        nd_to_ebitda=_ratio(d.get("nd_to_ebitda")),
        fcf_to_equity=safe_number(d.get("fcf_to_equity")),
        principal_payment=_first(d, "principal_payment", "principal"),
        interest_expense=_first(d, "interest_expense", "interest"),
        debt_balance=_first(d, "debt_balance", "ending_debt", "gross_debt", "ending_balance"),
        debt_service=safe_number(d.get("debt_service")),
    )


def _observed(value: Any) -> bool:
    v = safe_number(value)
    return 0 < v < RATIO_SENTINEL


def _normalize_stats(raw: Mapping[str, Any]) -> CreditStats:
    d = _snake_keys(raw)
    return CreditStats(
        min_dscr=safe_number(d.get("min_dscr")),
        max_dscr=safe_number(d.get("max_dscr")),
        avg_dscr=safe_number(d.get("avg_dscr")),
        min_icr=safe_number(d.get("min_icr")),
        max_icr=safe_number(d.get("max_icr")),
        avg_icr=safe_number(d.get("avg_icr")),
        min_leverage=safe_number(d.get("min_leverage")),
        max_leverage=safe_number(d.get("max_leverage")),
        avg_leverage=safe_number(d.get("avg_leverage")),
        dscr_available=_observed(d.get("min_dscr")),
        icr_available=_observed(d.get("min_icr")),
    )


def _normalize_multi_tranche(raw: Mapping[str, Any]) -> MultiTrancheInfo | None:
    d = _snake_keys(raw)
    tranches = [
        normalize_tranche(t, i)
        for i, t in enumerate(d.get("tranches") or [])
        if isinstance(t, Mapping)
    ]
    if not tranches:
        return None
    return MultiTrancheInfo(
        tranches=tranches,
        total_debt=safe_number(d.get("total_debt"), default=sum(t.amount for t in tranches)),
        blended_rate=normalize_rate(d.get("blended_rate")),
    )


def normalize_projection(raw: Mapping[str, Any] | list | None) -> Projection:
    """Build a :class:`Projection` from the projection engine's output.

    Accepts either the full projection object (``rows`` plus optional
    ``creditStats`` / ``multiTrancheInfo`` / ``finalDebt``), or a bare list
    of rows.
    """
    if not raw:
        return Projection()
    if isinstance(raw, list):
        raw = {"rows": raw}
    d = _snake_keys(raw)

    rows = [
        normalize_row(r, i)
        for i, r in enumerate(d.get("rows") or [])
        if isinstance(r, Mapping)
    ]
    stats_raw = d.get("credit_stats")
    mti_raw = d.get("multi_tranche_info")

    return Projection(
        rows=rows,
        credit_stats=_normalize_stats(stats_raw) if isinstance(stats_raw, Mapping) else None,
        multi_tranche_info=_normalize_multi_tranche(mti_raw) if isinstance(mti_raw, Mapping) else None,
        final_debt=_first(d, "final_debt", "total_debt"),
    )
