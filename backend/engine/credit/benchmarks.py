"""Covenant thresholds and per-industry lending benchmarks."""

from __future__ import annotations

from dataclasses import dataclass

from engine.credit.parameters import (
    DEFAULT_MAX_ND_TO_EBITDA,
    DEFAULT_MIN_DSCR,
    DEFAULT_TARGET_ICR,
    FinancialParameters,
)


@dataclass(frozen=True)
class CreditThresholds:
    min_dscr: float = DEFAULT_MIN_DSCR
    target_icr: float = DEFAULT_TARGET_ICR
    max_nd_to_ebitda: float = DEFAULT_MAX_ND_TO_EBITDA
    description: str = ""


DEFAULT_INDUSTRY = "Manufacturing"

INDUSTRY_BENCHMARKS: dict[str, CreditThresholds] = {
    "Manufacturing": CreditThresholds(1.25, 2.5, 3.0, "Conservative metrics for capital-intensive manufacturing"),
    "Services": CreditThresholds(1.35, 3.0, 2.5, "Higher coverage for service-based businesses"),
    "Retail": CreditThresholds(1.30, 2.75, 2.75, "Balanced metrics for retail operations"),
    "Technology": CreditThresholds(1.40, 3.5, 2.0, "Strong coverage for high-growth tech companies"),
    "Healthcare": CreditThresholds(1.30, 2.5, 3.0, "Standard healthcare industry metrics"),
    "Real Estate": CreditThresholds(1.20, 2.0, 4.0, "Asset-backed real estate lending standards"),
    "Financial Services": CreditThresholds(1.50, 4.0, 2.0, "Stringent metrics for financial institutions"),
    "Agriculture": CreditThresholds(1.15, 2.0, 3.5, "Seasonal business considerations"),
    "Energy": CreditThresholds(1.25, 2.5, 3.5, "Commodity-linked business metrics"),
    "Transportation": CreditThresholds(1.20, 2.25, 3.25, "Asset-heavy transportation metrics"),
}


def find_industry(industry: str | None) -> str | None:
    """Canonical industry name matching *industry* case-insensitively."""
    if not industry:
        return None
    key = industry.strip().lower()
    for name in INDUSTRY_BENCHMARKS:
        if name.lower() == key:
            return name
    return None


def get_benchmarks(industry: str | None) -> CreditThresholds:
    """Benchmarks for *industry*, Manufacturing if unknown."""
    return INDUSTRY_BENCHMARKS[find_industry(industry) or DEFAULT_INDUSTRY]


def thresholds_from_params(params: FinancialParameters) -> CreditThresholds:
    return CreditThresholds(
        min_dscr=params.min_dscr,
        target_icr=params.target_icr,
        max_nd_to_ebitda=params.max_nd_to_ebitda,
    )
