"""Credit-ratio statistics over a multi-year projection.

DSCR and ICR of 999 are the projection engine's sentinel for "no debt
service / no interest" (an infinite ratio) and are excluded together with
non-positive and non-finite values.  Leverage only needs to be finite.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from engine.credit.benchmarks import CreditThresholds
from engine.credit.parameters import RATIO_SENTINEL, CreditStats, Projection


@dataclass
class CovenantBreaches:
    dscr_breaches: int = 0
    icr_breaches: int = 0
    leverage_breaches: int = 0
    breach_years: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.dscr_breaches + self.icr_breaches + self.leverage_breaches


# ======================================================================
# Helpers
# ======================================================================

def _column(projection: Projection, attr: str) -> NDArray[np.float64]:
    return np.array([getattr(r, attr) for r in projection.rows], dtype=np.float64)


def _coverage_mask(values: NDArray[np.float64]) -> NDArray[np.bool_]:
    return np.isfinite(values) & (values > 0) & (values < RATIO_SENTINEL)


def _summary(values: NDArray[np.float64]) -> tuple[float, float, float]:
    """(min, max, mean), all 0 for an empty array."""
    if values.size == 0:
        return 0.0, 0.0, 0.0
    return float(values.min()), float(values.max()), float(values.mean())


# ======================================================================
# Statistics
# ======================================================================

def extract_credit_stats(projection: Projection, has_debt: bool) -> CreditStats:
    """Compute min/max/average DSCR, ICR and leverage for *projection*.

    Precomputed statistics on the projection are returned unchanged so the
    dashboard never drifts from the projection engine.  Without debt every
    statistic is 0, meaning "not applicable".  With debt but no usable
    coverage observations the statistics are 0 and flagged unavailable, so
    downstream checks do not read the 0 as a breach.
    """
    if projection.credit_stats is not None:
        return projection.credit_stats

    if not has_debt:
        return CreditStats()
    if not projection.rows:
        return CreditStats(dscr_available=False, icr_available=False)

    dscr = _column(projection, "dscr")
    icr = _column(projection, "icr")
    lev = _column(projection, "nd_to_ebitda")

    dscr_valid = dscr[_coverage_mask(dscr)]
    icr_valid = icr[_coverage_mask(icr)]

    min_dscr, max_dscr, avg_dscr = _summary(dscr_valid)
    min_icr, max_icr, avg_icr = _summary(icr_valid)
    min_lev, max_lev, avg_lev = _summary(lev[np.isfinite(lev)])

    return CreditStats(
        min_dscr=min_dscr,
        max_dscr=max_dscr,
        avg_dscr=avg_dscr,
        min_icr=min_icr,
        max_icr=max_icr,
        avg_icr=avg_icr,
        min_leverage=min_lev,
        max_leverage=max_lev,
        avg_leverage=avg_lev,
        dscr_available=dscr_valid.size > 0,
        icr_available=icr_valid.size > 0,
    )


def count_breaches(projection: Projection, thresholds: CreditThresholds) -> CovenantBreaches:
    """Count the projection years that breach each covenant."""
    if not projection.rows:
        return CovenantBreaches()

    years = np.array([r.year for r in projection.rows], dtype=np.int64)
    dscr = _column(projection, "dscr")
    icr = _column(projection, "icr")
    lev = _column(projection, "nd_to_ebitda")

    dscr_breach = _coverage_mask(dscr) & (dscr < thresholds.min_dscr)
    icr_breach = _coverage_mask(icr) & (icr < thresholds.target_icr)
    lev_breach = np.isfinite(lev) & (lev > thresholds.max_nd_to_ebitda)
    any_breach = dscr_breach | icr_breach | lev_breach

    return CovenantBreaches(
        dscr_breaches=int(dscr_breach.sum()),
        icr_breaches=int(icr_breach.sum()),
        leverage_breaches=int(lev_breach.sum()),
        breach_years=[int(y) for y in years[any_breach]],
    )
