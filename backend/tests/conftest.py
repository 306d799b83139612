"""Shared test fixtures for FinSight engine and API tests."""

from __future__ import annotations

import pytest

from engine.credit.parameters import (
    FinancialParameters,
    Projection,
    normalize_parameters,
    normalize_projection,
)


# ======================================================================
# Parameter fixtures
# ======================================================================

@pytest.fixture
def sample_params_raw() -> dict:
    """Existing term loan plus a new facility, as sent by the front end."""
    return {
        "hasExistingDebt": True,
        "openingDebt": 1_000_000,
        "existingDebtRate": 0.08,
        "existingDebtTenor": 5,
        "requestedLoanAmount": 500_000,
        "proposedPricing": 0.10,
        "proposedTenor": 5,
        "minDSCR": 1.2,
        "targetICR": 2.0,
        "maxNDToEBITDA": 3.5,
        "collateralValue": 3_000_000,
        "creditHistory": "Clean",
        "managementExperience": "Strong",
        "industry": "Manufacturing",
        "ebitda": 600_000,
    }


@pytest.fixture
def sample_params(sample_params_raw) -> FinancialParameters:
    return normalize_parameters(sample_params_raw)


@pytest.fixture
def no_debt_params() -> FinancialParameters:
    return normalize_parameters({"openingDebt": 0, "requestedLoanAmount": 0})


# ======================================================================
# Projection fixtures
# ======================================================================

@pytest.fixture
def sample_rows_raw() -> list[dict]:
    """Five projection years with improving coverage and deleveraging."""
    return [
        {"year": 1, "ebitda": 600_000, "dscr": 1.45, "icr": 3.2, "ndToEbitda": 2.8},
        {"year": 2, "ebitda": 650_000, "dscr": 1.52, "icr": 3.6, "ndToEbitda": 2.4},
        {"year": 3, "ebitda": 700_000, "dscr": 1.60, "icr": 4.1, "ndToEbitda": 2.0},
        {"year": 4, "ebitda": 750_000, "dscr": 1.71, "icr": 4.7, "ndToEbitda": 1.5},
        {"year": 5, "ebitda": 800_000, "dscr": 1.85, "icr": 5.4, "ndToEbitda": 1.0},
    ]


@pytest.fixture
def sample_projection(sample_rows_raw) -> Projection:
    return normalize_projection({"rows": sample_rows_raw})
