"""Tests for covenant and sanity checks."""
import pytest

from engine.credit.benchmarks import CreditThresholds
from engine.credit.checks import CheckLimits, run_sanity_checks
from engine.credit.debt import DebtComponent, DebtInfo, aggregate_debt
from engine.credit.parameters import CreditStats, normalize_parameters

THRESHOLDS = CreditThresholds(min_dscr=1.2, target_icr=2.0, max_nd_to_ebitda=3.5)


def _stats(min_dscr: float = 1.6, min_icr: float = 3.0, max_leverage: float = 2.0) -> CreditStats:
    return CreditStats(min_dscr=min_dscr, min_icr=min_icr, max_leverage=max_leverage)


@pytest.fixture
def facility_params():
    return normalize_parameters({"requestedLoanAmount": 500_000, "proposedPricing": 0.1})


@pytest.fixture
def facility_debt(facility_params):
    return aggregate_debt(facility_params)


def _codes(checks):
    return [c.code for c in checks]


class TestCoverageChecks:
    def test_healthy_credit_has_no_findings(self, facility_params, facility_debt):
        checks = run_sanity_checks(_stats(), facility_debt, facility_params, THRESHOLDS, True)
        assert checks == []

    def test_dscr_below_covenant_is_critical_only(self, facility_params, facility_debt):
        checks = run_sanity_checks(_stats(min_dscr=1.0), facility_debt, facility_params, THRESHOLDS, True)
        dscr = [c for c in checks if c.code.startswith("DSCR")]
        assert len(dscr) == 1
        assert dscr[0].type == "critical"
        assert dscr[0].code == "DSCR_BELOW_COVENANT"
        assert "1.00x" in dscr[0].message

    def test_dscr_near_covenant_is_warning_only(self, facility_params, facility_debt):
        checks = run_sanity_checks(_stats(min_dscr=1.25), facility_debt, facility_params, THRESHOLDS, True)
        assert [c.type for c in checks] == ["warning"]
        assert _codes(checks) == ["DSCR_NEAR_COVENANT"]

    def test_custom_warning_buffer(self, facility_params, facility_debt):
        limits = CheckLimits(dscr_warning_buffer=1.3)
        checks = run_sanity_checks(
            _stats(min_dscr=1.5), facility_debt, facility_params, THRESHOLDS, True, limits,
        )
        assert _codes(checks) == ["DSCR_NEAR_COVENANT"]

    def test_icr_and_leverage(self, facility_params, facility_debt):
        checks = run_sanity_checks(
            _stats(min_icr=1.5, max_leverage=4.2), facility_debt, facility_params, THRESHOLDS, True,
        )
        assert _codes(checks) == ["ICR_BELOW_TARGET", "LEVERAGE_ABOVE_LIMIT"]
        assert all(c.type == "critical" for c in checks)

    def test_unobserved_coverage_is_not_tested(self, facility_params, facility_debt):
        stats = CreditStats(max_leverage=0.8, dscr_available=False, icr_available=False)
        checks = run_sanity_checks(stats, facility_debt, facility_params, THRESHOLDS, True)
        assert checks == []

    def test_only_observed_ratio_is_tested(self, facility_params, facility_debt):
        stats = CreditStats(min_dscr=1.0, max_leverage=0.8, icr_available=False)
        checks = run_sanity_checks(stats, facility_debt, facility_params, THRESHOLDS, True)
        assert _codes(checks) == ["DSCR_BELOW_COVENANT"]

    def test_ratio_checks_skipped_without_debt(self):
        params = normalize_parameters({})
        checks = run_sanity_checks(CreditStats(), DebtInfo(), params, THRESHOLDS, False)
        assert checks == []


class TestStructureChecks:
    def test_high_ltv(self):
        params = normalize_parameters({"requestedLoanAmount": 900_000, "collateralValue": 1_000_000})
        checks = run_sanity_checks(_stats(), aggregate_debt(params), params, THRESHOLDS, True)
        assert _codes(checks) == ["HIGH_LTV"]
        assert checks[0].type == "warning"
        assert "90.0%" in checks[0].message

    def test_ltv_limit_is_configurable(self):
        params = normalize_parameters({"requestedLoanAmount": 900_000, "collateralValue": 1_000_000})
        limits = CheckLimits(ltv_warning_pct=95.0)
        checks = run_sanity_checks(_stats(), aggregate_debt(params), params, THRESHOLDS, True, limits)
        assert checks == []

    def test_existing_debt_only(self):
        params = normalize_parameters({"hasExistingDebt": True, "openingDebt": 800_000})
        checks = run_sanity_checks(_stats(), aggregate_debt(params), params, THRESHOLDS, True)
        assert _codes(checks) == ["EXISTING_DEBT_ONLY"]
        assert checks[0].type == "info"

    def test_facility_missing_from_debt(self):
        params = normalize_parameters({"requestedLoanAmount": 500_000})
        debt = DebtInfo(
            total_debt=1_000_000,
            existing_debt=1_000_000,
            components=[DebtComponent(name="Term Loan", amount=1_000_000, rate=0.08)],
        )
        checks = run_sanity_checks(_stats(), debt, params, THRESHOLDS, True)
        assert "FACILITY_NOT_IN_DEBT" in _codes(checks)

    def test_facility_matched_by_amount(self):
        params = normalize_parameters({"requestedLoanAmount": 500_000})
        debt = DebtInfo(
            total_debt=500_000,
            new_facility=500_000,
            components=[DebtComponent(name="Tranche 2", amount=500_400, rate=0.1)],
        )
        checks = run_sanity_checks(_stats(), debt, params, THRESHOLDS, True)
        assert "FACILITY_NOT_IN_DEBT" not in _codes(checks)

    @pytest.mark.parametrize("name", ["Renewal Loan", "Newco Term", "Facility B Refinancing"])
    def test_lookalike_names_do_not_match_facility(self, name):
        params = normalize_parameters({"requestedLoanAmount": 500_000})
        debt = DebtInfo(
            total_debt=1_000_000,
            existing_debt=1_000_000,
            components=[DebtComponent(name=name, amount=1_000_000, rate=0.08)],
        )
        checks = run_sanity_checks(_stats(), debt, params, THRESHOLDS, True)
        assert "FACILITY_NOT_IN_DEBT" in _codes(checks)

    def test_facility_matched_by_name(self):
        params = normalize_parameters({"requestedLoanAmount": 500_000})
        debt = DebtInfo(
            total_debt=750_000,
            new_facility=750_000,
            components=[DebtComponent(name="new facility", amount=750_000, rate=0.1)],
        )
        checks = run_sanity_checks(_stats(), debt, params, THRESHOLDS, True)
        assert "FACILITY_NOT_IN_DEBT" not in _codes(checks)
