"""Pydantic schemas for credit analysis.

Request models accept the front end's camelCase payloads (including the
``minDSCR`` style acronyms) as well as snake_case.  Unknown keys are kept
so that legacy spellings such as ``openingDebtRate`` still reach the
engine's normalizer.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_INPUT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class DebtTrancheIn(BaseModel):
    model_config = _INPUT_CONFIG

    name: str | None = None
    amount: float | None = Field(default=None, ge=0)
    rate: float | None = Field(default=None, ge=0, description="Annual rate, decimal or percent")
    seniority: str | None = None
    maturity_date: str | None = None
    amortization_type: str | None = None
    tenor_years: float | None = Field(default=None, gt=0)
    interest_only_years: float | None = Field(default=None, ge=0)


class FinancialParametersIn(BaseModel):
    model_config = _INPUT_CONFIG

    has_existing_debt: bool | None = None
    opening_debt: float | None = Field(default=None, ge=0)
    existing_debt_amount: float | None = Field(default=None, ge=0)
    existing_debt_rate: float | None = Field(default=None, ge=0)
    existing_debt_tenor: float | None = Field(default=None, gt=0)
    existing_debt_amortization_type: str | None = None
    has_multiple_tranches: bool | None = None
    debt_tranches: list[DebtTrancheIn] | None = None

    requested_loan_amount: float | None = Field(default=None, ge=0)
    proposed_pricing: float | None = Field(default=None, ge=0)
    proposed_tenor: float | None = Field(default=None, gt=0)
    facility_amortization_type: str | None = None
    interest_only_years: float | None = Field(default=None, ge=0)
    interest_rate: float | None = Field(default=None, ge=0)
    balloon_percentage: float | None = Field(default=None, ge=0, le=100)
    use_balloon_payment: bool | None = None

    min_dscr: float | None = Field(
        default=None, gt=0, validation_alias=AliasChoices("minDSCR", "minDscr", "min_dscr"),
    )
    target_icr: float | None = Field(
        default=None, gt=0, validation_alias=AliasChoices("targetICR", "targetIcr", "target_icr"),
    )
    max_nd_to_ebitda: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("maxNDToEBITDA", "maxNdToEbitda", "max_nd_to_ebitda"),
    )

    collateral_value: float | None = Field(default=None, ge=0)
    credit_history: str | None = None
    management_experience: str | None = None
    industry: str | None = None
    ebitda: float | None = None
    opening_cash: float | None = None


class ProjectionRowIn(BaseModel):
    model_config = _INPUT_CONFIG

    year: int | None = None
    ebitda: float | None = None
    dscr: float | None = None
    icr: float | None = None
    nd_to_ebitda: float | None = None
    fcf_to_equity: float | None = None
    principal_payment: float | None = None
    interest_expense: float | None = None
    debt_balance: float | None = None
    debt_service: float | None = None


class CreditStatsIn(BaseModel):
    model_config = _INPUT_CONFIG

    min_dscr: float | None = Field(default=None, validation_alias=AliasChoices("minDSCR", "minDscr", "min_dscr"))
    max_dscr: float | None = Field(default=None, validation_alias=AliasChoices("maxDSCR", "maxDscr", "max_dscr"))
    avg_dscr: float | None = Field(default=None, validation_alias=AliasChoices("avgDSCR", "avgDscr", "avg_dscr"))
    min_icr: float | None = Field(default=None, validation_alias=AliasChoices("minICR", "minIcr", "min_icr"))
    max_icr: float | None = Field(default=None, validation_alias=AliasChoices("maxICR", "maxIcr", "max_icr"))
    avg_icr: float | None = Field(default=None, validation_alias=AliasChoices("avgICR", "avgIcr", "avg_icr"))
    min_leverage: float | None = None
    max_leverage: float | None = None
    avg_leverage: float | None = None


class MultiTrancheInfoIn(BaseModel):
    model_config = _INPUT_CONFIG

    tranches: list[DebtTrancheIn] = Field(default_factory=list)
    total_debt: float | None = Field(default=None, ge=0)
    blended_rate: float | None = Field(default=None, ge=0)


class ProjectionIn(BaseModel):
    model_config = _INPUT_CONFIG

    rows: list[ProjectionRowIn] = Field(default_factory=list)
    credit_stats: CreditStatsIn | None = None
    multi_tranche_info: MultiTrancheInfoIn | None = None
    final_debt: float | None = Field(default=None, ge=0)


class CreditAnalysisRequest(BaseModel):
    parameters: FinancialParametersIn
    projection: ProjectionIn | None = None


class DebtSummaryRequest(BaseModel):
    parameters: FinancialParametersIn
    projection: ProjectionIn | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class ThresholdsResponse(BaseModel):
    min_dscr: float
    target_icr: float
    max_nd_to_ebitda: float
    description: str = ""


class IndustryBenchmarkResponse(ThresholdsResponse):
    industry: str


class DebtComponentResponse(BaseModel):
    name: str
    amount: float
    rate: float
    seniority: str
    source: str
    tenor_years: float
    amortization_type: str
    annual_service: float
    annual_interest: float


class DebtInfoResponse(BaseModel):
    total_debt: float
    existing_debt: float
    new_facility: float
    components: list[DebtComponentResponse]
    blended_rate: float
    source: str
    total_debt_service: float
    total_interest: float


class DebtSummaryResponse(BaseModel):
    scenario: str
    has_debt: bool
    debt: DebtInfoResponse


class CreditStatsResponse(BaseModel):
    min_dscr: float
    max_dscr: float
    avg_dscr: float
    min_icr: float
    max_icr: float
    avg_icr: float
    min_leverage: float
    max_leverage: float
    avg_leverage: float
    dscr_available: bool = True
    icr_available: bool = True


class CovenantBreachesResponse(BaseModel):
    dscr_breaches: int
    icr_breaches: int
    leverage_breaches: int
    breach_years: list[int]
    total: int


class SanityCheckResponse(BaseModel):
    type: str
    code: str
    title: str
    message: str


class RationaleBulletResponse(BaseModel):
    text: str
    passed: bool | None


class ScoreDetailResponse(BaseModel):
    category: str
    points: float
    max: float


class CreditScoreResponse(BaseModel):
    score: int
    band: str
    details: list[ScoreDetailResponse]


class DebtCapacityResponse(BaseModel):
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


class CreditAnalysisResponse(BaseModel):
    scenario: str
    has_debt: bool
    thresholds: ThresholdsResponse
    debt: DebtInfoResponse
    stats: CreditStatsResponse
    breaches: CovenantBreachesResponse
    checks: list[SanityCheckResponse]
    rationale: list[RationaleBulletResponse]
    covenants: list[str]
    score: CreditScoreResponse
    capacity: DebtCapacityResponse
