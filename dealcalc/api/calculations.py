"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Called by the front end on every input change.
"""

import math
from dataclasses import asdict, is_dataclass
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from dealcalc.calculations import amortization, flip, ltr, short_term
from dealcalc.calculations.analysis import AnalysisInputs, run_analysis
from dealcalc.calculations.models import (
    FinancingInputs,
    FlipInputs,
    HoldingCosts,
    LTRInputs,
    PropertyInputs,
    RehabBreakdown,
    STRInputs,
)
from dealcalc.calculations.waterfall import RefinanceWaterfall

router = APIRouter()


def to_json_safe(value: Any) -> Any:
    """
    Convert calculator output to JSON-compatible data.

    Dataclasses become dicts and non-finite floats become the strings
    "Infinity", "-Infinity" or "NaN" so unbounded returns survive
    serialization.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return to_json_safe(asdict(value))
    if isinstance(value, dict):
        return {k: to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return value


def waterfall_to_dict(waterfall: RefinanceWaterfall) -> dict:
    data = to_json_safe(waterfall)
    data["outcome"] = waterfall.outcome
    return data


# === Pydantic Schemas ===

class PropertyInput(BaseModel):
    """Shared property inputs."""

    purchase_price: float = Field(ge=0)
    down_payment_percent: float = 20.0
    interest_rate: float = 7.0
    loan_term_years: int = 30
    closing_costs: float = Field(default=0.0, ge=0)
    rehab_costs: float = Field(default=0.0, ge=0)
    arv: float = Field(default=0.0, ge=0)
    annual_property_taxes: float = Field(default=0.0, ge=0)
    annual_insurance: float = Field(default=0.0, ge=0)

    def to_inputs(self) -> PropertyInputs:
        return PropertyInputs(**self.model_dump())


class LTRInput(BaseModel):
    monthly_rent: float = Field(ge=0)
    vacancy_rate: float = 5.0
    property_management_percent: float = 10.0
    maintenance_reserve_percent: float = 5.0
    other_monthly_expenses: float = 0.0
    appreciation_rate: float = 3.0
    cash_invested: Optional[float] = None


class STRInput(BaseModel):
    average_nightly_rate: float = Field(ge=0)
    occupancy_rate: float = 65.0
    cleaning_fee: float = 0.0
    average_stay_length: float = 3.0
    high_season_multiplier: float = 1.0
    low_season_multiplier: float = 1.0
    management_fee_percent: float = 20.0
    furnishing_costs: float = Field(default=0.0, ge=0)
    monthly_operating_expenses: float = 0.0


class FlipInput(BaseModel):
    rehab_timeline_months: int = 3
    monthly_holding_costs: float = 0.0
    agent_commission_percent: float = 6.0
    selling_closing_costs_percent: float = 2.0


class LTRRequest(BaseModel):
    property: PropertyInput
    ltr: LTRInput


class STRRequest(BaseModel):
    property: PropertyInput
    str_inputs: STRInput


class FlipRequest(BaseModel):
    property: PropertyInput
    flip: FlipInput


class MortgageInput(BaseModel):
    principal: float = Field(ge=0)
    annual_rate: float
    term_years: int


class AmortizationInput(BaseModel):
    """Input for the amortization and appreciation projection."""

    loan_amount: float = Field(ge=0)
    annual_interest_rate: float
    loan_term_years: int = Field(ge=0)
    house_appreciation_rate: float = 0.0
    rent_appreciation_rate: float = 0.0
    initial_property_value: float = 0.0
    initial_monthly_rent: float = 0.0


class RehabInput(BaseModel):
    roof: float = Field(default=0.0, ge=0)
    paint: float = Field(default=0.0, ge=0)
    floors: float = Field(default=0.0, ge=0)
    cabinets: float = Field(default=0.0, ge=0)
    electrical: float = Field(default=0.0, ge=0)
    plumbing: float = Field(default=0.0, ge=0)
    framing: float = Field(default=0.0, ge=0)
    landscaping: float = Field(default=0.0, ge=0)
    foundation: float = Field(default=0.0, ge=0)
    misc: float = Field(default=0.0, ge=0)
    user_cash_for_rehab: float = Field(default=0.0, ge=0)
    debt_for_rehab: float = Field(default=0.0, ge=0)


class HoldingInput(BaseModel):
    annual_property_taxes: float = Field(default=3600.0, ge=0)
    annual_insurance: float = Field(default=1800.0, ge=0)
    monthly_utilities: float = Field(default=200.0, ge=0)
    short_term_months_held: int = 6


class FinancingInput(BaseModel):
    cash_amount: float = Field(default=60000.0, ge=0)
    short_term_loan_amount: float = Field(default=0.0, ge=0)
    short_term_interest_rate: float = 12.0
    short_term_loan_term_months: int = 12
    short_term_points: float = 2.0
    refinance_ltv: float = 75.0
    refinance_interest_rate: float = 7.0
    refinance_loan_term_years: int = 30
    refinance_points: float = 1.0


class AnalysisInput(BaseModel):
    """Full input snapshot for one property analysis."""

    address: str = ""
    purchase_price: float = Field(default=300000.0, ge=0)
    closing_costs: float = Field(default=6000.0, ge=0)
    rehab_costs: float = Field(default=15000.0, ge=0)
    arv: float = Field(default=350000.0, ge=0)
    rehab: RehabInput = RehabInput()
    holding: HoldingInput = HoldingInput()
    financing: FinancingInput = FinancingInput()
    ltr: LTRInput = LTRInput(monthly_rent=2200.0, other_monthly_expenses=100.0)
    additional_cash_invested: float = 0.0
    rent_appreciation_rate: float = 2.0
    str_inputs: STRInput = STRInput(
        average_nightly_rate=150.0,
        cleaning_fee=100.0,
        high_season_multiplier=1.3,
        low_season_multiplier=0.7,
        furnishing_costs=15000.0,
        monthly_operating_expenses=300.0,
    )
    flip: FlipInput = FlipInput(monthly_holding_costs=800.0)

    def to_inputs(self) -> AnalysisInputs:
        return AnalysisInputs(
            address=self.address,
            purchase_price=self.purchase_price,
            closing_costs=self.closing_costs,
            rehab_costs=self.rehab_costs,
            arv=self.arv,
            rehab=RehabBreakdown(**self.rehab.model_dump()),
            holding=HoldingCosts(**self.holding.model_dump()),
            financing=FinancingInputs(**self.financing.model_dump()),
            ltr=LTRInputs(**self.ltr.model_dump(exclude={"cash_invested"})),
            additional_cash_invested=self.additional_cash_invested,
            rent_appreciation_rate=self.rent_appreciation_rate,
            str_inputs=STRInputs(**self.str_inputs.model_dump()),
            flip=FlipInputs(**self.flip.model_dump()),
        )


def analysis_to_dict(inputs: AnalysisInputs) -> dict:
    """Run the full analysis and shape it for JSON."""
    results = run_analysis(inputs)
    project_costs = results.project_costs

    data = to_json_safe(results)
    data["project_costs"]["waterfall"] = waterfall_to_dict(project_costs.waterfall)
    data["project_costs"]["margin_is_negative"] = project_costs.margin_is_negative
    return data


# === Endpoints ===

@router.post("/mortgage")
async def calculate_mortgage(inputs: MortgageInput):
    """Calculate the fixed monthly mortgage payment."""
    payment = amortization.calculate_monthly_mortgage(
        inputs.principal, inputs.annual_rate, inputs.term_years
    )
    return {"monthly_payment": payment}


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate the yearly amortization and equity projection."""
    schedule = amortization.build_amortization_schedule(**inputs.model_dump())

    return {
        "schedule": to_json_safe(schedule),
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": amortization.calculate_total_principal(schedule),
    }


@router.post("/ltr")
async def calculate_ltr_endpoint(inputs: LTRRequest):
    """Calculate long-term rental metrics."""
    results = ltr.calculate_ltr(
        inputs.property.to_inputs(), LTRInputs(**inputs.ltr.model_dump())
    )
    return to_json_safe(results)


@router.post("/str")
async def calculate_str_endpoint(inputs: STRRequest):
    """Calculate short-term rental metrics."""
    results = short_term.calculate_str(
        inputs.property.to_inputs(), STRInputs(**inputs.str_inputs.model_dump())
    )
    return to_json_safe(results)


@router.post("/flip")
async def calculate_flip_endpoint(inputs: FlipRequest):
    """Calculate fix-and-flip metrics."""
    results = flip.calculate_flip(
        inputs.property.to_inputs(), FlipInputs(**inputs.flip.model_dump())
    )
    return to_json_safe(results)


@router.post("/analysis")
async def calculate_analysis(inputs: AnalysisInput):
    """Calculate every strategy, project costs and the amortization projection."""
    return analysis_to_dict(inputs.to_inputs())
