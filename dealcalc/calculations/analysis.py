"""
Deal Analysis

Derives every strategy result, the project cost summary and the
amortization projection from one snapshot of inputs. Results are
memoized on the full (hashable) input snapshot, so recomputing an
unchanged snapshot returns the same result object.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from dealcalc.calculations.amortization import build_amortization_schedule
from dealcalc.calculations.flip import calculate_flip
from dealcalc.calculations.ltr import calculate_ltr
from dealcalc.calculations.short_term import calculate_str
from dealcalc.calculations.waterfall import (
    ProjectCostSummary,
    calculate_project_costs,
    sync_rehab_costs,
)
from dealcalc.calculations.models import (
    AmortizationDataPoint,
    FinancingInputs,
    FlipInputs,
    FlipResults,
    HoldingCosts,
    LTRInputs,
    LTRResults,
    PropertyInputs,
    RehabBreakdown,
    STRInputs,
    STRResults,
)

ANALYSIS_CACHE_SIZE = 256


@dataclass(frozen=True)
class AnalysisInputs:
    """Everything a user enters for one property analysis."""

    purchase_price: float
    closing_costs: float
    rehab_costs: float
    arv: float
    holding: HoldingCosts
    financing: FinancingInputs
    ltr: LTRInputs  # cash_invested is derived, any value here is ignored
    str_inputs: STRInputs
    flip: FlipInputs
    rehab: RehabBreakdown = field(default_factory=RehabBreakdown)
    additional_cash_invested: float = 0.0
    rent_appreciation_rate: float = 0.0
    address: str = ""


@dataclass(frozen=True)
class AnalysisResults:
    property: PropertyInputs
    cash_invested: float
    ltr: LTRResults
    str_results: STRResults
    flip: FlipResults
    project_costs: ProjectCostSummary
    amortization: Tuple[AmortizationDataPoint, ...]


def build_property_inputs(inputs: AnalysisInputs) -> PropertyInputs:
    """
    Property inputs shared by the strategy calculators.

    Down payment comes from the cash amount, rate and term from the
    refinance loan, and rehab_costs from the rehab breakdown when it
    has been filled in.
    """
    financing = inputs.financing
    property = PropertyInputs(
        purchase_price=inputs.purchase_price,
        down_payment_percent=financing.down_payment_percent(inputs.purchase_price),
        interest_rate=financing.refinance_interest_rate,
        loan_term_years=financing.refinance_loan_term_years,
        closing_costs=inputs.closing_costs,
        rehab_costs=inputs.rehab_costs,
        arv=inputs.arv,
        annual_property_taxes=inputs.holding.annual_property_taxes,
        annual_insurance=inputs.holding.annual_insurance,
    )
    return sync_rehab_costs(property, inputs.rehab)


def calculate_cash_invested(inputs: AnalysisInputs) -> float:
    """Investor cash: cash at closing + rehab cash + any additional cash."""
    return (
        inputs.financing.cash_amount
        + inputs.rehab.user_cash_for_rehab
        + inputs.additional_cash_invested
    )


def compute_analysis(inputs: AnalysisInputs) -> AnalysisResults:
    """Run every calculator for one input snapshot."""
    property = build_property_inputs(inputs)
    cash_invested = calculate_cash_invested(inputs)

    ltr_results = calculate_ltr(
        property,
        LTRInputs(
            monthly_rent=inputs.ltr.monthly_rent,
            vacancy_rate=inputs.ltr.vacancy_rate,
            property_management_percent=inputs.ltr.property_management_percent,
            maintenance_reserve_percent=inputs.ltr.maintenance_reserve_percent,
            other_monthly_expenses=inputs.ltr.other_monthly_expenses,
            appreciation_rate=inputs.ltr.appreciation_rate,
            cash_invested=cash_invested,
        ),
    )
    str_results = calculate_str(property, inputs.str_inputs)
    flip_results = calculate_flip(
        property,
        FlipInputs(
            rehab_timeline_months=inputs.flip.rehab_timeline_months,
            monthly_holding_costs=inputs.holding.monthly_total,
            agent_commission_percent=inputs.flip.agent_commission_percent,
            selling_closing_costs_percent=inputs.flip.selling_closing_costs_percent,
        ),
    )

    project_costs = calculate_project_costs(
        purchase_price=inputs.purchase_price,
        closing_costs=inputs.closing_costs,
        arv=inputs.arv,
        rehab=inputs.rehab,
        holding=inputs.holding,
        financing=inputs.financing,
        cash_invested=cash_invested,
    )

    # The long-term hold is financed by the refinance loan sized on ARV
    financing = inputs.financing
    schedule = build_amortization_schedule(
        loan_amount=financing.refinance_loan_amount(inputs.arv),
        annual_interest_rate=financing.refinance_interest_rate,
        loan_term_years=financing.refinance_loan_term_years,
        house_appreciation_rate=inputs.ltr.appreciation_rate,
        rent_appreciation_rate=inputs.rent_appreciation_rate,
        initial_property_value=inputs.arv,
        initial_monthly_rent=inputs.ltr.monthly_rent,
    )

    return AnalysisResults(
        property=property,
        cash_invested=cash_invested,
        ltr=ltr_results,
        str_results=str_results,
        flip=flip_results,
        project_costs=project_costs,
        amortization=tuple(schedule),
    )


run_analysis = lru_cache(maxsize=ANALYSIS_CACHE_SIZE)(compute_analysis)
