"""
Input and Result Bundles

Immutable value objects consumed and produced by the calculators.
All rates and percentages are expressed as percents (7.0 for 7%),
all monetary amounts in whole currency units.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class PropertyInputs:
    """Shared property and financing assumptions for every strategy."""

    purchase_price: float
    down_payment_percent: float  # Percent of purchase price paid in cash
    interest_rate: float  # Annual rate, percent
    loan_term_years: int
    closing_costs: float
    rehab_costs: float  # Total rehab budget
    arv: float  # After-repair value
    annual_property_taxes: float
    annual_insurance: float

    @property
    def down_payment(self) -> float:
        return self.purchase_price * (self.down_payment_percent / 100)

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.down_payment


@dataclass(frozen=True)
class RehabBreakdown:
    """Rehab budget split by category, plus how the work is funded."""

    roof: float = 0.0
    paint: float = 0.0
    floors: float = 0.0
    cabinets: float = 0.0
    electrical: float = 0.0
    plumbing: float = 0.0
    framing: float = 0.0
    landscaping: float = 0.0
    foundation: float = 0.0
    misc: float = 0.0

    # Funding split
    user_cash_for_rehab: float = 0.0
    debt_for_rehab: float = 0.0

    @property
    def total(self) -> float:
        """Sum of the ten category costs."""
        return (
            self.roof
            + self.paint
            + self.floors
            + self.cabinets
            + self.electrical
            + self.plumbing
            + self.framing
            + self.landscaping
            + self.foundation
            + self.misc
        )

    @property
    def funding_gap(self) -> float:
        """Rehab cost not yet covered by user cash or rehab debt."""
        return max(0.0, self.total - self.user_cash_for_rehab - self.debt_for_rehab)


@dataclass(frozen=True)
class HoldingCosts:
    """Carrying costs while the short-term loan is outstanding."""

    annual_property_taxes: float
    annual_insurance: float
    monthly_utilities: float
    short_term_months_held: int

    @property
    def monthly_total(self) -> float:
        return (
            self.annual_property_taxes / 12
            + self.annual_insurance / 12
            + self.monthly_utilities
        )

    @property
    def total(self) -> float:
        return self.monthly_total * self.short_term_months_held


@dataclass(frozen=True)
class FinancingInputs:
    """Cash at closing, short-term (hard money / bridge) debt and the refinance."""

    cash_amount: float

    # Short-term debt
    short_term_loan_amount: float
    short_term_interest_rate: float
    short_term_loan_term_months: int
    short_term_points: float

    # Long-term refinance
    refinance_ltv: float
    refinance_interest_rate: float
    refinance_loan_term_years: int
    refinance_points: float

    def down_payment_percent(self, purchase_price: float) -> float:
        """Cash amount expressed as a percent of the purchase price."""
        if purchase_price <= 0:
            return 0.0
        return (self.cash_amount / purchase_price) * 100

    def refinance_loan_amount(self, arv: float) -> float:
        return (self.refinance_ltv / 100) * arv


@dataclass(frozen=True)
class LTRInputs:
    """Long-term rental operating assumptions."""

    monthly_rent: float
    vacancy_rate: float
    property_management_percent: float
    maintenance_reserve_percent: float
    other_monthly_expenses: float
    appreciation_rate: float
    # When set, used as-is instead of down payment + closing + rehab
    cash_invested: Optional[float] = None


@dataclass(frozen=True)
class STRInputs:
    """Short-term (nightly) rental operating assumptions."""

    average_nightly_rate: float
    occupancy_rate: float
    cleaning_fee: float
    average_stay_length: float  # Nights per stay
    high_season_multiplier: float
    low_season_multiplier: float
    management_fee_percent: float
    furnishing_costs: float
    monthly_operating_expenses: float


@dataclass(frozen=True)
class FlipInputs:
    """Fix-and-flip assumptions."""

    rehab_timeline_months: int
    monthly_holding_costs: float
    agent_commission_percent: float
    selling_closing_costs_percent: float


@dataclass(frozen=True)
class LTRResults:
    monthly_mortgage: float
    monthly_expenses: float
    monthly_cash_flow: float
    annual_cash_flow: float
    cash_invested: float
    cash_on_cash_return: float
    noi: float
    cap_rate: float
    equity_year_1: float
    equity_year_5: float
    equity_year_10: float
    cumulative_cash_flow_10_year: float
    total_roi_10_year: float


@dataclass(frozen=True)
class STRResults:
    adjusted_nightly_rate: float
    nights_booked_per_month: float
    gross_monthly_income: float
    net_monthly_cash_flow: float
    annual_revenue: float
    cash_on_cash_return: float
    break_even_occupancy: float
    total_cash_invested: float
    roi_with_furnishing: float


@dataclass(frozen=True)
class FlipResults:
    arv: float  # Sale price actually used
    purchase_price: float
    rehab_costs: float
    holding_costs: float
    selling_costs: float
    total_investment: float
    expected_net_profit: float
    cash_invested: float
    total_roi: float
    my_roi: float


@dataclass(frozen=True)
class AmortizationDataPoint:
    """One year of the amortization and appreciation projection."""

    year: int
    principal: int
    interest: int
    balance: int
    property_value: int
    equity: int
    annual_rent: int
