"""
Project Cost and Refinance Waterfall Calculations

Aggregates purchase, rehab, holding and financing costs into the total
project cost, and allocates refinance proceeds in priority order:

1. Lender Payoff - short-term purchase loan and rehab debt are repaid first
2. Return of Cash - whatever remains goes back to the investor
3. Cash Out - anything beyond the investor's cash is taken out of the deal
"""

from dataclasses import dataclass, replace

from dealcalc.calculations.models import (
    PropertyInputs,
    RehabBreakdown,
    HoldingCosts,
    FinancingInputs,
)

OUTCOME_CASH_STILL_NEEDED = "cash_still_needed"
OUTCOME_CASH_TAKEN_OUT = "cash_taken_out"
OUTCOME_CASH_LEFT_IN = "cash_left_in"
OUTCOME_BREAKEVEN = "breakeven"


@dataclass(frozen=True)
class RefinanceWaterfall:
    """Result of allocating refinance proceeds."""

    refinance_loan_amount: float
    total_short_term_debt: float
    cash_invested: float
    remaining_after_lender_payoff: float
    cash_taken_out: float
    cash_left_in: float
    cash_still_needed: float

    @property
    def outcome(self) -> str:
        if self.cash_still_needed > 0:
            return OUTCOME_CASH_STILL_NEEDED
        if self.cash_taken_out > 0:
            return OUTCOME_CASH_TAKEN_OUT
        if self.cash_left_in > 0:
            return OUTCOME_CASH_LEFT_IN
        return OUTCOME_BREAKEVEN


@dataclass(frozen=True)
class ShortTermLoanCosts:
    """Points and interest paid on the short-term loan."""

    points_cost: float
    monthly_interest: float
    total_interest: float

    @property
    def total(self) -> float:
        return self.points_cost + self.total_interest


@dataclass(frozen=True)
class ProjectCostSummary:
    """All-in project cost and the cash position after refinance."""

    total_rehab_costs: float
    rehab_funding_gap: float
    total_holding_costs: float
    monthly_holding_costs: float
    short_term_points_cost: float
    short_term_monthly_interest: float
    short_term_total_interest: float
    loan_costs: float
    refinance_points_cost: float
    total_project_cost: float
    margin_of_opportunity: float
    waterfall: RefinanceWaterfall

    @property
    def margin_is_negative(self) -> bool:
        return self.margin_of_opportunity < 0


def sync_rehab_costs(property: PropertyInputs, rehab: RehabBreakdown) -> PropertyInputs:
    """
    Return property inputs whose rehab_costs match the breakdown total.

    The breakdown wins whenever its total is positive; an empty
    breakdown leaves the entered rehab_costs untouched.
    """
    total = rehab.total
    if total > 0 and total != property.rehab_costs:
        return replace(property, rehab_costs=total)
    return property


def calculate_short_term_loan_costs(
    financing: FinancingInputs, months_held: int
) -> ShortTermLoanCosts:
    """Points plus simple monthly interest over the months held."""
    points_cost = (financing.short_term_points / 100) * financing.short_term_loan_amount
    monthly_interest = (
        financing.short_term_interest_rate / 100 / 12
    ) * financing.short_term_loan_amount

    return ShortTermLoanCosts(
        points_cost=points_cost,
        monthly_interest=monthly_interest,
        total_interest=monthly_interest * months_held,
    )


def calculate_refinance_waterfall(
    refinance_loan_amount: float,
    total_short_term_debt: float,
    cash_invested: float,
) -> RefinanceWaterfall:
    """
    Allocate refinance proceeds between lender payoff and investor cash.

    Exactly one outcome applies, checked in order: cash still needed,
    cash taken out, cash left in. At exact breakeven all three amounts
    are zero. When the refinance cannot even repay the lender, all
    investor cash also stays in, so cash_left_in accompanies
    cash_still_needed.

    Args:
        refinance_loan_amount: Proceeds of the long-term refinance loan
        total_short_term_debt: Short-term purchase loan plus rehab debt
        cash_invested: Investor's own cash in the deal

    Returns:
        RefinanceWaterfall
    """
    cash_taken_out = 0.0
    cash_left_in = 0.0
    cash_still_needed = 0.0

    # === STEP 1: Lender Payoff ===
    remaining = refinance_loan_amount - total_short_term_debt

    if remaining < 0:
        # Refinance does not cover the lender
        cash_still_needed = abs(remaining)
        cash_left_in = cash_invested
    elif remaining >= cash_invested:
        # === STEP 2 + 3: Full return of cash, surplus taken out ===
        cash_taken_out = remaining - cash_invested
    else:
        # === STEP 2: Partial return of cash ===
        cash_left_in = cash_invested - remaining

    return RefinanceWaterfall(
        refinance_loan_amount=refinance_loan_amount,
        total_short_term_debt=total_short_term_debt,
        cash_invested=cash_invested,
        remaining_after_lender_payoff=remaining,
        cash_taken_out=cash_taken_out,
        cash_left_in=cash_left_in,
        cash_still_needed=cash_still_needed,
    )


def calculate_project_costs(
    purchase_price: float,
    closing_costs: float,
    arv: float,
    rehab: RehabBreakdown,
    holding: HoldingCosts,
    financing: FinancingInputs,
    cash_invested: float,
) -> ProjectCostSummary:
    """
    Total project cost regardless of funding source, plus the refinance waterfall.

    Args:
        purchase_price: Purchase price
        closing_costs: Purchase closing costs
        arv: After-repair value the refinance is sized on
        rehab: Rehab breakdown (its total is authoritative)
        holding: Holding costs during the short-term period
        financing: Short-term and refinance loan terms
        cash_invested: Investor cash (cash amount + rehab cash + additional cash)

    Returns:
        ProjectCostSummary
    """
    total_rehab_costs = rehab.total
    total_holding_costs = holding.total

    loan_costs = calculate_short_term_loan_costs(financing, holding.short_term_months_held)

    refinance_loan_amount = financing.refinance_loan_amount(arv)
    refinance_points_cost = (financing.refinance_points / 100) * refinance_loan_amount

    total_project_cost = (
        purchase_price
        + closing_costs
        + total_rehab_costs
        + total_holding_costs
        + loan_costs.total
        + refinance_points_cost
    )

    # Purchase loan and rehab debt are paid off together at refinance
    total_short_term_debt = financing.short_term_loan_amount + rehab.debt_for_rehab

    waterfall = calculate_refinance_waterfall(
        refinance_loan_amount, total_short_term_debt, cash_invested
    )

    return ProjectCostSummary(
        total_rehab_costs=total_rehab_costs,
        rehab_funding_gap=rehab.funding_gap,
        total_holding_costs=total_holding_costs,
        monthly_holding_costs=holding.monthly_total,
        short_term_points_cost=loan_costs.points_cost,
        short_term_monthly_interest=loan_costs.monthly_interest,
        short_term_total_interest=loan_costs.total_interest,
        loan_costs=loan_costs.total,
        refinance_points_cost=refinance_points_cost,
        total_project_cost=total_project_cost,
        margin_of_opportunity=arv - (purchase_price + closing_costs + total_rehab_costs),
        waterfall=waterfall,
    )
