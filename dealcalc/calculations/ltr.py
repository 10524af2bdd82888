"""
Long-Term Rental Calculations

Monthly cash flow, cash-on-cash return, cap rate, equity buildup and
10-year ROI for a buy-and-hold rental.
"""

from dealcalc.calculations.amortization import calculate_monthly_mortgage
from dealcalc.calculations.appreciation import calculate_appreciation_gain, project_series
from dealcalc.calculations.models import PropertyInputs, LTRInputs, LTRResults

# Return reported when no cash is invested but the deal still cash flows
UNBOUNDED_RETURN = float("inf")

EQUITY_YEARS = (1, 5, 10)
PROJECTION_YEARS = 10


def calculate_equity(
    property: PropertyInputs, appreciation_rate: float, year: int
) -> float:
    """
    Estimate equity after `year` years.

    Principal paydown is approximated as straight-line (loan amount
    divided evenly over the term), not the true amortization curve.
    The amortization schedule is the place to look for the exact split.
    """
    if property.loan_term_years > 0:
        annual_principal_paydown = property.loan_amount / property.loan_term_years
    else:
        annual_principal_paydown = 0.0

    return (
        property.down_payment
        + annual_principal_paydown * year
        + calculate_appreciation_gain(property.purchase_price, appreciation_rate, year)
    )


def calculate_cumulative_cash_flow(
    ltr: LTRInputs,
    monthly_mortgage: float,
    monthly_taxes: float,
    monthly_insurance: float,
    years: int = PROJECTION_YEARS,
) -> float:
    """
    Sum of annual cash flows over `years`.

    Rent (and the rent-based vacancy, management and maintenance
    expenses) grows at the appreciation rate; mortgage, taxes,
    insurance and other expenses stay at year-1 levels.
    """
    yearly_fixed_expenses = (monthly_mortgage + monthly_taxes + monthly_insurance) * 12
    yearly_other = ltr.other_monthly_expenses * 12

    # Year 1 collects the current rent, so the series starts at year 0
    yearly_rents = project_series(ltr.monthly_rent * 12, ltr.appreciation_rate, years - 1)

    cumulative = 0.0
    for yearly_rent in yearly_rents:
        yearly_vacancy = yearly_rent * (ltr.vacancy_rate / 100)
        yearly_mgmt = yearly_rent * (ltr.property_management_percent / 100)
        yearly_maintenance = yearly_rent * (ltr.maintenance_reserve_percent / 100)

        cumulative += (
            yearly_rent
            - yearly_vacancy
            - yearly_mgmt
            - yearly_maintenance
            - yearly_other
            - yearly_fixed_expenses
        )

    return cumulative


def calculate_ltr(property: PropertyInputs, ltr: LTRInputs) -> LTRResults:
    """
    Calculate long-term rental metrics.

    Cash invested is ltr.cash_invested when provided, otherwise
    down payment + closing costs + rehab costs.

    Returns:
        LTRResults; cash_on_cash_return and total_roi_10_year are
        infinite when nothing is invested and the deal is profitable
    """
    down_payment = property.down_payment
    loan_amount = property.loan_amount

    if ltr.cash_invested is not None:
        cash_invested = ltr.cash_invested
    else:
        cash_invested = down_payment + property.closing_costs + property.rehab_costs

    monthly_mortgage = calculate_monthly_mortgage(
        loan_amount, property.interest_rate, property.loan_term_years
    )

    monthly_taxes = property.annual_property_taxes / 12
    monthly_insurance = property.annual_insurance / 12
    vacancy_loss = ltr.monthly_rent * (ltr.vacancy_rate / 100)
    management = ltr.monthly_rent * (ltr.property_management_percent / 100)
    maintenance = ltr.monthly_rent * (ltr.maintenance_reserve_percent / 100)

    operating_expenses = (
        monthly_taxes
        + monthly_insurance
        + vacancy_loss
        + management
        + maintenance
        + ltr.other_monthly_expenses
    )
    monthly_expenses = monthly_mortgage + operating_expenses

    monthly_cash_flow = ltr.monthly_rent - monthly_expenses
    annual_cash_flow = monthly_cash_flow * 12

    if cash_invested > 0:
        cash_on_cash_return = (annual_cash_flow / cash_invested) * 100
    elif annual_cash_flow > 0:
        cash_on_cash_return = UNBOUNDED_RETURN
    else:
        cash_on_cash_return = 0.0

    # NOI excludes debt service
    noi = ltr.monthly_rent * 12 - operating_expenses * 12
    cap_rate = (noi / property.purchase_price) * 100 if property.purchase_price > 0 else 0.0

    equity_year_1, equity_year_5, equity_year_10 = (
        calculate_equity(property, ltr.appreciation_rate, year) for year in EQUITY_YEARS
    )

    cumulative_cash_flow = calculate_cumulative_cash_flow(
        ltr, monthly_mortgage, monthly_taxes, monthly_insurance
    )

    if cash_invested > 0:
        total_roi_10_year = (
            (equity_year_10 + cumulative_cash_flow - cash_invested) / cash_invested
        ) * 100
    else:
        total_roi_10_year = UNBOUNDED_RETURN

    return LTRResults(
        monthly_mortgage=monthly_mortgage,
        monthly_expenses=monthly_expenses,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=annual_cash_flow,
        cash_invested=cash_invested,
        cash_on_cash_return=cash_on_cash_return,
        noi=noi,
        cap_rate=cap_rate,
        equity_year_1=equity_year_1,
        equity_year_5=equity_year_5,
        equity_year_10=equity_year_10,
        cumulative_cash_flow_10_year=cumulative_cash_flow,
        total_roi_10_year=total_roi_10_year,
    )
