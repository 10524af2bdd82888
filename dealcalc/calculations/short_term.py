"""
Short-Term Rental Calculations

Nightly-rental income, cash flow and break-even occupancy. Seasonality
is a flat blend of the high and low season multipliers rather than a
month-by-month simulation.
"""

from dealcalc.calculations.amortization import calculate_monthly_mortgage
from dealcalc.calculations.models import PropertyInputs, STRInputs, STRResults

# Return reported when no cash is invested
ZERO_CASH_RETURN = 0.0

NIGHTS_PER_MONTH = 30


def calculate_adjusted_nightly_rate(str_inputs: STRInputs) -> float:
    """Nightly rate scaled by the average of the seasonal multipliers."""
    avg_season_multiplier = (
        str_inputs.high_season_multiplier + str_inputs.low_season_multiplier
    ) / 2
    return str_inputs.average_nightly_rate * avg_season_multiplier


def calculate_break_even_occupancy(
    fixed_monthly_expenses: float,
    adjusted_nightly_rate: float,
    str_inputs: STRInputs,
) -> float:
    """
    Occupancy percent at which net nightly revenue covers fixed expenses.

    Returns 0 when a booked night brings in no net revenue.
    """
    if str_inputs.average_stay_length > 0:
        cleaning_per_night = str_inputs.cleaning_fee / str_inputs.average_stay_length
    else:
        cleaning_per_night = 0.0

    revenue_per_night = adjusted_nightly_rate + cleaning_per_night
    net_revenue_per_night = revenue_per_night * (1 - str_inputs.management_fee_percent / 100)

    if net_revenue_per_night > 0:
        break_even_nights = fixed_monthly_expenses / net_revenue_per_night
    else:
        break_even_nights = 0.0

    return (break_even_nights / NIGHTS_PER_MONTH) * 100


def calculate_str(property: PropertyInputs, str_inputs: STRInputs) -> STRResults:
    """
    Calculate short-term rental metrics.

    Cash invested includes furnishing costs on top of down payment,
    closing costs and rehab.
    """
    total_cash_invested = (
        property.down_payment
        + property.closing_costs
        + property.rehab_costs
        + str_inputs.furnishing_costs
    )

    monthly_mortgage = calculate_monthly_mortgage(
        property.loan_amount, property.interest_rate, property.loan_term_years
    )

    adjusted_nightly_rate = calculate_adjusted_nightly_rate(str_inputs)

    nights_booked = NIGHTS_PER_MONTH * (str_inputs.occupancy_rate / 100)
    if str_inputs.average_stay_length > 0:
        stays_per_month = nights_booked / str_inputs.average_stay_length
    else:
        stays_per_month = 0.0
    cleaning_income = stays_per_month * str_inputs.cleaning_fee

    gross_monthly_income = adjusted_nightly_rate * nights_booked + cleaning_income
    management_fees = gross_monthly_income * (str_inputs.management_fee_percent / 100)

    monthly_taxes = property.annual_property_taxes / 12
    monthly_insurance = property.annual_insurance / 12

    fixed_monthly_expenses = (
        monthly_mortgage
        + monthly_taxes
        + monthly_insurance
        + str_inputs.monthly_operating_expenses
    )
    total_monthly_expenses = fixed_monthly_expenses + management_fees

    net_monthly_cash_flow = gross_monthly_income - total_monthly_expenses
    annual_revenue = gross_monthly_income * 12

    if total_cash_invested > 0:
        cash_on_cash_return = (net_monthly_cash_flow * 12 / total_cash_invested) * 100
    else:
        cash_on_cash_return = ZERO_CASH_RETURN

    break_even_occupancy = calculate_break_even_occupancy(
        fixed_monthly_expenses, adjusted_nightly_rate, str_inputs
    )

    return STRResults(
        adjusted_nightly_rate=adjusted_nightly_rate,
        nights_booked_per_month=nights_booked,
        gross_monthly_income=gross_monthly_income,
        net_monthly_cash_flow=net_monthly_cash_flow,
        annual_revenue=annual_revenue,
        cash_on_cash_return=cash_on_cash_return,
        break_even_occupancy=break_even_occupancy,
        total_cash_invested=total_cash_invested,
        # Furnishing is already part of total_cash_invested
        roi_with_furnishing=cash_on_cash_return,
    )
