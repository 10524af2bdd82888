"""
Loan Amortization Calculations

Implements the fixed-rate monthly payment and the year-by-year
amortization schedule used for the loan balance vs. equity chart.
"""

import math
from typing import List

from dealcalc.calculations.appreciation import project_value
from dealcalc.calculations.models import AmortizationDataPoint


def round_currency(value: float) -> int:
    """Round half up to the nearest whole currency unit."""
    return int(math.floor(value + 0.5))


def calculate_monthly_mortgage(
    principal: float, annual_rate: float, term_years: float
) -> float:
    """
    Calculate the monthly payment of a fully-amortizing fixed-rate loan.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as a percent (e.g., 7 for 7%)
        term_years: Loan term in years

    Returns:
        Monthly payment, or 0 when any input is not positive
    """
    if principal <= 0 or annual_rate <= 0 or term_years <= 0:
        return 0.0

    monthly_rate = annual_rate / 100 / 12
    num_payments = term_years * 12

    growth = (1 + monthly_rate) ** num_payments
    return principal * monthly_rate * growth / (growth - 1)


def calculate_schedule_payment(
    principal: float, annual_rate: float, term_years: float
) -> float:
    """
    Monthly payment used by the amortization schedule.

    Same as calculate_monthly_mortgage, except that a zero (or negative)
    rate loan is repaid in equal straight-line installments.
    """
    if principal <= 0 or term_years <= 0:
        return 0.0
    if annual_rate <= 0:
        return principal / (term_years * 12)
    return calculate_monthly_mortgage(principal, annual_rate, term_years)


def build_amortization_schedule(
    loan_amount: float,
    annual_interest_rate: float,
    loan_term_years: int,
    house_appreciation_rate: float = 0.0,
    rent_appreciation_rate: float = 0.0,
    initial_property_value: float = 0.0,
    initial_monthly_rent: float = 0.0,
) -> List[AmortizationDataPoint]:
    """
    Build the yearly amortization and appreciation projection.

    Year 0 is the state at closing. Each following year simulates twelve
    monthly payments (fewer once the loan is paid off), then applies one
    year of appreciation to the property value and the rent.

    Args:
        loan_amount: Starting loan balance
        annual_interest_rate: Annual rate as a percent
        loan_term_years: Loan term; the schedule has loan_term_years + 1 rows
        house_appreciation_rate: Annual property appreciation, percent
        rent_appreciation_rate: Annual rent growth, percent
        initial_property_value: Property value at year 0
        initial_monthly_rent: Monthly rent at year 0

    Returns:
        List of AmortizationDataPoint, ordered by year
    """
    monthly_rate = annual_interest_rate / 100 / 12
    monthly_payment = calculate_schedule_payment(
        loan_amount, annual_interest_rate, loan_term_years
    )

    schedule = [
        AmortizationDataPoint(
            year=0,
            principal=0,
            interest=0,
            balance=round_currency(loan_amount),
            property_value=round_currency(initial_property_value),
            equity=round_currency(initial_property_value - loan_amount),
            annual_rent=round_currency(initial_monthly_rent * 12),
        )
    ]

    balance = loan_amount

    for year in range(1, int(loan_term_years) + 1):
        yearly_principal = 0.0
        yearly_interest = 0.0

        for _ in range(12):
            # Loan paid off
            if balance <= 0:
                break

            interest_payment = balance * monthly_rate
            principal_payment = min(monthly_payment - interest_payment, balance)

            yearly_interest += interest_payment
            yearly_principal += principal_payment
            balance -= principal_payment

        property_value = project_value(
            initial_property_value, house_appreciation_rate, year
        )
        annual_rent = project_value(
            initial_monthly_rent * 12, rent_appreciation_rate, year
        )
        outstanding = max(0.0, balance)

        schedule.append(
            AmortizationDataPoint(
                year=year,
                principal=round_currency(yearly_principal),
                interest=round_currency(yearly_interest),
                balance=round_currency(outstanding),
                property_value=round_currency(property_value),
                equity=round_currency(property_value - outstanding),
                annual_rent=round_currency(annual_rent),
            )
        )

    return schedule


def calculate_total_principal(schedule: List[AmortizationDataPoint]) -> int:
    """Total principal repaid over the schedule."""
    return sum(row.principal for row in schedule)


def calculate_total_interest(schedule: List[AmortizationDataPoint]) -> int:
    """Total interest paid over the schedule."""
    return sum(row.interest for row in schedule)
