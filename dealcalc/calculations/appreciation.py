"""
Appreciation Projections

Compounds a property value or rent forward at a constant annual rate.
"""

from typing import List


def project_value(value: float, annual_rate: float, years: float) -> float:
    """
    Project a value forward with annual compounding.

    Args:
        value: Starting value
        annual_rate: Annual growth rate as a percent (negative depreciates)
        years: Number of years to compound

    Returns:
        Value after the given number of years
    """
    return value * (1 + annual_rate / 100) ** years


def project_series(value: float, annual_rate: float, years: int) -> List[float]:
    """Projected values for years 0 through `years` inclusive."""
    return [project_value(value, annual_rate, year) for year in range(years + 1)]


def calculate_appreciation_gain(
    value: float, annual_rate: float, years: float
) -> float:
    """Increase in value over the period."""
    return project_value(value, annual_rate, years) - value
