"""
Financial Calculation Engine

Pure calculation modules for residential real estate investment analysis:
long-term rental, short-term rental and fix-and-flip strategies.
"""

from dealcalc.calculations import (
    amortization,
    appreciation,
    ltr,
    short_term,
    flip,
    waterfall,
    analysis,
)

__all__ = [
    "amortization",
    "appreciation",
    "ltr",
    "short_term",
    "flip",
    "waterfall",
    "analysis",
]
