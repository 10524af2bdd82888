"""
Fix-and-Flip Calculations

Profit and ROI for buying, rehabbing and reselling a property at ARV.
"""

from dealcalc.calculations.amortization import calculate_monthly_mortgage
from dealcalc.calculations.models import PropertyInputs, FlipInputs, FlipResults

# ROI reported when the denominator is zero or negative
ZERO_CASH_RETURN = 0.0


def calculate_sale_price(property: PropertyInputs) -> float:
    """ARV when known, otherwise the purchase price."""
    return property.arv if property.arv > 0 else property.purchase_price


def calculate_flip(property: PropertyInputs, flip: FlipInputs) -> FlipResults:
    """
    Calculate fix-and-flip metrics.

    Two ROI figures are reported:
    - total_roi: profit over the all-in project cost, regardless of funding
    - my_roi: profit over the cash the investor actually put in
    """
    monthly_mortgage = calculate_monthly_mortgage(
        property.loan_amount, property.interest_rate, property.loan_term_years
    )
    holding_costs = (flip.monthly_holding_costs + monthly_mortgage) * flip.rehab_timeline_months

    sale_price = calculate_sale_price(property)
    agent_commission = sale_price * (flip.agent_commission_percent / 100)
    selling_closing_costs = sale_price * (flip.selling_closing_costs_percent / 100)
    selling_costs = agent_commission + selling_closing_costs

    total_investment = (
        property.purchase_price
        + property.closing_costs
        + property.rehab_costs
        + holding_costs
    )

    expected_net_profit = (
        sale_price
        - property.purchase_price
        - property.rehab_costs
        - holding_costs
        - selling_costs
    )

    cash_invested = property.down_payment + property.closing_costs + property.rehab_costs

    if total_investment > 0:
        total_roi = (expected_net_profit / total_investment) * 100
    else:
        total_roi = ZERO_CASH_RETURN

    if cash_invested > 0:
        my_roi = (expected_net_profit / cash_invested) * 100
    else:
        my_roi = ZERO_CASH_RETURN

    return FlipResults(
        arv=sale_price,
        purchase_price=property.purchase_price,
        rehab_costs=property.rehab_costs,
        holding_costs=holding_costs,
        selling_costs=selling_costs,
        total_investment=total_investment,
        expected_net_profit=expected_net_profit,
        cash_invested=cash_invested,
        total_roi=total_roi,
        my_roi=my_roi,
    )
