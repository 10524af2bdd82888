"""
Seed the database with a demo BRRRR-style analysis.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dealcalc.calculations.analysis import run_analysis
from dealcalc.calculations.formatting import (
    format_compact_currency,
    format_currency,
    format_percent,
)
from dealcalc.db.database import get_db_context, init_db
from dealcalc.db.models import PropertyAnalysis
from dealcalc.services import analysis_store

DEMO_NAME = "Demo Duplex"

DEMO_FIELDS = {
    "name": DEMO_NAME,
    "property_address": "123 Maple St",
    "purchase_price": 200000,
    "closing_costs": 5000,
    "arv": 280000,
    # Rehab breakdown
    "rehab_roof": 8000,
    "rehab_paint": 3000,
    "rehab_floors": 4500,
    "rehab_plumbing": 2500,
    "rehab_misc": 2000,
    "rehab_user_cash": 10000,
    "rehab_debt": 10000,
    # Financing
    "down_payment_amount": 50000,
    "short_term_loan_amount": 150000,
    "short_term_interest_rate": 11,
    "short_term_points": 2,
    "refinance_ltv": 75,
    "interest_rate": 7,
    "loan_term_years": 30,
    # Rental
    "ltr_monthly_rent": 2400,
}


def main():
    init_db()

    with get_db_context() as db:
        existing = db.query(PropertyAnalysis).filter(PropertyAnalysis.name == DEMO_NAME).first()
        if existing:
            print(f"Analysis '{DEMO_NAME}' already exists (ID: {existing.id})")
            return

        record = analysis_store.create_analysis(db, DEMO_FIELDS)
        print(f"Created analysis: {record.name} (ID: {record.id})")

        results = run_analysis(analysis_store.record_to_inputs(record))
        waterfall = results.project_costs.waterfall
        print(f"  Total project cost: {format_currency(results.project_costs.total_project_cost)}")
        print(f"  LTR cash-on-cash:   {format_percent(results.ltr.cash_on_cash_return)}")
        print(f"  Flip ROI:           {format_percent(results.flip.my_roi)}")
        print(f"  Refinance outcome:  {waterfall.outcome}")

        final_year = results.amortization[-1]
        print(
            f"  Equity in year {final_year.year}: "
            f"{format_compact_currency(final_year.equity)}"
        )


if __name__ == "__main__":
    main()
