"""
SQLAlchemy ORM models for saved property analyses.

Only inputs are stored; results are always recomputed.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    Text,
)
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class PropertyAnalysis(AuditMixin, Base):
    """A named analysis: one flat record of numeric input fields."""

    __tablename__ = "property_analyses"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner_id = Column(String, nullable=True, index=True)
    name = Column(String(255))
    property_address = Column(String(255), nullable=False, default="Untitled Property")
    notes = Column(Text)
    app_version = Column(String(20))

    # Property
    purchase_price = Column(Float)
    closing_costs = Column(Float)
    rehab_costs = Column(Float)
    arv = Column(Float)

    # Rehab breakdown
    rehab_roof = Column(Float)
    rehab_paint = Column(Float)
    rehab_floors = Column(Float)
    rehab_cabinets = Column(Float)
    rehab_electrical = Column(Float)
    rehab_plumbing = Column(Float)
    rehab_framing = Column(Float)
    rehab_landscaping = Column(Float)
    rehab_foundation = Column(Float)
    rehab_misc = Column(Float)
    rehab_user_cash = Column(Float)
    rehab_debt = Column(Float)

    # Holding costs
    annual_property_taxes = Column(Float)
    annual_insurance = Column(Float)
    monthly_utilities = Column(Float)
    short_term_months_held = Column(Integer)

    # Financing - cash and short-term debt
    down_payment_amount = Column(Float)
    down_payment_percent = Column(Float)
    short_term_loan_amount = Column(Float)
    short_term_interest_rate = Column(Float)
    short_term_loan_term_months = Column(Integer)
    short_term_points = Column(Float)

    # Financing - refinance
    refinance_ltv = Column(Float)
    interest_rate = Column(Float)
    loan_term_years = Column(Integer)
    refinance_points = Column(Float)

    # Long-term rental
    ltr_monthly_rent = Column(Float)
    ltr_vacancy_rate = Column(Float)
    ltr_property_management_percent = Column(Float)
    ltr_maintenance_reserve_percent = Column(Float)
    ltr_other_monthly_expenses = Column(Float)
    ltr_appreciation_rate = Column(Float)
    ltr_additional_cash_invested = Column(Float)
    rent_appreciation_rate = Column(Float)

    # Short-term rental
    str_average_nightly_rate = Column(Float)
    str_occupancy_rate = Column(Float)
    str_cleaning_fee = Column(Float)
    str_average_stay_length = Column(Float)
    str_high_season_rate_multiplier = Column(Float)
    str_low_season_rate_multiplier = Column(Float)
    str_management_fee_percent = Column(Float)
    str_furnishing_costs = Column(Float)
    str_monthly_operating_expenses = Column(Float)

    # Flip
    flip_rehab_timeline_months = Column(Integer)
    flip_monthly_holding_costs = Column(Float)
    flip_agent_commission_percent = Column(Float)
    flip_selling_closing_costs_percent = Column(Float)
