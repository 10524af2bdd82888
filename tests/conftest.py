"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dealcalc.main import app
from dealcalc.db.database import create_db_engine, get_db, init_db
from dealcalc.db.models import Base, PropertyAnalysis  # noqa: F401
from dealcalc.calculations.analysis import AnalysisInputs
from dealcalc.calculations.models import (
    FinancingInputs,
    FlipInputs,
    HoldingCosts,
    LTRInputs,
    PropertyInputs,
    RehabBreakdown,
    STRInputs,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_db_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    init_db(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def property_inputs():
    """$300K rental bought with 20% down at 7% over 30 years."""
    return PropertyInputs(
        purchase_price=300000,
        down_payment_percent=20,
        interest_rate=7,
        loan_term_years=30,
        closing_costs=6000,
        rehab_costs=15000,
        arv=350000,
        annual_property_taxes=3600,
        annual_insurance=1800,
    )


@pytest.fixture
def ltr_inputs():
    return LTRInputs(
        monthly_rent=2200,
        vacancy_rate=5,
        property_management_percent=10,
        maintenance_reserve_percent=5,
        other_monthly_expenses=100,
        appreciation_rate=3,
    )


@pytest.fixture
def str_inputs():
    return STRInputs(
        average_nightly_rate=150,
        occupancy_rate=65,
        cleaning_fee=100,
        average_stay_length=3,
        high_season_multiplier=1.3,
        low_season_multiplier=0.7,
        management_fee_percent=20,
        furnishing_costs=15000,
        monthly_operating_expenses=300,
    )


@pytest.fixture
def analysis_inputs(ltr_inputs, str_inputs):
    """Default analysis snapshot with a populated rehab breakdown."""
    return AnalysisInputs(
        address="123 Maple St",
        purchase_price=300000,
        closing_costs=6000,
        rehab_costs=15000,
        arv=350000,
        rehab=RehabBreakdown(
            roof=8000,
            paint=3000,
            floors=5000,
            misc=4000,
            user_cash_for_rehab=10000,
            debt_for_rehab=10000,
        ),
        holding=HoldingCosts(
            annual_property_taxes=3600,
            annual_insurance=1800,
            monthly_utilities=200,
            short_term_months_held=6,
        ),
        financing=FinancingInputs(
            cash_amount=60000,
            short_term_loan_amount=240000,
            short_term_interest_rate=12,
            short_term_loan_term_months=12,
            short_term_points=2,
            refinance_ltv=75,
            refinance_interest_rate=7,
            refinance_loan_term_years=30,
            refinance_points=1,
        ),
        ltr=ltr_inputs,
        str_inputs=str_inputs,
        flip=FlipInputs(
            rehab_timeline_months=3,
            monthly_holding_costs=800,
            agent_commission_percent=6,
            selling_closing_costs_percent=2,
        ),
        additional_cash_invested=0,
        rent_appreciation_rate=2,
    )
