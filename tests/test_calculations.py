"""
Tests for financial calculation engine.
"""

import math
from dataclasses import replace

import pytest

from dealcalc.calculations.amortization import (
    build_amortization_schedule,
    calculate_monthly_mortgage,
    calculate_schedule_payment,
    calculate_total_interest,
    calculate_total_principal,
    round_currency,
)
from dealcalc.calculations.appreciation import (
    calculate_appreciation_gain,
    project_series,
    project_value,
)
from dealcalc.calculations.flip import calculate_flip
from dealcalc.calculations.ltr import calculate_ltr
from dealcalc.calculations.models import FlipInputs, LTRInputs, PropertyInputs
from dealcalc.calculations.short_term import calculate_str
from dealcalc.calculations.waterfall import (
    OUTCOME_BREAKEVEN,
    OUTCOME_CASH_LEFT_IN,
    OUTCOME_CASH_STILL_NEEDED,
    OUTCOME_CASH_TAKEN_OUT,
    calculate_refinance_waterfall,
)


class TestMonthlyMortgage:
    """Test fixed-rate monthly payment."""

    def test_calculate_payment(self):
        """$150K at 7% for 30 years is about $997.95/month."""
        payment = calculate_monthly_mortgage(150000, 7, 30)
        assert abs(payment - 997.95) < 0.01

    def test_payment_scales_with_principal(self):
        assert calculate_monthly_mortgage(300000, 7, 30) == pytest.approx(
            2 * calculate_monthly_mortgage(150000, 7, 30)
        )

    @pytest.mark.parametrize(
        "principal, rate, years",
        [(0, 7, 30), (-1000, 7, 30), (150000, 0, 30), (150000, -1, 30), (150000, 7, 0)],
    )
    def test_degenerate_inputs_return_zero(self, principal, rate, years):
        assert calculate_monthly_mortgage(principal, rate, years) == 0

    def test_schedule_payment_zero_rate_is_straight_line(self):
        """Zero-rate loan repays principal / (12 * term) each month."""
        assert calculate_schedule_payment(120000, 0, 10) == 1000

    def test_schedule_payment_matches_mortgage_when_rate_positive(self):
        assert calculate_schedule_payment(150000, 7, 30) == calculate_monthly_mortgage(
            150000, 7, 30
        )


class TestAmortizationSchedule:
    """Test the yearly amortization and appreciation projection."""

    def test_schedule_length(self):
        """Schedule has one row per year plus year 0."""
        schedule = build_amortization_schedule(240000, 7, 30)
        assert len(schedule) == 31
        assert [row.year for row in schedule] == list(range(31))

    def test_year_zero_is_initial_state(self):
        schedule = build_amortization_schedule(
            240000,
            7,
            30,
            house_appreciation_rate=3,
            rent_appreciation_rate=2,
            initial_property_value=300000,
            initial_monthly_rent=2200,
        )
        first = schedule[0]
        assert first.principal == 0
        assert first.interest == 0
        assert first.balance == 240000
        assert first.property_value == 300000
        assert first.equity == 60000
        assert first.annual_rent == 26400

    def test_principal_sums_to_loan_amount(self):
        """Total principal repaid equals the loan, final balance is zero."""
        schedule = build_amortization_schedule(240000, 7, 30)
        # Each yearly figure is rounded to the nearest dollar
        assert abs(calculate_total_principal(schedule) - 240000) <= 15
        assert schedule[-1].balance == 0

    def test_balance_never_increases_or_goes_negative(self):
        schedule = build_amortization_schedule(100000, 6, 15)
        balances = [row.balance for row in schedule]
        assert all(b >= 0 for b in balances)
        assert balances == sorted(balances, reverse=True)

    def test_first_year_interest_split(self):
        """Year 1 of a $240K 7% loan is mostly interest."""
        schedule = build_amortization_schedule(240000, 7, 30)
        year_1 = schedule[1]
        assert year_1.interest > year_1.principal
        assert 16500 < year_1.interest < 16900
        payment = calculate_monthly_mortgage(240000, 7, 30)
        assert abs(year_1.principal + year_1.interest - payment * 12) <= 1

    def test_total_interest(self):
        schedule = build_amortization_schedule(240000, 7, 30)
        payment = calculate_monthly_mortgage(240000, 7, 30)
        expected = payment * 360 - 240000
        assert abs(calculate_total_interest(schedule) - expected) <= 15

    def test_zero_rate_loan(self):
        """Zero-rate loan: straight-line principal, no interest."""
        schedule = build_amortization_schedule(120000, 0, 10)
        for row in schedule[1:]:
            assert row.principal == 12000
            assert row.interest == 0
        assert calculate_total_principal(schedule) == 120000
        assert schedule[-1].balance == 0

    def test_appreciation_applied_each_year(self):
        schedule = build_amortization_schedule(
            240000,
            7,
            30,
            house_appreciation_rate=3,
            rent_appreciation_rate=2,
            initial_property_value=300000,
            initial_monthly_rent=2200,
        )
        assert schedule[1].property_value == 309000
        assert schedule[1].annual_rent == 26928
        assert schedule[10].property_value == round_currency(300000 * 1.03 ** 10)

    def test_equity_is_value_less_balance(self):
        schedule = build_amortization_schedule(
            240000, 7, 30, house_appreciation_rate=3, initial_property_value=300000
        )
        for row in schedule[1:]:
            assert abs(row.equity - (row.property_value - row.balance)) <= 1
        assert schedule[-1].equity == schedule[-1].property_value

    def test_no_loan(self):
        """No loan: nothing is paid, equity is the full property value."""
        schedule = build_amortization_schedule(0, 7, 5, initial_property_value=200000)
        assert all(row.principal == 0 and row.interest == 0 for row in schedule)
        assert all(row.equity == 200000 for row in schedule)

    def test_schedule_is_deterministic(self):
        args = (240000, 6.5, 30, 3, 2, 300000, 2200)
        assert build_amortization_schedule(*args) == build_amortization_schedule(*args)


class TestAppreciation:
    """Test appreciation projections."""

    def test_project_value(self):
        assert project_value(300000, 3, 1) == pytest.approx(309000)
        assert project_value(300000, 3, 10) == pytest.approx(300000 * 1.03 ** 10)

    def test_zero_years_is_unchanged(self):
        assert project_value(300000, 5, 0) == 300000

    def test_negative_rate_depreciates(self):
        assert project_value(100000, -10, 1) == pytest.approx(90000)

    def test_project_series(self):
        series = project_series(1000, 10, 2)
        assert series == pytest.approx([1000, 1100, 1210])

    def test_appreciation_gain(self):
        assert calculate_appreciation_gain(200000, 5, 1) == pytest.approx(10000)


class TestLTR:
    """Test long-term rental calculations."""

    def test_monthly_cash_flow(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, ltr_inputs)
        mortgage = calculate_monthly_mortgage(240000, 7, 30)

        # taxes 300 + insurance 150 + vacancy 110 + mgmt 220 + maintenance 110 + other 100
        assert results.monthly_mortgage == pytest.approx(mortgage)
        assert results.monthly_expenses == pytest.approx(mortgage + 990)
        assert results.monthly_cash_flow == pytest.approx(2200 - 990 - mortgage)
        assert results.annual_cash_flow == pytest.approx(results.monthly_cash_flow * 12)

    def test_default_cash_invested(self, property_inputs, ltr_inputs):
        """Down payment + closing + rehab when no override is given."""
        results = calculate_ltr(property_inputs, ltr_inputs)
        assert results.cash_invested == 81000
        assert results.cash_on_cash_return == pytest.approx(
            results.annual_cash_flow / 81000 * 100
        )

    def test_cash_invested_override(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, replace(ltr_inputs, cash_invested=50000))
        assert results.cash_invested == 50000
        assert results.cash_on_cash_return == pytest.approx(
            results.annual_cash_flow / 50000 * 100
        )

    def test_cap_rate_excludes_mortgage(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, ltr_inputs)
        assert results.noi == pytest.approx(26400 - 990 * 12)
        assert results.cap_rate == pytest.approx(14520 / 300000 * 100)

    def test_cap_rate_zero_purchase_price(self, property_inputs, ltr_inputs):
        results = calculate_ltr(replace(property_inputs, purchase_price=0), ltr_inputs)
        assert results.cap_rate == 0

    def test_equity_buildup(self, property_inputs, ltr_inputs):
        """Straight-line paydown of 240000 / 30 = 8000 per year plus appreciation."""
        results = calculate_ltr(property_inputs, ltr_inputs)
        assert results.equity_year_1 == pytest.approx(60000 + 8000 + 9000)
        assert results.equity_year_5 == pytest.approx(
            60000 + 40000 + (300000 * 1.03 ** 5 - 300000)
        )
        assert results.equity_year_10 == pytest.approx(
            60000 + 80000 + (300000 * 1.03 ** 10 - 300000)
        )

    def test_equity_is_straight_line_not_amortized(self, property_inputs, ltr_inputs):
        """Year-10 equity uses straight-line paydown, unlike the amortization schedule."""
        no_growth = replace(ltr_inputs, appreciation_rate=0)
        results = calculate_ltr(property_inputs, no_growth)
        schedule = build_amortization_schedule(
            240000, 7, 30, initial_property_value=300000
        )
        assert results.equity_year_10 == pytest.approx(140000)
        assert schedule[10].equity < results.equity_year_10 - 30000

    def test_cumulative_cash_flow_without_growth(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, replace(ltr_inputs, appreciation_rate=0))
        assert results.cumulative_cash_flow_10_year == pytest.approx(
            results.annual_cash_flow * 10
        )

    def test_cumulative_cash_flow_grows_with_rent(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, ltr_inputs)
        mortgage = results.monthly_mortgage

        expected = 0.0
        for year in range(1, 11):
            rent = 2200 * 12 * 1.03 ** (year - 1)
            expected += rent * 0.8 - 1200 - (mortgage + 450) * 12
        assert results.cumulative_cash_flow_10_year == pytest.approx(expected)

    def test_total_roi_10_year(self, property_inputs, ltr_inputs):
        results = calculate_ltr(property_inputs, ltr_inputs)
        expected = (
            (results.equity_year_10 + results.cumulative_cash_flow_10_year - 81000)
            / 81000
            * 100
        )
        assert results.total_roi_10_year == pytest.approx(expected)

    def test_zero_cash_positive_cash_flow_is_unbounded(self):
        """No cash in and positive cash flow: return is infinite."""
        property = PropertyInputs(
            purchase_price=100000,
            down_payment_percent=100,
            interest_rate=7,
            loan_term_years=30,
            closing_costs=0,
            rehab_costs=0,
            arv=0,
            annual_property_taxes=0,
            annual_insurance=0,
        )
        ltr = LTRInputs(
            monthly_rent=1000,
            vacancy_rate=0,
            property_management_percent=0,
            maintenance_reserve_percent=0,
            other_monthly_expenses=0,
            appreciation_rate=3,
            cash_invested=0,
        )
        results = calculate_ltr(property, ltr)
        assert results.annual_cash_flow > 0
        assert math.isinf(results.cash_on_cash_return)
        assert math.isinf(results.total_roi_10_year)

    def test_zero_cash_no_cash_flow_is_zero(self):
        property = PropertyInputs(
            purchase_price=100000,
            down_payment_percent=20,
            interest_rate=7,
            loan_term_years=30,
            closing_costs=0,
            rehab_costs=0,
            arv=0,
            annual_property_taxes=1200,
            annual_insurance=600,
        )
        ltr = LTRInputs(
            monthly_rent=700,
            vacancy_rate=5,
            property_management_percent=10,
            maintenance_reserve_percent=5,
            other_monthly_expenses=0,
            appreciation_rate=3,
            cash_invested=0,
        )
        results = calculate_ltr(property, ltr)
        assert results.annual_cash_flow <= 0
        assert results.cash_on_cash_return == 0

    def test_zero_loan_term_does_not_raise(self, property_inputs, ltr_inputs):
        results = calculate_ltr(replace(property_inputs, loan_term_years=0), ltr_inputs)
        assert results.monthly_mortgage == 0
        assert results.equity_year_1 == pytest.approx(60000 + 9000)

    def test_idempotent(self, property_inputs, ltr_inputs):
        assert calculate_ltr(property_inputs, ltr_inputs) == calculate_ltr(
            property_inputs, ltr_inputs
        )


class TestSTR:
    """Test short-term rental calculations."""

    def test_gross_income(self, property_inputs, str_inputs):
        """19.5 nights at $150 plus 6.5 stays of cleaning."""
        results = calculate_str(property_inputs, str_inputs)
        assert results.adjusted_nightly_rate == pytest.approx(150)
        assert results.nights_booked_per_month == pytest.approx(19.5)
        assert results.gross_monthly_income == pytest.approx(2925 + 650)
        assert results.annual_revenue == pytest.approx(3575 * 12)

    def test_seasonal_multipliers_are_averaged(self, property_inputs, str_inputs):
        results = calculate_str(
            property_inputs,
            replace(str_inputs, high_season_multiplier=1.5, low_season_multiplier=0.9),
        )
        assert results.adjusted_nightly_rate == pytest.approx(180)

    def test_net_cash_flow(self, property_inputs, str_inputs):
        results = calculate_str(property_inputs, str_inputs)
        mortgage = calculate_monthly_mortgage(240000, 7, 30)
        expenses = mortgage + 300 + 150 + 3575 * 0.20 + 300
        assert results.net_monthly_cash_flow == pytest.approx(3575 - expenses)

    def test_cash_invested_includes_furnishing(self, property_inputs, str_inputs):
        results = calculate_str(property_inputs, str_inputs)
        assert results.total_cash_invested == 96000
        assert results.cash_on_cash_return == pytest.approx(
            results.net_monthly_cash_flow * 12 / 96000 * 100
        )
        assert results.roi_with_furnishing == results.cash_on_cash_return

    def test_break_even_occupancy(self, property_inputs, str_inputs):
        results = calculate_str(property_inputs, str_inputs)
        mortgage = calculate_monthly_mortgage(240000, 7, 30)
        fixed = mortgage + 300 + 150 + 300
        net_per_night = (150 + 100 / 3) * 0.8
        assert results.break_even_occupancy == pytest.approx(fixed / net_per_night / 30 * 100)

    def test_break_even_zero_when_no_net_revenue(self, property_inputs, str_inputs):
        results = calculate_str(
            property_inputs, replace(str_inputs, management_fee_percent=100)
        )
        assert results.break_even_occupancy == 0

    def test_zero_cash_invested_returns_zero(self, str_inputs):
        """Unlike LTR, no cash invested yields 0, not infinity."""
        property = PropertyInputs(
            purchase_price=100000,
            down_payment_percent=0,
            interest_rate=0,
            loan_term_years=30,
            closing_costs=0,
            rehab_costs=0,
            arv=0,
            annual_property_taxes=0,
            annual_insurance=0,
        )
        results = calculate_str(property, replace(str_inputs, furnishing_costs=0))
        assert results.net_monthly_cash_flow > 0
        assert results.cash_on_cash_return == 0

    def test_zero_stay_length_does_not_raise(self, property_inputs, str_inputs):
        results = calculate_str(property_inputs, replace(str_inputs, average_stay_length=0))
        assert results.gross_monthly_income == pytest.approx(2925)


class TestFlip:
    """Test fix-and-flip calculations."""

    @pytest.fixture
    def flip_property(self):
        """$200K purchase, $50K cash (25% down), 7% over 30 years."""
        return PropertyInputs(
            purchase_price=200000,
            down_payment_percent=50000 / 200000 * 100,
            interest_rate=7,
            loan_term_years=30,
            closing_costs=5000,
            rehab_costs=20000,
            arv=280000,
            annual_property_taxes=0,
            annual_insurance=0,
        )

    @pytest.fixture
    def flip_inputs(self):
        return FlipInputs(
            rehab_timeline_months=3,
            monthly_holding_costs=800,
            agent_commission_percent=6,
            selling_closing_costs_percent=2,
        )

    def test_flip_scenario(self, flip_property, flip_inputs):
        results = calculate_flip(flip_property, flip_inputs)
        holding_costs = (800 + calculate_monthly_mortgage(150000, 7, 30)) * 3
        total_investment = 200000 + 5000 + 20000 + holding_costs
        profit = 280000 - 200000 - 20000 - holding_costs - 22400

        assert results.selling_costs == pytest.approx(22400)
        assert results.holding_costs == pytest.approx(holding_costs)
        assert results.total_investment == pytest.approx(total_investment)
        assert results.expected_net_profit == pytest.approx(profit)
        assert results.cash_invested == pytest.approx(75000)
        assert round(results.total_roi, 2) == round(profit / total_investment * 100, 2)
        assert round(results.my_roi, 2) == round(profit / 75000 * 100, 2)

    def test_flip_scenario_values(self, flip_property, flip_inputs):
        """Holding is (800 + 997.95) x 3; profit is about $32,206."""
        results = calculate_flip(flip_property, flip_inputs)
        assert abs(results.holding_costs - 5393.86) < 0.05
        assert abs(results.expected_net_profit - 32206.14) < 0.05
        assert abs(results.my_roi - 42.94) < 0.01

    def test_sale_price_falls_back_to_purchase_price(self, flip_property, flip_inputs):
        results = calculate_flip(replace(flip_property, arv=0), flip_inputs)
        assert results.arv == 200000
        assert results.selling_costs == pytest.approx(16000)

    def test_zero_denominators_return_zero(self, flip_inputs):
        property = PropertyInputs(
            purchase_price=0,
            down_payment_percent=0,
            interest_rate=7,
            loan_term_years=30,
            closing_costs=0,
            rehab_costs=0,
            arv=100000,
            annual_property_taxes=0,
            annual_insurance=0,
        )
        results = calculate_flip(property, replace(flip_inputs, monthly_holding_costs=0))
        assert results.total_investment == 0
        assert results.total_roi == 0
        assert results.my_roi == 0


class TestRefinanceWaterfall:
    """Test refinance proceeds allocation."""

    def test_refinance_short_of_lender_payoff(self):
        result = calculate_refinance_waterfall(100000, 150000, 50000)
        assert result.remaining_after_lender_payoff == -50000
        assert result.cash_still_needed == 50000
        assert result.cash_left_in == 50000
        assert result.cash_taken_out == 0
        assert result.outcome == OUTCOME_CASH_STILL_NEEDED

    def test_full_recovery_with_cash_out(self):
        result = calculate_refinance_waterfall(262500, 150000, 60000)
        assert result.cash_taken_out == 52500
        assert result.cash_left_in == 0
        assert result.cash_still_needed == 0
        assert result.outcome == OUTCOME_CASH_TAKEN_OUT

    def test_partial_recovery(self):
        result = calculate_refinance_waterfall(200000, 150000, 60000)
        assert result.cash_left_in == 10000
        assert result.cash_taken_out == 0
        assert result.cash_still_needed == 0
        assert result.outcome == OUTCOME_CASH_LEFT_IN

    def test_exact_breakeven(self):
        result = calculate_refinance_waterfall(210000, 150000, 60000)
        assert result.cash_left_in == 0
        assert result.cash_taken_out == 0
        assert result.cash_still_needed == 0
        assert result.outcome == OUTCOME_BREAKEVEN

    @pytest.mark.parametrize(
        "refinance_loan, short_term_debt, cash_invested",
        [
            (0, 0, 0),
            (0, 100000, 0),
            (100000, 0, 0),
            (100000, 0, 50000),
            (100000, 100000, 50000),
            (149999, 100000, 50000),
            (150001, 100000, 50000),
            (50000, 100000, 50000),
            (300000, 250000, 75000),
        ],
    )
    def test_outcomes_are_exclusive(self, refinance_loan, short_term_debt, cash_invested):
        result = calculate_refinance_waterfall(refinance_loan, short_term_debt, cash_invested)
        remaining = refinance_loan - short_term_debt

        if result.cash_still_needed > 0:
            assert result.cash_taken_out == 0
            assert result.cash_left_in == cash_invested
        else:
            assert not (result.cash_taken_out > 0 and result.cash_left_in > 0)
            both_zero = result.cash_taken_out == 0 and result.cash_left_in == 0
            assert both_zero == (remaining == cash_invested)
