"""
Tests for financial calculation engine.
"""

import math

import pytest
from datetime import date
from syndicator.calculations.irr import (
    bisection,
    calculate_equity_multiple,
    calculate_irr,
    calculate_npv,
    irr_with_final_value,
    newton_raphson,
)
from syndicator.calculations.amortization import (
    annual_debt_service,
    calculate_dscr,
    generate_amortization_schedule,
    monthly_payment,
    remaining_balance,
)
from syndicator.calculations.cashflow import (
    calculate_escalation_factor,
    project_exit_noi,
    project_operating_year,
)


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Investment of 1000, return of 1100 after 1 year = 10%."""
        assert abs(calculate_irr([-1000, 1100]) - 10.0) < 0.01

    def test_calculate_irr_multi_period(self):
        """Investment of 100, annual returns of 20, capital back at end."""
        irr = calculate_irr([-100, 20, 20, 20, 20, 120])
        assert abs(irr - 20.0) < 0.05

    def test_irr_negative_returns(self):
        """Total return < investment gives a negative IRR."""
        assert calculate_irr([-100, 40, 40, 10]) < 0

    def test_irr_same_sign_is_zero(self):
        assert calculate_irr([100, 200, 300]) == 0
        assert calculate_irr([-100, -200, -300]) == 0
        assert calculate_irr([0, 0, 0]) == 0

    def test_irr_too_few_cash_flows(self):
        assert calculate_irr([-100]) == 0
        assert calculate_irr([]) == 0

    def test_irr_long_deferral(self):
        """A single payoff after nine years: root at 100^(1/9) - 1."""
        cash_flows = [-1, 0, 0, 0, 0, 0, 0, 0, 0, 100]
        expected = (100 ** (1 / 9) - 1) * 100
        assert abs(calculate_irr(cash_flows) - expected) < 0.05

    def test_irr_runaway_rate_returns_estimate(self):
        """A root far above the solver band still yields a finite estimate."""
        irr = calculate_irr([-1, 1000])
        assert math.isfinite(irr)
        assert irr > 0

    def test_irr_bisection_after_slow_newton(self):
        """Newton creeps toward a 400% root a percent per step; bisection finds it."""
        cash_flows = [-1] + [0] * 99 + [5.0 ** 100]
        assert not newton_raphson(cash_flows).converged
        assert calculate_irr(cash_flows) == pytest.approx(400.0, abs=0.05)

    def test_newton_raphson_converges(self):
        attempt = newton_raphson([-100, 110])
        assert attempt.converged
        assert abs(attempt.rate - 0.10) < 1e-4

    def test_bisection_converges(self):
        attempt = bisection([-100, 110])
        assert attempt.converged
        assert abs(attempt.rate - 0.10) < 1e-3

    def test_bisection_without_bracket(self):
        assert not bisection([100, 50]).converged

    def test_irr_with_final_value(self):
        """Candidate exit lands on the final entry without touching the input."""
        cash_flows = [-100, 10]
        irr = irr_with_final_value(cash_flows, 100)
        assert abs(irr - 10.0) < 0.01
        assert cash_flows == [-100, 10]

    def test_calculate_npv(self):
        """NPV should be positive since returns exceed cost."""
        assert calculate_npv([-100, 50, 50, 50], 0.10) > 0
        assert calculate_npv([-100, 110], 0.10) == pytest.approx(0.0, abs=1e-9)

    def test_equity_multiple(self):
        assert calculate_equity_multiple(250, 100) == 2.5
        assert calculate_equity_multiple(250, 0) == 0


class TestAmortization:
    """Test loan amortization calculations."""

    def test_monthly_payment(self):
        """$1M loan at 5% for 30 years is about $5,368/month."""
        payment = monthly_payment(1_000_000, 5, 30)
        assert 5300 < payment < 5500

    def test_monthly_payment_no_principal(self):
        assert monthly_payment(0, 6, 30) == 0
        assert monthly_payment(-100, 6, 30) == 0

    def test_monthly_payment_interest_only(self):
        assert monthly_payment(1_000_000, 6, 30, interest_only=True) == pytest.approx(5000)

    def test_monthly_payment_zero_rate(self):
        assert monthly_payment(360_000, 0, 30) == pytest.approx(1000)

    def test_remaining_balance_at_start(self):
        assert remaining_balance(1_000_000, 6, 30, 0) == pytest.approx(1_000_000)

    def test_remaining_balance_inside_io_window(self):
        balance = remaining_balance(1_000_000, 6, 30, 3, interest_only=True, io_years=3)
        assert balance == 1_000_000

    def test_remaining_balance_after_io_window(self):
        """Amortization starts when the IO window ends."""
        after_io = remaining_balance(1_000_000, 6, 30, 5, interest_only=True, io_years=3)
        straight = remaining_balance(1_000_000, 6, 30, 2)
        assert after_io == pytest.approx(straight)
        assert after_io < 1_000_000

    def test_remaining_balance_fully_amortized(self):
        assert remaining_balance(100_000, 6, 5, 5) == pytest.approx(0, abs=0.01)
        assert remaining_balance(100_000, 6, 5, 10) == 0

    def test_remaining_balance_zero_rate(self):
        assert remaining_balance(360_000, 0, 30, 10) == pytest.approx(240_000)

    def test_annual_debt_service(self):
        io_year = annual_debt_service(1_000_000, 6, 30, 1, interest_only=True, io_years=3)
        amortizing_year = annual_debt_service(1_000_000, 6, 30, 4, interest_only=True, io_years=3)
        assert io_year == pytest.approx(60_000)
        assert amortizing_year == pytest.approx(monthly_payment(1_000_000, 6, 30) * 12)

    def test_no_debt_service_after_payoff(self):
        payment = monthly_payment(100_000, 6, 5)
        assert annual_debt_service(100_000, 6, 5, 5) == pytest.approx(payment * 12, abs=0.01)
        assert annual_debt_service(100_000, 6, 5, 6) == pytest.approx(0, abs=0.01)
        assert annual_debt_service(100_000, 6, 5, 10) == pytest.approx(0, abs=0.01)

    def test_payoff_year_charges_remaining_balance_only(self):
        """A 4.5 year loan retires after six payments in year 5."""
        payment = monthly_payment(100_000, 6, 4.5)
        assert annual_debt_service(100_000, 6, 4.5, 5) == pytest.approx(payment * 6, abs=0.01)

    def test_debt_service_is_interest_plus_principal_drop(self):
        """An 18 month IO window splits year 2 into IO and amortizing months."""
        principal = 100_000
        schedule = generate_amortization_schedule(
            principal=principal,
            annual_rate_percent=6,
            amort_years=5,
            io_years=1.5,
            total_months=120,
        )
        yearly = [
            annual_debt_service(principal, 6, 5, year, interest_only=True, io_years=1.5)
            for year in range(1, 11)
        ]

        assert yearly[0] == pytest.approx(principal * 0.06)
        assert yearly[1] == pytest.approx(
            principal * 0.005 * 6 + monthly_payment(principal, 6, 5) * 6, abs=0.01
        )
        for year, paid in enumerate(yearly, start=1):
            rows = [row for row in schedule if (year - 1) * 12 < row["period"] <= year * 12]
            assert paid == pytest.approx(sum(row["payment"] for row in rows), abs=0.1)

        balance_drop = principal - remaining_balance(
            principal, 6, 5, 10, interest_only=True, io_years=1.5
        )
        total_interest = sum(row["interest"] for row in schedule)
        assert sum(yearly) == pytest.approx(total_interest + balance_drop, abs=1)

    def test_amortization_schedule_length(self):
        schedule = generate_amortization_schedule(
            principal=100_000,
            annual_rate_percent=6,
            amort_years=5,
            io_years=0,
            total_months=60,
            start_date=date(2025, 1, 1),
        )
        assert len(schedule) == 60
        assert schedule[0]["date"] == "2025-01-01"
        assert schedule[12]["date"] == "2026-01-01"

    def test_amortization_io_periods(self):
        """First 24 periods should have 0 principal."""
        schedule = generate_amortization_schedule(
            principal=100_000,
            annual_rate_percent=6,
            amort_years=5,
            io_years=2,
            total_months=36,
        )
        for i in range(24):
            assert schedule[i]["principal"] == 0
        assert schedule[24]["principal"] > 0

    def test_amortization_final_balance(self):
        schedule = generate_amortization_schedule(
            principal=100_000,
            annual_rate_percent=6,
            amort_years=5,
            total_months=60,
        )
        assert abs(schedule[-1]["ending_balance"]) < 1

    def test_schedule_matches_remaining_balance(self):
        schedule = generate_amortization_schedule(
            principal=1_000_000,
            annual_rate_percent=6,
            amort_years=30,
            io_years=2,
            total_months=60,
        )
        expected = remaining_balance(1_000_000, 6, 30, 5, interest_only=True, io_years=2)
        assert abs(schedule[59]["ending_balance"] - expected) < 1

    def test_dscr(self):
        assert calculate_dscr(150, 100) == 1.5
        assert calculate_dscr(100, 0) == 0


class TestCashFlows:
    """Test operating statement projections."""

    def test_escalation_factor(self):
        assert calculate_escalation_factor(3, 1) == 1.0
        assert calculate_escalation_factor(3, 2) == pytest.approx(1.03)
        assert calculate_escalation_factor(3, 3) == pytest.approx(1.0609)

    def test_year_one_noi(self, simple_deal):
        year1 = project_operating_year(simple_deal, 1)
        assert year1.effective_gross_income == pytest.approx(570_000)
        assert year1.operating_expenses == pytest.approx(228_000)
        assert year1.noi == pytest.approx(342_000)

    def test_year_two_growth(self, simple_deal):
        """Revenue grows 3%, expenses 2% off the year 1 base."""
        year2 = project_operating_year(simple_deal, 2)
        assert year2.effective_gross_income == pytest.approx(587_100)
        assert year2.operating_expenses == pytest.approx(232_560)
        assert year2.noi == pytest.approx(354_540)

    def test_vacancy_applies_to_rent_only(self, default_deal):
        year1 = project_operating_year(default_deal, 1)
        assert year1.vacancy_loss == pytest.approx(30_000)
        assert year1.effective_gross_income == pytest.approx(594_000)
        assert year1.operating_expenses == pytest.approx(594_000 * 0.45)

    def test_exit_noi_is_year_after_hold(self, simple_deal):
        exit_noi = project_exit_noi(simple_deal)
        assert exit_noi == pytest.approx(project_operating_year(simple_deal, 6).noi)
        assert exit_noi > project_operating_year(simple_deal, 5).noi
