"""
Loan Amortization Calculations

Implements loan payment, remaining balance and amortization schedule
calculations for standard and interest-only acquisition loans.

Rates are passed as annual percentages (e.g., 6.5 for 6.5%).
"""

from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta


def monthly_payment(
    principal: float,
    annual_rate_percent: float,
    years: float,
    interest_only: bool = False,
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function for amortizing loans.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percent (e.g., 6.0 for 6%)
        years: Amortization period in years
        interest_only: If True, returns the interest-only payment

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0

    monthly_rate = annual_rate_percent / 100 / 12

    if interest_only:
        return principal * monthly_rate

    months = years * 12
    if monthly_rate == 0:
        return principal / months if months > 0 else 0.0
    if months <= 0:
        return 0.0

    payment = (
        principal
        * monthly_rate
        * ((1 + monthly_rate) ** months)
        / (((1 + monthly_rate) ** months) - 1)
    )

    return payment


def _io_months(interest_only: bool, io_years: float) -> int:
    return int(round(io_years * 12)) if interest_only else 0


def remaining_balance(
    principal: float,
    annual_rate_percent: float,
    amort_years: float,
    years_elapsed: float,
    interest_only: bool = False,
    io_years: float = 0,
) -> float:
    """
    Calculate outstanding loan balance after a number of years.

    During the interest-only window the balance stays at the original
    principal. Amortization starts when the window ends, so only the
    post-IO elapsed time reduces the balance. The window is counted in whole
    months, as in generate_amortization_schedule().
    """
    if principal <= 0:
        return 0.0

    io_months = _io_months(interest_only, io_years)
    months_elapsed = years_elapsed * 12
    if months_elapsed <= io_months:
        return principal

    months_amortized = months_elapsed - io_months
    monthly_rate = annual_rate_percent / 100 / 12
    payment = monthly_payment(principal, annual_rate_percent, amort_years)

    if monthly_rate == 0:
        return max(0.0, principal - payment * months_amortized)

    balance = principal * ((1 + monthly_rate) ** months_amortized) - payment * (
        ((1 + monthly_rate) ** months_amortized - 1) / monthly_rate
    )

    return max(0.0, balance)


def annual_debt_service(
    principal: float,
    annual_rate_percent: float,
    amort_years: float,
    year: int,
    interest_only: bool = False,
    io_years: float = 0,
) -> float:
    """
    Debt service paid during a hold year (1-based).

    Walks the year's twelve months from the balance outstanding at the start
    of the year: interest only inside the IO window, the amortizing payment
    after it. The payoff month charges only the remaining balance plus
    interest, and nothing is owed once the loan is retired, so debt service
    paid always equals interest plus the drop in remaining_balance().
    """
    balance = remaining_balance(
        principal,
        annual_rate_percent,
        amort_years,
        year - 1,
        interest_only=interest_only,
        io_years=io_years,
    )
    monthly_rate = annual_rate_percent / 100 / 12
    io_months = _io_months(interest_only, io_years)
    amortizing_payment = monthly_payment(principal, annual_rate_percent, amort_years)

    total = 0.0
    for month in range((year - 1) * 12 + 1, year * 12 + 1):
        if balance <= 0:
            break

        interest = balance * monthly_rate
        if month <= io_months:
            total += interest
            continue

        principal_pmt = min(amortizing_payment - interest, balance)
        total += interest + principal_pmt
        balance -= principal_pmt

    return total


def generate_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    amort_years: float,
    io_years: float = 0,
    total_months: int = 120,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a full monthly amortization schedule.

    The amortizing payment is fixed once the IO window ends, so the ending
    balance of every twelfth row agrees with remaining_balance().

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percent
        amort_years: Amortization period in years
        io_years: Interest-only period in years
        total_months: Number of months to schedule
        start_date: Date of first payment

    Returns:
        List of amortization rows
    """
    schedule = []
    balance = principal
    monthly_rate = annual_rate_percent / 100 / 12
    io_months = int(round(io_years * 12))
    amortizing_payment = monthly_payment(principal, annual_rate_percent, amort_years)

    if start_date is None:
        start_date = date.today()

    for period in range(1, total_months + 1):
        if balance <= 0:
            break

        period_date = start_date + relativedelta(months=period - 1)
        interest = balance * monthly_rate

        if period <= io_months:
            principal_pmt = 0.0
            payment = interest
        else:
            principal_pmt = min(amortizing_payment - interest, balance)
            payment = principal_pmt + interest

        ending_balance = max(0.0, balance - principal_pmt)

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(ending_balance, 2),
            }
        )

        balance = ending_balance

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the scheduled months."""
    return sum(row["interest"] for row in schedule)


def calculate_dscr(noi: float, debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Returns 0 for an unlevered year rather than an infinite ratio.
    """
    if debt_service <= 0:
        return 0.0
    return noi / debt_service
