"""
Cash Flow Calculations

Generates annual operating statements for a stabilized multifamily asset.

Rent and other income compound at the rent growth rate; operating expenses
are set as a ratio of year 1 effective gross income and compound at the
expense growth rate from there.
"""

from dataclasses import dataclass

from syndicator.calculations.models import DealInputs


@dataclass(frozen=True)
class OperatingStatement:
    """Annual operating statement for one year of the hold."""

    year: int
    gross_potential_rent: float
    vacancy_loss: float
    other_income: float
    effective_gross_income: float
    operating_expenses: float
    noi: float


def calculate_escalation_factor(annual_rate_percent: float, year: int) -> float:
    """
    Calculate escalation factor for a hold year.

    Year 1 is the base year (factor 1.0); each later year steps up once.

    Args:
        annual_rate_percent: Annual escalation rate as percent (e.g., 3.0)
        year: Hold year, 1-based
    """
    return (1 + annual_rate_percent / 100) ** (year - 1)


def base_operating_expenses(inputs: DealInputs) -> float:
    """Year 1 operating expenses: the expense ratio applied to year 1 EGI."""
    vacancy_loss = inputs.gross_potential_rent * (inputs.vacancy_rate / 100)
    effective_gross_income = (
        inputs.gross_potential_rent - vacancy_loss + inputs.other_income
    )
    return effective_gross_income * (inputs.operating_expense_ratio / 100)


def project_operating_year(inputs: DealInputs, year: int) -> OperatingStatement:
    """
    Project the operating statement for a hold year.

    Args:
        inputs: Deal inputs
        year: Hold year, 1-based; the year after the hold gives the exit NOI

    Returns:
        OperatingStatement for the year
    """
    rent_escalation = calculate_escalation_factor(inputs.rent_growth_rate, year)
    expense_escalation = calculate_escalation_factor(inputs.expense_growth_rate, year)

    # === REVENUE ===
    gross_potential_rent = inputs.gross_potential_rent * rent_escalation
    vacancy_loss = gross_potential_rent * (inputs.vacancy_rate / 100)
    other_income = inputs.other_income * rent_escalation
    effective_gross_income = gross_potential_rent - vacancy_loss + other_income

    # === EXPENSES ===
    operating_expenses = base_operating_expenses(inputs) * expense_escalation

    return OperatingStatement(
        year=year,
        gross_potential_rent=gross_potential_rent,
        vacancy_loss=vacancy_loss,
        other_income=other_income,
        effective_gross_income=effective_gross_income,
        operating_expenses=operating_expenses,
        noi=effective_gross_income - operating_expenses,
    )


def project_exit_noi(inputs: DealInputs) -> float:
    """Forward NOI used for exit valuation: one year past the end of the hold."""
    return project_operating_year(inputs, inputs.hold_period_years + 1).noi
