"""
Plain-data records for the syndication engine.

Inputs and results are frozen dataclasses: no behavior beyond derived
properties, safe to share between calls and to serialize with asdict().
All rates are percentages (e.g., 8.0 for an 8% preferred return).
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DealInputs:
    """Validated inputs for a syndication deal."""

    # Project capitalization
    purchase_price: float
    closing_costs: float
    capex_reserves: float

    # Debt
    loan_to_value: float
    interest_rate: float
    amortization_years: float
    interest_only: bool
    interest_only_years: float

    # Property operations (year 1)
    gross_potential_rent: float
    vacancy_rate: float
    other_income: float
    operating_expense_ratio: float

    # Growth and hold
    rent_growth_rate: float
    expense_growth_rate: float
    hold_period_years: int

    # Exit
    exit_cap_rate: float
    disposition_fee_percent: float

    # Fees
    acquisition_fee_percent: float
    asset_management_fee_percent: float

    # Equity structure
    lp_equity_percent: float
    gp_equity_percent: float
    preferred_return: float

    # Waterfall tiers (tier 1 is the base split and has no hurdle)
    tier1_lp_split: float
    tier1_gp_split: float
    tier2_irr_hurdle: float
    tier2_lp_split: float
    tier2_gp_split: float
    tier3_irr_hurdle: float
    tier3_lp_split: float
    tier3_gp_split: float

    # Informational; the balloon is settled at the end of the hold
    loan_term_years: float = 10


@dataclass(frozen=True)
class Capitalization:
    """Sources and uses at closing."""

    total_capitalization: float
    loan_amount: float
    total_equity: float
    lp_equity: float
    gp_equity: float


@dataclass(frozen=True)
class YearlyProjection:
    """One year of the hold: operations, debt and distributions."""

    year: int
    gross_potential_rent: float
    vacancy_loss: float
    other_income: float
    effective_gross_income: float
    operating_expenses: float
    noi: float
    asset_management_fee: float
    cash_flow_before_debt: float
    debt_service: float
    cash_flow_after_debt: float
    dscr: float
    preferred_return_paid: float
    lp_distribution: float
    gp_distribution: float
    cumulative_lp_distributions: float
    cumulative_gp_distributions: float


@dataclass(frozen=True)
class SensitivityRow:
    """Returns at one tested exit cap rate."""

    exit_cap_rate: float
    exit_value: float
    net_sale_proceeds: float
    lp_irr: float
    lp_equity_multiple: float
    gp_irr: float
    gp_equity_multiple: float


@dataclass(frozen=True)
class DealResults:
    """Full output of a syndication analysis."""

    # Capitalization summary
    total_capitalization: float
    total_equity: float
    lp_equity: float
    gp_equity: float
    loan_amount: float

    # Fee summary
    acquisition_fee: float
    total_asset_management_fees: float

    # Operating projections
    yearly_projections: Tuple[YearlyProjection, ...]
    total_noi_over_hold: float

    # Exit analysis
    exit_noi: float
    exit_value: float
    disposition_costs: float
    loan_payoff: float
    net_sale_proceeds: float
    equity_at_sale: float

    # LP returns
    lp_total_distributions: float
    lp_equity_multiple: float
    lp_irr: float
    lp_preferred_return_total: float
    lp_cash_flow_distributions: float
    lp_sale_proceeds_distribution: float
    lp_cash_flows: Tuple[float, ...]

    # GP returns
    gp_total_distributions: float
    gp_equity_multiple: float
    gp_irr: float
    gp_promote: float
    gp_acquisition_fee: float
    gp_asset_management_fees: float
    gp_cash_flow_distributions: float
    gp_sale_proceeds_distribution: float
    gp_cash_flows: Tuple[float, ...]
    exit_tier: int

    # Deal metrics
    going_in_cap_rate: float
    average_cash_on_cash: float
    total_profit_over_hold: float

    sensitivity_analysis: Tuple[SensitivityRow, ...]
