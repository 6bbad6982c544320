"""
Syndication Deal Analysis

Drives the year-by-year pro forma, the exit sale and its waterfall, and the
exit cap rate sensitivity table for an LP/GP syndication.

calculate_syndication() is a pure function of DealInputs. Distribution
history is carried year to year in an immutable DistributionState, so any
year can be projected from a partial history.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from syndicator.calculations.amortization import (
    annual_debt_service,
    calculate_dscr,
    remaining_balance,
)
from syndicator.calculations.cashflow import project_exit_noi, project_operating_year
from syndicator.calculations.irr import calculate_equity_multiple, calculate_irr
from syndicator.calculations.models import (
    Capitalization,
    DealInputs,
    DealResults,
    SensitivityRow,
    YearlyProjection,
)
from syndicator.calculations.waterfall import (
    ExitDistribution,
    WaterfallStructure,
    calculate_exit_waterfall,
    distribute_waterfall,
)

logger = logging.getLogger(__name__)

# Exit cap rate offsets (percentage points) tested around the base case
SENSITIVITY_OFFSETS = (-1.0, -0.5, 0.0, 0.5, 1.0)


@dataclass(frozen=True)
class DistributionState:
    """Running distribution totals and cash-flow vectors through a given year."""

    cumulative_lp_distributions: float
    cumulative_gp_distributions: float
    preferred_paid: float
    lp_cash_flows: Tuple[float, ...]
    gp_cash_flows: Tuple[float, ...]
    total_noi: float = 0.0
    total_asset_management_fees: float = 0.0
    total_cash_flow_after_debt: float = 0.0


@dataclass(frozen=True)
class ExitValuation:
    """Sale of the property at a given exit cap rate."""

    exit_cap_rate: float
    exit_noi: float
    exit_value: float
    disposition_costs: float
    loan_payoff: float
    net_sale_proceeds: float
    equity_at_sale: float


def calculate_capitalization(inputs: DealInputs) -> Capitalization:
    """Total capitalization, loan amount and the LP/GP equity split."""
    total_capitalization = (
        inputs.purchase_price + inputs.closing_costs + inputs.capex_reserves
    )
    loan_amount = inputs.purchase_price * (inputs.loan_to_value / 100)
    total_equity = total_capitalization - loan_amount

    return Capitalization(
        total_capitalization=total_capitalization,
        loan_amount=loan_amount,
        total_equity=total_equity,
        lp_equity=total_equity * (inputs.lp_equity_percent / 100),
        gp_equity=total_equity * (inputs.gp_equity_percent / 100),
    )


def calculate_acquisition_fee(inputs: DealInputs) -> float:
    """One-time GP fee at closing, on the purchase price."""
    return inputs.purchase_price * (inputs.acquisition_fee_percent / 100)


def initial_state(capitalization: Capitalization, acquisition_fee: float) -> DistributionState:
    """
    Year 0 state: both parties have funded their equity.

    The GP's acquisition fee is paid at closing and nets against its
    contribution.
    """
    return DistributionState(
        cumulative_lp_distributions=0.0,
        cumulative_gp_distributions=0.0,
        preferred_paid=0.0,
        lp_cash_flows=(-capitalization.lp_equity,),
        gp_cash_flows=(-capitalization.gp_equity + acquisition_fee,),
    )


def project_year(
    inputs: DealInputs,
    capitalization: Capitalization,
    structure: WaterfallStructure,
    state: DistributionState,
    year: int,
) -> Tuple[YearlyProjection, DistributionState]:
    """
    Project one hold year and distribute its cash.

    Args:
        inputs: Deal inputs
        capitalization: Sources and uses at closing
        structure: Waterfall configuration
        state: Distribution history through the prior year
        year: Hold year, 1-based

    Returns:
        The year's projection row and the state carried into the next year
    """
    operations = project_operating_year(inputs, year)
    noi = operations.noi

    debt_service = annual_debt_service(
        capitalization.loan_amount,
        inputs.interest_rate,
        inputs.amortization_years,
        year,
        interest_only=inputs.interest_only,
        io_years=inputs.interest_only_years,
    )

    asset_management_fee = capitalization.total_equity * (
        inputs.asset_management_fee_percent / 100
    )
    cash_flow_before_debt = noi - asset_management_fee
    cash_flow_after_debt = cash_flow_before_debt - debt_service

    distribution = distribute_waterfall(
        max(0.0, cash_flow_after_debt),
        capitalization.lp_equity,
        state.cumulative_lp_distributions,
        structure,
    )
    lp_distribution = distribution.lp_share
    # Asset management fee is paid to the GP whether or not the deal distributes
    gp_distribution = distribution.gp_share + asset_management_fee

    cumulative_lp = state.cumulative_lp_distributions + lp_distribution
    cumulative_gp = state.cumulative_gp_distributions + gp_distribution

    projection = YearlyProjection(
        year=year,
        gross_potential_rent=operations.gross_potential_rent,
        vacancy_loss=operations.vacancy_loss,
        other_income=operations.other_income,
        effective_gross_income=operations.effective_gross_income,
        operating_expenses=operations.operating_expenses,
        noi=noi,
        asset_management_fee=asset_management_fee,
        cash_flow_before_debt=cash_flow_before_debt,
        debt_service=debt_service,
        cash_flow_after_debt=cash_flow_after_debt,
        dscr=calculate_dscr(noi, debt_service),
        preferred_return_paid=distribution.preferred_paid,
        lp_distribution=lp_distribution,
        gp_distribution=gp_distribution,
        cumulative_lp_distributions=cumulative_lp,
        cumulative_gp_distributions=cumulative_gp,
    )

    next_state = DistributionState(
        cumulative_lp_distributions=cumulative_lp,
        cumulative_gp_distributions=cumulative_gp,
        preferred_paid=state.preferred_paid + distribution.preferred_paid,
        lp_cash_flows=state.lp_cash_flows + (lp_distribution,),
        gp_cash_flows=state.gp_cash_flows + (gp_distribution,),
        total_noi=state.total_noi + noi,
        total_asset_management_fees=(
            state.total_asset_management_fees + asset_management_fee
        ),
        total_cash_flow_after_debt=(
            state.total_cash_flow_after_debt + cash_flow_after_debt
        ),
    )

    return projection, next_state


def project_hold(
    inputs: DealInputs,
    capitalization: Capitalization,
    structure: WaterfallStructure,
    state: DistributionState,
) -> Tuple[List[YearlyProjection], DistributionState]:
    """Fold project_year over every year of the hold."""
    projections = []
    for year in range(1, inputs.hold_period_years + 1):
        projection, state = project_year(inputs, capitalization, structure, state, year)
        projections.append(projection)
    return projections, state


def value_exit(
    inputs: DealInputs,
    capitalization: Capitalization,
    exit_noi: float,
    exit_cap_rate: float,
) -> ExitValuation:
    """
    Value the sale at an exit cap rate and settle the loan.

    Args:
        inputs: Deal inputs
        capitalization: Sources and uses at closing
        exit_noi: Forward NOI at sale
        exit_cap_rate: Exit cap rate as percent

    Returns:
        ExitValuation with sale price, costs, loan payoff and net proceeds
    """
    exit_value = exit_noi / (exit_cap_rate / 100) if exit_cap_rate > 0 else 0.0
    disposition_costs = exit_value * (inputs.disposition_fee_percent / 100)
    loan_payoff = remaining_balance(
        capitalization.loan_amount,
        inputs.interest_rate,
        inputs.amortization_years,
        inputs.hold_period_years,
        interest_only=inputs.interest_only,
        io_years=inputs.interest_only_years,
    )

    return ExitValuation(
        exit_cap_rate=exit_cap_rate,
        exit_noi=exit_noi,
        exit_value=exit_value,
        disposition_costs=disposition_costs,
        loan_payoff=loan_payoff,
        net_sale_proceeds=exit_value - disposition_costs - loan_payoff,
        equity_at_sale=exit_value - loan_payoff,
    )


def distribute_exit(
    inputs: DealInputs,
    capitalization: Capitalization,
    structure: WaterfallStructure,
    state: DistributionState,
    valuation: ExitValuation,
) -> ExitDistribution:
    """Run the exit waterfall over net sale proceeds using the pre-exit history."""
    return calculate_exit_waterfall(
        max(0.0, valuation.net_sale_proceeds),
        capitalization.lp_equity,
        capitalization.gp_equity,
        state.cumulative_lp_distributions,
        state.cumulative_gp_distributions,
        state.preferred_paid,
        inputs.hold_period_years,
        state.lp_cash_flows,
        state.gp_cash_flows,
        structure,
    )


def with_exit_proceeds(cash_flows: Tuple[float, ...], exit_share: float) -> Tuple[float, ...]:
    """Exit proceeds land in the final operating year, not a year of their own."""
    return cash_flows[:-1] + (cash_flows[-1] + exit_share,)


def sensitivity_cap_rates(base_cap_rate: float) -> List[float]:
    """Exit cap rates tested around the base case, non-positive rates dropped."""
    candidates = [round(base_cap_rate + offset, 4) for offset in SENSITIVITY_OFFSETS]
    return [rate for rate in candidates if rate > 0]


def build_sensitivity_table(
    inputs: DealInputs,
    capitalization: Capitalization,
    structure: WaterfallStructure,
    state: DistributionState,
    exit_noi: float,
) -> List[SensitivityRow]:
    """
    Re-run the exit at each tested cap rate.

    Every scenario starts from the same pre-exit state; operating years are
    unaffected by the exit cap rate, so only the sale is recomputed.
    """
    rows = []
    for exit_cap_rate in sensitivity_cap_rates(inputs.exit_cap_rate):
        valuation = value_exit(inputs, capitalization, exit_noi, exit_cap_rate)
        exit_distribution = distribute_exit(
            inputs, capitalization, structure, state, valuation
        )
        rows.append(
            SensitivityRow(
                exit_cap_rate=exit_cap_rate,
                exit_value=valuation.exit_value,
                net_sale_proceeds=valuation.net_sale_proceeds,
                lp_irr=exit_distribution.lp_irr,
                lp_equity_multiple=calculate_equity_multiple(
                    state.cumulative_lp_distributions + exit_distribution.lp_share,
                    capitalization.lp_equity,
                ),
                gp_irr=exit_distribution.gp_irr,
                gp_equity_multiple=calculate_equity_multiple(
                    state.cumulative_gp_distributions + exit_distribution.gp_share,
                    capitalization.gp_equity,
                ),
            )
        )
    return rows


def calculate_syndication(inputs: DealInputs) -> DealResults:
    """
    Analyze a syndication deal.

    Args:
        inputs: Validated deal inputs

    Returns:
        DealResults with the pro forma, exit, LP/GP returns and sensitivity table
    """
    capitalization = calculate_capitalization(inputs)
    structure = WaterfallStructure.from_inputs(inputs)
    acquisition_fee = calculate_acquisition_fee(inputs)

    # === OPERATING YEARS ===
    projections, state = project_hold(
        inputs, capitalization, structure, initial_state(capitalization, acquisition_fee)
    )

    # === EXIT ===
    exit_noi = project_exit_noi(inputs)
    valuation = value_exit(inputs, capitalization, exit_noi, inputs.exit_cap_rate)
    exit_distribution = distribute_exit(inputs, capitalization, structure, state, valuation)

    lp_cash_flows = with_exit_proceeds(state.lp_cash_flows, exit_distribution.lp_share)
    gp_cash_flows = with_exit_proceeds(state.gp_cash_flows, exit_distribution.gp_share)

    # === RETURNS ===
    lp_total_distributions = state.cumulative_lp_distributions + exit_distribution.lp_share
    gp_total_distributions = state.cumulative_gp_distributions + exit_distribution.gp_share
    lp_irr = calculate_irr(lp_cash_flows)
    gp_irr = calculate_irr(gp_cash_flows)

    year1_noi = projections[0].noi if projections else 0.0
    going_in_cap_rate = (
        year1_noi / inputs.purchase_price * 100 if inputs.purchase_price > 0 else 0.0
    )
    average_cash_flow = (
        state.total_cash_flow_after_debt / len(projections) if projections else 0.0
    )
    average_cash_on_cash = (
        average_cash_flow / capitalization.total_equity * 100
        if capitalization.total_equity > 0
        else 0.0
    )

    sensitivity = build_sensitivity_table(
        inputs, capitalization, structure, state, exit_noi
    )

    logger.debug(
        "Syndication analyzed: hold=%d years, exit tier %d, LP IRR %.2f%%, GP IRR %.2f%%",
        inputs.hold_period_years,
        exit_distribution.tier,
        lp_irr,
        gp_irr,
    )

    return DealResults(
        total_capitalization=capitalization.total_capitalization,
        total_equity=capitalization.total_equity,
        lp_equity=capitalization.lp_equity,
        gp_equity=capitalization.gp_equity,
        loan_amount=capitalization.loan_amount,
        acquisition_fee=acquisition_fee,
        total_asset_management_fees=state.total_asset_management_fees,
        yearly_projections=tuple(projections),
        total_noi_over_hold=state.total_noi,
        exit_noi=valuation.exit_noi,
        exit_value=valuation.exit_value,
        disposition_costs=valuation.disposition_costs,
        loan_payoff=valuation.loan_payoff,
        net_sale_proceeds=valuation.net_sale_proceeds,
        equity_at_sale=valuation.equity_at_sale,
        lp_total_distributions=lp_total_distributions,
        lp_equity_multiple=calculate_equity_multiple(
            lp_total_distributions, capitalization.lp_equity
        ),
        lp_irr=lp_irr,
        lp_preferred_return_total=state.preferred_paid + exit_distribution.preferred_catch_up,
        lp_cash_flow_distributions=state.cumulative_lp_distributions,
        lp_sale_proceeds_distribution=exit_distribution.lp_share,
        lp_cash_flows=lp_cash_flows,
        gp_total_distributions=gp_total_distributions,
        gp_equity_multiple=calculate_equity_multiple(
            gp_total_distributions, capitalization.gp_equity
        ),
        gp_irr=gp_irr,
        gp_promote=exit_distribution.gp_promote,
        gp_acquisition_fee=acquisition_fee,
        gp_asset_management_fees=state.total_asset_management_fees,
        gp_cash_flow_distributions=(
            state.cumulative_gp_distributions - state.total_asset_management_fees
        ),
        gp_sale_proceeds_distribution=exit_distribution.gp_share,
        gp_cash_flows=gp_cash_flows,
        exit_tier=exit_distribution.tier,
        going_in_cap_rate=going_in_cap_rate,
        average_cash_on_cash=average_cash_on_cash,
        total_profit_over_hold=(
            lp_total_distributions + gp_total_distributions - capitalization.total_equity
        ),
        sensitivity_analysis=tuple(sensitivity),
    )
