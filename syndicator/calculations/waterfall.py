"""
Waterfall Distribution Calculations

Splits distributable cash between LP and GP through a three-tier promote
structure.

Operating distributions (each year of the hold):
1. Return of Capital - exit year only, LP outstanding capital
2. Preferred Return - the year's pref on LP equity
3. Profit Split - remainder at the tier 1 (base) split

Exit distribution (sale proceeds):
1. Return of Capital - LP outstanding capital, then GP
2. Pref Catch-up - accrued preferred return not yet paid during the hold
3. Profit Split - remainder at the highest tier whose LP IRR hurdle is cleared
4. Promote - GP share in excess of its pro-rata equity share of the pool
"""

from typing import Optional, Sequence, Tuple
from dataclasses import dataclass

from syndicator.calculations.irr import irr_with_final_value
from syndicator.calculations.models import DealInputs


@dataclass(frozen=True)
class WaterfallTier:
    """Configuration for a single tier in the waterfall."""

    number: int
    irr_hurdle: Optional[float]  # LP IRR % needed to reach this tier, None for the base tier
    lp_split: float  # LP's share at this tier (e.g., 70.0 for 70%)
    gp_split: float  # GP's share at this tier (e.g., 30.0 for 30%)


@dataclass(frozen=True)
class WaterfallStructure:
    """Preferred return plus the base split and two IRR-hurdle tiers."""

    preferred_return: float
    tier1: WaterfallTier
    tier2: WaterfallTier
    tier3: WaterfallTier

    @classmethod
    def from_inputs(cls, inputs: DealInputs) -> "WaterfallStructure":
        return cls(
            preferred_return=inputs.preferred_return,
            tier1=WaterfallTier(1, None, inputs.tier1_lp_split, inputs.tier1_gp_split),
            tier2=WaterfallTier(
                2, inputs.tier2_irr_hurdle, inputs.tier2_lp_split, inputs.tier2_gp_split
            ),
            tier3=WaterfallTier(
                3, inputs.tier3_irr_hurdle, inputs.tier3_lp_split, inputs.tier3_gp_split
            ),
        )

    def annual_preferred(self, lp_equity: float) -> float:
        return lp_equity * (self.preferred_return / 100)


@dataclass(frozen=True)
class OperatingDistribution:
    """LP/GP split of one year's distributable cash."""

    lp_share: float
    gp_share: float
    capital_returned: float
    preferred_paid: float
    residual_split: float


@dataclass(frozen=True)
class ExitDistribution:
    """LP/GP split of net sale proceeds."""

    lp_share: float
    gp_share: float
    lp_capital_returned: float
    gp_capital_returned: float
    preferred_catch_up: float
    tier: int
    lp_split: float
    gp_split: float
    lp_irr: float
    gp_irr: float
    gp_promote: float


def distribute_waterfall(
    available_cash: float,
    lp_equity: float,
    cumulative_lp_distributions: float,
    structure: WaterfallStructure,
    is_exit_year: bool = False,
) -> OperatingDistribution:
    """
    Distribute a single year's cash (net of asset management fee and debt service).

    Args:
        available_cash: Distributable cash for the year
        lp_equity: LP equity invested
        cumulative_lp_distributions: LP distributions paid in prior years
        structure: Waterfall configuration
        is_exit_year: Return outstanding LP capital before paying pref

    Returns:
        OperatingDistribution with the LP/GP shares and their components
    """
    if available_cash <= 0:
        return OperatingDistribution(0.0, 0.0, 0.0, 0.0, 0.0)

    remaining = available_cash

    # === STEP 1: Return of Capital (exit year only) ===
    capital_returned = 0.0
    if is_exit_year:
        outstanding_capital = max(0.0, lp_equity - cumulative_lp_distributions)
        capital_returned = min(remaining, outstanding_capital)
        remaining -= capital_returned

    # === STEP 2: Preferred Return ===
    preferred_paid = min(remaining, structure.annual_preferred(lp_equity))
    remaining -= preferred_paid

    # === STEP 3: Profit Split at the base tier ===
    lp_residual = remaining * (structure.tier1.lp_split / 100)
    gp_residual = remaining * (structure.tier1.gp_split / 100)

    return OperatingDistribution(
        lp_share=capital_returned + preferred_paid + lp_residual,
        gp_share=gp_residual,
        capital_returned=capital_returned,
        preferred_paid=preferred_paid,
        residual_split=remaining,
    )


def select_exit_tier(
    lp_cash_flows: Sequence[float],
    lp_exit_base: float,
    remainder: float,
    structure: WaterfallStructure,
) -> Tuple[WaterfallTier, float]:
    """
    Pick the split tier for the exit remainder.

    Each candidate tier is tested by adding the LP exit share it would produce
    onto the final LP cash flow and solving the LP IRR. Tier 3 is tried first,
    then tier 2; tier 1 applies when neither hurdle is reached.

    Returns:
        The applied tier and the LP IRR (%) computed for it
    """
    for tier in (structure.tier3, structure.tier2):
        candidate = lp_exit_base + remainder * (tier.lp_split / 100)
        lp_irr = irr_with_final_value(lp_cash_flows, candidate)
        if lp_irr >= tier.irr_hurdle:
            return tier, lp_irr

    base_candidate = lp_exit_base + remainder * (structure.tier1.lp_split / 100)
    return structure.tier1, irr_with_final_value(lp_cash_flows, base_candidate)


def calculate_exit_waterfall(
    net_proceeds: float,
    lp_equity: float,
    gp_equity: float,
    cumulative_lp_distributions: float,
    cumulative_gp_distributions: float,
    preferred_paid: float,
    hold_period_years: int,
    lp_cash_flows: Sequence[float],
    gp_cash_flows: Sequence[float],
    structure: WaterfallStructure,
) -> ExitDistribution:
    """
    Distribute net sale proceeds between LP and GP.

    The cash-flow vectors are the pre-exit histories; they are read, never
    modified, so sensitivity scenarios can reuse the same history.

    Args:
        net_proceeds: Sale proceeds available for distribution
        lp_equity: LP equity invested
        gp_equity: GP equity invested
        cumulative_lp_distributions: LP operating distributions over the hold
        cumulative_gp_distributions: GP operating distributions over the hold
        preferred_paid: Preferred return already paid to LP during the hold
        hold_period_years: Years of preferred return accrual
        lp_cash_flows: LP cash flows through the final operating year
        gp_cash_flows: GP cash flows through the final operating year
        structure: Waterfall configuration

    Returns:
        ExitDistribution with each step's allocation, the GP promote and the
        LP/GP IRRs once the exit shares land on the final cash flows
    """
    remaining = max(0.0, net_proceeds)

    # === STEP 1: Return of Capital, LP first ===
    lp_outstanding = max(0.0, lp_equity - cumulative_lp_distributions)
    lp_capital_returned = min(remaining, lp_outstanding)
    remaining -= lp_capital_returned

    gp_outstanding = max(0.0, gp_equity - cumulative_gp_distributions)
    gp_capital_returned = min(remaining, gp_outstanding)
    remaining -= gp_capital_returned

    # === STEP 2: Preferred Return catch-up ===
    preferred_due = structure.annual_preferred(lp_equity) * hold_period_years
    unpaid_preferred = max(0.0, preferred_due - preferred_paid)
    preferred_catch_up = min(remaining, unpaid_preferred)
    remaining -= preferred_catch_up

    lp_share = lp_capital_returned + preferred_catch_up
    gp_share = gp_capital_returned

    # === STEP 3: Profit Split at the tier the LP IRR reaches ===
    tier, lp_irr = select_exit_tier(lp_cash_flows, lp_share, remaining, structure)
    lp_share += remaining * (tier.lp_split / 100)
    gp_share += remaining * (tier.gp_split / 100)

    # === STEP 4: GP Promote ===
    total_equity = lp_equity + gp_equity
    gp_weight = gp_equity / total_equity if total_equity > 0 else 0.0
    gp_promote = max(0.0, gp_share - max(0.0, net_proceeds) * gp_weight)

    return ExitDistribution(
        lp_share=lp_share,
        gp_share=gp_share,
        lp_capital_returned=lp_capital_returned,
        gp_capital_returned=gp_capital_returned,
        preferred_catch_up=preferred_catch_up,
        tier=tier.number,
        lp_split=tier.lp_split,
        gp_split=tier.gp_split,
        lp_irr=lp_irr,
        gp_irr=irr_with_final_value(gp_cash_flows, gp_share),
        gp_promote=gp_promote,
    )
