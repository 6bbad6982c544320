"""
Default deal, waterfall presets and return benchmarks.
"""

from dataclasses import replace
from typing import Dict

from syndicator.calculations.models import DealInputs

# Typical multifamily syndication
DEFAULT_DEAL = DealInputs(
    # Project capitalization
    purchase_price=5_000_000,
    closing_costs=100_000,
    capex_reserves=150_000,
    # Debt
    loan_to_value=65,
    interest_rate=6.5,
    amortization_years=30,
    interest_only=True,
    interest_only_years=3,
    loan_term_years=10,
    # Property operations (year 1)
    gross_potential_rent=600_000,
    vacancy_rate=5,
    other_income=24_000,
    operating_expense_ratio=45,
    # Growth and hold
    rent_growth_rate=3,
    expense_growth_rate=2,
    hold_period_years=5,
    # Exit
    exit_cap_rate=6.0,
    disposition_fee_percent=2,
    # Fees
    acquisition_fee_percent=2,
    asset_management_fee_percent=2,
    # Equity structure
    lp_equity_percent=90,
    gp_equity_percent=10,
    preferred_return=8,
    # Waterfall tiers
    tier1_lp_split=70,
    tier1_gp_split=30,
    tier2_irr_hurdle=12,
    tier2_lp_split=60,
    tier2_gp_split=40,
    tier3_irr_hurdle=18,
    tier3_lp_split=50,
    tier3_gp_split=50,
)

WATERFALL_PRESETS: Dict[str, Dict] = {
    "conservative": {
        "name": "Conservative (LP Favorable)",
        "tier1_lp_split": 80,
        "tier1_gp_split": 20,
        "tier2_irr_hurdle": 15,
        "tier2_lp_split": 70,
        "tier2_gp_split": 30,
        "tier3_irr_hurdle": 20,
        "tier3_lp_split": 60,
        "tier3_gp_split": 40,
    },
    "standard": {
        "name": "Standard",
        "tier1_lp_split": 70,
        "tier1_gp_split": 30,
        "tier2_irr_hurdle": 12,
        "tier2_lp_split": 60,
        "tier2_gp_split": 40,
        "tier3_irr_hurdle": 18,
        "tier3_lp_split": 50,
        "tier3_gp_split": 50,
    },
    "aggressive": {
        "name": "Aggressive (GP Favorable)",
        "tier1_lp_split": 60,
        "tier1_gp_split": 40,
        "tier2_irr_hurdle": 10,
        "tier2_lp_split": 50,
        "tier2_gp_split": 50,
        "tier3_irr_hurdle": 15,
        "tier3_lp_split": 40,
        "tier3_gp_split": 60,
    },
}

# Lower bound (%) of each rating band for syndication IRRs
IRR_BENCHMARKS = {
    "poor": 8,
    "acceptable": 12,
    "good": 15,
    "excellent": 20,
}

EQUITY_MULTIPLE_BENCHMARKS = {
    "poor": 1.5,
    "acceptable": 1.75,
    "good": 2.0,
    "excellent": 2.5,
}


def apply_waterfall_preset(inputs: DealInputs, preset_name: str) -> DealInputs:
    """
    Return a copy of inputs with a named preset's tier structure.

    Raises:
        KeyError: If the preset name is unknown
    """
    preset = WATERFALL_PRESETS[preset_name]
    tiers = {key: value for key, value in preset.items() if key != "name"}
    return replace(inputs, **tiers)


def _rate(value: float, benchmarks: Dict[str, float]) -> str:
    if value >= benchmarks["excellent"]:
        return "excellent"
    if value >= benchmarks["good"]:
        return "good"
    if value >= benchmarks["acceptable"]:
        return "acceptable"
    return "poor"


def rate_irr(irr_percent: float) -> str:
    """Rate an IRR (%) against syndication benchmarks."""
    return _rate(irr_percent, IRR_BENCHMARKS)


def rate_equity_multiple(multiple: float) -> str:
    """Rate an equity multiple against syndication benchmarks."""
    return _rate(multiple, EQUITY_MULTIPLE_BENCHMARKS)
