"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Used by the deal form for real-time updates.
"""

import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from syndicator.calculations import irr, amortization, presets
from syndicator.calculations.models import DealInputs
from syndicator.calculations.syndication import calculate_syndication

logger = logging.getLogger(__name__)

router = APIRouter()

_defaults = presets.DEFAULT_DEAL
SPLIT_TOLERANCE = 0.01


class SyndicationInput(BaseModel):
    """Input for syndication analysis. All rates are percents."""

    # Project Capitalization
    purchase_price: float = Field(_defaults.purchase_price, ge=100_000, le=500_000_000)
    closing_costs: float = Field(_defaults.closing_costs, ge=0, le=10_000_000)
    capex_reserves: float = Field(_defaults.capex_reserves, ge=0, le=10_000_000)

    # Equity Structure
    lp_equity_percent: float = Field(_defaults.lp_equity_percent, ge=0, le=100)
    gp_equity_percent: float = Field(_defaults.gp_equity_percent, ge=0, le=100)

    # Debt
    loan_to_value: float = Field(_defaults.loan_to_value, ge=0, le=90)
    interest_rate: float = Field(_defaults.interest_rate, ge=0, le=25)
    loan_term_years: float = Field(_defaults.loan_term_years, ge=1, le=40)
    amortization_years: float = Field(_defaults.amortization_years, ge=1, le=40)
    interest_only: bool = _defaults.interest_only
    interest_only_years: float = Field(_defaults.interest_only_years, ge=0, le=10)

    # Fees
    acquisition_fee_percent: float = Field(_defaults.acquisition_fee_percent, ge=0, le=5)
    asset_management_fee_percent: float = Field(
        _defaults.asset_management_fee_percent, ge=0, le=5
    )

    # Preferred Return
    preferred_return: float = Field(_defaults.preferred_return, ge=0, le=20)

    # Waterfall Tiers
    tier1_lp_split: float = Field(_defaults.tier1_lp_split, ge=0, le=100)
    tier1_gp_split: float = Field(_defaults.tier1_gp_split, ge=0, le=100)
    tier2_irr_hurdle: float = Field(_defaults.tier2_irr_hurdle, ge=0, le=50)
    tier2_lp_split: float = Field(_defaults.tier2_lp_split, ge=0, le=100)
    tier2_gp_split: float = Field(_defaults.tier2_gp_split, ge=0, le=100)
    tier3_irr_hurdle: float = Field(_defaults.tier3_irr_hurdle, ge=0, le=50)
    tier3_lp_split: float = Field(_defaults.tier3_lp_split, ge=0, le=100)
    tier3_gp_split: float = Field(_defaults.tier3_gp_split, ge=0, le=100)

    # Property Operations
    gross_potential_rent: float = Field(_defaults.gross_potential_rent, ge=0, le=100_000_000)
    vacancy_rate: float = Field(_defaults.vacancy_rate, ge=0, le=50)
    other_income: float = Field(_defaults.other_income, ge=0, le=10_000_000)
    operating_expense_ratio: float = Field(_defaults.operating_expense_ratio, ge=0, le=90)

    # Growth Assumptions
    rent_growth_rate: float = Field(_defaults.rent_growth_rate, ge=-10, le=20)
    expense_growth_rate: float = Field(_defaults.expense_growth_rate, ge=0, le=20)
    hold_period_years: int = Field(_defaults.hold_period_years, ge=1, le=15)

    # Exit Assumptions
    exit_cap_rate: float = Field(_defaults.exit_cap_rate, ge=1, le=15)
    disposition_fee_percent: float = Field(_defaults.disposition_fee_percent, ge=0, le=10)

    @model_validator(mode="after")
    def check_splits(self):
        pairs = {
            "equity": (self.lp_equity_percent, self.gp_equity_percent),
            "tier 1": (self.tier1_lp_split, self.tier1_gp_split),
            "tier 2": (self.tier2_lp_split, self.tier2_gp_split),
            "tier 3": (self.tier3_lp_split, self.tier3_gp_split),
        }
        for label, (lp, gp) in pairs.items():
            if abs(lp + gp - 100) > SPLIT_TOLERANCE:
                raise ValueError(f"LP and GP {label} percentages must sum to 100")
        return self

    def to_deal_inputs(self) -> DealInputs:
        return DealInputs(**self.model_dump())


@router.post("/syndication")
async def calculate_syndication_endpoint(inputs: SyndicationInput):
    """Run the full syndication analysis: pro forma, exit, returns, sensitivity."""
    results = calculate_syndication(inputs.to_deal_inputs())

    logger.info(
        "Syndication calculated: LP IRR %.2f%%, GP IRR %.2f%%, exit tier %d",
        results.lp_irr,
        results.gp_irr,
        results.exit_tier,
    )

    response = asdict(results)
    response["ratings"] = {
        "lp_irr": presets.rate_irr(results.lp_irr),
        "lp_equity_multiple": presets.rate_equity_multiple(results.lp_equity_multiple),
    }
    return response


@router.get("/syndication/defaults", response_model=SyndicationInput)
async def syndication_defaults():
    """Default deal inputs for a typical multifamily syndication."""
    return SyndicationInput()


@router.get("/syndication/presets")
async def list_waterfall_presets():
    """Named waterfall tier structures."""
    return presets.WATERFALL_PRESETS


@router.get("/syndication/presets/{preset_name}", response_model=SyndicationInput)
async def apply_waterfall_preset(preset_name: str):
    """Default deal inputs with a named waterfall preset applied."""
    try:
        deal = presets.apply_waterfall_preset(presets.DEFAULT_DEAL, preset_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown preset: {preset_name}")
    return SyndicationInput(**asdict(deal))


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    multiple: float
    profit: float
    npv_at_10_percent: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR (%) for periodic cash flows."""
    try:
        if len(inputs.cash_flows) < 2:
            raise ValueError("At least 2 cash flows required")

        inflows = sum(cf for cf in inputs.cash_flows if cf > 0)
        outflows = -sum(cf for cf in inputs.cash_flows if cf < 0)

        return IRRResponse(
            irr=irr.calculate_irr(inputs.cash_flows),
            multiple=irr.calculate_equity_multiple(inflows, outflows),
            profit=irr.calculate_profit(inputs.cash_flows),
            npv_at_10_percent=irr.calculate_npv(inputs.cash_flows, 0.10),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float = Field(ge=0)
    annual_rate: float = Field(ge=0, le=25)  # percent
    amortization_years: float = Field(30, ge=1, le=40)
    io_years: float = Field(0, ge=0, le=10)
    total_months: int = Field(120, ge=1, le=480)


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate,
        amort_years=inputs.amortization_years,
        io_years=inputs.io_years,
        total_months=inputs.total_months,
    )

    return {
        "monthly_payment": amortization.monthly_payment(
            inputs.principal, inputs.annual_rate, inputs.amortization_years
        ),
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }
