"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from syndicator.main import app
from syndicator.calculations.presets import DEFAULT_DEAL
from syndicator.calculations.waterfall import WaterfallStructure


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def default_deal():
    """Default syndication deal (IO loan, fees, other income)."""
    return DEFAULT_DEAL


@pytest.fixture
def simple_deal():
    """
    Fully amortizing, fee-free 5-year deal.

    $5M purchase at 65% LTV, 6% / 30 years, $600K GPR, 5% vacancy,
    40% expense ratio, 3% rent / 2% expense growth, 6% exit cap.
    """
    return replace(
        DEFAULT_DEAL,
        purchase_price=5_000_000,
        closing_costs=0,
        capex_reserves=0,
        loan_to_value=65,
        interest_rate=6,
        amortization_years=30,
        interest_only=False,
        interest_only_years=0,
        gross_potential_rent=600_000,
        vacancy_rate=5,
        other_income=0,
        operating_expense_ratio=40,
        rent_growth_rate=3,
        expense_growth_rate=2,
        hold_period_years=5,
        exit_cap_rate=6,
        disposition_fee_percent=0,
        acquisition_fee_percent=0,
        asset_management_fee_percent=0,
        lp_equity_percent=90,
        gp_equity_percent=10,
        preferred_return=8,
        tier1_lp_split=70,
        tier1_gp_split=30,
    )


@pytest.fixture
def structure(simple_deal):
    """8% pref; 70/30 base, 60/40 above 12% LP IRR, 50/50 above 18%."""
    return WaterfallStructure.from_inputs(simple_deal)
