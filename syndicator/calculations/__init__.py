"""
Syndication Calculation Engine

Core calculation modules for LP/GP syndication analysis.
All functions are pure: the same inputs always produce the same results.
"""

from syndicator.calculations import (
    irr,
    amortization,
    cashflow,
    waterfall,
    syndication,
    presets,
)
from syndicator.calculations.models import DealInputs, DealResults
from syndicator.calculations.syndication import calculate_syndication

__all__ = [
    "irr",
    "amortization",
    "cashflow",
    "waterfall",
    "syndication",
    "presets",
    "DealInputs",
    "DealResults",
    "calculate_syndication",
]
