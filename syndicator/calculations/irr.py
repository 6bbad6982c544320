"""
IRR and NPV Calculations

Implements IRR with Newton-Raphson, falling back to bisection when Newton's
method fails to converge. Rates are solved as decimals internally and
reported as percentages (e.g., 12.5 for 12.5%).

The solver never raises: cash flows without a sign change return 0, and a
run where neither method converges returns the last Newton estimate.
"""

import logging
from typing import List, NamedTuple, Sequence

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DERIVATIVE_FLOOR = 1e-10
DEFAULT_GUESS = 0.1

# Newton guard rails: proposals outside the band snap back inside it
MIN_RATE = -0.99
MAX_RATE = 10.0
LOW_RESTART = -0.5
HIGH_RESTART = 2.0
DERIVATIVE_NUDGE = 0.1

BISECTION_LOW = -0.99
BISECTION_HIGH = 5.0


class IRRAttempt(NamedTuple):
    """Outcome of a single root-finding strategy."""

    rate: float
    converged: bool
    iterations: int


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of periodic cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Periodic discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / ((1 + discount_rate) ** period)
    return npv


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    dnpv = 0.0
    for period, cf in enumerate(cash_flows):
        if period > 0:
            dnpv -= (period * cf) / ((1 + rate) ** (period + 1))
    return dnpv


def has_sign_change(cash_flows: Sequence[float]) -> bool:
    """True when the series holds at least one outflow and one inflow."""
    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)
    return has_positive and has_negative


def newton_raphson(
    cash_flows: Sequence[float], guess: float = DEFAULT_GUESS
) -> IRRAttempt:
    """
    Solve for IRR using Newton-Raphson.

    A near-zero derivative nudges the rate upward and retries. Proposals that
    run away below MIN_RATE or above MAX_RATE restart from LOW_RESTART or
    HIGH_RESTART instead of being accepted.
    """
    rate = guess

    for iteration in range(1, MAX_ITERATIONS + 1):
        npv = calculate_npv(cash_flows, rate)
        dnpv = _npv_derivative(cash_flows, rate)

        if abs(dnpv) < DERIVATIVE_FLOOR:
            rate += DERIVATIVE_NUDGE
            continue

        new_rate = rate - npv / dnpv

        if new_rate < MIN_RATE:
            rate = LOW_RESTART
            continue
        if new_rate > MAX_RATE:
            rate = HIGH_RESTART
            continue

        if abs(new_rate - rate) < TOLERANCE:
            return IRRAttempt(new_rate, True, iteration)

        rate = new_rate

    return IRRAttempt(rate, False, MAX_ITERATIONS)


def bisection(
    cash_flows: Sequence[float],
    low: float = BISECTION_LOW,
    high: float = BISECTION_HIGH,
) -> IRRAttempt:
    """
    Solve for IRR by bisecting [low, high].

    Requires NPV to change sign across the bracket; otherwise reports
    non-convergence at the midpoint.
    """
    npv_low = calculate_npv(cash_flows, low)
    npv_high = calculate_npv(cash_flows, high)

    if npv_low == 0:
        return IRRAttempt(low, True, 0)
    if npv_high == 0:
        return IRRAttempt(high, True, 0)
    if (npv_low > 0) == (npv_high > 0):
        return IRRAttempt((low + high) / 2, False, 0)

    mid = (low + high) / 2
    for iteration in range(1, MAX_ITERATIONS + 1):
        mid = (low + high) / 2
        npv_mid = calculate_npv(cash_flows, mid)

        if abs(npv_mid) < TOLERANCE or (high - low) / 2 < TOLERANCE:
            return IRRAttempt(mid, True, iteration)

        if (npv_mid > 0) == (npv_low > 0):
            low, npv_low = mid, npv_mid
        else:
            high = mid

    return IRRAttempt(mid, False, MAX_ITERATIONS)


def calculate_irr(cash_flows: Sequence[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR (Internal Rate of Return) for periodic cash flows.

    Args:
        cash_flows: Array of periodic cash flows, index 0 = initial investment
        guess: Initial guess for Newton-Raphson (default 0.1 = 10%)

    Returns:
        IRR as a percentage (e.g., 15.0 for 15%); 0 when undefined
    """
    if len(cash_flows) < 2 or not has_sign_change(cash_flows):
        return 0.0

    newton = newton_raphson(cash_flows, guess)
    if newton.converged:
        return newton.rate * 100

    logger.debug(
        "Newton-Raphson did not converge after %d iterations, trying bisection",
        newton.iterations,
    )
    fallback = bisection(cash_flows)
    if fallback.converged:
        return fallback.rate * 100

    logger.warning(
        "IRR did not converge for %d cash flows, returning last estimate %.6f",
        len(cash_flows),
        newton.rate,
    )
    return newton.rate * 100


def irr_with_final_value(cash_flows: Sequence[float], final_addition: float) -> float:
    """
    IRR of a cash-flow vector after adding a candidate amount to its final entry.

    The input vector is copied, never mutated, so the same history can be
    tested against several candidate exit distributions.
    """
    candidate: List[float] = list(cash_flows)
    if not candidate:
        return 0.0
    candidate[-1] += final_addition
    return calculate_irr(candidate)


def calculate_equity_multiple(total_distributions: float, equity: float) -> float:
    """
    Calculate equity multiple.

    Returns:
        Multiple (e.g., 2.0 = 2.0x return); 0 when no equity was invested
    """
    if equity <= 0:
        return 0.0
    return total_distributions / equity


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
