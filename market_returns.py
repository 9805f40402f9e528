"""
Synthetic market return generator for the bucket withdrawal strategy.
Produces a repeating 7-year sequence of good and bad years instead of a flat
monthly rate, scaled so that the cycle compounds to the expected annual return.
"""
import numpy as np
from typing import Dict


CYCLE_YEARS = 7
MONTHS_PER_YEAR = 12
CYCLE_MONTHS = CYCLE_YEARS * MONTHS_PER_YEAR

# Annual returns of the reference cycle (fractions)
ANNUAL_PATTERN = np.array([
    -0.03,  # Year 1: mild correction
    0.18,   # Year 2: recovery
    -0.05,  # Year 3: bear year
    0.22,   # Year 4: strong rally
    0.08,   # Year 5
    0.15,   # Year 6
    0.12,   # Year 7
])

# Intra-year monthly shapes, one row per cycle year
MONTHLY_SHAPES = np.array([
    [0.02, -0.01, 0.03, -0.02, 0.01, -0.015, 0.025, -0.01, 0.02, -0.005, 0.015, -0.01],   # volatile
    [0.03, 0.04, 0.02, 0.03, 0.025, 0.02, 0.015, 0.02, 0.01, 0.015, 0.02, 0.025],        # positive
    [-0.02, -0.03, -0.01, 0.01, -0.015, -0.02, 0.005, -0.01, -0.015, 0.01, -0.005, -0.01],  # negative
    [0.04, 0.03, 0.05, 0.02, 0.03, 0.025, 0.02, 0.015, 0.01, 0.02, 0.015, 0.01],         # strong positive
    [0.015, 0.02, 0.01, 0.015, 0.005, 0.01, 0.02, 0.005, 0.015, 0.01, 0.005, 0.01],      # moderate positive
    [0.025, 0.03, 0.02, 0.015, 0.025, 0.01, 0.015, 0.02, 0.01, 0.015, 0.005, 0.01],      # good positive
    [0.02, 0.015, 0.025, 0.01, 0.02, 0.015, 0.01, 0.015, 0.005, 0.01, 0.015, 0.01],      # steady positive
])


def pattern_cagr(pattern: np.ndarray = ANNUAL_PATTERN) -> float:
    """Geometric mean annual return of a sequence of annual returns"""
    growth = np.prod(1.0 + pattern)
    return float(growth ** (1.0 / len(pattern)) - 1.0)


def scaled_annual_returns(expected_annual_return_pct: float) -> np.ndarray:
    """
    Scale the reference cycle to an expected annual return.

    Each year of the cycle is multiplied by expected / pattern CAGR, then the
    seven growth factors share a common correction so the cycle compounds to
    exactly (1 + expected)^7.

    Args:
        expected_annual_return_pct: Expected annual return in percent

    Returns:
        Array of 7 annual returns (fractions)
    """
    target = expected_annual_return_pct / 100
    if target <= -1.0:
        raise ValueError(
            f"Expected annual return must be greater than -100%, got {expected_annual_return_pct}%")

    base_cagr = pattern_cagr()
    if base_cagr == 0:
        raise ValueError("Return pattern has a zero CAGR and cannot be scaled")

    scale_factor = target / base_cagr
    growth = 1.0 + ANNUAL_PATTERN * scale_factor
    if np.any(growth <= 0):
        raise ValueError(
            f"Expected annual return {expected_annual_return_pct}% scales the return cycle "
            f"below -100% in at least one year")

    correction = ((1.0 + target) ** CYCLE_YEARS / np.prod(growth)) ** (1.0 / CYCLE_YEARS)
    return growth * correction - 1.0


def monthly_return_table(expected_annual_return_pct: float) -> np.ndarray:
    """
    Build the 7x12 table of monthly returns for one full cycle.

    Every row compounds exactly to the scaled annual return of that cycle year.
    """
    annual_targets = scaled_annual_returns(expected_annual_return_pct)

    shape_growth = 1.0 + MONTHLY_SHAPES
    shape_annual = np.prod(shape_growth, axis=1) - 1.0

    monthly_scale = ((1.0 + annual_targets) / (1.0 + shape_annual)) ** (1.0 / MONTHS_PER_YEAR)
    return shape_growth * monthly_scale[:, np.newaxis] - 1.0


def generate_monthly_returns(expected_annual_return_pct: float, num_months: int) -> np.ndarray:
    """
    Generate a deterministic sequence of monthly returns.

    Month m uses cycle year floor(m / 12) mod 7 and month-in-year m mod 12.

    Args:
        expected_annual_return_pct: Expected annual return in percent
        num_months: Number of months to generate

    Returns:
        Array of num_months fractional monthly returns
    """
    if num_months < 0:
        raise ValueError(f"Number of months cannot be negative, got {num_months}")
    if num_months == 0:
        return np.zeros(0)

    cycle = monthly_return_table(expected_annual_return_pct).ravel()
    return np.resize(cycle, num_months)


def cycle_summary(expected_annual_return_pct: float) -> Dict[str, float]:
    """Summary of a scaled cycle: best/worst year and realised CAGR"""
    annual = scaled_annual_returns(expected_annual_return_pct)
    return {
        'best_year': float(np.max(annual)),
        'worst_year': float(np.min(annual)),
        'cagr': pattern_cagr(annual),
        'negative_years': int(np.sum(annual < 0)),
    }
