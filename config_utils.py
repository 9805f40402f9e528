"""
Configuration utilities for the projection calculators.
Default inputs for every calculator and JSON config-file overrides.
"""

import json
import logging
import os
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'calculator_config.json'


def load_calculator_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load calculator overrides from a JSON file (empty dict if unavailable)"""
    if not os.path.exists(path):
        logger.debug("Config file %s does not exist, using defaults", path)
        return {}
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.warning("Ignoring %s: top level must be a JSON object", path)
        return {}
    logger.debug("Loaded config with %d sections from %s", len(config), path)
    return config


def save_calculator_config(config: Dict[str, Any], path: str = DEFAULT_CONFIG_PATH) -> None:
    """Save calculator overrides to a JSON file"""
    with open(path, 'w') as f:
        json.dump(config, f, indent=2)
    logger.debug("Saved config with %d sections to %s", len(config), path)


def get_default_bucket_params() -> Dict[str, Any]:
    """Default three-bucket strategy inputs"""
    return {
        'monthly_requirement': 50_000,
        'inflation_rate': 6.0,
        'tier1_duration': 16,
        'tier1_return': 6.0,
        'tier2_duration': 24,
        'tier2_return': 8.0,
        'tier3a_principal': 5_000_000,
        'dividend_yield': 2.0,
        'tier3b_principal': 3_000_000,
        'tier3_return': 12.0,
        'max_years': 40,
    }


def get_default_investment_params() -> Dict[str, Any]:
    """Default SIP / lumpsum inputs"""
    return {
        'initial_investment': 10_000_000,
        'monthly_sip': 60_000,
        'step_up_pct': 5.0,
        'expected_return_pct': 12.0,
        'sip_years': 10,
        'invest_years': 20,
        'additional_lumpsums': [],
    }


def get_default_fire_params() -> Dict[str, Any]:
    """Default FIRE horizon inputs"""
    return {
        'current_age': 30,
        'monthly_expense': 2_000,
        'inflation_pct': 5.0,
        'current_investment': 25_000,
        'sip_monthly': 1_000,
        'step_up_pct': 10.0,
        'cagr_pct': 10.0,
        'horizon_years': 60,
        'fire_multiple': 60.0,
    }


def get_default_milestone_params() -> Dict[str, Any]:
    """Default child milestone inputs"""
    return {
        'current_age': 3,
        'milestones': [
            {'name': 'UG', 'current_value': 0, 'target_age': 15, 'inflation': 6.0},
            {'name': 'PG', 'current_value': 0, 'target_age': 19, 'inflation': 6.0},
            {'name': 'Business', 'current_value': 0, 'target_age': 24, 'inflation': 5.0},
            {'name': 'Marriage', 'current_value': 0, 'target_age': 25, 'inflation': 5.0},
        ],
        'initial_investment': 170_000,
        'sip_monthly': 15_000,
        'step_up_annual': 1_000,
        'cagr_pct': 12.0,
        'sip_years': 20,
        'post_sip_years': 25,
    }


def _category(name: str, items: List[tuple]) -> Dict[str, Any]:
    return {
        'name': name,
        'items': [{'name': n, 'amount': a, 'inflation_rate': r} for n, a, r in items],
    }


def get_default_expense_budget() -> Dict[str, Any]:
    """Default household expense budget"""
    return {
        'monthly': [
            _category("HOUSING & HOME", [
                ("Groceries", 5000, 5), ("Fish", 2500, 6), ("Chicken", 1500, 6),
                ("Vegetables", 5000, 5), ("Gas (Utilities)", 1000, 4), ("Internet & TV", 1000, 3),
            ]),
            _category("ENTERTAINMENT & SUBSCRIPTIONS", [
                ("Hangout", 5000, 5), ("OTT Subscriptions", 500, 8),
            ]),
            _category("PERSONAL CARE & LIFESTYLE", [
                ("Phone", 1000, 3), ("Clothing", 3000, 5), ("Beautification", 2000, 5),
                ("Gym", 1500, 4), ("Regular Expense", 5000, 5),
            ]),
            _category("TRANSPORTATION", [
                ("Car Fuel", 3000, 6), ("Bike Fuel", 1500, 6),
                ("Transportation (public transport, ride-sharing)", 1000, 5),
            ]),
            _category("MAINTENANCE", [("Housing Maintenance", 5000, 5)]),
            _category("MEDICAL & HEALTH", [
                ("Health Insurance", 4000, 8), ("Medicine & Health Related", 5000, 7),
            ]),
            _category("FINANCIAL OBLIGATIONS", [("Credit Card", 2000, 0)]),
        ],
        'quarterly': [
            _category("HOUSING & HOME", [("Electricity", 10000, 5)]),
            _category("VACATION", [("Every Quarter Vacation", 50000, 6)]),
            _category("MAINTENANCE", [("Housing Maintenance", 30000, 5)]),
        ],
        'half_yearly': [
            _category("TRANSPORTATION", [("Car Maintenance", 6000, 5), ("Bike Maintenance", 1500, 5)]),
        ],
        'annual': [
            _category("TRANSPORTATION", [("Car Insurance", 6000, 6), ("Bike Insurance", 1500, 6)]),
            _category("MAINTENANCE", [("Housing Maintenance", 50000, 5)]),
        ],
        'monthly_buffer': 30.0,
        'quarterly_buffer': 30.0,
        'half_yearly_buffer': 50.0,
        'annual_buffer': 50.0,
    }


_DEFAULTS = {
    'bucket': get_default_bucket_params,
    'investment': get_default_investment_params,
    'fire': get_default_fire_params,
    'milestones': get_default_milestone_params,
    'expenses': get_default_expense_budget,
}


def get_params_with_overrides(calculator: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge a calculator's config section over its defaults.

    Args:
        calculator: Calculator id ('bucket', 'investment', 'fire', 'milestones', 'expenses')
        config: Loaded config, keyed by calculator id

    Returns:
        Parameter dictionary
    """
    if calculator not in _DEFAULTS:
        raise ValueError(f"Unknown calculator: {calculator}")
    params = _DEFAULTS[calculator]()
    overrides = config.get(calculator, {}) or {}
    unknown = set(overrides) - set(params)
    if unknown:
        logger.warning("Ignoring unknown %s settings: %s", calculator, ", ".join(sorted(unknown)))
    params.update({k: v for k, v in overrides.items() if k in params})
    return params
