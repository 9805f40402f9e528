"""
FIRE horizon calculator.
Finds the first month in which the portfolio reaches a multiple of the
current (inflating) annual expense.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np

from projection import MonthlyProjector, ProjectionParams, to_monthly_rate


@dataclass
class FireParams:
    """Parameters for the FIRE horizon calculator"""
    current_age: int = 30
    monthly_expense: float = 2_000
    inflation_pct: float = 5.0
    current_investment: float = 25_000
    sip_monthly: float = 1_000
    step_up_pct: float = 10.0
    cagr_pct: float = 10.0
    horizon_years: int = 60
    fire_multiple: float = 60.0  # portfolio target in years of annual expense
    start_year: int = field(default_factory=lambda: datetime.now().year)

    def validate(self) -> List[str]:
        errors = []
        if self.current_age < 0:
            errors.append("Current age cannot be negative")
        for name, value in [("Monthly expense", self.monthly_expense),
                            ("Inflation %", self.inflation_pct),
                            ("Current investment", self.current_investment),
                            ("SIP amount", self.sip_monthly),
                            ("Step-up %", self.step_up_pct),
                            ("CAGR %", self.cagr_pct)]:
            if value < 0:
                errors.append(f"{name} cannot be negative")
        if self.horizon_years < 1:
            errors.append("Horizon must be at least 1 year")
        if self.fire_multiple <= 0:
            errors.append("FIRE multiple must be positive")
        return errors


@dataclass
class FireResults:
    """Outcome of the FIRE horizon search"""
    yearly: Dict[str, List]
    fire_reached: bool
    fire_month_index: Optional[int]
    fire_year: Optional[int]
    fire_age: Optional[int]


def calculate_fire(params: FireParams) -> FireResults:
    """
    Project the portfolio and find when it first covers the FIRE target.

    Expenses inflate every month; the target in month m is
    fire_multiple x 12 x the monthly expense after that month's inflation.
    """
    errors = params.validate()
    if errors:
        raise ValueError("Invalid FIRE inputs: " + "; ".join(errors))

    total_months = params.horizon_years * 12
    projection = MonthlyProjector(ProjectionParams(
        initial_principal=params.current_investment,
        monthly_contribution=params.sip_monthly,
        step_up_pct=params.step_up_pct,
        annual_return=params.cagr_pct,
        horizon_months=total_months,
    )).run_projection()

    portfolio = projection.balance_path[1:]
    monthly_inflation = to_monthly_rate(params.inflation_pct)
    monthly_expense = params.monthly_expense * (1 + monthly_inflation) ** np.arange(1, total_months + 1)
    annual_expense = monthly_expense * 12
    fire_target = params.fire_multiple * annual_expense

    reached = np.nonzero(portfolio >= fire_target)[0]
    fire_month_index = int(reached[0]) if len(reached) > 0 else None

    yearly = {
        'year': [], 'age': [], 'portfolio': [], 'annual_expense': [],
        'fire_target': [], 'sip_monthly': []
    }
    for month in range(11, total_months, 12):
        years_elapsed = month // 12
        yearly['year'].append(params.start_year + years_elapsed)
        yearly['age'].append(params.current_age + years_elapsed)
        yearly['portfolio'].append(float(portfolio[month]))
        yearly['annual_expense'].append(float(annual_expense[month]))
        yearly['fire_target'].append(float(fire_target[month]))
        yearly['sip_monthly'].append(float(projection.contribution_path[month]))

    fire_year = None
    fire_age = None
    if fire_month_index is not None:
        years_to_fire = fire_month_index // 12
        fire_year = params.start_year + years_to_fire
        fire_age = params.current_age + years_to_fire

    return FireResults(
        yearly=yearly,
        fire_reached=fire_month_index is not None,
        fire_month_index=fire_month_index,
        fire_year=fire_year,
        fire_age=fire_age
    )
