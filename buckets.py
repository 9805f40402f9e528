"""
Three-bucket retirement withdrawal strategy simulation.

Money is held in a short-duration liquid bucket (Tier-1), a medium-duration
balanced bucket (Tier-2) and a long-duration growth pool split into equities
(Tier-3a) and funds (Tier-3b). Each month the requirement is paid from Tier-1,
Tier-1 is refilled from Tier-2 and Tier-2 from Tier-3, and the requirement
grows with inflation once a year. The run stops when Tier-1 can no longer be
refilled or at the horizon cap.
"""
import logging
import math
from dataclasses import dataclass, field, fields, replace
from typing import Dict, List, Optional, Tuple

import numpy as np

from market_returns import generate_monthly_returns, scaled_annual_returns


logger = logging.getLogger(__name__)

HORIZON_CAP_YEARS = 40

OUTCOME_EXHAUSTED = "exhausted"
OUTCOME_HORIZON_REACHED = "horizon_reached"


@dataclass
class BucketParams:
    """Inputs for the bucket strategy (rates in percent, durations in months)"""
    monthly_requirement: float = 50_000
    inflation_rate: float = 6.0

    # Tier-1: liquid fund
    tier1_duration: int = 16
    tier1_return: float = 6.0

    # Tier-2: conservative / balanced fund
    tier2_duration: int = 24
    tier2_return: float = 8.0

    # Tier-3a: stocks, Tier-3b: mutual funds (shared return)
    tier3a_principal: float = 5_000_000
    dividend_yield: float = 2.0
    tier3b_principal: float = 3_000_000
    tier3_return: float = 12.0

    max_years: int = HORIZON_CAP_YEARS

    @property
    def horizon_months(self) -> int:
        return self.max_years * 12

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty when inputs are valid)"""
        errors = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{f.name} must be a number, got {value!r}")
        if errors:
            return errors

        for name, value in [("Tier-1 duration", self.tier1_duration),
                            ("Tier-2 duration", self.tier2_duration),
                            ("Horizon (max_years)", self.max_years)]:
            if not isinstance(value, int):
                errors.append(f"{name} must be a whole number, got {value}")

        if self.monthly_requirement <= 0:
            errors.append("Monthly requirement must be positive")
        if self.inflation_rate < 0:
            errors.append("Inflation rate cannot be negative")
        if self.tier1_duration < 1:
            errors.append("Tier-1 duration must be at least 1 month")
        if self.tier2_duration < self.tier1_duration:
            errors.append("Tier-2 duration must be greater than or equal to Tier-1 duration")
        for name, rate in [("Tier-1 return", self.tier1_return),
                           ("Tier-2 return", self.tier2_return),
                           ("Tier-3 return", self.tier3_return),
                           ("Dividend yield", self.dividend_yield)]:
            if rate < 0:
                errors.append(f"{name} cannot be negative")
        if self.tier3a_principal < 0:
            errors.append("Tier-3a principal cannot be negative")
        if self.tier3b_principal < 0:
            errors.append("Tier-3b principal cannot be negative")
        if self.max_years < 1:
            errors.append("Horizon must be at least 1 year")

        # The return cycle cannot be scaled to every expected return
        for name, rate in [("Tier-2 return", self.tier2_return),
                           ("Tier-3 return", self.tier3_return)]:
            if rate >= 0:
                try:
                    scaled_annual_returns(rate)
                except ValueError as e:
                    errors.append(f"{name}: {e}")
        return errors


@dataclass(frozen=True)
class BucketState:
    """Balances and refill timers carried from one month to the next"""
    tier1: float
    tier2: float
    tier3a: float
    tier3b: float
    months_since_tier1_refill: int
    months_since_tier2_refill: int
    requirement: float
    exhausted: bool = False

    @classmethod
    def initial(cls, params: BucketParams) -> 'BucketState':
        return cls(
            tier1=params.monthly_requirement * params.tier1_duration,
            tier2=params.monthly_requirement * params.tier2_duration,
            tier3a=float(params.tier3a_principal),
            tier3b=float(params.tier3b_principal),
            months_since_tier1_refill=0,
            months_since_tier2_refill=0,
            requirement=float(params.monthly_requirement),
        )

    @property
    def total(self) -> float:
        return self.tier1 + self.tier2 + self.tier3a + self.tier3b


@dataclass(frozen=True)
class MonthRecord:
    """End-of-month snapshot of the strategy"""
    month: int
    requirement: float
    dividend: float
    tier1: float
    tier2: float
    tier3a: float
    tier3b: float
    tier2_return: float
    tier2_return_pct: float
    tier3_return: float
    tier3_return_pct: float
    tier1_refill: float = 0.0
    tier2_refill: float = 0.0


@dataclass
class BucketResults:
    """Results of a bucket strategy run"""
    records: List[MonthRecord] = field(default_factory=list)
    outcome: str = OUTCOME_HORIZON_REACHED
    exhaustion_month: Optional[int] = None
    years_lasted: Optional[int] = None

    @property
    def exhausted(self) -> bool:
        return self.outcome == OUTCOME_EXHAUSTED

    @property
    def months_simulated(self) -> int:
        return len(self.records)

    def month_by_month_details(self) -> Dict[str, List]:
        """Column-oriented view of the records for tables and exports"""
        columns = [
            'month', 'requirement', 'dividend', 'tier1', 'tier2', 'tier3a', 'tier3b',
            'tier2_return', 'tier2_return_pct', 'tier3_return', 'tier3_return_pct',
            'tier1_refill', 'tier2_refill'
        ]
        return {col: [getattr(record, col) for record in self.records] for col in columns}

    def yearly_summary(self) -> Dict[str, List]:
        """Per-year totals of requirement paid and dividends with year-end balances"""
        summary = {
            'year': [], 'requirement_paid': [], 'dividends': [],
            'tier1': [], 'tier2': [], 'tier3a': [], 'tier3b': [], 'total_corpus': []
        }
        for start in range(0, len(self.records), 12):
            chunk = self.records[start:start + 12]
            last = chunk[-1]
            summary['year'].append(start // 12 + 1)
            summary['requirement_paid'].append(sum(r.requirement for r in chunk))
            summary['dividends'].append(sum(r.dividend for r in chunk))
            summary['tier1'].append(last.tier1)
            summary['tier2'].append(last.tier2)
            summary['tier3a'].append(last.tier3a)
            summary['tier3b'].append(last.tier3b)
            summary['total_corpus'].append(last.tier1 + last.tier2 + last.tier3a + last.tier3b)
        return summary


def split_refill(tier3a: float, tier3b: float, amount: float) -> Tuple[float, float]:
    """
    Split a Tier-3 withdrawal between equities and funds in proportion to
    their current balances.

    Args:
        tier3a: Current Tier-3a balance
        tier3b: Current Tier-3b balance
        amount: Total amount to withdraw

    Returns:
        (withdraw_a, withdraw_b) summing to amount
    """
    total = tier3a + tier3b
    if total <= 0:
        raise ValueError("Cannot split a withdrawal from an empty Tier-3")
    withdraw_a = (tier3a / total) * amount
    return withdraw_a, amount - withdraw_a


def step_month(state: BucketState,
               month: int,
               params: BucketParams,
               tier2_rate: float,
               tier3_rate: float) -> Tuple[BucketState, MonthRecord]:
    """
    Advance the strategy by one month.

    Args:
        state: State at the end of the previous month
        month: 1-based month index
        params: Strategy inputs
        tier2_rate: Tier-2 market return for this month (fraction)
        tier3_rate: Tier-3 market return for this month (fraction)

    Returns:
        (new_state, record) where new_state.exhausted marks the end of the run
    """
    requirement = state.requirement

    # Quarterly dividend on the opening equity balance (reported, not reinvested)
    month_in_year = (month - 1) % 12 + 1
    dividend = state.tier3a * (params.dividend_yield / 100) / 4 if month_in_year % 3 == 0 else 0.0

    # Market returns
    tier2_return = state.tier2 * tier2_rate
    tier2 = state.tier2 + tier2_return

    tier3a_return = state.tier3a * tier3_rate
    tier3b_return = state.tier3b * tier3_rate
    tier3a = state.tier3a + tier3a_return
    tier3b = state.tier3b + tier3b_return
    tier3_return = tier3a_return + tier3b_return
    tier3_opening = state.tier3a + state.tier3b
    tier3_return_pct = tier3_return / tier3_opening * 100 if tier3_opening > 0 else 0.0

    # Tier-1 is near-cash: flat monthly accrual
    tier1 = state.tier1 + state.tier1 * (params.tier1_return / 100) / 12

    tier1 -= requirement
    since_tier1 = state.months_since_tier1_refill + 1
    since_tier2 = state.months_since_tier2_refill + 1

    exhausted = False
    tier1_refill = 0.0
    tier2_refill = 0.0

    if since_tier1 >= params.tier1_duration or tier1 <= 0:
        amount = requirement * params.tier1_duration
        if tier2 >= amount:
            tier2 -= amount
            tier1 += amount
            tier1_refill = amount
            since_tier1 = 0
        else:
            logger.debug("Month %d: Tier-2 balance %.2f cannot refill Tier-1 (needs %.2f)",
                         month, tier2, amount)
            exhausted = True

    # Tier-2 refills on its timer only; a short Tier-3 is retried next month
    if not exhausted and since_tier2 >= params.tier2_duration:
        amount = requirement * params.tier2_duration
        if tier3a + tier3b >= amount:
            withdraw_a, withdraw_b = split_refill(tier3a, tier3b, amount)
            tier3a -= withdraw_a
            tier3b -= withdraw_b
            tier2 += amount
            tier2_refill = amount
            since_tier2 = 0

    record = MonthRecord(
        month=month,
        requirement=requirement,
        dividend=dividend,
        tier1=max(0.0, tier1),
        tier2=max(0.0, tier2),
        tier3a=max(0.0, tier3a),
        tier3b=max(0.0, tier3b),
        tier2_return=tier2_return,
        tier2_return_pct=tier2_rate * 100,
        tier3_return=tier3_return,
        tier3_return_pct=tier3_return_pct,
        tier1_refill=tier1_refill,
        tier2_refill=tier2_refill,
    )

    if not exhausted:
        if month % 12 == 0:
            requirement *= 1 + params.inflation_rate / 100
        if tier1 <= 0 and tier2 <= 0 and tier3a <= 0 and tier3b <= 0:
            logger.debug("Month %d: all buckets depleted", month)
            exhausted = True

    new_state = replace(
        state,
        tier1=record.tier1,
        tier2=record.tier2,
        tier3a=record.tier3a,
        tier3b=record.tier3b,
        months_since_tier1_refill=since_tier1,
        months_since_tier2_refill=since_tier2,
        requirement=requirement,
        exhausted=exhausted,
    )
    return new_state, record


class BucketSimulator:
    """Month-by-month bucket strategy simulation"""

    def __init__(self, params: BucketParams):
        self.params = params
        self._validate_params()

    def _validate_params(self):
        """Validate strategy inputs"""
        errors = self.params.validate()
        if errors:
            raise ValueError("Invalid bucket strategy inputs: " + "; ".join(errors))

    def run_simulation(self) -> BucketResults:
        """Run the strategy until Tier-1 cannot be refilled or the horizon cap is reached"""
        horizon = self.params.horizon_months
        tier2_returns = generate_monthly_returns(self.params.tier2_return, horizon)
        tier3_returns = generate_monthly_returns(self.params.tier3_return, horizon)

        logger.debug("Running bucket strategy for up to %d months", horizon)

        state = BucketState.initial(self.params)
        records: List[MonthRecord] = []

        for month in range(1, horizon + 1):
            state, record = step_month(
                state, month, self.params,
                float(tier2_returns[month - 1]), float(tier3_returns[month - 1]))
            records.append(record)

            if state.exhausted:
                years_lasted = math.floor(month / 12)
                logger.debug("Corpus exhausted in month %d (%d years)", month, years_lasted)
                return BucketResults(
                    records=records,
                    outcome=OUTCOME_EXHAUSTED,
                    exhaustion_month=month,
                    years_lasted=years_lasted,
                )

        logger.debug("Corpus lasted the full %d-year horizon", self.params.max_years)
        return BucketResults(records=records, outcome=OUTCOME_HORIZON_REACHED)


def simulate(params: BucketParams) -> BucketResults:
    """Validate inputs and run the bucket strategy"""
    return BucketSimulator(params).run_simulation()


def total_corpus_path(results: BucketResults) -> np.ndarray:
    """Total of all four buckets at the end of each simulated month"""
    return np.array([r.tier1 + r.tier2 + r.tier3a + r.tier3b for r in results.records])
