"""
Single-account monthly projection with compounding, recurring contributions,
one-time injections and scheduled withdrawals.
The SIP, FIRE and milestone calculators are configurations of this loop.
"""
import logging
import numpy as np
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


def to_monthly_rate(annual_pct: float) -> float:
    """Effective monthly rate equivalent to an annual percentage rate"""
    return (1 + annual_pct / 100) ** (1 / 12) - 1


def inflate(present_value: float, annual_inflation_pct: float, years: float) -> float:
    """Grow a present value by annual inflation over a number of years"""
    return present_value * (1 + annual_inflation_pct / 100) ** max(0.0, years)


@dataclass
class LumpsumInjection:
    """One-time deposit made at the start of a month (0-based index)"""
    amount: float
    month: int


@dataclass
class ScheduledWithdrawal:
    """Withdrawal of an inflated present value at a future month (0-based index)"""
    present_value: float
    inflation_rate: float
    month: int
    label: str = ""

    def inflated_amount(self) -> float:
        return inflate(self.present_value, self.inflation_rate, self.month / 12)


@dataclass
class ProjectionParams:
    """Parameters for a monthly projection"""
    initial_principal: float = 0.0
    monthly_contribution: float = 0.0
    step_up_pct: float = 0.0        # % increase of the contribution each year
    step_up_amount: float = 0.0     # flat increase of the contribution each year
    annual_return: float = 12.0     # % per year
    monthly_returns: Optional[Sequence[float]] = None  # overrides annual_return when given
    contribution_months: Optional[int] = None  # None = contribute for the whole horizon
    horizon_months: int = 120
    lumpsums: List[LumpsumInjection] = field(default_factory=list)
    withdrawals: List[ScheduledWithdrawal] = field(default_factory=list)

    def validate(self) -> List[str]:
        errors = []
        if self.initial_principal < 0:
            errors.append("Initial principal cannot be negative")
        if self.monthly_contribution < 0:
            errors.append("Monthly contribution cannot be negative")
        if self.step_up_pct < 0 or self.step_up_amount < 0:
            errors.append("Step-up cannot be negative")
        if self.annual_return <= -100:
            errors.append("Annual return must be greater than -100%")
        if self.horizon_months < 0:
            errors.append("Horizon cannot be negative")
        if self.contribution_months is not None and self.contribution_months < 0:
            errors.append("Contribution months cannot be negative")
        if self.monthly_returns is not None and len(self.monthly_returns) < self.horizon_months:
            errors.append("Monthly return sequence is shorter than the horizon")
        for lumpsum in self.lumpsums:
            if lumpsum.amount < 0:
                errors.append("Lumpsum amounts cannot be negative")
        for withdrawal in self.withdrawals:
            if withdrawal.present_value < 0:
                errors.append(f"Withdrawal {withdrawal.label or withdrawal.month} cannot be negative")
            if withdrawal.inflation_rate < 0:
                errors.append(f"Withdrawal {withdrawal.label or withdrawal.month} inflation cannot be negative")
        return errors

    def contribution_for_month(self, month: int) -> float:
        """Recurring contribution for a 0-based month index, including step-ups"""
        stop = self.horizon_months if self.contribution_months is None else self.contribution_months
        if month >= stop:
            return 0.0
        year_index = month // 12
        return (self.monthly_contribution * (1 + self.step_up_pct / 100) ** year_index
                + year_index * self.step_up_amount)


@dataclass
class ProjectionResults:
    """Results from a monthly projection"""
    balance_path: np.ndarray        # balance at the start (index 0) and end of each month
    contribution_path: np.ndarray
    lumpsum_path: np.ndarray
    interest_path: np.ndarray
    withdrawal_path: np.ndarray
    year_by_year_details: Dict
    totals: Dict[str, float]

    @property
    def final_balance(self) -> float:
        return float(self.balance_path[-1])


class MonthlyProjector:
    """Monthly compounding projection for a single balance"""

    def __init__(self, params: ProjectionParams):
        self.params = params
        self._validate_params()

    def _validate_params(self):
        errors = self.params.validate()
        if errors:
            raise ValueError("Invalid projection inputs: " + "; ".join(errors))

    def _monthly_rates(self) -> np.ndarray:
        horizon = self.params.horizon_months
        if self.params.monthly_returns is not None:
            return np.asarray(self.params.monthly_returns, dtype=float)[:horizon]
        return np.full(horizon, to_monthly_rate(self.params.annual_return))

    def _lumpsums_by_month(self) -> Dict[int, float]:
        by_month: Dict[int, float] = {}
        for lumpsum in self.params.lumpsums:
            if lumpsum.month < 0 or lumpsum.month >= self.params.horizon_months:
                logger.warning("Ignoring lumpsum of %.2f scheduled outside the horizon (month %d)",
                               lumpsum.amount, lumpsum.month)
                continue
            by_month[lumpsum.month] = by_month.get(lumpsum.month, 0.0) + lumpsum.amount
        return by_month

    def _withdrawals_by_month(self) -> Dict[int, List[ScheduledWithdrawal]]:
        by_month: Dict[int, List[ScheduledWithdrawal]] = {}
        for withdrawal in self.params.withdrawals:
            if withdrawal.month < 0 or withdrawal.month >= self.params.horizon_months:
                logger.warning("Ignoring withdrawal %s scheduled outside the horizon (month %d)",
                               withdrawal.label, withdrawal.month)
                continue
            by_month.setdefault(withdrawal.month, []).append(withdrawal)
        return by_month

    def run_projection(self) -> ProjectionResults:
        """Run the projection month by month"""
        horizon = self.params.horizon_months
        rates = self._monthly_rates()
        lumpsums = self._lumpsums_by_month()
        withdrawals = self._withdrawals_by_month()

        balance_path = np.zeros(horizon + 1)
        contribution_path = np.zeros(horizon)
        lumpsum_path = np.zeros(horizon)
        interest_path = np.zeros(horizon)
        withdrawal_path = np.zeros(horizon)

        details = {
            'year': [],
            'start_balance': [],
            'contributions': [],
            'lumpsums': [],
            'interest': [],
            'withdrawals': [],
            'end_balance': [],
            'cumulative_principal': [],
            'notes': []
        }

        balance = float(self.params.initial_principal)
        principal = balance
        balance_path[0] = balance
        year_notes: List[str] = []

        for month in range(horizon):
            extra = lumpsums.get(month, 0.0)
            balance += extra
            lumpsum_path[month] = extra

            contribution = self.params.contribution_for_month(month)
            balance += contribution
            contribution_path[month] = contribution
            principal += extra + contribution

            interest = balance * rates[month]
            balance += interest
            interest_path[month] = interest

            for withdrawal in withdrawals.get(month, []):
                amount = min(balance, withdrawal.inflated_amount())
                balance -= amount
                withdrawal_path[month] += amount
                label = withdrawal.label or "Withdrawal"
                year_notes.append(f"{label} (Y{month // 12 + 1}): -{amount:,.0f}")

            balance_path[month + 1] = balance

            # Close the year after its last month, or at the end of a partial final year
            if month % 12 == 11 or month == horizon - 1:
                year_start = month - month % 12
                details['year'].append(month // 12 + 1)
                details['start_balance'].append(float(balance_path[year_start]))
                details['contributions'].append(float(contribution_path[year_start:month + 1].sum()))
                details['lumpsums'].append(float(lumpsum_path[year_start:month + 1].sum()))
                details['interest'].append(float(interest_path[year_start:month + 1].sum()))
                details['withdrawals'].append(float(withdrawal_path[year_start:month + 1].sum()))
                details['end_balance'].append(balance)
                details['cumulative_principal'].append(principal)
                details['notes'].append(year_notes)
                year_notes = []

        totals = {
            'principal': principal,
            'contributions': float(contribution_path.sum()),
            'lumpsums': float(lumpsum_path.sum()),
            'interest': float(interest_path.sum()),
            'withdrawals': float(withdrawal_path.sum()),
        }

        return ProjectionResults(
            balance_path=balance_path,
            contribution_path=contribution_path,
            lumpsum_path=lumpsum_path,
            interest_path=interest_path,
            withdrawal_path=withdrawal_path,
            year_by_year_details=details,
            totals=totals
        )


def project(params: ProjectionParams) -> ProjectionResults:
    """Validate parameters and run a monthly projection"""
    return MonthlyProjector(params).run_projection()
