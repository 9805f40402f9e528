"""
Child milestone planner.
A lumpsum plus a monthly SIP with a flat annual step-up funds inflated
milestone costs (UG, PG, business, marriage) withdrawn at the child's target ages.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List

from projection import MonthlyProjector, ProjectionParams, ScheduledWithdrawal, inflate


@dataclass
class MilestoneGoal:
    """A future expense expressed in today's money"""
    name: str
    current_value: float
    target_age: float
    inflation: float  # % per year


def _default_milestones() -> List[MilestoneGoal]:
    return [
        MilestoneGoal("UG", 0.0, 15, 6.0),
        MilestoneGoal("PG", 0.0, 19, 6.0),
        MilestoneGoal("Business", 0.0, 24, 5.0),
        MilestoneGoal("Marriage", 0.0, 25, 5.0),
    ]


@dataclass
class MilestonePlanParams:
    """Parameters for the milestone planner"""
    current_age: float = 3
    milestones: List[MilestoneGoal] = field(default_factory=_default_milestones)
    initial_investment: float = 170_000
    sip_monthly: float = 15_000
    step_up_annual: float = 1_000  # added to the monthly SIP each year
    cagr_pct: float = 12.0
    sip_years: int = 20
    post_sip_years: int = 25

    @property
    def total_years(self) -> int:
        return self.sip_years + self.post_sip_years

    def validate(self) -> List[str]:
        """Return descriptive validation errors"""
        errors = []
        if self.current_age < 0:
            errors.append("Current age must be >= 0.")
        for m in self.milestones:
            if m.target_age <= self.current_age:
                errors.append(f"{m.name} age must be greater than current age.")
            if m.current_value < 0:
                errors.append(f"{m.name} current value cannot be negative.")
            if m.inflation < 0:
                errors.append(f"{m.name} inflation cannot be negative.")
        if self.initial_investment < 0:
            errors.append("Initial investment cannot be negative.")
        if self.sip_monthly < 0:
            errors.append("SIP per month cannot be negative.")
        if self.step_up_annual < 0:
            errors.append("Step up amount cannot be negative.")
        if self.cagr_pct < 0:
            errors.append("CAGR % cannot be negative.")
        if self.sip_years < 0:
            errors.append("SIP years cannot be negative.")
        if self.post_sip_years < 0:
            errors.append("Post-SIP years cannot be negative.")

        latest = max([max(0, m.target_age - self.current_age) for m in self.milestones], default=0)
        if latest > self.total_years:
            errors.append(
                f"Your projection horizon ({self.total_years} years) ends before the latest "
                f"milestone ({latest} years). Increase SIP years and/or post-SIP years to cover "
                f"all withdrawals.")
        return errors


@dataclass
class MilestoneScheduleItem:
    name: str
    target_age: float
    years_from_now: float
    event_month: int  # 0-based month index
    inflated_cost: float


@dataclass
class MilestonePlanResults:
    """Year rows, totals and the milestone schedule"""
    schedule: List[MilestoneScheduleItem]
    year_by_year_details: Dict[str, List]
    final_balance: float
    totals: Dict[str, float]
    total_years: int
    total_months: int


def compute_milestone_schedule(params: MilestonePlanParams) -> List[MilestoneScheduleItem]:
    """
    Compute when each milestone falls due and its inflated cost.

    A milestone due exactly at the end of the horizon is settled in the final
    simulated month.
    """
    total_months = params.total_years * 12
    schedule = []
    for m in params.milestones:
        years_from_now = max(0, m.target_age - params.current_age)
        # Half months round up
        event_month = math.floor(years_from_now * 12 + 0.5)
        if total_months > 0:
            event_month = min(event_month, total_months - 1)
        schedule.append(MilestoneScheduleItem(
            name=m.name,
            target_age=m.target_age,
            years_from_now=years_from_now,
            event_month=event_month,
            inflated_cost=inflate(m.current_value, m.inflation, years_from_now),
        ))
    return schedule


def plan_milestones(params: MilestonePlanParams) -> MilestonePlanResults:
    """Simulate the plan; each withdrawal is limited to the balance available"""
    errors = params.validate()
    if errors:
        raise ValueError("Invalid milestone plan: " + " ".join(errors))

    schedule = compute_milestone_schedule(params)
    total_months = params.total_years * 12

    # Withdraw the scheduled inflated cost; zero inflation keeps it unchanged
    withdrawals = [
        ScheduledWithdrawal(present_value=item.inflated_cost, inflation_rate=0.0,
                            month=item.event_month, label=item.name)
        for item in schedule
    ]

    projection = MonthlyProjector(ProjectionParams(
        initial_principal=params.initial_investment,
        monthly_contribution=params.sip_monthly,
        step_up_amount=params.step_up_annual,
        annual_return=params.cagr_pct,
        contribution_months=params.sip_years * 12,
        horizon_months=total_months,
        withdrawals=withdrawals,
    )).run_projection()

    totals = {
        'contributions': projection.totals['contributions'],
        'interest': projection.totals['interest'],
        'withdrawals': projection.totals['withdrawals'],
    }

    return MilestonePlanResults(
        schedule=schedule,
        year_by_year_details=projection.year_by_year_details,
        final_balance=projection.final_balance,
        totals=totals,
        total_years=params.total_years,
        total_months=total_months
    )
