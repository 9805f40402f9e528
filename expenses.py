"""
Expense inflation and FIRE number calculator.
Expenses are grouped by frequency; each item inflates at its own rate until
retirement and every frequency carries a buffer percentage.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

FREQUENCY_MULTIPLIERS = {
    'monthly': 12,
    'quarterly': 4,
    'half_yearly': 2,
    'annual': 1,
}


@dataclass
class ExpenseItem:
    name: str
    amount: float           # per occurrence, today's money
    inflation_rate: float   # % per year


@dataclass
class ExpenseCategory:
    name: str
    items: List[ExpenseItem] = field(default_factory=list)


@dataclass
class ExpenseBudget:
    """Expense categories for each frequency with a buffer % per frequency"""
    monthly: List[ExpenseCategory] = field(default_factory=list)
    quarterly: List[ExpenseCategory] = field(default_factory=list)
    half_yearly: List[ExpenseCategory] = field(default_factory=list)
    annual: List[ExpenseCategory] = field(default_factory=list)
    monthly_buffer: float = 30.0
    quarterly_buffer: float = 30.0
    half_yearly_buffer: float = 50.0
    annual_buffer: float = 50.0

    def validate(self) -> List[str]:
        errors = []
        for frequency in FREQUENCY_MULTIPLIERS:
            if getattr(self, f"{frequency}_buffer") < 0:
                errors.append(f"{frequency} buffer cannot be negative")
            for category in getattr(self, frequency):
                for item in category.items:
                    if item.amount < 0:
                        errors.append(f"{category.name} / {item.name}: amount cannot be negative")
                    if item.inflation_rate < 0:
                        errors.append(f"{category.name} / {item.name}: inflation cannot be negative")
        return errors


@dataclass
class ExpenseProjection:
    """Current and retirement-year annual expenses and the FIRE number"""
    period_totals: Dict[str, Dict[str, float]]
    total_current_annual: float
    total_future_annual: float
    fire_number: float
    inflation_impact_pct: float


def budget_from_dict(data: Dict[str, Any]) -> ExpenseBudget:
    """Build an ExpenseBudget from nested dicts (as stored in JSON)"""
    kwargs: Dict[str, Any] = {}
    for frequency in FREQUENCY_MULTIPLIERS:
        kwargs[frequency] = [
            ExpenseCategory(
                name=category['name'],
                items=[ExpenseItem(name=item['name'],
                                   amount=float(item['amount']),
                                   inflation_rate=float(item['inflation_rate']))
                       for item in category.get('items', [])]
            )
            for category in data.get(frequency, [])
        ]
        buffer_key = f"{frequency}_buffer"
        if buffer_key in data:
            kwargs[buffer_key] = float(data[buffer_key])
    return ExpenseBudget(**kwargs)


def _period_total(categories: List[ExpenseCategory], multiplier: int,
                  buffer_pct: float, years: float) -> Dict[str, float]:
    current_total = 0.0
    future_total = 0.0
    for category in categories:
        for item in category.items:
            annual_amount = item.amount * multiplier
            current_total += annual_amount
            future_total += annual_amount * (1 + item.inflation_rate / 100) ** years
    return {
        'current_total': current_total * (1 + buffer_pct / 100),
        'future_total': future_total * (1 + buffer_pct / 100),
    }


def project_expenses(budget: ExpenseBudget,
                     years_to_retirement: float,
                     fire_multiplier: float = 25.0) -> ExpenseProjection:
    """
    Inflate the budget to retirement and derive the FIRE number.

    Args:
        budget: Expense budget in today's money
        years_to_retirement: Years until retirement
        fire_multiplier: Years of expenses to hold (25 = 4% withdrawal rate)

    Returns:
        ExpenseProjection
    """
    errors = budget.validate()
    if years_to_retirement < 0:
        errors.append("Years to retirement cannot be negative")
    if fire_multiplier <= 0:
        errors.append("FIRE multiplier must be positive")
    if errors:
        raise ValueError("Invalid expense inputs: " + "; ".join(errors))

    period_totals = {
        frequency: _period_total(getattr(budget, frequency), multiplier,
                                 getattr(budget, f"{frequency}_buffer"), years_to_retirement)
        for frequency, multiplier in FREQUENCY_MULTIPLIERS.items()
    }

    total_current = sum(p['current_total'] for p in period_totals.values())
    total_future = sum(p['future_total'] for p in period_totals.values())
    inflation_impact = (total_future - total_current) / total_current * 100 if total_current > 0 else 0.0

    return ExpenseProjection(
        period_totals=period_totals,
        total_current_annual=total_current,
        total_future_annual=total_future,
        fire_number=total_future * fire_multiplier,
        inflation_impact_pct=inflation_impact
    )
