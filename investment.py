"""
SIP and lumpsum growth calculator.
Monthly SIP with an annual percentage step-up, an initial investment and
optional one-time lumpsums deposited at the start of a year.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from projection import LumpsumInjection, MonthlyProjector, ProjectionParams


@dataclass
class InvestmentParams:
    """Parameters for the SIP / lumpsum calculator"""
    initial_investment: float = 10_000_000
    monthly_sip: float = 60_000
    step_up_pct: float = 5.0
    expected_return_pct: float = 12.0
    sip_years: int = 10
    invest_years: int = 20
    additional_lumpsums: List[Tuple[float, int]] = field(default_factory=list)  # (amount, year)

    def validate(self) -> List[str]:
        errors = []
        if self.initial_investment < 0:
            errors.append("Initial investment cannot be negative")
        if self.monthly_sip < 0:
            errors.append("Monthly SIP cannot be negative")
        if self.step_up_pct < 0:
            errors.append("Step-up % cannot be negative")
        if self.expected_return_pct < 0:
            errors.append("Expected return % cannot be negative")
        if self.sip_years < 0:
            errors.append("SIP years cannot be negative")
        if self.invest_years < 0:
            errors.append("Investment years cannot be negative")
        if self.sip_years > self.invest_years:
            errors.append("Investment years must be greater than or equal to SIP years")
        for amount, year in self.additional_lumpsums:
            if amount < 0 or year < 0:
                errors.append("Lumpsum amounts and years cannot be negative")
        return errors

    def to_projection_params(self) -> ProjectionParams:
        return ProjectionParams(
            initial_principal=self.initial_investment,
            monthly_contribution=self.monthly_sip,
            step_up_pct=self.step_up_pct,
            annual_return=self.expected_return_pct,
            contribution_months=self.sip_years * 12,
            horizon_months=self.invest_years * 12,
            lumpsums=[LumpsumInjection(amount=amount, month=int(year) * 12)
                      for amount, year in self.additional_lumpsums],
        )


@dataclass
class InvestmentResults:
    """Yearly points, year rows and summary of a SIP projection"""
    yearly: Dict[str, List[float]]
    year_rows: Dict[str, List[float]]
    summary: Dict[str, float]


def project_investment(params: InvestmentParams) -> InvestmentResults:
    """
    Project SIP and lumpsum growth.

    Args:
        params: InvestmentParams

    Returns:
        InvestmentResults with year 0..N points (principal, value, gains)
    """
    errors = params.validate()
    if errors:
        raise ValueError("Invalid investment inputs: " + "; ".join(errors))

    projection = MonthlyProjector(params.to_projection_params()).run_projection()
    details = projection.year_by_year_details

    yearly = {
        'year': [0],
        'principal': [float(params.initial_investment)],
        'value': [float(params.initial_investment)],
        'gains': [0.0],
    }
    for year, principal, value in zip(details['year'], details['cumulative_principal'],
                                      details['end_balance']):
        yearly['year'].append(year)
        yearly['principal'].append(principal)
        yearly['value'].append(value)
        yearly['gains'].append(max(0.0, value - principal))

    year_rows = {
        'year': [], 'contributions_this_year': [], 'start_value': [], 'end_value': [],
        'cumulative_principal': [], 'cumulative_gains': [], 'growth_this_year': []
    }
    for i in range(1, len(yearly['year'])):
        contributions = max(0.0, yearly['principal'][i] - yearly['principal'][i - 1])
        year_rows['year'].append(yearly['year'][i])
        year_rows['contributions_this_year'].append(contributions)
        year_rows['start_value'].append(yearly['value'][i - 1])
        year_rows['end_value'].append(yearly['value'][i])
        year_rows['cumulative_principal'].append(yearly['principal'][i])
        year_rows['cumulative_gains'].append(yearly['gains'][i])
        year_rows['growth_this_year'].append(
            yearly['value'][i] - yearly['value'][i - 1] - contributions)

    final_value = projection.final_balance
    total_principal = projection.totals['principal']
    summary = {
        'total_principal': total_principal,
        'final_value': final_value,
        'total_gains': final_value - total_principal,
    }

    return InvestmentResults(yearly=yearly, year_rows=year_rows, summary=summary)
