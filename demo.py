#!/usr/bin/env python3
"""
Demo script showing how to use the projection calculators programmatically.
This demonstrates the core functionality without any UI.
"""

import logging

from buckets import BucketSimulator
from config_utils import get_params_with_overrides, load_calculator_config
from expenses import budget_from_dict, project_expenses
from fire import calculate_fire
from investment import project_investment
from io_utils import PARAMS_TYPES, create_bucket_summary_report, dict_to_params
from market_returns import cycle_summary
from milestones import plan_milestones


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = load_calculator_config()

    print("Bucket Strategy Demo")
    print("=" * 50)

    # 1. Three-bucket withdrawal strategy
    bucket_params = dict_to_params(get_params_with_overrides('bucket', config), PARAMS_TYPES['bucket'])
    results = BucketSimulator(bucket_params).run_simulation()
    report = create_bucket_summary_report(bucket_params, results)

    print(f"\nMonthly requirement: {bucket_params.monthly_requirement:,.0f} "
          f"(inflating {bucket_params.inflation_rate}% a year)")
    if results.years_lasted is None:
        print(f"   Corpus lasts {bucket_params.max_years}+ years")
    else:
        print(f"   Corpus exhausted in month {results.exhaustion_month} "
              f"({results.years_lasted} years)")
    print(f"   Dividends received: {report['totals']['dividends']:,.0f}")
    print(f"   Tier-1 refills: {report['totals']['tier1_refills']}, "
          f"Tier-2 refills: {report['totals']['tier2_refills']}")

    cycle = cycle_summary(bucket_params.tier3_return)
    print(f"   Tier-3 cycle: best year {cycle['best_year']:.1%}, worst year {cycle['worst_year']:.1%}, "
          f"CAGR {cycle['cagr']:.2%}")

    print(f"\n   {'Year':<6} {'Tier-1':>12} {'Tier-2':>12} {'Tier-3a':>14} {'Tier-3b':>14}")
    yearly = results.yearly_summary()
    for i in range(min(5, len(yearly['year']))):
        print(f"   {yearly['year'][i]:<6} {yearly['tier1'][i]:>12,.0f} {yearly['tier2'][i]:>12,.0f} "
              f"{yearly['tier3a'][i]:>14,.0f} {yearly['tier3b'][i]:>14,.0f}")

    # 2. SIP and lumpsum growth
    investment = project_investment(
        dict_to_params(get_params_with_overrides('investment', config), PARAMS_TYPES['investment']))
    print(f"\nSIP projection: invested {investment.summary['total_principal']:,.0f}, "
          f"final value {investment.summary['final_value']:,.0f}")

    # 3. FIRE horizon
    fire = calculate_fire(dict_to_params(get_params_with_overrides('fire', config), PARAMS_TYPES['fire']))
    if fire.fire_reached:
        print(f"FIRE reached in {fire.fire_year} at age {fire.fire_age}")
    else:
        print(f"FIRE not reached within {len(fire.yearly['year'])} years")

    # 4. Child milestones
    plan = plan_milestones(
        dict_to_params(get_params_with_overrides('milestones', config), PARAMS_TYPES['milestones']))
    print(f"Milestone plan: withdrawn {plan.totals['withdrawals']:,.0f}, "
          f"final balance {plan.final_balance:,.0f} after {plan.total_years} years")

    # 5. Expenses and FIRE number
    expenses = project_expenses(budget_from_dict(get_params_with_overrides('expenses', config)),
                                years_to_retirement=20)
    print(f"Annual expenses today {expenses.total_current_annual:,.0f}, "
          f"at retirement {expenses.total_future_annual:,.0f}, FIRE number {expenses.fire_number:,.0f}")

    print("\nDemo completed successfully!")
    print("   To run tests: python3 -m pytest tests/ -v")


if __name__ == "__main__":
    main()
