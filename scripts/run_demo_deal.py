"""
Run the default syndication deal and print the headline results.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from syndicator.calculations import calculate_syndication
from syndicator.calculations.presets import DEFAULT_DEAL, apply_waterfall_preset


def main(preset_name=None):
    inputs = DEFAULT_DEAL
    if preset_name:
        try:
            inputs = apply_waterfall_preset(inputs, preset_name)
        except KeyError:
            print(f"Unknown preset '{preset_name}'.")
            return

    results = calculate_syndication(inputs)

    print(f"Total capitalization: ${results.total_capitalization:,.0f}")
    print(f"  Loan:   ${results.loan_amount:,.0f}")
    print(f"  Equity: ${results.total_equity:,.0f} (LP ${results.lp_equity:,.0f} / GP ${results.gp_equity:,.0f})")
    print(f"Going-in cap rate: {results.going_in_cap_rate:.2f}%")
    print()

    print(f"{'Year':>4} {'NOI':>12} {'Debt Svc':>12} {'CF After':>12} {'LP Dist':>12} {'GP Dist':>12}")
    for year in results.yearly_projections:
        print(
            f"{year.year:>4} {year.noi:>12,.0f} {year.debt_service:>12,.0f} "
            f"{year.cash_flow_after_debt:>12,.0f} {year.lp_distribution:>12,.0f} "
            f"{year.gp_distribution:>12,.0f}"
        )
    print()

    print(f"Exit value: ${results.exit_value:,.0f}, net proceeds ${results.net_sale_proceeds:,.0f} (tier {results.exit_tier})")
    print(f"LP: IRR {results.lp_irr:.2f}%, multiple {results.lp_equity_multiple:.2f}x")
    print(f"GP: IRR {results.gp_irr:.2f}%, multiple {results.gp_equity_multiple:.2f}x, promote ${results.gp_promote:,.0f}")
    print()

    print("Exit cap rate sensitivity:")
    for row in results.sensitivity_analysis:
        print(
            f"  {row.exit_cap_rate:5.2f}%  value ${row.exit_value:>12,.0f}  "
            f"LP IRR {row.lp_irr:6.2f}%  GP IRR {row.gp_irr:6.2f}%"
        )


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
