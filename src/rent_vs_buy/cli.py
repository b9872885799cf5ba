from __future__ import annotations

import json
import logging
import os
from typing import Optional

import typer

from .model import format_money, project, record_for_year
from .schemas import Assumptions, ViewMode, YearlyRecord, coerce_view_mode

app = typer.Typer(help="Compare the cost and wealth outcomes of renting versus buying.")


def _default_view() -> ViewMode:
    return coerce_view_mode(os.environ.get("RENT_VS_BUY_VIEW", ViewMode.WEALTH.value))


def _default_log_level() -> str:
    return os.environ.get("RENT_VS_BUY_LOG_LEVEL", "WARNING")


def _configure_logging(verbose: bool, level: str) -> None:
    resolved = logging.getLevelName(level.strip().upper())
    known = isinstance(resolved, int)
    logging.basicConfig(
        level=logging.DEBUG if verbose else (resolved if known else logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not known:
        logging.getLogger(__name__).warning("Unknown log level %r, using WARNING", level)


@app.command()
def run(
    years: int = typer.Option(10, help="Years staying (1-50)."),
    rent: float = typer.Option(2500.0, help="Monthly rent today."),
    rent_growth: float = typer.Option(
        0.03, help="Annual rent increase (e.g., 0.03 for 3%)."
    ),
    price: float = typer.Option(600000.0, help="Home purchase price."),
    down: float = typer.Option(0.20, help="Down payment as a share of price."),
    mortgage_rate: float = typer.Option(0.05, help="Nominal annual mortgage rate."),
    amortization: float = typer.Option(25.0, help="Amortization term in years."),
    property_tax: float = typer.Option(0.01, help="Property tax per year, share of value."),
    maintenance: float = typer.Option(0.01, help="Maintenance per year, share of value."),
    appreciation: float = typer.Option(0.03, help="Annual home price appreciation."),
    selling_cost: float = typer.Option(0.05, help="Selling costs as a share of sale price."),
    investment_return: float = typer.Option(
        0.06, help="Annual return on the renter's invested savings."
    ),
    view: ViewMode = typer.Option(
        default_factory=_default_view,
        help="Which comparison drives the verdict (env RENT_VS_BUY_VIEW).",
    ),
    year: Optional[int] = typer.Option(
        None, help="Print the detail of a single year's record."
    ),
    show_timeline: bool = typer.Option(
        False, help="If set, dump the yearly records as JSON."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_level: str = typer.Option(
        default_factory=_default_log_level,
        help="Logging level (env RENT_VS_BUY_LOG_LEVEL).",
    ),
) -> None:
    """
    Project renting against buying and print the verdict.
    """
    _configure_logging(verbose, log_level)

    assumptions = Assumptions(
        horizon_years=years,
        monthly_rent=rent,
        rent_growth_rate=rent_growth,
        home_price=price,
        down_payment_rate=down,
        mortgage_rate=mortgage_rate,
        amortization_years=amortization,
        property_tax_rate=property_tax,
        maintenance_rate=maintenance,
        appreciation_rate=appreciation,
        selling_cost_rate=selling_cost,
        investment_return=investment_return,
        view_mode=view,
    )
    result = project(assumptions)
    final = result.final_record

    typer.echo(
        f"Mortgage (est): ${format_money(result.monthly_mortgage_payment)}/mo"
        f" | Down payment: ${format_money(result.down_payment)}"
    )
    typer.echo("")
    typer.echo(result.verdict)
    typer.echo(result.breakeven_text)
    typer.echo("")
    typer.echo(f"Final (year {final.year}) rent paid: ${format_money(final.rent_paid_cumulative)}")
    typer.echo(f"Renter portfolio: ${format_money(final.renter_portfolio_value)}")
    typer.echo(f"Buy cash outflow: ${format_money(final.buy_cash_cumulative)}")
    typer.echo(f"Equity if sold: ${format_money(final.equity_if_sold)}")
    typer.echo(f"Better outcome: {result.better_option}")

    if year is not None:
        typer.echo("")
        _echo_year(record_for_year(result, year), result.view_mode)

    if show_timeline:
        payload = [
            {
                "year": record.year,
                "rent_paid_cumulative": record.rent_paid_cumulative,
                "renter_portfolio_value": record.renter_portfolio_value,
                "rent_net_cost": record.rent_net_cost,
                "buy_cash_cumulative": record.buy_cash_cumulative,
                "equity_if_sold": record.equity_if_sold,
                "net_buy_cost": record.net_buy_cost,
            }
            for record in result.records
        ]
        typer.echo(json.dumps(payload, indent=2))


def _echo_year(record: YearlyRecord, view: ViewMode) -> None:
    typer.echo(f"At year {record.year}:")
    typer.echo(f"  Rent paid (cum): ${format_money(record.rent_paid_cumulative)}")
    typer.echo(f"  Renter portfolio: ${format_money(record.renter_portfolio_value)}")
    typer.echo(f"  Buy cash outflow (cum): ${format_money(record.buy_cash_cumulative)}")
    typer.echo(f"  Equity (est): ${format_money(record.equity_if_sold)}")
    typer.echo(f"  Buy net cost: ${format_money(record.net_buy_cost)}")
    if view is ViewMode.COST:
        diff, label = record.cost_diff, "Rent net - Buy net"
    else:
        diff, label = record.wealth_diff, "Equity - Portfolio"
    winner = "buy" if diff > 0 else "rent"
    typer.echo(f"  {label} = ${format_money(diff)} ({winner} wins by that year)")


if __name__ == "__main__":
    app()
