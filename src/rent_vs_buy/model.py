from __future__ import annotations

import logging
import math
from dataclasses import replace
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from .schemas import (
    Assumptions,
    MonthlyCashFlow,
    ProjectionResult,
    SimulationState,
    ViewMode,
    YearlyRecord,
    coerce_view_mode,
    finite_or,
)

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


@lru_cache(maxsize=128)
def project(assumptions: Assumptions) -> ProjectionResult:
    """
    Simulate renting versus buying month by month over the horizon.

    The result is cached on the assumptions, so recomputing with identical
    inputs returns the same (immutable) result object.
    """
    payment = monthly_mortgage_payment(
        assumptions.loan_amount, assumptions.mortgage_rate, assumptions.amortization_years
    )
    state = SimulationState(
        mortgage_balance=assumptions.loan_amount,
        home_value=assumptions.home_price,
        renter_portfolio=assumptions.down_payment,
        buy_cash=assumptions.down_payment,
    )

    wealth_breakeven: Optional[int] = None
    cost_breakeven: Optional[int] = None
    records: List[YearlyRecord] = []

    for year in range(1, assumptions.horizon_years + 1):
        state, record = simulate_year(state, year, payment, assumptions)
        records.append(record)
        wealth_breakeven = first_crossing(
            wealth_breakeven,
            year,
            record.equity_if_sold > record.renter_portfolio_value,
        )
        cost_breakeven = first_crossing(
            cost_breakeven, year, record.net_buy_cost < record.rent_net_cost
        )

    result = summarize(
        tuple(records),
        monthly_payment=payment,
        down_payment=assumptions.down_payment,
        wealth_breakeven_year=wealth_breakeven,
        cost_breakeven_year=cost_breakeven,
        view_mode=assumptions.view_mode,
    )
    logger.debug(
        "Projected %d years: payment=%.2f wealth_breakeven=%s cost_breakeven=%s",
        assumptions.horizon_years,
        payment,
        wealth_breakeven,
        cost_breakeven,
    )
    return result


def monthly_mortgage_payment(
    principal: Any, annual_rate: Any, term_years: Any
) -> float:
    """Level payment that retires ``principal`` over ``term_years`` at ``annual_rate``."""
    principal = finite_or(principal)
    rate = finite_or(annual_rate)
    months = max(1.0, finite_or(term_years, 1.0)) * MONTHS_PER_YEAR
    if principal <= 0:
        return 0.0
    straight_line = principal / months
    growth = 1 + rate / MONTHS_PER_YEAR
    # A rate at or below -100% a month, or one too small to register, has no annuity.
    if growth <= 0 or growth == 1:
        return straight_line
    try:
        discount = growth ** (-months)
    except OverflowError:
        return straight_line
    payment = principal * (growth - 1) / (1 - discount)
    if not math.isfinite(payment) or payment < 0:
        return straight_line
    return payment


def advance_month(
    state: SimulationState,
    year: int,
    payment: float,
    assumptions: Assumptions,
) -> Tuple[SimulationState, MonthlyCashFlow]:
    rent = assumptions.monthly_rent * _compound(assumptions.rent_growth_rate, year - 1)

    balance = state.mortgage_balance
    interest = balance * assumptions.mortgage_rate / MONTHS_PER_YEAR
    principal = min(max(payment - interest, 0.0), balance)
    balance = _non_negative(balance - principal)

    # Carrying costs use the start-of-year value; appreciation lands at year-end.
    owner_cash = (
        payment
        + state.home_value * assumptions.property_tax_rate / MONTHS_PER_YEAR
        + state.home_value * assumptions.maintenance_rate / MONTHS_PER_YEAR
    )

    # Growth first, then the month's contribution (or withdrawal).
    portfolio = state.renter_portfolio * (
        1 + assumptions.investment_return / MONTHS_PER_YEAR
    ) + (owner_cash - rent)

    next_state = replace(
        state,
        mortgage_balance=balance,
        renter_portfolio=_non_negative(portfolio),
        rent_paid=state.rent_paid + rent,
        buy_cash=state.buy_cash + owner_cash,
    )
    return next_state, MonthlyCashFlow(
        rent=rent, owner_cash=owner_cash, interest=interest, principal=principal
    )


def simulate_year(
    state: SimulationState,
    year: int,
    payment: float,
    assumptions: Assumptions,
) -> Tuple[SimulationState, YearlyRecord]:
    for _ in range(MONTHS_PER_YEAR):
        state, _flow = advance_month(state, year, payment, assumptions)

    home_value = _non_negative(state.home_value * (1 + assumptions.appreciation_rate))
    state = replace(state, home_value=home_value)
    equity = _non_negative(
        home_value * (1 - assumptions.selling_cost_rate) - state.mortgage_balance
    )

    record = YearlyRecord(
        year=year,
        rent_paid_cumulative=state.rent_paid,
        renter_portfolio_value=state.renter_portfolio,
        rent_net_cost=state.rent_paid - state.renter_portfolio,
        buy_cash_cumulative=state.buy_cash,
        equity_if_sold=equity,
        net_buy_cost=state.buy_cash - equity,
        home_value=home_value,
        mortgage_balance=state.mortgage_balance,
    )
    return state, record


def _compound(rate: float, periods: int) -> float:
    """Growth factor after ``periods`` annual steps; overflow saturates to inf."""
    try:
        return max(1 + rate, 0.0) ** periods
    except OverflowError:
        return math.inf


def _non_negative(value: float) -> float:
    # NaN floors to 0 too.
    return value if value > 0 else 0.0


def first_crossing(current: Optional[int], year: int, crossed: bool) -> Optional[int]:
    """Latch the first year a crossing is seen; later years never move it."""
    if current is not None:
        return current
    return year if crossed else None


def summarize(
    records: Tuple[YearlyRecord, ...],
    *,
    monthly_payment: float,
    down_payment: float,
    wealth_breakeven_year: Optional[int],
    cost_breakeven_year: Optional[int],
    view_mode: ViewMode,
) -> ProjectionResult:
    last = records[-1]
    final_wealth_diff = last.equity_if_sold - last.renter_portfolio_value
    final_cost_diff = last.rent_net_cost - last.net_buy_cost
    verdict, breakeven_text = _verdict_text(
        view_mode,
        len(records),
        final_wealth_diff=final_wealth_diff,
        final_cost_diff=final_cost_diff,
        breakeven_year=(
            cost_breakeven_year if view_mode is ViewMode.COST else wealth_breakeven_year
        ),
    )
    return ProjectionResult(
        records=records,
        monthly_mortgage_payment=monthly_payment,
        down_payment=down_payment,
        wealth_breakeven_year=wealth_breakeven_year,
        cost_breakeven_year=cost_breakeven_year,
        view_mode=view_mode,
        verdict=verdict,
        breakeven_text=breakeven_text,
        final_wealth_diff=final_wealth_diff,
        final_cost_diff=final_cost_diff,
    )


def select_view(result: ProjectionResult, view_mode: ViewMode) -> ProjectionResult:
    """Surface another view of an existing projection without re-simulating."""
    view_mode = coerce_view_mode(view_mode)
    if view_mode is result.view_mode:
        return result
    return summarize(
        result.records,
        monthly_payment=result.monthly_mortgage_payment,
        down_payment=result.down_payment,
        wealth_breakeven_year=result.wealth_breakeven_year,
        cost_breakeven_year=result.cost_breakeven_year,
        view_mode=view_mode,
    )


def chart_series(
    result: ProjectionResult, view_mode: Optional[ViewMode] = None
) -> Dict[str, List[float]]:
    """Columns a chart needs for one view: the year axis plus the rent and buy lines."""
    view_mode = coerce_view_mode(view_mode) if view_mode is not None else result.view_mode
    years = [record.year for record in result.records]
    if view_mode is ViewMode.COST:
        return {
            "year": years,
            "rent": [record.rent_net_cost for record in result.records],
            "buy": [record.net_buy_cost for record in result.records],
        }
    return {
        "year": years,
        "rent": [record.renter_portfolio_value for record in result.records],
        "buy": [record.equity_if_sold for record in result.records],
    }


def record_for_year(result: ProjectionResult, year: object) -> YearlyRecord:
    """Record shown for a selected year; out-of-range picks clamp to the horizon."""
    try:
        wanted = int(float(year))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return result.final_record
    wanted = min(max(wanted, 1), len(result.records))
    return result.records[wanted - 1]


def format_money(amount: float) -> str:
    return f"{abs(amount):,.0f}"


def _verdict_text(
    view_mode: ViewMode,
    years: int,
    *,
    final_wealth_diff: float,
    final_cost_diff: float,
    breakeven_year: Optional[int],
) -> Tuple[str, str]:
    if view_mode is ViewMode.COST:
        winner = "Buying" if final_cost_diff > 0 else "Renting"
        verdict = (
            f"{winner} appears cheaper by ${format_money(final_cost_diff)} "
            f"over {years} years (net of equity)."
        )
    else:
        winner = "Buying" if final_wealth_diff > 0 else "Renting"
        verdict = (
            f"{winner} appears to build more wealth by "
            f"${format_money(final_wealth_diff)} over {years} years."
        )

    if breakeven_year is not None:
        breakeven_text = f"Estimated breakeven: year {breakeven_year}."
    else:
        breakeven_text = f"No breakeven within {years} years."
    return verdict, breakeven_text

