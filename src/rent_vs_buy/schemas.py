from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

MIN_HORIZON_YEARS = 1
MAX_HORIZON_YEARS = 50


class ViewMode(str, Enum):
    """Which derived pair of series drives the verdict."""

    WEALTH = "wealth"
    COST = "cost"


def finite_or(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _clamp(name: str, value: float, low: float, high: Optional[float] = None) -> float:
    clamped = max(low, value)
    if high is not None:
        clamped = min(high, clamped)
    if clamped != value:
        logger.warning("%s=%r out of range, using %r", name, value, clamped)
    return clamped


def coerce_view_mode(value: Any) -> ViewMode:
    if isinstance(value, ViewMode):
        return value
    try:
        return ViewMode(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown view mode %r, using %r", value, ViewMode.WEALTH.value)
        return ViewMode.WEALTH


@dataclass(frozen=True)
class Assumptions:
    """Scalar inputs for one projection. Rates are decimal fractions."""

    horizon_years: int = 10
    monthly_rent: float = 2500.0
    rent_growth_rate: float = 0.03  # annual, applied in yearly steps
    home_price: float = 600000.0
    down_payment_rate: float = 0.20
    mortgage_rate: float = 0.05  # nominal annual
    amortization_years: float = 25
    property_tax_rate: float = 0.01  # of home value, per year
    maintenance_rate: float = 0.01  # of home value, per year
    appreciation_rate: float = 0.03  # annual
    selling_cost_rate: float = 0.05  # of sale price
    investment_return: float = 0.06  # annual, compounded monthly
    view_mode: ViewMode = ViewMode.WEALTH

    def __post_init__(self) -> None:
        # Bad input is coerced, never rejected.
        horizon = math.floor(finite_or(self.horizon_years) or MIN_HORIZON_YEARS)
        amortization = finite_or(self.amortization_years) or 1.0
        normalized = {
            "horizon_years": int(
                _clamp("horizon_years", horizon, MIN_HORIZON_YEARS, MAX_HORIZON_YEARS)
            ),
            "monthly_rent": _clamp("monthly_rent", finite_or(self.monthly_rent), 0.0),
            "rent_growth_rate": finite_or(self.rent_growth_rate),
            "home_price": _clamp("home_price", finite_or(self.home_price), 0.0),
            "down_payment_rate": _clamp(
                "down_payment_rate", finite_or(self.down_payment_rate), 0.0, 1.0
            ),
            "mortgage_rate": finite_or(self.mortgage_rate),
            "amortization_years": _clamp("amortization_years", amortization, 1.0),
            "property_tax_rate": finite_or(self.property_tax_rate),
            "maintenance_rate": finite_or(self.maintenance_rate),
            "appreciation_rate": finite_or(self.appreciation_rate),
            "selling_cost_rate": _clamp(
                "selling_cost_rate", finite_or(self.selling_cost_rate), 0.0, 1.0
            ),
            "investment_return": finite_or(self.investment_return),
            "view_mode": coerce_view_mode(self.view_mode),
        }
        for name, value in normalized.items():
            object.__setattr__(self, name, value)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Assumptions":
        """Build from a flat record, ignoring keys that are not fields."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

    @property
    def down_payment(self) -> float:
        return self.home_price * self.down_payment_rate

    @property
    def loan_amount(self) -> float:
        return max(self.home_price - self.down_payment, 0.0)

    @property
    def term_months(self) -> float:
        return self.amortization_years * 12


@dataclass(frozen=True)
class MonthlyCashFlow:
    rent: float
    owner_cash: float
    interest: float
    principal: float


@dataclass(frozen=True)
class SimulationState:
    """Everything that carries from one simulated month to the next."""

    mortgage_balance: float
    home_value: float
    renter_portfolio: float
    rent_paid: float = 0.0
    buy_cash: float = 0.0


@dataclass(frozen=True)
class YearlyRecord:
    year: int
    rent_paid_cumulative: float
    renter_portfolio_value: float
    rent_net_cost: float
    buy_cash_cumulative: float
    equity_if_sold: float
    net_buy_cost: float
    home_value: float
    mortgage_balance: float

    @property
    def wealth_diff(self) -> float:
        """Positive when the owner is ahead on wealth at this year."""
        return self.equity_if_sold - self.renter_portfolio_value

    @property
    def cost_diff(self) -> float:
        """Positive when buying has been net cheaper up to this year."""
        return self.rent_net_cost - self.net_buy_cost


@dataclass(frozen=True)
class ProjectionResult:
    records: Tuple[YearlyRecord, ...]
    monthly_mortgage_payment: float
    down_payment: float
    wealth_breakeven_year: Optional[int]
    cost_breakeven_year: Optional[int]
    view_mode: ViewMode
    verdict: str
    breakeven_text: str
    final_wealth_diff: float
    final_cost_diff: float

    @property
    def horizon_years(self) -> int:
        return len(self.records)

    @property
    def final_record(self) -> YearlyRecord:
        return self.records[-1]

    @property
    def breakeven_year(self) -> Optional[int]:
        if self.view_mode is ViewMode.COST:
            return self.cost_breakeven_year
        return self.wealth_breakeven_year

    @property
    def final_diff(self) -> float:
        if self.view_mode is ViewMode.COST:
            return self.final_cost_diff
        return self.final_wealth_diff

    @property
    def better_option(self) -> str:
        if self.final_diff > 0:
            return "buying"
        if self.final_diff < 0:
            return "renting"
        return "tie"

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["records"] = [asdict(record) for record in self.records]
        payload["view_mode"] = self.view_mode.value
        return payload
