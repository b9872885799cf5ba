"""
Rent vs. buy projection toolkit.

Given a flat set of housing, mortgage and investment assumptions, this
package simulates renting and buying month by month over a fixed horizon,
reports a yearly series of cumulative cash flows, renter portfolio and
home equity, and derives when (if ever) buying overtakes renting.
"""

import logging

from .schemas import (
    Assumptions,
    ProjectionResult,
    ViewMode,
    YearlyRecord,
)
from .model import (
    chart_series,
    monthly_mortgage_payment,
    project,
    record_for_year,
    select_view,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Assumptions",
    "ProjectionResult",
    "ViewMode",
    "YearlyRecord",
    "chart_series",
    "monthly_mortgage_payment",
    "project",
    "record_for_year",
    "select_view",
]
