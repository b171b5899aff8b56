"""
Unit Scenario Generator - Unit-mix projections per development type.

Each development type maps to a fixed typology table. Tiers are independent
what-if breakdowns over the same buildable area, not a partition of it: the
summed revenue of the APARTMENTS tiers can exceed the project's total revenue.
"""

import math
from typing import Callable, Dict, List, Sequence

import pandas as pd

from core.models import (
    DevelopmentType,
    FinancialResults,
    ProjectData,
    UnitScenario,
    UnknownDevelopmentTypeError,
)

# Reference unit sizes, m²
TOWNHOUSE_SIZE = 300
APARTMENT_TIERS = (
    ("Luxury 1BR", 85),
    ("Spacious 3BR", 180),
    ("Full Floor Penthouse", 450),
)
RETAIL_SHARE = 0.2
RETAIL_PREMIUM = 1.5
OFFICE_SHARE = 0.8
OFFICE_SUITE_SIZE = 120


def units_that_fit(area: float, unit_size: float) -> int:
    """
    Whole units of unit_size that fit in area. Partial units do not count.

    An area too large to represent (overflowed to inf) or NaN yields 0.
    """
    quotient = area / unit_size
    if not math.isfinite(quotient):
        return 0
    return max(0, math.floor(quotient))


def _houses(project: ProjectData, results: FinancialResults) -> List[UnitScenario]:
    area = results.buildable_area
    price = project.expected_selling_price_per_m2
    return [
        UnitScenario(
            type="Signature Villa",
            unit_count=1,
            avg_unit_size=area,
            revenue_per_unit=results.total_revenue,
        ),
        UnitScenario(
            type="Standard Townhouse",
            unit_count=units_that_fit(area, TOWNHOUSE_SIZE),
            avg_unit_size=TOWNHOUSE_SIZE,
            revenue_per_unit=TOWNHOUSE_SIZE * price,
        ),
    ]


def _apartments(project: ProjectData, results: FinancialResults) -> List[UnitScenario]:
    area = results.buildable_area
    price = project.expected_selling_price_per_m2
    return [
        UnitScenario(
            type=name,
            unit_count=units_that_fit(area, size),
            avg_unit_size=size,
            revenue_per_unit=size * price,
        )
        for name, size in APARTMENT_TIERS
    ]


def _mixed_use(project: ProjectData, results: FinancialResults) -> List[UnitScenario]:
    area = results.buildable_area
    price = project.expected_selling_price_per_m2
    retail_area = area * RETAIL_SHARE
    return [
        UnitScenario(
            type="Prime Retail",
            unit_count=1,
            avg_unit_size=retail_area,
            revenue_per_unit=retail_area * price * RETAIL_PREMIUM,
        ),
        UnitScenario(
            type="Office Suites",
            unit_count=units_that_fit(area * OFFICE_SHARE, OFFICE_SUITE_SIZE),
            avg_unit_size=OFFICE_SUITE_SIZE,
            revenue_per_unit=OFFICE_SUITE_SIZE * price,
        ),
    ]


# Every DevelopmentType member needs an entry here.
TYPOLOGY_BUILDERS: Dict[DevelopmentType, Callable[[ProjectData, FinancialResults], List[UnitScenario]]] = {
    DevelopmentType.HOUSES: _houses,
    DevelopmentType.APARTMENTS: _apartments,
    DevelopmentType.MIXED_USE: _mixed_use,
}


def compute_unit_scenarios(project: ProjectData, results: FinancialResults) -> List[UnitScenario]:
    """
    Derive the unit-mix breakdown for a project.

    Args:
        project: The project the results were computed from.
        results: Output of compute_financials() for the same project.

    Returns:
        Ordered list of UnitScenario rows.

    Raises:
        UnknownDevelopmentTypeError: if the project's development type has
            no typology table.
    """
    try:
        builder = TYPOLOGY_BUILDERS[project.development_type]
    except (KeyError, TypeError):
        raise UnknownDevelopmentTypeError(project.development_type) from None
    return builder(project, results)


def scenarios_to_frame(scenarios: Sequence[UnitScenario]) -> pd.DataFrame:
    """Tabulate scenarios for display."""
    columns = ["Typology", "Units", "Avg Size (m²)", "Value / Unit"]
    rows = [
        [s.type, s.unit_count, s.avg_unit_size, s.revenue_per_unit]
        for s in scenarios
    ]
    return pd.DataFrame(rows, columns=columns)
