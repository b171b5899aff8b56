"""
Core data models for the feasibility engine.

A ProjectData record describes one feasibility case. FinancialResults and
UnitScenario are always derived from it and never edited on their own.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Tuple


class UnknownDevelopmentTypeError(ValueError):
    """Raised when a development type has no typology table."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unknown development type: {value!r}")


class DevelopmentType(Enum):
    """Development classification; selects the unit typology table."""
    HOUSES = "Houses"
    APARTMENTS = "Apartments"
    MIXED_USE = "Mixed Use"

    @property
    def label(self) -> str:
        """Human-readable category used in the sidebar."""
        return _TYPE_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "DevelopmentType":
        """Accept a member, its value ("Mixed Use") or its name ("MIXED_USE")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            for member in cls:
                if text == member.value or text.upper().replace(" ", "_") == member.name:
                    return member
        raise UnknownDevelopmentTypeError(value)


_TYPE_LABELS = {
    DevelopmentType.HOUSES: "Villas/Townhouses",
    DevelopmentType.APARTMENTS: "Luxury Apartments",
    DevelopmentType.MIXED_USE: "Commercial/Retail",
}


# camelCase keys accepted from JSON payloads -> field names
_CAMEL_KEYS = {
    "plotSize": "plot_size",
    "buildFactor": "build_factor",
    "plotCost": "plot_cost",
    "constructionCostPerM2": "construction_cost_per_m2",
    "additionalExpenses": "additional_expenses",
    "expectedSellingPricePerM2": "expected_selling_price_per_m2",
    "developmentType": "development_type",
}

_NUMERIC_FIELDS = (
    "plot_size",
    "build_factor",
    "plot_cost",
    "construction_cost_per_m2",
    "additional_expenses",
    "expected_selling_price_per_m2",
)


@dataclass(frozen=True)
class ProjectData:
    """
    The complete description of one feasibility case.

    Records are immutable. Editing a project means building a new record,
    e.g. with dataclasses.replace().
    """
    id: str
    address: str
    plot_size: float                       # m²
    build_factor: float                    # floor-area ratio
    plot_cost: float                       # land acquisition, currency
    construction_cost_per_m2: float        # currency / m²
    additional_expenses: float             # fees, consultants, currency
    expected_selling_price_per_m2: float   # currency / m²
    development_type: DevelopmentType = DevelopmentType.APARTMENTS

    def validation_issues(self) -> List[str]:
        """
        List constraint violations for display.

        The engine accepts every finite value, so these are warnings only.
        """
        issues = []
        if not str(self.id).strip():
            issues.append("Project id must not be empty")
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                issues.append(f"{name} must be a finite number")
            elif value < 0:
                issues.append(f"{name} must be >= 0 (got {value:g})")
        return issues

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["development_type"] = self.development_type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectData":
        normalized = {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}
        if "development_type" in normalized:
            normalized["development_type"] = DevelopmentType.parse(normalized["development_type"])
        for name in _NUMERIC_FIELDS:
            if name in normalized:
                normalized[name] = float(normalized[name])
        return cls(**normalized)


@dataclass(frozen=True)
class FinancialResults:
    """Financial figures derived from a single ProjectData."""
    total_land_cost: float
    total_construction_cost: float
    total_additional_expenses: float
    total_project_cost: float
    buildable_area: float
    total_revenue: float
    total_profit: float
    profit_per_m2: float
    roi: float  # percent

    def cost_breakdown(self) -> List[Tuple[str, float]]:
        """Cost components in display order."""
        return [
            ("Land Cost", self.total_land_cost),
            ("Construction", self.total_construction_cost),
            ("Soft Costs", self.total_additional_expenses),
        ]

    def yield_structure(self) -> List[Tuple[str, float]]:
        return [
            ("Total Investment", self.total_project_cost),
            ("Net Profit", self.total_profit),
        ]

    def cost_shares(self) -> List[Tuple[str, float]]:
        """Each cost component as a percentage of total project cost."""
        denominator = self.total_project_cost or 1
        return [(name, value / denominator * 100) for name, value in self.cost_breakdown()]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UnitScenario:
    """One row of a unit-mix breakdown."""
    type: str
    unit_count: int
    avg_unit_size: float   # m²
    revenue_per_unit: float

    @property
    def total_revenue(self) -> float:
        return self.unit_count * self.revenue_per_unit

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
