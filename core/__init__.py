"""
Core module for Estate Nexus.
Contains data models, the feasibility engine, unit scenarios, and the
narrative analyst.
"""

from core.models import (
    DevelopmentType,
    ProjectData,
    FinancialResults,
    UnitScenario,
    UnknownDevelopmentTypeError,
)
from core.proforma import FeasibilityEngine, compute_financials, get_feasibility_engine
from core.scenarios import compute_unit_scenarios, scenarios_to_frame
from core.pipeline import FeasibilityPipeline, FeasibilitySnapshot, evaluate_project
from core.presets import list_presets, get_preset, default_preset

__all__ = [
    # Models
    "DevelopmentType",
    "ProjectData",
    "FinancialResults",
    "UnitScenario",
    "UnknownDevelopmentTypeError",
    # Engine
    "FeasibilityEngine",
    "compute_financials",
    "get_feasibility_engine",
    "compute_unit_scenarios",
    "scenarios_to_frame",
    # Pipeline
    "FeasibilityPipeline",
    "FeasibilitySnapshot",
    "evaluate_project",
    # Presets
    "list_presets",
    "get_preset",
    "default_preset",
]
