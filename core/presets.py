"""
Preset catalog of Dubai feasibility cases.

Static reference data: the sidebar loads one of these as the active project.
"""

from typing import Dict, List, Tuple

from core.models import DevelopmentType, ProjectData

PRESETS: Tuple[ProjectData, ...] = (
    ProjectData(
        id="palm-jumeirah-villa",
        address="Frond G, Palm Jumeirah, Dubai, UAE",
        plot_size=1200,
        build_factor=0.6,
        plot_cost=18_000_000,
        construction_cost_per_m2=9_500,
        additional_expenses=1_250_000,
        expected_selling_price_per_m2=48_000,
        development_type=DevelopmentType.HOUSES,
    ),
    ProjectData(
        id="downtown-tower",
        address="Mohammed Bin Rashid Blvd, Downtown Dubai, UAE",
        plot_size=2000,
        build_factor=3,
        plot_cost=45_000_000,
        construction_cost_per_m2=7_200,
        additional_expenses=3_400_000,
        expected_selling_price_per_m2=20_000,
        development_type=DevelopmentType.APARTMENTS,
    ),
    ProjectData(
        id="business-bay-mixed",
        address="Marasi Drive, Business Bay, Dubai, UAE",
        plot_size=3500,
        build_factor=4.5,
        plot_cost=82_000_000,
        construction_cost_per_m2=6_800,
        additional_expenses=6_100_000,
        expected_selling_price_per_m2=16_500,
        development_type=DevelopmentType.MIXED_USE,
    ),
    ProjectData(
        id="dubai-hills-townhouses",
        address="Golf Place, Dubai Hills Estate, Dubai, UAE",
        plot_size=9000,
        build_factor=0.9,
        plot_cost=38_000_000,
        construction_cost_per_m2=5_400,
        additional_expenses=2_300_000,
        expected_selling_price_per_m2=14_500,
        development_type=DevelopmentType.HOUSES,
    ),
    ProjectData(
        id="jvc-midrise",
        address="District 12, Jumeirah Village Circle, Dubai, UAE",
        plot_size=1800,
        build_factor=2.5,
        plot_cost=9_500_000,
        construction_cost_per_m2=4_300,
        additional_expenses=900_000,
        expected_selling_price_per_m2=11_200,
        development_type=DevelopmentType.APARTMENTS,
    ),
    ProjectData(
        id="dubai-marina-podium",
        address="Al Marsa Street, Dubai Marina, Dubai, UAE",
        plot_size=2600,
        build_factor=5,
        plot_cost=96_000_000,
        construction_cost_per_m2=7_900,
        additional_expenses=7_500_000,
        expected_selling_price_per_m2=19_800,
        development_type=DevelopmentType.MIXED_USE,
    ),
)

_BY_ID: Dict[str, ProjectData] = {p.id: p for p in PRESETS}


def list_presets() -> List[ProjectData]:
    return list(PRESETS)


def get_preset(preset_id: str) -> ProjectData:
    """Look up a preset by id. Raises KeyError for unknown ids."""
    return _BY_ID[preset_id]


def default_preset() -> ProjectData:
    return PRESETS[0]


def short_label(project: ProjectData) -> str:
    """First part of the address, e.g. 'Frond G'."""
    return project.address.split(",")[0].strip()
