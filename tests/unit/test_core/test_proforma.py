"""Tests for the feasibility engine."""

import math

import pytest
from core.models import DevelopmentType, FinancialResults, ProjectData
from core.proforma import FeasibilityEngine, compute_financials, get_feasibility_engine


def make_project(**overrides) -> ProjectData:
    fields = dict(
        id="test",
        address="Test Plot, Dubai",
        plot_size=1000,
        build_factor=2,
        plot_cost=5_000_000,
        construction_cost_per_m2=4_000,
        additional_expenses=500_000,
        expected_selling_price_per_m2=12_000,
        development_type=DevelopmentType.APARTMENTS,
    )
    fields.update(overrides)
    return ProjectData(**fields)


class TestFeasibilityEngine:
    """Tests for the financial derivation."""

    def test_basic_calculation(self):
        result = compute_financials(make_project())

        assert result.buildable_area == 2000
        assert result.total_land_cost == 5_000_000
        assert result.total_construction_cost == 2000 * 4_000
        assert result.total_additional_expenses == 500_000
        assert result.total_project_cost == 13_500_000
        assert result.total_revenue == 24_000_000
        assert result.total_profit == 10_500_000
        assert result.profit_per_m2 == 10_500_000 / 2000
        assert result.roi == (10_500_000 / 13_500_000) * 100

    def test_negative_profit_propagates(self):
        result = compute_financials(make_project(expected_selling_price_per_m2=1_000))

        assert result.total_profit < 0
        assert result.roi < 0
        assert result.profit_per_m2 < 0

    @pytest.mark.parametrize("plot_size,build_factor", [
        (0, 2), (1000, 0), (0, 0), (-500, 2), (1000, -1),
    ])
    def test_profit_per_m2_guard(self, plot_size, build_factor):
        result = compute_financials(make_project(plot_size=plot_size, build_factor=build_factor))

        assert result.buildable_area <= 0
        assert result.profit_per_m2 == 0

    def test_zero_cost_project(self):
        result = compute_financials(make_project(
            plot_cost=0,
            construction_cost_per_m2=0,
            additional_expenses=0,
            expected_selling_price_per_m2=0,
        ))

        assert result.total_project_cost == 0
        assert result.roi == 0
        assert result.total_profit == 0
        assert result.profit_per_m2 == 0

    def test_negative_total_cost_guard(self):
        result = compute_financials(make_project(
            plot_cost=-2_000_000,
            construction_cost_per_m2=0,
            additional_expenses=0,
        ))

        assert result.total_project_cost < 0
        assert result.roi == 0

    def test_results_are_finite_for_edge_inputs(self):
        for overrides in (
            dict(plot_size=0, plot_cost=0, additional_expenses=0),
            dict(build_factor=0, construction_cost_per_m2=-10),
            dict(expected_selling_price_per_m2=-5_000),
        ):
            result = compute_financials(make_project(**overrides))
            for value in result.to_dict().values():
                assert math.isfinite(value)


class TestInvariants:
    """Identities that hold by construction."""

    @pytest.mark.parametrize("overrides", [
        {},
        dict(plot_size=733.3, build_factor=1.7),
        dict(plot_cost=0.1, construction_cost_per_m2=0.2, additional_expenses=0.3),
        dict(expected_selling_price_per_m2=-12.5),
        dict(plot_size=0),
    ])
    def test_cost_and_profit_identities(self, overrides):
        project = make_project(**overrides)
        result = compute_financials(project)

        assert result.buildable_area == project.plot_size * project.build_factor
        assert result.total_project_cost == (
            result.total_land_cost + result.total_construction_cost + result.total_additional_expenses
        )
        assert result.total_profit == result.total_revenue - result.total_project_cost

    def test_idempotent(self):
        project = make_project(plot_size=1234.567, build_factor=3.21)
        first = compute_financials(project)
        second = compute_financials(project)

        assert first == second
        assert first.roi.hex() == second.roi.hex()


class TestBreakeven:
    """Tests for the breakeven sale price."""

    def test_breakeven_zeroes_profit(self):
        engine = FeasibilityEngine()
        project = make_project()
        price = engine.breakeven_price_per_m2(project)

        result = engine.calculate(make_project(expected_selling_price_per_m2=price))
        assert result.total_profit == pytest.approx(0, abs=1e-6)

    def test_breakeven_without_area(self):
        engine = FeasibilityEngine()
        assert engine.breakeven_price_per_m2(make_project(build_factor=0)) == 0


class TestFinancialResults:
    """Tests for the FinancialResults data class."""

    def test_cost_breakdown_order(self):
        result = compute_financials(make_project())
        names = [name for name, _ in result.cost_breakdown()]
        assert names == ["Land Cost", "Construction", "Soft Costs"]

    def test_cost_shares_sum_to_100(self):
        result = compute_financials(make_project())
        total = sum(share for _, share in result.cost_shares())
        assert total == pytest.approx(100)

    def test_cost_shares_without_cost(self):
        result = compute_financials(make_project(
            plot_cost=0, construction_cost_per_m2=0, additional_expenses=0
        ))
        assert all(share == 0 for _, share in result.cost_shares())

    def test_yield_structure(self):
        result = compute_financials(make_project())
        assert result.yield_structure() == [
            ("Total Investment", result.total_project_cost),
            ("Net Profit", result.total_profit),
        ]

    def test_to_dict(self):
        result = FinancialResults(
            total_land_cost=1, total_construction_cost=2, total_additional_expenses=3,
            total_project_cost=6, buildable_area=10, total_revenue=20,
            total_profit=14, profit_per_m2=1.4, roi=233.3,
        )
        d = result.to_dict()
        assert d['total_project_cost'] == 6
        assert 'roi' in d


class TestFactoryFunction:
    """Tests for factory function."""

    def test_get_feasibility_engine(self):
        assert isinstance(get_feasibility_engine(), FeasibilityEngine)
