"""
Feasibility Engine - Derives project cost, revenue, profit and ROI.

Pure computation: the result is a function of the ProjectData argument only,
so it is safe to rerun on every input change.
"""

from core.models import ProjectData, FinancialResults


class FeasibilityEngine:
    """Engine for deriving financial results from project inputs."""

    def calculate(self, project: ProjectData) -> FinancialResults:
        """Calculate the full set of financial results for a project."""
        buildable_area = project.plot_size * project.build_factor

        # Costs
        total_land_cost = project.plot_cost
        total_construction_cost = buildable_area * project.construction_cost_per_m2
        total_additional_expenses = project.additional_expenses
        total_project_cost = total_land_cost + total_construction_cost + total_additional_expenses

        # Revenue and returns
        total_revenue = buildable_area * project.expected_selling_price_per_m2
        total_profit = total_revenue - total_project_cost
        profit_per_m2 = total_profit / buildable_area if buildable_area > 0 else 0.0
        roi = (total_profit / total_project_cost) * 100 if total_project_cost > 0 else 0.0

        return FinancialResults(
            total_land_cost=total_land_cost,
            total_construction_cost=total_construction_cost,
            total_additional_expenses=total_additional_expenses,
            total_project_cost=total_project_cost,
            buildable_area=buildable_area,
            total_revenue=total_revenue,
            total_profit=total_profit,
            profit_per_m2=profit_per_m2,
            roi=roi,
        )

    def breakeven_price_per_m2(self, project: ProjectData) -> float:
        """Sale rate at which total profit is exactly zero."""
        results = self.calculate(project)
        if results.buildable_area <= 0:
            return 0.0
        return results.total_project_cost / results.buildable_area


def compute_financials(project: ProjectData) -> FinancialResults:
    """Convenience function to derive financial results."""
    return FeasibilityEngine().calculate(project)


def get_feasibility_engine() -> FeasibilityEngine:
    """Factory function for the feasibility engine."""
    return FeasibilityEngine()
