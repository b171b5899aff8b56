"""
Evaluation pipeline - Recomputes results whenever the project changes.

A change handler receives a new ProjectData, runs the financial engine and
then the scenario generator, and publishes both together as one snapshot.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from core.models import FinancialResults, ProjectData, UnitScenario
from core.proforma import compute_financials
from core.scenarios import compute_unit_scenarios

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeasibilitySnapshot:
    """A project together with everything derived from it."""
    project: ProjectData
    results: FinancialResults
    scenarios: Tuple[UnitScenario, ...]


def evaluate_project(project: ProjectData) -> FeasibilitySnapshot:
    """Run the engine and scenario generator for one project."""
    results = compute_financials(project)
    scenarios = tuple(compute_unit_scenarios(project, results))
    log.debug(f"Evaluated {project.id}: ROI {results.roi:.2f}%, {len(scenarios)} scenarios")
    return FeasibilitySnapshot(project=project, results=results, scenarios=scenarios)


Subscriber = Callable[[FeasibilitySnapshot], None]


class FeasibilityPipeline:
    """
    Change handler for project selection.

    Subscribers are only notified with complete snapshots. If evaluation
    fails, the previous snapshot stays current and nothing is published.
    """

    def __init__(self):
        self.current: Optional[FeasibilitySnapshot] = None
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def submit(self, project: ProjectData) -> FeasibilitySnapshot:
        """Evaluate a new project record and publish the result."""
        snapshot = evaluate_project(project)
        self.current = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)
        return snapshot
