"""
Functional test for the feasibility flow.

Select a preset, edit it, recompute, and ask the analyst for a memo, as the
dashboard does on each interaction.
"""

import json
from dataclasses import replace

import pytest
from core.advisor import FailureReason, NarrativeAnalyst, NarrativeRequest
from core.models import DevelopmentType, ProjectData
from core.pipeline import FeasibilityPipeline
from core.presets import get_preset, list_presets
from core.scenarios import scenarios_to_frame


class CannedClient:
    """Completion client that echoes the requested ROI back as the score."""

    def complete(self, prompt):
        roi_line = next(line for line in prompt.splitlines() if line.startswith("- ROI:"))
        roi = float(roi_line.split(":")[1].strip().rstrip("%"))
        return "```json\n" + json.dumps({
            "executive_summary": f"ROI of **{roi:.1f}%**.",
            "project_score": roi,
            "projection_data": [{"year": f"Y{i}", "value": 100 + 10 * i} for i in range(1, 6)],
            "market_sentiment": [{"name": "Demand", "value": 60}, {"name": "Supply", "value": 40}],
            "competitor_comparison": [{"metric": "Yield (%)", "project": roi, "market": 10.5}],
            "verdict": "Proceed.",
        }) + "\n```"


class TestFeasibilityFlow:

    def test_preset_to_memo(self):
        pipeline = FeasibilityPipeline()
        published = []
        pipeline.subscribe(published.append)

        snapshot = pipeline.submit(get_preset("downtown-tower"))
        results = snapshot.results

        assert results.buildable_area == 6000
        assert results.total_revenue == 120_000_000
        assert results.total_project_cost == 45_000_000 + 6000 * 7200 + 3_400_000
        assert [s.unit_count for s in snapshot.scenarios] == [70, 33, 13]

        analyst = NarrativeAnalyst(CannedClient())
        result = analyst.analyze(NarrativeRequest.from_project(snapshot.project, results))

        assert result.ok
        assert result.report.project_score == round(results.roi)
        assert published == [snapshot]

    def test_edit_changes_typology_table(self):
        pipeline = FeasibilityPipeline()
        base = pipeline.submit(get_preset("downtown-tower"))

        edited = pipeline.submit(replace(
            base.project,
            id=f"{base.project.id}-custom",
            development_type=DevelopmentType.MIXED_USE,
        ))

        assert [s.type for s in edited.scenarios] == ["Prime Retail", "Office Suites"]
        assert edited.results == base.results
        assert pipeline.current is edited

    def test_round_trip_through_dict(self):
        for preset in list_presets():
            restored = ProjectData.from_dict(preset.to_dict())
            assert FeasibilityPipeline().submit(restored).results == FeasibilityPipeline().submit(preset).results

    @pytest.mark.parametrize("preset", list_presets(), ids=lambda p: p.id)
    def test_every_preset_tabulates(self, preset):
        snapshot = FeasibilityPipeline().submit(preset)
        frame = scenarios_to_frame(snapshot.scenarios)

        assert len(frame) == len(snapshot.scenarios)
        assert (frame["Units"] >= 0).all()

    def test_memo_without_api_key(self):
        snapshot = FeasibilityPipeline().submit(get_preset("business-bay-mixed"))
        result = NarrativeAnalyst().analyze(NarrativeRequest.from_project(snapshot.project, snapshot.results))

        assert result.failure.reason is FailureReason.UNAVAILABLE
