"""Tests for the preset catalog."""

import pytest
from core.models import DevelopmentType
from core.presets import PRESETS, default_preset, get_preset, list_presets, short_label
from core.proforma import compute_financials


class TestPresetCatalog:
    """Tests for the preset project catalog."""

    def test_ids_are_unique(self):
        ids = [p.id for p in PRESETS]
        assert len(ids) == len(set(ids))

    def test_covers_every_development_type(self):
        assert {p.development_type for p in PRESETS} == set(DevelopmentType)

    def test_presets_are_valid(self):
        for preset in list_presets():
            assert preset.validation_issues() == []

    def test_presets_have_positive_buildable_area(self):
        for preset in list_presets():
            assert compute_financials(preset).buildable_area > 0

    def test_get_preset(self):
        assert get_preset("downtown-tower").development_type is DevelopmentType.APARTMENTS

    def test_get_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("atlantis")

    def test_default_preset_is_first(self):
        assert default_preset() is PRESETS[0]

    def test_list_presets_is_a_copy(self):
        presets = list_presets()
        presets.clear()
        assert len(list_presets()) == len(PRESETS)


class TestShortLabel:
    """Tests for preset labels."""

    def test_short_label(self):
        assert short_label(get_preset("palm-jumeirah-villa")) == "Frond G"
