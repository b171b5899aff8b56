import pytest
import importlib

def test_imports():
    """Verify that critical modules can be imported without error."""
    modules_to_test = [
        "core",
        "core.models",
        "core.proforma",
        "core.scenarios",
        "core.pipeline",
        "core.presets",
        "core.config",
        "core.advisor",
        "core.charts",
        "core.theme",
        "loaders",
        "loaders.location",
        # "app", # runs the Streamlit page on import
    ]

    for module_name in modules_to_test:
        try:
            importlib.import_module(module_name)
        except Exception as e:
            pytest.fail(f"Failed to import {module_name}: {e}")
