"""
Aurora Tests: Model Analysis
============================

Tests:
- Selection ordering and validation
- Checkbox state behind the dialog
- Running the selected analyses
"""

import importlib
import io
import json

import pytest
from rich.console import Console

from aurora_tools.core.config import AuroraConfig, set_config
from aurora_tools.core.exceptions import DisplayUnavailableError, ModelLoadError
from aurora_tools.model.architecture import ModelLoader
from aurora_tools.tools.model_analysis import (
    ANALYSIS_KEYS,
    SelectionState,
    model_analysis,
    order_selection,
    run_model_analysis,
    selection_from_config,
)

# The package re-exports the model_analysis function under the module name
analysis_module = importlib.import_module("aurora_tools.tools.model_analysis")


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=100)


@pytest.mark.unit
class TestSelection:

    def test_fixed_run_order(self):
        assert order_selection(["properties", "mass", "cost"]) == ["cost", "mass", "properties"]

    def test_duplicates_removed(self):
        assert order_selection(["mass", "mass"]) == ["mass"]

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            order_selection(["volume"])

    def test_selection_from_config(self):
        enabled = {"mass": True, "cost": False, "air_resistance": True, "properties": False}

        assert selection_from_config(enabled) == ["mass", "air_resistance"]

    def test_all_keys(self):
        assert ANALYSIS_KEYS == ["cost", "mass", "air_resistance", "properties"]


@pytest.mark.unit
class TestSelectionState:

    def test_nothing_checked_does_not_confirm(self):
        assert SelectionState().confirm() is None

    def test_individual_checkboxes(self):
        state = SelectionState()
        state.set("properties", True)
        state.set("cost", True)

        assert state.confirm() == ["cost", "properties"]

    def test_select_all_sets_every_checkbox(self):
        state = SelectionState()
        state.toggle_all(True)

        assert state.selected() == ANALYSIS_KEYS

        state.toggle_all(False)
        assert state.confirm() is None

    def test_unchecking_after_select_all(self):
        state = SelectionState()
        state.toggle_all(True)
        state.set("mass", False)

        assert state.selected() == ["cost", "air_resistance", "properties"]


@pytest.mark.integration
class TestRunModelAnalysis:

    def test_runs_selected_analyses(self, config, model_file, console):
        results = run_model_analysis("NRC_Template", ["properties", "mass"], console=console)

        assert list(results) == ["mass", "properties"]
        assert (config.paths.output_dir / "MassBreakdown.xlsx").exists()
        assert (config.paths.output_dir / "OccurrenceProperties.xlsx").exists()
        assert not (config.paths.output_dir / "CostBreakdown.xlsx").exists()

        output = console.file.getvalue()
        assert "MODEL ANALYSIS REPORT" in output
        assert "ANALYSIS COMPLETE" in output
        assert output.index("Mass Breakdown") < output.index("All Properties Export")

    def test_model_loaded_once(self, config, model_file, console):
        loader = ModelLoader(config)

        run_model_analysis("NRC_Template", ANALYSIS_KEYS, loader=loader, console=console)

        assert loader.is_loaded("NRC_Template")
        assert console.file.getvalue().count("Loading model") == 1

    def test_project_root_fallback(self, tmp_path, rocket_model_data, console):
        config = AuroraConfig.for_root(tmp_path)
        config.paths.model_dir = tmp_path / "models"
        set_config(config)
        (tmp_path / "NRC_Template.json").write_text(json.dumps(rocket_model_data), encoding="utf-8")

        results = run_model_analysis(selected=["cost"], config=config, console=console)

        assert results["cost"].total == pytest.approx(690.0)

    def test_empty_selection(self, config, console):
        with pytest.raises(ValueError):
            run_model_analysis("NRC_Template", [], console=console)

    def test_missing_model(self, config, console):
        with pytest.raises(ModelLoadError):
            run_model_analysis("Ghost", ["mass"], console=console)

    def test_cancelled_dialog_runs_nothing(self, config, monkeypatch):
        monkeypatch.setattr(analysis_module.AnalysisSelectionDialog, "show", lambda self: [])

        assert model_analysis("NRC_Template") == {}

    def test_dialog_selection_is_run(self, config, model_file, monkeypatch):
        shown = []
        monkeypatch.setattr(analysis_module.AnalysisSelectionDialog, "show", lambda self: ["cost"])
        monkeypatch.setattr(analysis_module, "show_completion_message", shown.append)

        results = model_analysis("NRC_Template")

        assert list(results) == ["cost"]
        assert shown == [config.paths.output_dir]

    def test_dialog_without_display(self, config, headless_tkinter):
        with pytest.raises(DisplayUnavailableError) as exc_info:
            model_analysis("NRC_Template")

        assert "--select" in str(exc_info.value)
        assert "$DISPLAY" in str(exc_info.value)
