"""
Aurora Tests: Occurrence Properties Export
==========================================

Tests:
- Summary and Properties sheet rows
- Output path resolution
- Workbook written to the Tools folder
- Empty model and load failures
"""

import json

import pytest
from openpyxl import load_workbook

from aurora_tools.backend.excel_format import ReportFormatter
from aurora_tools.backend.extractor import extract_occurrence_data
from aurora_tools.backend.occurrence_export import (
    PROPERTY_HEADERS,
    SUMMARY_HEADERS,
    build_property_rows,
    build_summary_rows,
    export_occurrence_properties,
    resolve_output_path,
)
from aurora_tools.core.config import AuroraConfig, set_config
from aurora_tools.core.exceptions import ExportError, ModelLoadError


@pytest.mark.unit
class TestSheetRows:

    def test_summary_rows(self, rocket_model):
        rows = build_summary_rows(extract_occurrence_data(rocket_model))

        assert rows[0] == SUMMARY_HEADERS
        assert len(rows) == 6
        assert rows[4] == ["OCC-003", "PN-300", "Fin 1; Fin 2", "See Properties sheet (Row 5)"]
        assert rows[1][3] == "See Properties sheet (Row 2)"

    def test_property_rows_cover_every_member_property(self, rocket_model):
        groups = extract_occurrence_data(rocket_model)
        rows = build_property_rows(groups)

        expected = sum(len(c.properties) for g in groups for c in g.components)
        assert rows[0] == PROPERTY_HEADERS
        assert len(rows) == expected + 1

    def test_property_values_rendered_as_text(self, rocket_model):
        rows = build_property_rows(extract_occurrence_data(rocket_model))
        recovery = {row[2]: row[3] for row in rows[1:] if row[1] == "Recovery"}

        assert recovery == {"OccuranceNumber": "7", "Mass": "2", "Deployed": "true"}


@pytest.mark.unit
class TestOutputPath:

    def test_extension_appended(self, config):
        assert resolve_output_path("MyOutput", config) == config.paths.output_dir / "MyOutput.xlsx"

    def test_extension_kept(self, config):
        assert resolve_output_path("MyOutput.xlsx", config) == config.paths.output_dir / "MyOutput.xlsx"

    def test_directories_in_name_are_ignored(self, config):
        assert resolve_output_path("elsewhere/Out", config) == config.paths.output_dir / "Out.xlsx"

    def test_output_folder_created(self, config):
        resolve_output_path("Out", config)

        assert config.paths.output_dir.is_dir()


@pytest.mark.integration
class TestExport:

    def test_export_writes_both_sheets(self, config, model_file):
        path = export_occurrence_properties("NRC_Template", "MyOutput")

        assert path == config.paths.output_dir / "MyOutput.xlsx"
        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Properties"]
        assert wb["Summary"].max_row == 6
        assert wb["Summary"]["C5"].value == "Fin 1; Fin 2"
        assert wb["Properties"]["A1"].value == "OccurrenceNumber"
        wb.close()

    def test_default_output_name(self, config, model_file):
        path = export_occurrence_properties()

        assert path.name == "OccurrenceProperties.xlsx"

    def test_export_formatting(self, config, model_file):
        path = export_occurrence_properties()

        wb = load_workbook(path)
        assert wb["Summary"]["A1"].font.bold
        assert wb["Properties"]["D1"].font.bold
        assert wb["Summary"]["B3"].border.left.style == "thin"
        wb.close()

    def test_export_without_formatting(self, config, model_file):
        path = export_occurrence_properties(formatter=ReportFormatter(enabled=False))

        wb = load_workbook(path)
        assert not wb["Summary"]["A1"].font.bold
        wb.close()

    def test_empty_model_returns_none(self, config, write_model):
        write_model({"name": "Bare", "architecture": {"components": [{"name": "A"}]}}, name="Bare")

        assert export_occurrence_properties("Bare") is None
        assert not (config.paths.output_dir / "OccurrenceProperties.xlsx").exists()

    def test_missing_model(self, config):
        with pytest.raises(ModelLoadError) as exc_info:
            export_occurrence_properties("Nowhere")

        assert "Nowhere" in str(exc_info.value)

    def test_write_failure_is_export_error(self, config, model_file, monkeypatch):
        def fail(groups, path):
            raise PermissionError("file is open in another program")

        monkeypatch.setattr("aurora_tools.backend.occurrence_export.write_occurrence_workbook", fail)

        with pytest.raises(ExportError) as exc_info:
            export_occurrence_properties()

        assert "file is open in another program" in str(exc_info.value)

    def test_explicit_config_locates_the_model(self, tmp_path, rocket_model_data):
        set_config(AuroraConfig.for_root(tmp_path / "global"))
        other = AuroraConfig.for_root(tmp_path / "other")
        other.paths.model_dir.mkdir(parents=True)
        (other.paths.model_dir / "NRC_Template.json").write_text(json.dumps(rocket_model_data), encoding="utf-8")

        path = export_occurrence_properties(config=other)

        assert path == other.paths.output_dir / "OccurrenceProperties.xlsx"
        assert path.exists()
