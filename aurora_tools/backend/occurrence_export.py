"""
Aurora Backend: Occurrence Properties Export
Export occurrence numbers and every stereotype property to Excel

The workbook has two sheets:
  1. Summary    - OccurrenceNumber | PartNumber | ComponentName | Properties
  2. Properties - OccurrenceNumber | Component | Property Name | Property Value

Component names sharing an occurrence number are joined with "; ". The
Properties column of the Summary sheet points at the detail rows.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from openpyxl import Workbook

from ..core.config import AuroraConfig, get_config
from ..core.exceptions import AuroraError, ExportError
from ..model.architecture import ModelLoader
from .excel_format import ReportFormatter, create_report_formatter
from .extractor import extract_occurrence_data
from .models import OccurrenceGroup

logger = logging.getLogger(__name__)

SUMMARY_HEADERS = ["OccurrenceNumber", "PartNumber", "ComponentName", "Properties"]
PROPERTY_HEADERS = ["OccurrenceNumber", "Component", "Property Name", "Property Value"]


def build_summary_rows(groups: List[OccurrenceGroup]) -> List[List[Any]]:
    """Header plus one row per occurrence group"""
    rows: List[List[Any]] = [list(SUMMARY_HEADERS)]
    for i, group in enumerate(groups):
        rows.append([
            group.occurrence_number,
            group.part_number,
            "; ".join(group.component_names),
            f"See Properties sheet (Row {i + 2})",
        ])
    return rows


def build_property_rows(groups: List[OccurrenceGroup]) -> List[List[Any]]:
    """Header plus one row per property of every member component"""
    rows: List[List[Any]] = [list(PROPERTY_HEADERS)]
    for group in groups:
        for component in group.components:
            for prop_name, value in component.properties.items():
                rows.append([group.occurrence_number, component.name, prop_name, value.as_text()])
    return rows


def resolve_output_path(output_file_name: str, config: AuroraConfig) -> Path:
    """Reports always land in the configured Tools folder"""
    file_name = Path(output_file_name).name
    if not file_name.endswith(".xlsx"):
        file_name = f"{file_name}.xlsx"
    output_dir = Path(config.paths.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / file_name


def write_occurrence_workbook(groups: List[OccurrenceGroup], file_path: Path) -> Path:
    """Write the Summary and Properties sheets, replacing any existing file"""
    if file_path.exists():
        file_path.unlink()

    wb = Workbook()
    summary = wb.active
    summary.title = "Summary"
    for row in build_summary_rows(groups):
        summary.append(row)

    properties = wb.create_sheet("Properties")
    for row in build_property_rows(groups):
        properties.append(row)

    wb.save(file_path)
    return file_path


def export_occurrence_properties(
    model_name: Optional[str] = None,
    output_file_name: Optional[str] = None,
    config: Optional[AuroraConfig] = None,
    loader: Optional[ModelLoader] = None,
    formatter: Optional[ReportFormatter] = None
) -> Optional[Path]:
    """
    Export occurrence numbers and properties of a model to Excel

    Args:
        model_name: Architecture model name (default from configuration)
        output_file_name: Output workbook name, ".xlsx" appended when missing
        config: Configuration (global configuration when omitted)
        loader: Model loader (one built from config when omitted)
        formatter: Report formatter (configured formatter when omitted)

    Returns:
        Path of the written workbook, or None when the model has no
        component with an occurrence number

    Raises:
        ModelLoadError: If the model cannot be loaded
        ExportError: If the workbook cannot be written
    """
    config = config or get_config()
    model_name = model_name or config.model.default_model_name
    output_file_name = output_file_name or config.reports.occurrence_export_name
    loader = loader or ModelLoader(config)
    formatter = formatter or create_report_formatter(config.reports.enable_formatting)

    output_path = resolve_output_path(output_file_name, config)

    logger.info(f"Extracting occurrence data from model: {model_name}")

    try:
        groups = extract_occurrence_data(model_name, loader=loader)

        if not groups:
            logger.warning(f"No components with OccurrenceNumber property found in model: {model_name}")
            return None

        logger.info(f"Found {len(groups)} unique occurrence numbers")

        write_occurrence_workbook(groups, output_path)
        formatter.format_occurrence_export(output_path)

        logger.info(f"Export complete! File saved as: {output_path}")
        return output_path

    except AuroraError:
        raise
    except Exception as e:
        raise ExportError(f"Failed to export occurrence properties:\n{e}") from e
