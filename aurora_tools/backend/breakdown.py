"""
Aurora Backend: Breakdown Reports
Mass, cost and air resistance totals across all occurrence components

Each report:
  1. Refreshes OccurrenceProperties.xlsx (when enabled in the configuration)
  2. Re-runs the occurrence extractor
  3. Writes one row per component instance (OccurrenceNumber, ComponentName,
     value) followed by a TOTAL row, to a single-sheet workbook in the
     Tools folder

Values that are missing or not numeric count as 0. Numeric strings such as
"12.5" are parsed; strings that do not parse also count as 0.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from openpyxl import Workbook

from ..core.config import AuroraConfig, get_config
from ..model.architecture import ModelLoader
from .excel_format import ReportFormatter, create_report_formatter
from .extractor import extract_occurrence_data
from .models import BreakdownResult, BreakdownRow, OccurrenceGroup
from .occurrence_export import export_occurrence_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakdownSpec:
    """What a breakdown report sums and where it writes"""
    key: str
    title: str
    property_name: str
    header: str
    sheet_name: str
    file_name: str
    total_format: str


MASS = BreakdownSpec(
    key="mass",
    title="Mass Breakdown",
    property_name="Mass",
    header="Mass (kg)",
    sheet_name="Mass Breakdown",
    file_name="MassBreakdown.xlsx",
    total_format="Total Mass: {:.2f} kg",
)

COST = BreakdownSpec(
    key="cost",
    title="Cost Breakdown",
    property_name="Cost",
    header="Cost (£)",
    sheet_name="Cost Breakdown",
    file_name="CostBreakdown.xlsx",
    total_format="Total Cost: £{:.2f}",
)

AIR_RESISTANCE = BreakdownSpec(
    key="air_resistance",
    title="Air Resistance Breakdown",
    property_name="AirResistance",
    header="Air Resistance (N)",
    sheet_name="Air Resistance Breakdown",
    file_name="AirResistanceBreakdown.xlsx",
    total_format="Total Air Resistance: {:.2f} N",
)

BREAKDOWNS: Dict[str, BreakdownSpec] = {spec.key: spec for spec in (MASS, COST, AIR_RESISTANCE)}


def build_breakdown(groups: List[OccurrenceGroup], spec: BreakdownSpec) -> BreakdownResult:
    """One row per component instance plus the column total"""
    rows: List[BreakdownRow] = []
    total = 0.0

    for group in groups:
        for component in group.components:
            value = component.get_number(spec.property_name)
            rows.append(BreakdownRow(
                occurrence_number=group.occurrence_number,
                component_name=component.name,
                value=value
            ))
            total += value

    return BreakdownResult(title=spec.title, header=spec.header, rows=rows, total=total)


def write_breakdown_workbook(result: BreakdownResult, spec: BreakdownSpec, file_path: Path) -> Path:
    """Write the report sheet, replacing any existing file"""
    if file_path.exists():
        file_path.unlink()

    wb = Workbook()
    ws = wb.active
    ws.title = spec.sheet_name
    for row in result.table():
        ws.append(row)
    wb.save(file_path)

    return file_path


class BreakdownReporter:
    """
    Generate a breakdown report for one numeric property

    Usage:
        reporter = BreakdownReporter(MASS)
        result = reporter.run("NRC_Template")
        print(result.total, result.output_path)
    """

    def __init__(
        self,
        spec: BreakdownSpec,
        config: Optional[AuroraConfig] = None,
        loader: Optional[ModelLoader] = None,
        formatter: Optional[ReportFormatter] = None
    ):
        self.spec = spec
        self.config = config or get_config()
        self.loader = loader or ModelLoader(self.config)
        self.formatter = formatter or create_report_formatter(self.config.reports.enable_formatting)

    @property
    def output_path(self) -> Path:
        return Path(self.config.paths.output_dir) / self.spec.file_name

    def run(self, model_name: Optional[str] = None) -> Optional[BreakdownResult]:
        """
        Generate the report

        Returns:
            BreakdownResult, or None when no component has an occurrence number

        Raises:
            ModelLoadError: If the model cannot be loaded
        """
        model_name = model_name or self.config.model.default_model_name
        logger.info(f"=== {self.spec.title} Report ===")

        if self.config.reports.refresh_properties:
            logger.info("Step 1: Updating occurrence properties...")
            export_occurrence_properties(
                model_name,
                config=self.config,
                loader=self.loader,
                formatter=self.formatter
            )

        logger.info(f"Step 2: Generating {self.spec.title.lower()}...")
        groups = extract_occurrence_data(model_name, loader=self.loader)

        if not groups:
            logger.warning("No components with OccurrenceNumber found.")
            return None

        result = build_breakdown(groups, self.spec)

        output_path = self.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        write_breakdown_workbook(result, self.spec, output_path)
        result.output_path = str(output_path)
        result.formatted = self.formatter.format_breakdown(output_path, self.spec.sheet_name)

        logger.info(f"{self.spec.title} complete!")
        logger.info(self.spec.total_format.format(result.total))
        logger.info(f"File saved: {output_path}")

        return result


def run_breakdown(
    key: str,
    model_name: Optional[str] = None,
    config: Optional[AuroraConfig] = None,
    loader: Optional[ModelLoader] = None
) -> Optional[BreakdownResult]:
    """Run a breakdown report by key ("mass", "cost" or "air_resistance")"""
    if key not in BREAKDOWNS:
        raise ValueError(f"Unknown breakdown: {key}")
    return BreakdownReporter(BREAKDOWNS[key], config=config, loader=loader).run(model_name)


def mass_breakdown(model_name: Optional[str] = None, **kwargs) -> Optional[BreakdownResult]:
    """Generate MassBreakdown.xlsx"""
    return run_breakdown(MASS.key, model_name, **kwargs)


def cost_breakdown(model_name: Optional[str] = None, **kwargs) -> Optional[BreakdownResult]:
    """Generate CostBreakdown.xlsx"""
    return run_breakdown(COST.key, model_name, **kwargs)


def air_resistance_breakdown(model_name: Optional[str] = None, **kwargs) -> Optional[BreakdownResult]:
    """Generate AirResistanceBreakdown.xlsx"""
    return run_breakdown(AIR_RESISTANCE.key, model_name, **kwargs)
