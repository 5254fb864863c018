"""
Aurora Backend - occurrence property extraction and spreadsheet reports
"""

from .models import (
    PropertyKind,
    PropertyValue,
    ComponentRecord,
    OccurrenceGroup,
    BreakdownRow,
    BreakdownResult,
)
from .extractor import (
    OccurrenceExtractor,
    extract_occurrence_data,
    is_occurrence_property,
    sanitize_field_name,
)
from .excel_format import ReportFormatter, create_report_formatter
from .occurrence_export import export_occurrence_properties
from .breakdown import (
    BreakdownSpec,
    BreakdownReporter,
    BREAKDOWNS,
    MASS,
    COST,
    AIR_RESISTANCE,
    build_breakdown,
    run_breakdown,
    mass_breakdown,
    cost_breakdown,
    air_resistance_breakdown,
)

__all__ = [
    "PropertyKind",
    "PropertyValue",
    "ComponentRecord",
    "OccurrenceGroup",
    "BreakdownRow",
    "BreakdownResult",
    "OccurrenceExtractor",
    "extract_occurrence_data",
    "is_occurrence_property",
    "sanitize_field_name",
    "ReportFormatter",
    "create_report_formatter",
    "export_occurrence_properties",
    "BreakdownSpec",
    "BreakdownReporter",
    "BREAKDOWNS",
    "MASS",
    "COST",
    "AIR_RESISTANCE",
    "build_breakdown",
    "run_breakdown",
    "mass_breakdown",
    "cost_breakdown",
    "air_resistance_breakdown",
]
