#!/usr/bin/env python3
"""
Aurora CLI - Command Line Interface
===================================

Commands:
  aurora-tools import-requirements [model] [workbook]   Import requirements from Excel
  aurora-tools mass [model]                             Mass breakdown report
  aurora-tools cost [model]                             Cost breakdown report
  aurora-tools air-resistance [model]                   Air resistance breakdown report
  aurora-tools export-properties [model] [output]       Export all occurrence properties
  aurora-tools analyze [model] [--select KEY ...]       Pick and run analyses
  aurora-tools info                                     Show project folders
"""

import sys
import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from .core.config import AuroraConfig, get_config, set_config
from .core.exceptions import AuroraError
from .backend.breakdown import BREAKDOWNS, run_breakdown
from .backend.occurrence_export import export_occurrence_properties
from .requirements.importer import import_requirements
from .tools.model_analysis import ANALYSIS_KEYS, model_analysis, run_model_analysis

console = Console()


def print_output(message, style=None):
    """Print output with optional styling"""
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s | %(message)s"
    )


def cmd_import_requirements(args):
    """Import requirements from Excel"""
    result = import_requirements(args.model, args.workbook)

    print_output(f"✓ Requirement set saved to: {result.store_path}", "green")
    print_output(f"  Created: {result.created}")
    print_output(f"  Updated: {result.updated}")
    print_output(f"  Total:   {result.total}")
    if result.errors:
        print_output(f"  ⚠️  Rows with errors: {len(result.errors)}", "yellow")
        for error in result.errors:
            print_output(f"    • row {error.row_number} ({error.req_id}): {error.message}")


def cmd_breakdown(args):
    """Generate one breakdown report"""
    spec = BREAKDOWNS[args.breakdown]
    result = run_breakdown(spec.key, args.model)

    if result is None:
        print_output("No components with OccurrenceNumber found.", "yellow")
        return

    print_output(f"✓ {spec.title} complete", "green")
    print_output(f"  {spec.total_format.format(result.total)}")
    print_output(f"  File saved: {result.output_path}")


def cmd_export_properties(args):
    """Export all occurrence properties"""
    output_path = export_occurrence_properties(args.model, args.output)

    if output_path is None:
        print_output("No components with OccurrenceNumber property found.", "yellow")
        return

    print_output(f"✓ Exported to: {output_path}", "green")


def cmd_analyze(args):
    """Run analyses chosen in the dialog or on the command line"""
    selected = ANALYSIS_KEYS if args.all else (args.select or [])

    if selected:
        run_model_analysis(args.model, selected, console=console)
    else:
        model_analysis(args.model)


def cmd_info(args):
    """Show project folders and configuration issues"""
    config = get_config()

    table = Table(title="Aurora Model Tools", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Project root", str(config.paths.project_root))
    table.add_row("Model directory", str(config.paths.model_dir))
    table.add_row("Default model", config.model.default_model_name)
    table.add_row("Requirements workbook", str(config.requirements_workbook))
    table.add_row("Requirements sheet", config.requirements.sheet_name)
    table.add_row("Requirement store", str(config.requirements_store))
    table.add_row("Reports folder", str(config.paths.output_dir))
    table.add_row("Formatting", "on" if config.reports.enable_formatting else "off")

    console.print(table)

    for issue in config.validate():
        print_output(f"  ⚠️  {issue}", "yellow")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aurora-tools",
        description="Aurora - requirements import and model property reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  aurora-tools import-requirements NRC_Template "ModelData/Aurora Requirements.xlsx"
  aurora-tools mass NRC_Template
  aurora-tools export-properties NRC_Template MyOutput
  aurora-tools analyze NRC_Template --select mass cost
  aurora-tools analyze
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--project-root", help="Project folder (default: current directory)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # import-requirements command
    import_parser = subparsers.add_parser("import-requirements", help="Import requirements from Excel")
    import_parser.add_argument("model", nargs="?", help="Model name")
    import_parser.add_argument("workbook", nargs="?", help="Requirements workbook")
    import_parser.set_defaults(handler=cmd_import_requirements)

    # breakdown commands
    for name, key in (("mass", "mass"), ("cost", "cost"), ("air-resistance", "air_resistance")):
        breakdown_parser = subparsers.add_parser(name, help=f"Generate {BREAKDOWNS[key].file_name}")
        breakdown_parser.add_argument("model", nargs="?", help="Model name")
        breakdown_parser.set_defaults(handler=cmd_breakdown, breakdown=key)

    # export-properties command
    export_parser = subparsers.add_parser("export-properties", help="Export all occurrence properties")
    export_parser.add_argument("model", nargs="?", help="Model name")
    export_parser.add_argument("output", nargs="?", help="Output workbook name")
    export_parser.set_defaults(handler=cmd_export_properties)

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Pick and run analyses")
    analyze_parser.add_argument("model", nargs="?", help="Model name")
    analyze_parser.add_argument("--select", "-s", nargs="+", choices=ANALYSIS_KEYS,
                                help="Run these analyses without the dialog")
    analyze_parser.add_argument("--all", "-a", action="store_true", help="Run every analysis")
    analyze_parser.set_defaults(handler=cmd_analyze)

    # info command
    info_parser = subparsers.add_parser("info", help="Show project folders")
    info_parser.set_defaults(handler=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    if args.project_root:
        set_config(AuroraConfig.for_root(Path(args.project_root)))

    try:
        args.handler(args)
    except AuroraError as e:
        print_output(f"Error: {e}", "red")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
