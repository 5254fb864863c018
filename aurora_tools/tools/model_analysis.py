"""
Aurora Tools: Model Analysis
Run the breakdown reports and the property export from a selection dialog

The dialog shows one checkbox per analysis plus "Select All". Run executes
every checked analysis in a fixed order; with nothing checked it warns and
stays open. Where no display is available, selection_from_config() turns a
{analysis: enabled} mapping into the same selection.

Usage:
    from aurora_tools.tools.model_analysis import model_analysis, run_model_analysis

    model_analysis("NRC_Template")                       # interactive
    run_model_analysis("NRC_Template", ["mass", "cost"])  # non-interactive
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel

from ..backend.breakdown import run_breakdown
from ..backend.occurrence_export import export_occurrence_properties
from ..core.config import AuroraConfig, get_config
from ..core.exceptions import DisplayUnavailableError
from ..model.architecture import ModelLoader

logger = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "Please select at least one analysis to run."
NO_DISPLAY_MESSAGE = (
    "No display available for the analysis dialog ({error}).\n"
    "Run with --select KEY ... or --all instead."
)


@dataclass(frozen=True)
class Analysis:
    """An analysis offered in the selection dialog"""
    key: str
    label: str
    description: str
    run: Callable[[str, AuroraConfig, ModelLoader], Any]


def _breakdown_runner(key: str) -> Callable[[str, AuroraConfig, ModelLoader], Any]:
    def run(model_name: str, config: AuroraConfig, loader: ModelLoader) -> Any:
        return run_breakdown(key, model_name, config=config, loader=loader)
    return run


def _export_properties(model_name: str, config: AuroraConfig, loader: ModelLoader) -> Any:
    logger.info("=== All Properties Export ===")
    return export_occurrence_properties(model_name, config=config, loader=loader)


# Fixed run order
ANALYSES: List[Analysis] = [
    Analysis(
        "cost", "Cost Breakdown",
        "Calculates total rocket cost from all component costs. Updates CostBreakdown.xlsx",
        _breakdown_runner("cost"),
    ),
    Analysis(
        "mass", "Mass Breakdown",
        "Calculates total rocket mass from all component masses. Updates MassBreakdown.xlsx",
        _breakdown_runner("mass"),
    ),
    Analysis(
        "air_resistance", "Air Resistance Breakdown",
        "Calculates total air resistance from all components. Updates AirResistanceBreakdown.xlsx",
        _breakdown_runner("air_resistance"),
    ),
    Analysis(
        "properties", "All Properties Export",
        "Exports all stereotype properties for all components. Updates OccurrenceProperties.xlsx",
        _export_properties,
    ),
]

ANALYSIS_KEYS = [a.key for a in ANALYSES]


def order_selection(selected: Iterable[str]) -> List[str]:
    """
    Selected analysis keys in the fixed run order, without duplicates

    Raises:
        ValueError: For an unknown analysis key
    """
    chosen = set()
    for key in selected:
        if key not in ANALYSIS_KEYS:
            raise ValueError(f"Unknown analysis: {key} (choose from {', '.join(ANALYSIS_KEYS)})")
        chosen.add(key)
    return [key for key in ANALYSIS_KEYS if key in chosen]


def selection_from_config(enabled: Dict[str, bool]) -> List[str]:
    """Non-interactive selection: the enabled entries of an {analysis: enabled} mapping"""
    return order_selection(key for key, on in enabled.items() if on)


class SelectionState:
    """Checkbox state behind the selection dialog"""

    def __init__(self, analyses: Optional[List[Analysis]] = None):
        self.analyses = analyses or ANALYSES
        self.checked: Dict[str, bool] = {a.key: False for a in self.analyses}
        self.select_all = False

    def set(self, key: str, value: bool) -> None:
        self.checked[key] = value

    def toggle_all(self, value: bool) -> None:
        """Select All sets every checkbox to its own state"""
        self.select_all = value
        for key in self.checked:
            self.checked[key] = value

    def selected(self) -> List[str]:
        return [a.key for a in self.analyses if self.checked.get(a.key)]

    def confirm(self) -> Optional[List[str]]:
        """Selection to run, or None when nothing is checked"""
        selected = self.selected()
        return selected or None


def open_window(tk: Any) -> Any:
    """
    Root window for the dialogs

    Raises:
        DisplayUnavailableError: If no display can be opened
    """
    try:
        return tk.Tk()
    except tk.TclError as e:
        raise DisplayUnavailableError(NO_DISPLAY_MESSAGE.format(error=e)) from e


class AnalysisSelectionDialog:
    """Checkbox dialog that blocks until the user runs or cancels"""

    def __init__(self, model_name: str, analyses: Optional[List[Analysis]] = None):
        self.model_name = model_name
        self.state = SelectionState(analyses)
        self.result: List[str] = []

    def show(self) -> List[str]:
        """Show the dialog; returns the selected keys, empty when cancelled"""
        import tkinter as tk
        from tkinter import messagebox

        root = open_window(tk)
        root.title("Model Analysis")
        root.geometry("500x400")
        root.resizable(False, False)

        tk.Label(root, text=f"Model Analysis - {self.model_name}",
                 font=("TkDefaultFont", 16, "bold")).pack(pady=(12, 2))
        tk.Label(root, text="Select the analyses you want to run:").pack(pady=(0, 8))

        variables: Dict[str, Any] = {}
        for analysis in self.state.analyses:
            var = tk.BooleanVar(value=False)
            variables[analysis.key] = var
            tk.Checkbutton(
                root, text=analysis.label, variable=var, font=("TkDefaultFont", 11, "bold"),
                command=lambda k=analysis.key, v=var: self.state.set(k, v.get())
            ).pack(anchor="w", padx=30)
            tk.Label(root, text=analysis.description, fg="#666666",
                     wraplength=420, justify="left").pack(anchor="w", padx=50)

        select_all = tk.BooleanVar(value=False)

        def on_select_all():
            self.state.toggle_all(select_all.get())
            for key, var in variables.items():
                var.set(self.state.checked[key])

        tk.Checkbutton(root, text="Select All", variable=select_all,
                       command=on_select_all).pack(anchor="w", padx=30, pady=(8, 0))

        def on_run():
            selected = self.state.confirm()
            if selected is None:
                messagebox.showwarning("No Selection", NO_SELECTION_MESSAGE, parent=root)
                return
            self.result = selected
            root.destroy()

        buttons = tk.Frame(root)
        buttons.pack(side="bottom", pady=20)
        tk.Button(buttons, text="Run", width=10, bg="#4DB34D", fg="white",
                  command=on_run).pack(side="left", padx=5)
        tk.Button(buttons, text="Cancel", width=10, command=root.destroy).pack(side="left", padx=5)

        root.mainloop()
        return self.result


def show_completion_message(output_dir: Path) -> None:
    """Completion message box shown after a dialog-driven run"""
    import tkinter as tk
    from tkinter import messagebox

    root = open_window(tk)
    root.withdraw()
    try:
        messagebox.showinfo(
            "Model Analysis Complete",
            f"Analysis complete!\n\nFiles saved to {output_dir}.",
            parent=root
        )
    finally:
        root.destroy()


def ensure_model_loaded(model_name: str, config: AuroraConfig, loader: ModelLoader, console: Console) -> None:
    """
    Load the model unless it is already loaded, falling back to the project root.

    Raises:
        ModelLoadError: If the model cannot be found or parsed
    """
    if loader.is_loaded(model_name):
        return
    fallback = Path(config.paths.project_root) / f"{model_name}{config.model.model_file_suffix}"
    console.print(f"Loading model: {model_name}")
    loader.load(model_name, file_path=fallback)


def run_model_analysis(
    model_name: Optional[str] = None,
    selected: Iterable[str] = (),
    config: Optional[AuroraConfig] = None,
    loader: Optional[ModelLoader] = None,
    console: Optional[Console] = None,
    show_message: bool = False
) -> Dict[str, Any]:
    """
    Run the selected analyses in the fixed order

    Returns:
        Result of each analysis keyed by analysis key

    Raises:
        ValueError: If nothing is selected or a key is unknown
        ModelLoadError: If the model cannot be loaded
    """
    config = config or get_config()
    model_name = model_name or config.model.default_model_name
    loader = loader or ModelLoader(config)
    console = console or Console()

    keys = order_selection(selected)
    if not keys:
        raise ValueError(NO_SELECTION_MESSAGE)

    ensure_model_loaded(model_name, config, loader, console)

    console.print(Panel.fit(
        f"[bold]MODEL ANALYSIS REPORT[/bold]\nModel: {model_name}",
        box=box.DOUBLE
    ))

    by_key = {a.key: a for a in ANALYSES}
    results: Dict[str, Any] = {}
    for key in keys:
        analysis = by_key[key]
        console.rule(analysis.label)
        results[key] = analysis.run(model_name, config, loader)
        console.print(_summarize(analysis, results[key]))

    console.print(Panel.fit("[bold green]ANALYSIS COMPLETE[/bold green]", box=box.DOUBLE))
    console.print(f"Files saved to: {config.paths.output_dir}")

    if show_message:
        show_completion_message(Path(config.paths.output_dir))

    return results


def _summarize(analysis: Analysis, result: Any) -> str:
    if result is None:
        return f"{analysis.label}: no components with OccurrenceNumber found"
    if hasattr(result, "total"):
        return f"{analysis.label}: total {result.total:.2f} -> {result.output_path}"
    return f"{analysis.label}: {result}"


def model_analysis(model_name: Optional[str] = None, config: Optional[AuroraConfig] = None) -> Dict[str, Any]:
    """
    Open the selection dialog and run whatever the user picks

    Raises:
        DisplayUnavailableError: If the dialog cannot open a window
    """
    config = config or get_config()
    model_name = model_name or config.model.default_model_name

    selected = AnalysisSelectionDialog(model_name).show()
    if not selected:
        logger.info("Model analysis cancelled")
        return {}

    return run_model_analysis(model_name, selected, config=config, show_message=True)
