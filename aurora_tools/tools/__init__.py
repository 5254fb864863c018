"""Aurora Tools - interactive model analysis"""

from .model_analysis import (
    Analysis,
    ANALYSES,
    ANALYSIS_KEYS,
    SelectionState,
    AnalysisSelectionDialog,
    order_selection,
    selection_from_config,
    run_model_analysis,
    model_analysis,
)

__all__ = [
    "Analysis",
    "ANALYSES",
    "ANALYSIS_KEYS",
    "SelectionState",
    "AnalysisSelectionDialog",
    "order_selection",
    "selection_from_config",
    "run_model_analysis",
    "model_analysis",
]
