"""Services for the progress map system."""

from .progress_model import ProgressModel
from .tree_layout import TreeLayoutEngine, HORIZONTAL_SPACING, VERTICAL_SPACING
from .view_state import ViewStateController
from .dependency_graph import DependencyGraph
from .progress_store import get_progress_model, get_view_state, reset_progress_state

__all__ = [
    "ProgressModel",
    "TreeLayoutEngine",
    "HORIZONTAL_SPACING",
    "VERTICAL_SPACING",
    "ViewStateController",
    "DependencyGraph",
    "get_progress_model",
    "get_view_state",
    "reset_progress_state",
]
