"""Data models for the progress map system."""

from .common import (
    NodeLevel,
    NodeStatus,
    Priority,
    LEVEL_ORDER,
    round_half_up,
    mean_completion,
    status_for_completion,
)
from .progress import Subtask, Feature, Domain, Product
from .query import ProgressFilter, QueryResult
from .updates import ProgressUpdate
from .summary import LevelSummary, ProgressSummary, IntegrityReport
from .layout import (
    NodeFootprint,
    DEFAULT_FOOTPRINTS,
    LayoutNode,
    LayoutEdge,
    TreeLayout,
)

__all__ = [
    # Common
    "NodeLevel",
    "NodeStatus",
    "Priority",
    "LEVEL_ORDER",
    "round_half_up",
    "mean_completion",
    "status_for_completion",
    # Entity models
    "Subtask",
    "Feature",
    "Domain",
    "Product",
    # Query models
    "ProgressFilter",
    "QueryResult",
    "ProgressUpdate",
    # Summary models
    "LevelSummary",
    "ProgressSummary",
    "IntegrityReport",
    # Layout models
    "NodeFootprint",
    "DEFAULT_FOOTPRINTS",
    "LayoutNode",
    "LayoutEdge",
    "TreeLayout",
]
