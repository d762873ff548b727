from .node_index import NodeIndex, flatten_dataset
from .connections import build_connections
from .state_resolver import resolve_state, resolve_states
from .visibility import get_visible_nodes, toggle_expansion, toggle_filter
from .filters import filter_nodes
from .layout_engine import layout
from .progress import calculate_hierarchical_progress, calculate_progress, completion_ratio, get_statistics
from .query_engine import QueryEngine
from .mermaid_generator import generate_mermaid

__all__ = [
    "NodeIndex",
    "flatten_dataset",
    "build_connections",
    "resolve_state",
    "resolve_states",
    "get_visible_nodes",
    "toggle_expansion",
    "toggle_filter",
    "filter_nodes",
    "layout",
    "calculate_progress",
    "calculate_hierarchical_progress",
    "completion_ratio",
    "get_statistics",
    "QueryEngine",
    "generate_mermaid",
]
