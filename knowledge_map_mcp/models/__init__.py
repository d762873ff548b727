from .enums import ConnectionKind, NodeState, QueryType
from .node import Node
from .connection import Connection
from .dataset import DomainGroup, FlatCategory, GroupedCategory, HierarchicalDataset
from .layout import CategoryLabel, LayoutResult, Rect

__all__ = [
    "ConnectionKind",
    "NodeState",
    "QueryType",
    "Node",
    "Connection",
    "DomainGroup",
    "FlatCategory",
    "GroupedCategory",
    "HierarchicalDataset",
    "CategoryLabel",
    "LayoutResult",
    "Rect",
]
