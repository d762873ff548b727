"""Enums for the knowledge map."""

from enum import Enum


class NodeState(str, Enum):
    """Computed status of a node for one learner."""

    COMPLETED = "completed"  # Id is in the completed set
    AVAILABLE = "available"  # Every prerequisite is completed
    LOCKED = "locked"        # Some prerequisite is unmet, or the node is unknown


class ConnectionKind(str, Enum):
    """Origin of a rendered edge."""

    PREREQUISITE = "prerequisite"  # prereq -> node
    HIERARCHY = "hierarchy"        # parent -> subnode


class QueryType(str, Enum):
    """Types of map queries supported."""

    READY_TO_LEARN = "ready_to_learn"      # Available nodes, in catalog order
    SUGGESTED_NEXT = "suggested_next"      # First few available nodes of the filtered view
    LEARNING_PATH = "learning_path"        # Ordered prerequisites for a target
    LOCKED = "locked"                      # Nodes still blocked by prerequisites
    COMPLETED = "completed"                # Nodes already completed
    ALL_NODES = "all_nodes"                # All nodes in the catalog
