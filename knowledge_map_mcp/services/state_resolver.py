"""Locked / available / completed classification."""

from collections.abc import Iterable

from ..models.enums import NodeState
from ..models.node import Node
from .node_index import NodeIndex


def resolve_state(
    node_id: str,
    completed_ids: Iterable[str] | None,
    all_nodes: Iterable[Node] | NodeIndex | None,
) -> NodeState:
    """
    Classify one node.

    Completion is checked before existence, so a completed id that has left
    the catalog still reports ``completed``. Prerequisites pointing at unknown
    nodes can never be satisfied.
    """
    completed = _as_set(completed_ids)
    if node_id in completed:
        return NodeState.COMPLETED

    index = all_nodes if isinstance(all_nodes, NodeIndex) else NodeIndex(all_nodes)
    node = index.get(node_id)
    if node is None:
        return NodeState.LOCKED

    if all(prereq in completed for prereq in node.prereqs):
        return NodeState.AVAILABLE
    return NodeState.LOCKED


def resolve_states(
    nodes: Iterable[Node] | NodeIndex | None,
    completed_ids: Iterable[str] | None,
) -> dict[str, NodeState]:
    """Classify every node in one pass over a shared index."""
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    completed = _as_set(completed_ids)
    return {node.id: resolve_state(node.id, completed, index) for node in index}


def _as_set(ids: Iterable[str] | None) -> set[str] | frozenset[str]:
    if ids is None:
        return frozenset()
    if isinstance(ids, (set, frozenset)):
        return ids
    return set(ids)
