"""Completion progress and summary statistics."""

import math
from collections.abc import Iterable

from ..models.enums import NodeState
from ..models.node import Node
from .node_index import NodeIndex
from .state_resolver import resolve_states
from .visibility import get_visible_nodes


def _round_half_up(value: float) -> int:
    # Matches Math.round for the non-negative values used here
    return math.floor(value + 0.5)


def calculate_progress(visible_nodes: Iterable[Node] | None, completed_ids: Iterable[str] | None) -> int:
    """
    Percentage (0-100) of the visible nodes that are completed.

    Returns 0 for an empty node list.
    """
    visible = list(visible_nodes or [])
    if not visible:
        return 0
    completed = set(completed_ids or ())
    done = sum(1 for node in visible if node.id in completed)
    return _round_half_up(100 * done / len(visible))


def calculate_hierarchical_progress(
    all_nodes: Iterable[Node] | None,
    completed_ids: Iterable[str] | None,
    expanded_ids: Iterable[str] | None,
) -> int:
    """Progress over the nodes visible under the given expansion set."""
    return calculate_progress(get_visible_nodes(all_nodes, expanded_ids), completed_ids)


def completion_ratio(completed_count: int, total_nodes: int) -> float:
    """
    Raw completed/total percentage, rounded.

    Unlike calculate_progress this does not guard the denominator: a zero
    total gives ``inf`` (or ``nan`` when nothing is completed either), and
    values above 100 are returned as-is.
    """
    if total_nodes == 0:
        return math.nan if completed_count == 0 else math.copysign(math.inf, completed_count)
    return float(_round_half_up(completed_count / total_nodes * 100))


def get_statistics(
    nodes: Iterable[Node] | None,
    completed_ids: Iterable[str] | None,
    expanded_ids: Iterable[str] | None = None,
) -> dict:
    """Get completion statistics for the visible nodes (all nodes if no expansion set)."""
    nodes = list(nodes or [])
    if expanded_ids is not None:
        nodes = get_visible_nodes(nodes, expanded_ids)
    completed = set(completed_ids or ())

    states = resolve_states(NodeIndex(nodes), completed)
    distribution = {state.value: 0 for state in NodeState}
    for state in states.values():
        distribution[state.value] += 1

    by_domain: dict[str, list[Node]] = {}
    for node in nodes:
        by_domain.setdefault(node.domain, []).append(node)

    return {
        "total_nodes": len(nodes),
        "completed_count": sum(1 for n in nodes if n.id in completed),
        "state_distribution": distribution,
        "progress_by_domain": {
            domain: calculate_progress(domain_nodes, completed)
            for domain, domain_nodes in by_domain.items()
            if domain
        },
        "overall_progress": calculate_progress(nodes, completed),
    }
