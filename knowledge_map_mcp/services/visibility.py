"""Expand/collapse visibility and the pure toggles the UI calls."""

from collections.abc import Iterable

from ..models.node import Node


def is_visible(node: Node, expanded_ids: Iterable[str] | None) -> bool:
    """Top-level nodes always; subnodes only under an expanded parent."""
    if node.parent_id is None:
        return True
    return node.parent_id in (expanded_ids or ())


def get_visible_nodes(
    all_nodes: Iterable[Node] | None,
    expanded_ids: Iterable[str] | None,
) -> list[Node]:
    """Return the nodes currently shown, preserving input order."""
    expanded = frozenset(expanded_ids or ())
    return [node for node in all_nodes or [] if is_visible(node, expanded)]


def toggle_expansion(node_id: str, expanded_ids: Iterable[str] | None) -> frozenset[str]:
    """
    Return a new expansion set with ``node_id`` flipped.

    The caller's set is never mutated, and the result is always a new object,
    so identity comparison detects the change.
    """
    expanded = set(expanded_ids or ())
    if node_id in expanded:
        expanded.discard(node_id)
    else:
        expanded.add(node_id)
    return frozenset(expanded)


def toggle_filter(domain: str, active_filters: Iterable[str] | None) -> tuple[str, ...]:
    """Return new domain filters with ``domain`` removed if active, else appended."""
    filters = tuple(active_filters or ())
    if domain in filters:
        return tuple(f for f in filters if f != domain)
    return filters + (domain,)
