"""Domain, search and visibility filtering."""

from collections.abc import Callable, Iterable

from ..models.node import Node
from .visibility import is_visible

NodePredicate = Callable[[Node], bool]


def filter_nodes(
    nodes: Iterable[Node] | None,
    domain_filters: Iterable[str] | None = (),
    search_term: str | None = "",
    expanded_ids: Iterable[str] | None = None,
) -> list[Node]:
    """
    Filter nodes by visibility, domain and name search.

    Args:
        nodes: Nodes to filter (input order is kept)
        domain_filters: Domains to keep. Empty means no domain restriction.
        search_term: Case-insensitive substring of the node name. Empty means no search.
        expanded_ids: When given, subnodes of collapsed parents are hidden

    Returns:
        Nodes matching every active criterion
    """
    predicates = _build_predicates(domain_filters, search_term, expanded_ids)
    return [node for node in nodes or [] if all(p(node) for p in predicates)]


def _build_predicates(
    domain_filters: Iterable[str] | None,
    search_term: str | None,
    expanded_ids: Iterable[str] | None,
) -> list[NodePredicate]:
    # Each criterion tests a single node, so their order does not matter.
    predicates: list[NodePredicate] = []

    if expanded_ids is not None:
        expanded = frozenset(expanded_ids)
        predicates.append(lambda node: is_visible(node, expanded))

    domains = frozenset(domain_filters or ())
    if domains:
        predicates.append(lambda node: node.domain in domains)

    if search_term:
        needle = search_term.lower()
        predicates.append(lambda node: needle in node.name.lower())

    return predicates
