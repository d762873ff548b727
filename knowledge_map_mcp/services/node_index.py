"""In-memory lookup of nodes for one catalog version."""

from collections.abc import Iterable, Iterator

from ..models.dataset import GroupedCategory, HierarchicalDataset
from ..models.node import Node


class NodeIndex:
    """Read-only id -> node lookup.

    The first node seen for an id wins; later duplicates are kept in
    iteration order but are not reachable by id.
    """

    def __init__(self, nodes: Iterable[Node] | None = None):
        self._nodes: list[Node] = list(nodes or [])
        self._by_id: dict[str, Node] = {}
        for node in self._nodes:
            self._by_id.setdefault(node.id, node)

    @classmethod
    def from_dataset(cls, dataset: HierarchicalDataset) -> "NodeIndex":
        return cls(flatten_dataset(dataset))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        return self._by_id.get(node_id)

    def get_by_name(self, name: str) -> Node | None:
        """Get a node by name (case-insensitive)."""
        lowered = name.lower()
        for node in self._nodes:
            if node.name.lower() == lowered:
                return node
        return None

    def resolve_id(self, identifier: str) -> str | None:
        """Resolve a node identifier (ID or name) to node ID."""
        node = self.get(identifier) or self.get_by_name(identifier)
        return node.id if node else None

    def children_of(self, parent_id: str) -> list[Node]:
        return [n for n in self._nodes if n.parent_id == parent_id]

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def domains(self) -> list[str]:
        """Distinct domains in first-seen order."""
        return list(dict.fromkeys(n.domain for n in self._nodes if n.domain))


def flatten_dataset(dataset: HierarchicalDataset) -> list[Node]:
    """
    List every node of a dataset, parents followed by their subnodes.

    Subnodes already carry ``parent_id`` back-references from parsing, so the
    flat list is exactly what the visibility and connection helpers expect.
    """
    nodes: list[Node] = []
    for category in dataset.categories:
        if isinstance(category, GroupedCategory):
            groups = [domain.nodes for domain in category.domains]
        else:
            groups = [category.nodes]
        for group in groups:
            for node in group:
                nodes.append(node)
                nodes.extend(node.subnodes)
    return nodes
