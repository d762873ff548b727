"""Edge derivation for rendering."""

from collections.abc import Iterable

from ..models.connection import Connection
from ..models.enums import ConnectionKind
from ..models.node import Node


def build_connections(nodes: Iterable[Node] | None) -> list[Connection]:
    """
    Derive directed edges from prerequisites and parent/subnode links.

    Edges are only emitted when both ends are in ``nodes``; dangling
    prerequisite or parent references are skipped. Duplicates are not removed.
    """
    nodes = list(nodes or [])
    known_ids = {n.id for n in nodes}
    connections: list[Connection] = []

    for node in nodes:
        for prereq_id in node.prereqs:
            if prereq_id in known_ids:
                connections.append(
                    Connection(source_id=prereq_id, target_id=node.id, kind=ConnectionKind.PREREQUISITE)
                )

        if node.parent_id is not None and node.parent_id in known_ids:
            connections.append(
                Connection(source_id=node.parent_id, target_id=node.id, kind=ConnectionKind.HIERARCHY)
            )

    return connections
