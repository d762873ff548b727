"""Mermaid diagram generation for knowledge map visualization."""

import re
from collections.abc import Mapping

from ..models.connection import Connection
from ..models.enums import ConnectionKind, NodeState
from ..models.node import Node


def generate_mermaid(
    nodes: list[Node],
    connections: list[Connection],
    states: Mapping[str, NodeState] | None = None,
    title: str | None = None,
) -> str:
    """
    Generate a Mermaid flowchart from nodes and connections.

    Node styling based on state:
    - completed: Green fill
    - available: Blue fill
    - locked: Grey fill, dashed border

    Parent nodes get a thick border. Edge styling by kind:
    - prerequisite: Solid arrow
    - hierarchy: Dotted arrow
    """
    states = states or {}
    lines = ["graph TD"]

    # Add class definitions
    lines.extend([
        "    classDef completed fill:#2ecc71,stroke:#333,stroke-width:2px,color:#fff",
        "    classDef available fill:#3498db,stroke:#333,stroke-width:2px,color:#fff",
        "    classDef locked fill:#bdc3c7,stroke:#7f8c8d,stroke-width:2px,stroke-dasharray:5",
        "    classDef parent stroke-width:4px",
    ])

    if title:
        lines.append(f"    subgraph {_sanitize_id(title)}[{_escape_label(title)}]")

    for node in nodes:
        node_id = _sanitize_id(node.id)
        label = _escape_label(node.name or node.id)
        state = states.get(node.id, NodeState.LOCKED)

        classes = [state.value]
        if node.is_parent:
            classes.append("parent")

        lines.append(f'    {node_id}["{label} ({node.points} pts)"]:::{",".join(classes)}')

    if title:
        lines.append("    end")

    for connection in connections:
        source = _sanitize_id(connection.source_id)
        target = _sanitize_id(connection.target_id)
        lines.append(f"    {_get_edge_style(connection.kind, source, target)}")

    return "\n".join(lines)


def _sanitize_id(id_str: str) -> str:
    """Convert ID to valid Mermaid node ID."""
    # Replace invalid characters with underscores
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "_", id_str)
    # Ensure it starts with a letter
    if sanitized and sanitized[0].isdigit():
        sanitized = "n_" + sanitized
    return sanitized or "node"


def _escape_label(label: str) -> str:
    """Escape special characters in labels."""
    return (
        label.replace('"', "'")
        .replace("\n", " ")
        .replace("[", "(")
        .replace("]", ")")
    )


def _get_edge_style(kind: ConnectionKind, source: str, target: str) -> str:
    """Get Mermaid edge syntax based on connection kind."""
    match kind:
        case ConnectionKind.PREREQUISITE:
            return f"{source} --> {target}"
        case ConnectionKind.HIERARCHY:
            return f'{source} -.->|"contains"| {target}'
        case _:
            return f"{source} --> {target}"
