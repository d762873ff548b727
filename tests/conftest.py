"""Shared fixtures: small node sets and hierarchical datasets."""

import pytest

from knowledge_map_mcp.models.node import Node
from knowledge_map_mcp.services.layout_engine import NODE_HEIGHT, NODE_WIDTH


@pytest.fixture()
def chain_nodes() -> list[Node]:
    """A <- B <- C, with C also requiring A."""
    return [
        Node(id="A", name="Counting", domain="math", category="foundation", prereqs=[]),
        Node(id="B", name="Addition", domain="math", category="foundation", prereqs=["A"], difficulty=2, points=100),
        Node(id="C", name="Advanced Sums", domain="science", category="advanced", prereqs=["A", "B"], difficulty=3, points=150),
    ]


@pytest.fixture()
def hierarchy_nodes() -> list[Node]:
    """Two top-level nodes, two subnodes under parent1."""
    return [
        Node(id="parent1", name="Parent 1", domain="math", is_parent=True),
        Node(id="child1", name="Child 1", domain="math", parent_id="parent1"),
        Node(id="child2", name="Child 2", domain="math", parent_id="parent1", prereqs=["child1"]),
        Node(id="parent2", name="Parent 2", domain="science", prereqs=["parent1"]),
    ]


@pytest.fixture()
def raw_dataset() -> dict:
    """Catalog-shaped mapping with a grouped and a flat category."""
    return {
        "foundation": {
            "math": [
                {
                    "id": "math1",
                    "name": "Basic Math",
                    "domain": "math",
                    "category": "foundation",
                    "prereqs": [],
                    "difficulty": 1,
                    "points": 50,
                    "isParent": False,
                },
                {
                    "id": "math2",
                    "name": "Advanced Math",
                    "domain": "math",
                    "category": "foundation",
                    "prereqs": ["math1"],
                    "difficulty": 2,
                    "points": 100,
                    "isParent": True,
                    "subnodes": [
                        {
                            "id": "math2-sub1",
                            "name": "Calculus",
                            "domain": "math",
                            "category": "foundation",
                            "prereqs": [],
                            "difficulty": 3,
                            "points": 150,
                            "parentId": "math2",
                        }
                    ],
                },
            ],
            "science": [
                {
                    "id": "sci1",
                    "name": "Basic Science",
                    "domain": "science",
                    "category": "foundation",
                    "prereqs": [],
                    "difficulty": 1,
                    "points": 50,
                    "isParent": False,
                }
            ],
        },
        "advanced": [
            {
                "id": "adv1",
                "name": "Advanced Topic",
                "domain": "mixed",
                "category": "advanced",
                "prereqs": ["math1", "sci1"],
                "difficulty": 4,
                "points": 200,
                "isParent": False,
            }
        ],
    }


def assert_no_overlap(nodes: list[Node]) -> None:
    """No two node footprints anchored at (x, y) overlap."""
    for i, a in enumerate(nodes):
        for b in nodes[i + 1:]:
            overlapping = abs(a.x - b.x) < NODE_WIDTH and abs(a.y - b.y) < NODE_HEIGHT
            assert not overlapping, f"{a.id} at ({a.x}, {a.y}) overlaps {b.id} at ({b.x}, {b.y})"
