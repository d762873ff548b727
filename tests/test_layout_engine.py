"""Layout engine tests."""

import time

from conftest import assert_no_overlap

from knowledge_map_mcp.models import HierarchicalDataset, LayoutResult
from knowledge_map_mcp.services import layout_engine
from knowledge_map_mcp.services.layout_engine import (
    CATEGORY_SPACING,
    LEFT_MARGIN,
    NODE_HEIGHT,
    NODE_WIDTH,
    TOP_MARGIN,
    layout,
)


def _node(node_id: str, **extra) -> dict:
    return {"id": node_id, "name": node_id.title(), "prereqs": [], "difficulty": 1, "points": 50, **extra}


def _large_dataset(categories: int, domains: int, per_domain: int) -> dict:
    return {
        f"category{c}": {
            f"domain{d}": [_node(f"node-{c}-{d}-{n}", domain=f"domain{d}") for n in range(per_domain)]
            for d in range(domains)
        }
        for c in range(categories)
    }


# ---------------------------------------------------------------------------
# Basic placement
# ---------------------------------------------------------------------------

class TestLayoutBasics:
    def test_returns_positioned_nodes(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset)
        assert isinstance(result, LayoutResult)
        assert [n.id for n in result.nodes] == ["math1", "math2", "sci1", "adv1"]
        for node in result.nodes:
            assert isinstance(node.x, (int, float))
            assert isinstance(node.y, (int, float))

    def test_first_node_at_margins(self, raw_dataset: dict) -> None:
        first = layout(raw_dataset).nodes[0]
        assert (first.x, first.y) == (LEFT_MARGIN, TOP_MARGIN)

    def test_unique_positions(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset, {"math2"})
        positions = [(n.x, n.y) for n in result.nodes]
        assert len(positions) == len(set(positions))

    def test_index_is_placement_order(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset, {"math2"})
        assert [n.index for n in result.nodes] == list(range(len(result.nodes)))

    def test_accepts_parsed_dataset(self, raw_dataset: dict) -> None:
        parsed = HierarchicalDataset.from_raw(raw_dataset)
        assert layout(parsed).positions() == layout(raw_dataset).positions()

    def test_single_category_two_nodes(self) -> None:
        data = {"foundation": {"math": [_node("m1"), _node("m2")]}}
        result = layout(data, set())
        assert [n.id for n in result.nodes] == ["m1", "m2"]
        assert_no_overlap(result.nodes)

    def test_next_category_starts_below_previous(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset)
        foundation_bottom = max(n.y + NODE_HEIGHT for n in result.nodes if n.category == "foundation")
        adv = next(n for n in result.nodes if n.id == "adv1")
        assert adv.y == foundation_bottom + CATEGORY_SPACING

    def test_domains_do_not_share_columns(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset)
        math_right = max(n.x + NODE_WIDTH for n in result.nodes if n.domain == "math")
        sci = next(n for n in result.nodes if n.id == "sci1")
        assert sci.x >= math_right + layout_engine.DOMAIN_SPACING


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------

class TestLayoutExpansion:
    def test_expanded_parent_includes_subnodes(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset, {"math2"})
        sub = next(n for n in result.nodes if n.id == "math2-sub1")
        parent = next(n for n in result.nodes if n.id == "math2")
        assert sub.parent_id == "math2"
        assert sub.x > parent.x
        assert sub.y == parent.y

    def test_collapsed_parent_has_no_subnodes(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset, set())
        assert all(n.id != "math2-sub1" for n in result.nodes)

    def test_expanding_non_parent_is_ignored(self, raw_dataset: dict) -> None:
        assert layout(raw_dataset, {"math1", "adv1"}).positions() == layout(raw_dataset).positions()

    def test_many_subnodes_push_siblings_without_overlap(self) -> None:
        parent = _node("p", isParent=True, subnodes=[_node(f"s{i}") for i in range(9)])
        data = {"cat": {"dom": [parent, _node("n1"), _node("n2"), _node("n3"), _node("n4")]}}
        result = layout(data, {"p"})
        assert len(result.nodes) == 14
        assert_no_overlap(result.nodes)

    def test_expanded_parent_in_flat_category(self) -> None:
        parent = _node("p", isParent=True, subnodes=[_node("s1"), _node("s2")])
        result = layout({"mastery": [parent, _node("after")]}, {"p"})
        assert [n.id for n in result.nodes] == ["p", "s1", "s2", "after"]
        assert_no_overlap(result.nodes)


# ---------------------------------------------------------------------------
# Category labels
# ---------------------------------------------------------------------------

class TestCategoryLabels:
    def test_labels_anchor_band_start(self, raw_dataset: dict) -> None:
        result = layout(raw_dataset)
        assert set(result.category_labels) == {"foundation", "advanced"}
        assert result.category_labels["foundation"].y == TOP_MARGIN
        adv = next(n for n in result.nodes if n.id == "adv1")
        assert result.category_labels["advanced"].y == adv.y

    def test_label_name_and_title(self, raw_dataset: dict) -> None:
        label = layout(raw_dataset).category_labels["foundation"]
        assert label.name == "foundation"
        assert label.title == "FOUNDATION"

    def test_to_dict_shape(self, raw_dataset: dict) -> None:
        data = layout(raw_dataset).to_dict()
        assert set(data) == {"nodes", "categoryLabels"}
        assert data["categoryLabels"]["foundation"] == {"y": TOP_MARGIN, "name": "foundation"}


# ---------------------------------------------------------------------------
# Degenerate inputs
# ---------------------------------------------------------------------------

class TestDegenerateInputs:
    def test_none(self) -> None:
        result = layout(None)
        assert result.nodes == []
        assert result.category_labels == {}
        assert result.to_dict() == {"nodes": [], "categoryLabels": {}}

    def test_empty(self) -> None:
        result = layout({})
        assert result.nodes == []
        assert result.category_labels == {}

    def test_non_mapping(self) -> None:
        assert layout(["not", "a", "catalog"]).nodes == []
        assert layout("catalog").nodes == []

    def test_malformed_nodes(self) -> None:
        data = {"test": {"badDomain": [{"id": "bad1", "name": "Bad Node"}, {"name": "no id"}, 7]}}
        result = layout(data)
        assert [n.id for n in result.nodes] == ["bad1"]

    def test_circular_reference(self) -> None:
        data: dict = {"category": {"domain": []}}
        data["category"]["circular"] = data
        result = layout(data)
        assert result.nodes == []
        assert list(result.category_labels) == ["category"]

    def test_flat_category(self) -> None:
        result = layout({"mastery": [_node("master1", category="mastery")]})
        assert len(result.nodes) == 1
        assert result.nodes[0].id == "master1"


# ---------------------------------------------------------------------------
# Determinism, non-overlap, scale
# ---------------------------------------------------------------------------

class TestLayoutProperties:
    def test_deterministic(self, raw_dataset: dict) -> None:
        first = layout(raw_dataset, {"math2"})
        second = layout(raw_dataset, {"math2"})
        assert [(n.id, n.x, n.y) for n in first.nodes] == [(n.id, n.x, n.y) for n in second.nodes]

    def test_no_overlap(self, raw_dataset: dict) -> None:
        assert_no_overlap(layout(raw_dataset, {"math2"}).nodes)

    def test_input_is_not_modified(self, raw_dataset: dict) -> None:
        layout(raw_dataset, {"math2"})
        assert "x" not in raw_dataset["foundation"]["math"][0]

    def test_large_dataset(self) -> None:
        result = layout(_large_dataset(5, 5, 10))
        assert len(result.nodes) == 250
        assert_no_overlap(result.nodes)

    def test_thousand_nodes_within_time_bound(self) -> None:
        data = _large_dataset(10, 10, 10)
        start = time.perf_counter()
        result = layout(data)
        elapsed = time.perf_counter() - start
        assert len(result.nodes) == 1000
        assert elapsed < 10.0
        assert_no_overlap(result.nodes)

    def test_long_flat_row(self) -> None:
        result = layout({"mastery": [_node(f"m{i}") for i in range(50)]})
        assert len({n.y for n in result.nodes}) == 1
        assert_no_overlap(result.nodes)
