"""Collision-free 2D placement of a hierarchical catalog."""

import logging
from collections.abc import Iterable
from typing import Any

from ..models.dataset import FlatCategory, GroupedCategory, HierarchicalDataset
from ..models.layout import CategoryLabel, LayoutResult, Rect
from ..models.node import Node

logger = logging.getLogger(__name__)

# Node footprint and grid pitch
NODE_WIDTH = 120
NODE_HEIGHT = 140
MIN_SPACING_X = 40
MIN_SPACING_Y = 60
NODES_PER_ROW = 3

# Bands
TOP_MARGIN = 80
LEFT_MARGIN = 50
CATEGORY_SPACING = 100
DOMAIN_SPACING = 200

# Expanded parents lay their subnodes out on a tighter sub-grid
SUBNODES_PER_ROW = 4
SUBNODE_SPACING_X = 30
SUBNODE_SPACING_Y = 40

# Probing wraps to the next row past these x values
MAX_ROW_X = 1200
MAX_SUBNODE_ROW_X = 1400


class _Placement:
    """Mutable bookkeeping for one layout() call."""

    def __init__(self, expanded_ids: frozenset[str]):
        self.expanded_ids = expanded_ids
        self.nodes: list[Node] = []
        self.occupied: list[Rect] = []

    def find_position(self, proposed_x: float, proposed_y: float, max_x: float) -> tuple[float, float]:
        """
        Probe from the proposed point until the footprint is free.

        Moves right one pitch per collision; past ``max_x`` it returns to the
        proposed column one row down. Only finitely many footprints exist, so
        this always ends below the lowest one.
        """
        x, y = proposed_x, proposed_y
        while self._collides(Rect(x, y, NODE_WIDTH, NODE_HEIGHT)):
            x += NODE_WIDTH + MIN_SPACING_X
            if x > max_x:
                x = proposed_x
                y += NODE_HEIGHT + MIN_SPACING_Y
        return x, y

    def place(self, node: Node, proposed_x: float, proposed_y: float, max_x: float = MAX_ROW_X) -> Rect:
        x, y = self.find_position(proposed_x, proposed_y, max_x)
        self.nodes.append(node.positioned(x, y, index=len(self.nodes)))
        rect = Rect(x, y, NODE_WIDTH, NODE_HEIGHT)
        self.occupied.append(rect)
        return rect

    def place_subnodes(self, parent: Node, parent_rect: Rect) -> tuple[float, float]:
        """Lay out an expanded parent's subnodes; return their max (x, y) extent."""
        start_x = parent_rect.x + NODE_WIDTH + SUBNODE_SPACING_X
        start_y = parent_rect.y
        max_x, max_y = parent_rect.x + NODE_WIDTH, parent_rect.y + NODE_HEIGHT

        for i, subnode in enumerate(parent.subnodes):
            row, col = divmod(i, SUBNODES_PER_ROW)
            rect = self.place(
                subnode,
                start_x + col * (NODE_WIDTH + SUBNODE_SPACING_X),
                start_y + row * (NODE_HEIGHT + SUBNODE_SPACING_Y),
                max_x=MAX_SUBNODE_ROW_X,
            )
            max_x = max(max_x, rect.x + rect.width)
            max_y = max(max_y, rect.y + rect.height)

        return max_x, max_y

    def is_expanded(self, node: Node) -> bool:
        return node.is_parent and bool(node.subnodes) and node.id in self.expanded_ids

    def _collides(self, candidate: Rect) -> bool:
        return any(candidate.overlaps(rect) for rect in self.occupied)


def layout(dataset: Any, expanded_ids: Iterable[str] | None = None) -> LayoutResult:
    """
    Assign non-overlapping (x, y) coordinates to every node that is drawn.

    Args:
        dataset: ``HierarchicalDataset`` or a raw catalog mapping of
            category -> (domain -> [node]) | [node]. ``None`` and other
            degenerate shapes give an empty result.
        expanded_ids: Parent ids whose subnodes are drawn

    Returns:
        LayoutResult with positioned nodes (in placement order) and
        category label anchors
    """
    parsed = HierarchicalDataset.from_raw(dataset)
    if not parsed.categories:
        return LayoutResult()

    placement = _Placement(frozenset(expanded_ids or ()))
    labels: dict[str, CategoryLabel] = {}
    global_y: float = TOP_MARGIN

    for category in parsed.categories:
        labels[category.name] = CategoryLabel(y=global_y, name=category.name)
        if isinstance(category, GroupedCategory):
            category_max_y = _layout_grouped(placement, category, global_y)
        else:
            category_max_y = _layout_flat(placement, category, global_y)
        global_y = category_max_y + CATEGORY_SPACING

    logger.debug("Placed %d nodes in %d categories", len(placement.nodes), len(labels))
    return LayoutResult(nodes=placement.nodes, category_labels=labels)


def _layout_grouped(placement: _Placement, category: GroupedCategory, band_y: float) -> float:
    category_max_y = band_y
    domain_start_x: float = LEFT_MARGIN

    for domain in category.domains:
        domain_max_x, domain_max_y = domain_start_x, band_y

        for i, node in enumerate(domain.nodes):
            row, col = divmod(i, NODES_PER_ROW)
            rect = placement.place(
                node,
                domain_start_x + col * (NODE_WIDTH + MIN_SPACING_X),
                band_y + row * (NODE_HEIGHT + MIN_SPACING_Y),
            )
            domain_max_x = max(domain_max_x, rect.x + rect.width)
            domain_max_y = max(domain_max_y, rect.y + rect.height)

            if placement.is_expanded(node):
                sub_max_x, sub_max_y = placement.place_subnodes(node, rect)
                domain_max_x = max(domain_max_x, sub_max_x)
                domain_max_y = max(domain_max_y, sub_max_y)

        category_max_y = max(category_max_y, domain_max_y)
        domain_start_x = domain_max_x + DOMAIN_SPACING

    return category_max_y


def _layout_flat(placement: _Placement, category: FlatCategory, band_y: float) -> float:
    category_max_y = band_y
    current_x: float = LEFT_MARGIN

    for node in category.nodes:
        rect = placement.place(node, current_x, band_y)
        category_max_y = max(category_max_y, rect.y + rect.height)
        current_x = rect.x + NODE_WIDTH + MIN_SPACING_X

        if placement.is_expanded(node):
            sub_max_x, sub_max_y = placement.place_subnodes(node, rect)
            category_max_y = max(category_max_y, sub_max_y)
            current_x = max(current_x, sub_max_x + MIN_SPACING_X)

    return category_max_y
