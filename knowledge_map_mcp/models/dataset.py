"""Hierarchical catalog dataset models.

A catalog maps category name to either a mapping of domain name to node list
(grouped categories) or directly to a node list (flat tiers such as
"mastery"). The two shapes are modeled as a discriminated union.
"""

import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from .node import Node

logger = logging.getLogger(__name__)


class DomainGroup(BaseModel):
    """Nodes of one domain inside a grouped category."""

    name: str
    nodes: list[Node] = Field(default_factory=list)


class GroupedCategory(BaseModel):
    """Category whose nodes are split by domain."""

    kind: Literal["grouped"] = "grouped"
    name: str
    domains: list[DomainGroup] = Field(default_factory=list)


class FlatCategory(BaseModel):
    """Category holding a single node list."""

    kind: Literal["flat"] = "flat"
    name: str
    nodes: list[Node] = Field(default_factory=list)


CategoryContent = Annotated[Union[GroupedCategory, FlatCategory], Field(discriminator="kind")]


class HierarchicalDataset(BaseModel):
    """Ordered categories of a catalog version."""

    categories: list[CategoryContent] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Any) -> "HierarchicalDataset":
        """
        Parse a catalog mapping, following only the documented shape.

        ``None`` or non-mapping input gives an empty dataset. Category values
        that are neither mappings nor lists, and domain values that are not
        lists, are ignored, so auxiliary data (including cyclic references)
        is never walked.
        """
        if isinstance(raw, HierarchicalDataset):
            return raw
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("Ignoring catalog of type %s", type(raw).__name__)
            return cls()

        categories: list[GroupedCategory | FlatCategory] = []
        for category_name, content in raw.items():
            if not isinstance(category_name, str):
                continue
            if isinstance(content, Mapping):
                domains = []
                for domain_name, entries in content.items():
                    if not isinstance(entries, (list, tuple)):
                        logger.debug("Ignoring non-list value at %s.%s", category_name, domain_name)
                        continue
                    domains.append(DomainGroup(name=str(domain_name), nodes=_parse_nodes(entries)))
                categories.append(GroupedCategory(name=category_name, domains=domains))
            elif isinstance(content, (list, tuple)):
                categories.append(FlatCategory(name=category_name, nodes=_parse_nodes(content)))
            else:
                logger.debug("Ignoring category '%s' of type %s", category_name, type(content).__name__)

        return cls(categories=categories)

    def to_dict(self) -> dict:
        """Convert back to the catalog mapping shape."""
        data: dict = {}
        for category in self.categories:
            if isinstance(category, GroupedCategory):
                data[category.name] = {
                    domain.name: [n.to_dict() for n in domain.nodes] for domain in category.domains
                }
            else:
                data[category.name] = [n.to_dict() for n in category.nodes]
        return data


def _parse_nodes(entries) -> list[Node]:
    nodes = (Node.from_raw(entry) for entry in entries)
    return [node for node in nodes if node is not None]
