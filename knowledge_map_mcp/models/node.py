"""Node models for the knowledge map."""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

# Catalog keys read by Node.from_raw. Anything else on a node entry is ignored.
_SCALAR_KEYS = ("id", "name", "domain", "category", "difficulty", "points", "level")


class Node(BaseModel):
    """One learning unit.

    Subnodes are materialized as independent records with ``parent_id`` set,
    and nesting is exactly one level deep.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str = ""
    domain: str = ""
    category: str = ""
    difficulty: int = Field(default=1, ge=1)
    points: int = Field(default=0, ge=0)
    prereqs: list[str] = Field(default_factory=list)

    # Hierarchy
    parent_id: Optional[str] = Field(None, alias="parentId")
    is_parent: bool = Field(default=False, alias="isParent")
    subnodes: list["Node"] = Field(default_factory=list)
    level: Optional[int] = None

    # Assigned by the layout engine
    index: Optional[int] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _link_subnodes(cls, data: Any) -> Any:
        # Subnodes point back at their parent and never nest further
        if not isinstance(data, Mapping) or not isinstance(data.get("subnodes"), (list, tuple)):
            return data
        parent_id = data.get("id")
        return {**data, "subnodes": [_as_subnode(s, parent_id) for s in data["subnodes"]]}

    @property
    def is_subnode(self) -> bool:
        return self.parent_id is not None

    @property
    def is_expandable(self) -> bool:
        """A parent with at least one subnode."""
        return self.is_parent and bool(self.subnodes)

    @classmethod
    def from_raw(cls, raw: Any, parent_id: str | None = None) -> Optional["Node"]:
        """
        Build a Node from a loosely-shaped catalog entry.

        Missing optional fields fall back to defaults. Entries that are not
        mappings, have no usable id, or fail validation are skipped.

        Args:
            raw: Catalog entry (usually a dict decoded from JSON)
            parent_id: Set when parsing the subnodes of a parent entry

        Returns:
            Node, or None if the entry cannot be used
        """
        if isinstance(raw, Node):
            return raw
        if not isinstance(raw, Mapping):
            logger.warning("Skipping node entry of type %s", type(raw).__name__)
            return None

        data: dict[str, Any] = {key: raw[key] for key in _SCALAR_KEYS if raw.get(key) is not None}
        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            logger.warning("Skipping node entry without an id: %r", raw.get("name"))
            return None

        prereqs = raw.get("prereqs")
        if isinstance(prereqs, (list, tuple)):
            data["prereqs"] = [p for p in prereqs if isinstance(p, str)]

        if parent_id is not None:
            # Subnodes never nest further
            data["parent_id"] = parent_id
            data["is_parent"] = False
        else:
            if raw.get("parentId") is not None:
                data["parent_id"] = raw.get("parentId")
            data["is_parent"] = bool(raw.get("isParent", False))
            subnodes = raw.get("subnodes")
            if isinstance(subnodes, (list, tuple)):
                children = [cls.from_raw(child, parent_id=node_id) for child in subnodes]
                data["subnodes"] = [child for child in children if child is not None]

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning("Skipping invalid node '%s': %s", node_id, e.errors()[0].get("msg"))
            return None

    def positioned(self, x: float, y: float, index: int) -> "Node":
        """Return a copy carrying layout coordinates."""
        return self.model_copy(update={"x": x, "y": y, "index": index})

    def to_dict(self, include_subnodes: bool = True) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "category": self.category,
            "difficulty": self.difficulty,
            "points": self.points,
            "prereqs": list(self.prereqs),
            "parentId": self.parent_id,
            "isParent": self.is_parent,
            "level": self.level,
            "index": self.index,
            "x": self.x,
            "y": self.y,
        }
        if include_subnodes and self.subnodes:
            data["subnodes"] = [s.to_dict(include_subnodes=False) for s in self.subnodes]
        return data


def _as_subnode(entry: Any, parent_id: Any) -> Any:
    if isinstance(entry, Node):
        if entry.parent_id == parent_id and not entry.is_parent and not entry.subnodes:
            return entry
        return entry.model_copy(update={"parent_id": parent_id, "is_parent": False, "subnodes": []})
    if isinstance(entry, Mapping):
        fields = {k: v for k, v in entry.items() if k not in ("parentId", "isParent")}
        return {**fields, "parent_id": parent_id, "is_parent": False, "subnodes": []}
    return entry
