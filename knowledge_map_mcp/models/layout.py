"""Layout result models."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from .node import Node


@dataclass(frozen=True)
class Rect:
    """Axis-aligned footprint of a placed node."""

    x: float
    y: float
    width: float
    height: float

    def overlaps(self, other: "Rect") -> bool:
        # Touching edges count as overlap
        return not (
            self.x + self.width < other.x
            or other.x + other.width < self.x
            or self.y + self.height < other.y
            or other.y + other.height < self.y
        )


class CategoryLabel(BaseModel):
    """Anchor for a category band."""

    y: float
    name: str

    @property
    def title(self) -> str:
        """Display text for the label."""
        return self.name.upper()


class LayoutResult(BaseModel):
    """Positioned nodes plus category label anchors."""

    nodes: list[Node] = Field(default_factory=list)
    category_labels: dict[str, CategoryLabel] = Field(default_factory=dict)

    def positions(self) -> dict[str, tuple[float, float]]:
        """Map node id to its (x, y)."""
        return {n.id: (n.x, n.y) for n in self.nodes}

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "nodes": [n.to_dict(include_subnodes=False) for n in self.nodes],
            "categoryLabels": {
                name: {"y": label.y, "name": label.name}
                for name, label in self.category_labels.items()
            },
        }
