"""Connection models for the knowledge map."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ConnectionKind


class Connection(BaseModel):
    """Directed edge: ``source_id`` comes before ``target_id``.

    Derived from nodes on every request and never persisted.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source_id: str = Field(..., alias="from", description="Prerequisite or parent node ID")
    target_id: str = Field(..., alias="to", description="Dependent node or subnode ID")
    kind: ConnectionKind = ConnectionKind.PREREQUISITE

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "from": self.source_id,
            "to": self.target_id,
            "kind": self.kind.value,
        }
