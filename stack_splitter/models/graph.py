"""Dependency graph model."""

from pydantic import BaseModel, ConfigDict, Field


class DependencyGraph(BaseModel):
    """Directed "depends on" graph over a template's logical identifiers."""

    model_config = ConfigDict(populate_by_name=True)

    nodes: list[str] = Field(default_factory=list)
    outgoing_edges: dict[str, list[str]] = Field(default_factory=dict, alias="outgoingEdges")
    incoming_edges: dict[str, list[str]] = Field(default_factory=dict, alias="incomingEdges")

    def dependencies_of(self, node: str) -> list[str]:
        """Identifiers that ``node`` references."""
        return self.outgoing_edges.get(node, [])

    def dependents_of(self, node: str) -> list[str]:
        """Identifiers that reference ``node``."""
        return self.incoming_edges.get(node, [])

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)
