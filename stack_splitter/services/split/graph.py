"""
Dependency Graph Module

Builds the "depends on" graph of a template: an edge A -> B exists when
resource A references B (``Ref`` or ``Fn::GetAtt``) or lists it in DependsOn.
"""

from typing import Any

import structlog

from ...constants import RESOURCES
from ...core.walker import depends_on, iter_references
from ...models.graph import DependencyGraph


class DependencyGraphBuilder:
    """Derives a dependency graph from a template's resource definitions."""

    def __init__(self):
        self.logger = structlog.get_logger().bind(component="dependency_graph")

    def build(self, template: dict[str, Any]) -> DependencyGraph:
        """Build the dependency graph for every resource in ``template``.

        Edges are deduplicated and kept in discovery order, so the same
        template always yields the same graph. References to identifiers that
        are not resources are recorded as-is; the target does not become a node.
        """
        resources: dict[str, Any] = template.get(RESOURCES, {})
        nodes = list(resources)
        outgoing: dict[str, list[str]] = {node: [] for node in nodes}
        incoming: dict[str, list[str]] = {node: [] for node in nodes}

        def add_edge(source: str, target: str) -> None:
            if target in outgoing[source]:
                return
            outgoing[source].append(target)
            incoming.setdefault(target, []).append(source)

        for logical_id, resource in resources.items():
            for site in iter_references(resource):
                add_edge(logical_id, site.reference.target)
            for target in depends_on(resource):
                add_edge(logical_id, target)

        graph = DependencyGraph(nodes=nodes, outgoing_edges=outgoing, incoming_edges=incoming)
        dangling = sorted(set(incoming) - set(nodes))

        self.logger.info(
            "Dependency graph built",
            nodes=len(nodes),
            edges=sum(len(graph.dependencies_of(node)) for node in nodes),
            external_targets=dangling,
        )
        return graph
