"""
Stack Partitioner Module

Groups resources into partitions built around anchor resources (compute
units). A partition holds its anchor plus every resource that depends on the
anchor, directly or transitively, and on no other anchor.
"""

from collections import Counter, deque
from typing import Any

import structlog

from ...constants import RESOURCES, TYPE
from ...core.exceptions import PartitionError
from ...models.graph import DependencyGraph
from ...models.stack import Partition


class StackPartitioner:
    """Anchor-based partitioning of a dependency graph."""

    def __init__(self, anchor_types: list[str]):
        self.anchor_types = set(anchor_types)
        self.logger = structlog.get_logger().bind(component="partitioner")

    def find_anchors(self, graph: DependencyGraph, template: dict[str, Any]) -> list[str]:
        """Anchor resources in template order."""
        resources = template.get(RESOURCES, {})
        return [
            node
            for node in graph.nodes
            if resources.get(node, {}).get(TYPE) in self.anchor_types
        ]

    def partition(self, graph: DependencyGraph, template: dict[str, Any]) -> list[Partition]:
        """Compute the ordered, non-overlapping partitions for ``template``.

        Raises:
            PartitionError: If the resulting partitions overlap or an anchor is
                not owned by exactly one partition
        """
        anchors = self.find_anchors(graph, template)
        anchor_set = set(anchors)

        dependents = {
            anchor: self._collect_dependents(graph, anchor, anchor_set) for anchor in anchors
        }
        reach_count = Counter(node for reached in dependents.values() for node in reached)

        partitions: list[Partition] = []
        claimed: set[str] = set()
        for anchor in anchors:
            if anchor in claimed:
                continue
            private = {node for node in dependents[anchor] if reach_count[node] == 1}
            members = [node for node in graph.nodes if node == anchor or node in private]
            claimed.update(members)
            partitions.append(Partition(index=len(partitions) + 1, anchor=anchor, members=members))

            shared = sorted(dependents[anchor] - private)
            self.logger.debug(
                "Partition computed",
                index=len(partitions),
                anchor=anchor,
                members=members,
                shared_dependents=shared,
            )

        self._validate(partitions, anchors)

        self.logger.info(
            "Template partitioned",
            anchors=len(anchors),
            partitions=len(partitions),
            partitioned_resources=sum(len(p.members) for p in partitions),
            root_resources=len(graph.nodes) - sum(len(p.members) for p in partitions),
        )
        return partitions

    def _collect_dependents(
        self, graph: DependencyGraph, anchor: str, anchors: set[str]
    ) -> set[str]:
        """Every resource that transitively depends on ``anchor``, not passing other anchors."""
        nodes = set(graph.nodes)
        reached: set[str] = set()
        queue = deque([anchor])

        while queue:
            current = queue.popleft()
            for dependent in graph.dependents_of(current):
                if dependent in reached or dependent in anchors or dependent not in nodes:
                    continue
                reached.add(dependent)
                queue.append(dependent)

        return reached

    def _validate(self, partitions: list[Partition], anchors: list[str]) -> None:
        owners: dict[str, int] = {}
        for partition in partitions:
            for member in partition.members:
                if member in owners:
                    raise PartitionError(
                        f"Resource '{member}' is assigned to nested stacks "
                        f"{owners[member]} and {partition.index}"
                    )
                owners[member] = partition.index

        for anchor in anchors:
            owning = [p.index for p in partitions if anchor in p.members]
            if len(owning) != 1:
                raise PartitionError(
                    f"Anchor '{anchor}' must belong to exactly one partition, found {len(owning)}"
                )
