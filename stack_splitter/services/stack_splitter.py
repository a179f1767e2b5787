"""Stack splitting service: runs the splitting stages in order."""

from pathlib import Path
from typing import Any

import structlog

from ..constants import MAX_TEMPLATE_BODY_BYTES, RESOURCES
from ..core.config_loader import StackSplittingConfig
from ..core.stack_writer import write_stacks_to_disk
from ..core.template_loader import dump_template
from ..models.enums import SplitState
from ..models.stack import NestedStack, SplitResult
from ..utils import format_size
from .split import DependencyGraphBuilder, NestedStackGenerator, StackPartitioner, TemplateUpdater


class StackSplitService:
    """Facade over the graph, partition, generate and update stages."""

    def __init__(self, config: StackSplittingConfig):
        self.config = config
        self.graph_builder = DependencyGraphBuilder()
        self.partitioner = StackPartitioner(config.anchor_types)
        self.generator = NestedStackGenerator(
            artifact_directory_name=config.artifact_directory_name,
            bucket_placeholder=config.bucket_placeholder,
        )
        self.updater = TemplateUpdater()
        self.logger = structlog.get_logger().bind(component="stack_splitter")

    def generate(self, template: dict[str, Any]) -> SplitResult:
        """Build the graph, partition it and generate the nested stacks.

        The template is not modified; the result is in the REWRITTEN state
        (or DISABLED when stack splitting is switched off).
        """
        if not self.config.use_stack_splitting:
            self.logger.debug("Stack splitting disabled, template left unchanged")
            return SplitResult(state=SplitState.DISABLED, template=template)

        graph = self.graph_builder.build(template)
        self._advance(SplitState.GRAPH_BUILT, nodes=len(graph.nodes))
        partitions = self.partitioner.partition(graph, template)
        self._advance(SplitState.PARTITIONED, partitions=len(partitions))
        nested_stacks = self.generator.generate(template, graph, partitions)
        self._advance(SplitState.REWRITTEN, nested_stacks=len(nested_stacks))

        return SplitResult(
            state=SplitState.REWRITTEN,
            template=template,
            graph=graph,
            partitions=partitions,
            nested_stacks=nested_stacks,
        )

    def apply(self, result: SplitResult) -> SplitResult:
        """Update the template of a REWRITTEN result in place."""
        if result.state is not SplitState.REWRITTEN:
            return result

        self.updater.update(result.template, result.nested_stacks)
        result.state = SplitState.UPDATED
        self._advance(SplitState.UPDATED, resources=len(result.template[RESOURCES]))
        self._check_limits(result.template, result.nested_stacks)
        return result

    def split(self, template: dict[str, Any]) -> SplitResult:
        """Split ``template`` in place and return the nested stack descriptors."""
        return self.apply(self.generate(template))

    async def run(
        self, template: dict[str, Any], output_dir: str | Path | None = None
    ) -> SplitResult:
        """Split ``template`` and write the nested stack templates to disk.

        Templates are written before the compiled template is updated, so a
        write failure leaves the template as it was.
        """
        result = self.generate(template)
        if result.state is SplitState.DISABLED:
            return result

        await write_stacks_to_disk(result.nested_stacks, output_dir or self.config.output_dir)
        return self.apply(result)

    def _advance(self, state: SplitState, **details: Any) -> None:
        self.logger.debug("Stack splitting stage complete", state=state.value, **details)

    def _check_limits(self, template: dict[str, Any], nested_stacks: list[NestedStack]) -> None:
        resource_count = len(template[RESOURCES])
        if resource_count > self.config.max_resources:
            self.logger.warning(
                "Template still exceeds resource limit after splitting",
                resources=resource_count,
                max_resources=self.config.max_resources,
            )

        bodies = [("root", template)]
        bodies.extend((stack.logical_id, stack.stack_template) for stack in nested_stacks)
        for name, body in bodies:
            size = len(dump_template(body).encode("utf-8"))
            if size > MAX_TEMPLATE_BODY_BYTES:
                self.logger.warning(
                    "Template body exceeds size limit",
                    template=name,
                    size=format_size(size),
                    limit=format_size(MAX_TEMPLATE_BODY_BYTES),
                )


def split_stack(template: dict[str, Any], config: StackSplittingConfig) -> SplitResult:
    """Split ``template`` according to ``config`` without touching the disk."""
    return StackSplitService(config).split(template)
