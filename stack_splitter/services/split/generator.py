"""
Nested Stack Generator Module

Turns each partition into a standalone sub-template plus the parent-side
``AWS::CloudFormation::Stack`` resource that provisions it. References that
cross the partition boundary become sub-template parameters; the parent passes
the original expression in, so every resource still sees the same value.
"""

import copy
from typing import Any

import structlog

from ...constants import (
    DEPENDS_ON,
    DEPLOYMENT_BUCKET_PLACEHOLDER,
    DESCRIPTION,
    NESTED_STACK_DESCRIPTION,
    NESTED_STACK_FILE_NAME,
    NESTED_STACK_LOGICAL_ID,
    NESTED_STACK_TYPE,
    OUTPUTS,
    PARAMETER_TYPE,
    PARAMETERS,
    PROPERTIES,
    REF,
    RESOURCES,
    S3_BASE_URL,
    TEMPLATE_FORMAT_VERSION,
    TEMPLATE_FORMAT_VERSION_VALUE,
    TYPE,
    VALUE,
)
from ...core.exceptions import PartitionBoundaryError
from ...core.walker import depends_on, find_references, iter_references, replace_at
from ...models.graph import DependencyGraph
from ...models.references import AttributeReference, PlainReference, ReferenceSite
from ...models.stack import TEMPLATE_URL, NestedStack, OutputBinding, Partition

ReferenceExpression = PlainReference | AttributeReference


class NestedStackGenerator:
    """Builds nested stack templates and their parent-side stack resources."""

    def __init__(
        self,
        artifact_directory_name: str = "",
        bucket_placeholder: str = DEPLOYMENT_BUCKET_PLACEHOLDER,
    ):
        self.artifact_directory_name = artifact_directory_name
        self.bucket_placeholder = bucket_placeholder
        self.logger = structlog.get_logger().bind(component="nested_stack_generator")

    def template_url(self, index: int) -> str:
        """Remote location of nested stack ``index``; the bucket is a placeholder."""
        segments = [
            S3_BASE_URL,
            self.bucket_placeholder,
            self.artifact_directory_name.strip("/"),
            NESTED_STACK_FILE_NAME.format(index=index),
        ]
        return "/".join(segment for segment in segments if segment)

    def generate(
        self,
        template: dict[str, Any],
        graph: DependencyGraph,
        partitions: list[Partition],
    ) -> list[NestedStack]:
        """Generate one nested stack per partition, in partition order.

        The input template is not modified.

        Raises:
            PartitionBoundaryError: If a resource outside a partition references
                one of its members
        """
        for partition in partitions:
            self._check_boundary(partition, graph)

        output_sites = [
            (output_name, site)
            for output_name, output in template.get(OUTPUTS, {}).items()
            for site in iter_references(output)
        ]
        root_ids = set(graph.nodes)

        return [
            self._generate_stack(partition, template[RESOURCES], root_ids, output_sites)
            for partition in partitions
        ]

    def _check_boundary(self, partition: Partition, graph: DependencyGraph) -> None:
        members = set(partition.members)
        for member in partition.members:
            for source in graph.dependents_of(member):
                if source not in members:
                    raise PartitionBoundaryError(
                        f"Resource '{source}' references '{member}', which would be moved "
                        f"into nested stack {partition.index} (anchor '{partition.anchor}')"
                    )

    def _generate_stack(
        self,
        partition: Partition,
        resources: dict[str, Any],
        root_ids: set[str],
        output_sites: list[tuple[str, ReferenceSite]],
    ) -> NestedStack:
        members = set(partition.members)
        logical_id = NESTED_STACK_LOGICAL_ID.format(index=partition.index)
        description = NESTED_STACK_DESCRIPTION.format(anchor=partition.anchor)

        stack_resources = {member: copy.deepcopy(resources[member]) for member in partition.members}
        parameters: dict[str, ReferenceExpression] = {}
        stack_depends_on: list[str] = []

        def require(target: str) -> None:
            # Template parameters can be passed in but cannot be depended on
            if target in root_ids and target not in stack_depends_on:
                stack_depends_on.append(target)

        for member in partition.members:
            resource = stack_resources[member]
            for site in find_references(resource):
                reference = site.reference
                if reference.target in members:
                    continue
                parameter = self._parameter_name(reference, parameters, members)
                replace_at(resource, site.path, {REF: parameter})
                require(reference.target)

            for target in self._move_external_depends_on(resource, members):
                require(target)

        exports, bindings = self._export_outputs(members, output_sites)

        stack_template: dict[str, Any] = {
            TEMPLATE_FORMAT_VERSION: TEMPLATE_FORMAT_VERSION_VALUE,
            DESCRIPTION: description,
        }
        if parameters:
            stack_template[PARAMETERS] = {name: {TYPE: PARAMETER_TYPE} for name in parameters}
        stack_template[RESOURCES] = stack_resources
        if exports:
            stack_template[OUTPUTS] = {
                name: {VALUE: reference.to_expression()} for name, reference in exports.items()
            }

        stack_resource = {
            logical_id: {
                TYPE: NESTED_STACK_TYPE,
                PROPERTIES: {
                    PARAMETERS: {
                        name: reference.to_expression() for name, reference in parameters.items()
                    },
                    TEMPLATE_URL: self.template_url(partition.index),
                },
                DESCRIPTION: description,
                DEPENDS_ON: stack_depends_on,
            }
        }

        self.logger.info(
            "Nested stack generated",
            logical_id=logical_id,
            anchor=partition.anchor,
            resources=len(stack_resources),
            parameters=list(parameters),
            depends_on=stack_depends_on,
            exported_outputs=list(exports),
        )

        return NestedStack(
            index=partition.index,
            anchor=partition.anchor,
            logical_id=logical_id,
            members=list(partition.members),
            stack_template=stack_template,
            stack_resource=stack_resource,
            output_bindings=bindings,
        )

    def _parameter_name(
        self,
        reference: ReferenceExpression,
        parameters: dict[str, ReferenceExpression],
        members: set[str],
    ) -> str:
        """Parameter carrying ``reference`` into the sub-template, declared on first use.

        Parameters are deduplicated per reference shape, not per target
        identifier: the first shape is named after the referenced resource,
        and a second shape for the same resource (``Ref`` next to
        ``Fn::GetAtt``, or two attributes) gets its own ``<target><suffix>``
        parameter so each internal use keeps its original value.

        Parameters and resources share the sub-template's logical id
        namespace, so names taken by ``members`` are skipped as well.
        """
        for name, existing in parameters.items():
            if existing.key == reference.key:
                return name

        name = reference.target
        if name in parameters:
            name = f"{reference.target}{reference.suffix}"
        base, counter = name, 2
        while name in parameters or name in members:
            name = f"{base}{counter}"
            counter += 1

        parameters[name] = reference
        return name

    def _move_external_depends_on(self, resource: dict[str, Any], members: set[str]) -> list[str]:
        """Strip DependsOn entries pointing outside the partition and return them."""
        ordering = depends_on(resource)
        external = [target for target in ordering if target not in members]
        if not external:
            return []

        internal = [target for target in ordering if target in members]
        if internal:
            resource[DEPENDS_ON] = internal
        else:
            del resource[DEPENDS_ON]
        return external

    def _export_outputs(
        self, members: set[str], output_sites: list[tuple[str, ReferenceSite]]
    ) -> tuple[dict[str, ReferenceExpression], list[OutputBinding]]:
        """Sub-template outputs needed by root outputs that reference partition members."""
        exports: dict[str, ReferenceExpression] = {}
        bindings: list[OutputBinding] = []

        for output_name, site in output_sites:
            reference = site.reference
            if reference.target not in members:
                continue

            export_name = next(
                (name for name, existing in exports.items() if existing.key == reference.key),
                None,
            )
            if export_name is None:
                base = (
                    reference.target
                    if isinstance(reference, PlainReference)
                    else f"{reference.target}{reference.suffix}"
                )
                export_name, counter = base, 2
                while export_name in exports:
                    export_name = f"{base}{counter}"
                    counter += 1
                exports[export_name] = reference

            bindings.append(
                OutputBinding(output_name=output_name, path=site.path, export_name=export_name)
            )

        return exports, bindings


def resolve_template_urls(
    nested_stacks: list[NestedStack],
    bucket_name: str,
    bucket_placeholder: str = DEPLOYMENT_BUCKET_PLACEHOLDER,
) -> list[str]:
    """Substitute the deployment bucket into every nested stack's TemplateURL.

    Called by the uploader once the bucket name is known.
    """
    urls = []
    for stack in nested_stacks:
        properties = stack.resource_definition[PROPERTIES]
        properties[TEMPLATE_URL] = properties[TEMPLATE_URL].replace(bucket_placeholder, bucket_name)
        urls.append(properties[TEMPLATE_URL])
    return urls
