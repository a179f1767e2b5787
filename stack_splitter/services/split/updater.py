"""
Template Updater Module

Collapses every partition of the compiled template into its nested stack
resource.
"""

from typing import Any

import structlog

from ...constants import GET_ATT, NESTED_STACK_OUTPUT_ATTRIBUTE, OUTPUTS, RESOURCES
from ...core.exceptions import TemplateUpdateError
from ...core.walker import replace_at
from ...models.stack import NestedStack


class TemplateUpdater:
    """Replaces partitioned resources with their nested stack resources."""

    def __init__(self):
        self.logger = structlog.get_logger().bind(component="template_updater")

    def update(self, template: dict[str, Any], nested_stacks: list[NestedStack]) -> dict[str, Any]:
        """Update ``template`` in place and return it.

        Everything is validated before the first mutation, so a failure leaves
        the template untouched.

        Raises:
            TemplateUpdateError: If a member is missing from the template or a
                stack logical id is already taken
        """
        resources: dict[str, Any] = template[RESOURCES]
        self._validate(resources, template.get(OUTPUTS, {}), nested_stacks)

        original_count = len(resources)
        for stack in nested_stacks:
            for member in stack.members:
                del resources[member]

        for stack in nested_stacks:
            resources.update(stack.stack_resource)
            for binding in stack.output_bindings:
                replace_at(
                    template[OUTPUTS][binding.output_name],
                    binding.path,
                    {
                        GET_ATT: [
                            stack.logical_id,
                            NESTED_STACK_OUTPUT_ATTRIBUTE.format(name=binding.export_name),
                        ]
                    },
                )

        self.logger.info(
            "Compiled template updated",
            original_resources=original_count,
            resources=len(resources),
            nested_stacks=[stack.logical_id for stack in nested_stacks],
            rewired_outputs=sum(len(stack.output_bindings) for stack in nested_stacks),
        )
        return template

    def _validate(
        self,
        resources: dict[str, Any],
        outputs: dict[str, Any],
        nested_stacks: list[NestedStack],
    ) -> None:
        removed: set[str] = set()
        for stack in nested_stacks:
            missing = [member for member in stack.members if member not in resources]
            if missing:
                raise TemplateUpdateError(
                    f"{stack.logical_id} members not found in template: {', '.join(missing)}"
                )
            overlap = removed.intersection(stack.members)
            if overlap:
                raise TemplateUpdateError(
                    f"{stack.logical_id} members already moved: {', '.join(sorted(overlap))}"
                )
            removed.update(stack.members)

        for stack in nested_stacks:
            if stack.logical_id in resources and stack.logical_id not in removed:
                raise TemplateUpdateError(
                    f"Logical id '{stack.logical_id}' already exists in the template"
                )
            for binding in stack.output_bindings:
                if binding.output_name not in outputs:
                    raise TemplateUpdateError(
                        f"Output '{binding.output_name}' not found in template"
                    )
