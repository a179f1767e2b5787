"""Partition and nested stack models."""

import posixpath
from typing import Any

from pydantic import BaseModel, Field, SkipValidation

from ..constants import PROPERTIES
from .enums import SplitState
from .graph import DependencyGraph

TEMPLATE_URL = "TemplateURL"


class Partition(BaseModel):
    """Resources extracted together into one nested stack."""

    index: int
    anchor: str
    members: list[str] = Field(default_factory=list)


class OutputBinding(BaseModel):
    """A root template output that must read its value from a nested stack."""

    output_name: str
    path: tuple[str | int, ...]
    export_name: str


class NestedStack(BaseModel):
    """Generated sub-template plus the parent-side stack resource for one partition."""

    index: int
    anchor: str
    logical_id: str
    members: list[str] = Field(default_factory=list)
    stack_template: dict[str, Any] | str
    stack_resource: dict[str, dict[str, Any]]
    output_bindings: list[OutputBinding] = Field(default_factory=list)

    @property
    def resource_definition(self) -> dict[str, Any]:
        return self.stack_resource[self.logical_id]

    @property
    def template_url(self) -> str:
        return self.resource_definition[PROPERTIES][TEMPLATE_URL]

    @property
    def file_name(self) -> str:
        """Local file name, taken from the last segment of the remote location."""
        return posixpath.basename(self.template_url)


class SplitResult(BaseModel):
    """Outcome of a stack splitting run."""

    state: SplitState
    template: SkipValidation[dict[str, Any]]
    graph: DependencyGraph | None = None
    partitions: list[Partition] = Field(default_factory=list)
    nested_stacks: list[NestedStack] = Field(default_factory=list)
