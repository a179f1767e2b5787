"""Data models for stack splitting."""

from .enums import SplitState  # noqa: F401
from .graph import DependencyGraph  # noqa: F401
from .references import (  # noqa: F401
    AttributeReference,
    PlainReference,
    Reference,
    ReferenceSite,
)
from .stack import (  # noqa: F401
    NestedStack,
    OutputBinding,
    Partition,
    SplitResult,
)

__all__ = [
    # Reference models
    "AttributeReference",
    "PlainReference",
    "Reference",
    "ReferenceSite",
    # Graph and pipeline models
    "DependencyGraph",
    "NestedStack",
    "OutputBinding",
    "Partition",
    "SplitResult",
    "SplitState",
]
