"""Enum definitions for the stack splitting pipeline."""

from enum import Enum


class SplitState(Enum):
    """Stage reached by a stack splitting run."""

    DISABLED = "disabled"
    GRAPH_BUILT = "graph_built"
    PARTITIONED = "partitioned"
    REWRITTEN = "rewritten"
    UPDATED = "updated"
