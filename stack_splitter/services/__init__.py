"""
Stack Splitter Services

Service layer wiring the splitting stages together.
"""

from .stack_splitter import StackSplitService, split_stack  # noqa: F401

__all__ = [
    "StackSplitService",
    "split_stack",
]
