"""
Stack Splitting Modules

The splitting pipeline is broken into single-responsibility stages:
- graph: dependency graph over the template's resources
- partitioner: anchor-based grouping of resources
- generator: nested stack templates and parent-side stack resources
- updater: collapsing partitions in the compiled template

StackSplitService (services/stack_splitter.py) runs them in order.
"""

from .generator import NestedStackGenerator, resolve_template_urls
from .graph import DependencyGraphBuilder
from .partitioner import StackPartitioner
from .updater import TemplateUpdater

__all__ = [
    "DependencyGraphBuilder",
    "StackPartitioner",
    "NestedStackGenerator",
    "TemplateUpdater",
    "resolve_template_urls",
]
