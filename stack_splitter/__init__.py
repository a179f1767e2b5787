"""Split CloudFormation templates into nested stacks."""

from .core.config_loader import StackSplittingConfig, load_config
from .services.stack_splitter import StackSplitService, split_stack

__version__ = "0.1.0"

__all__ = [
    "StackSplittingConfig",
    "StackSplitService",
    "load_config",
    "split_stack",
]
