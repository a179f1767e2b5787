"""Core exceptions for stack splitting operations."""


class StackSplittingError(Exception):
    """Base exception for stack splitting operations."""


class ConfigurationError(StackSplittingError):
    """Configuration validation or loading failed."""


class TemplateLoadError(StackSplittingError):
    """Template file could not be read or parsed."""


class PartitionError(StackSplittingError):
    """Partitions overlap or an anchor is not owned by exactly one partition."""


class PartitionBoundaryError(PartitionError):
    """A resource outside a partition references a resource inside it."""


class TemplateUpdateError(StackSplittingError):
    """The compiled template could not be updated with the nested stacks."""


class StackWriteError(StackSplittingError):
    """One or more nested stack templates could not be written to disk."""

    def __init__(self, message: str, failures: dict[str, str] | None = None):
        super().__init__(message)
        self.failures = failures or {}
