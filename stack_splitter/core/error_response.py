"""RFC 7807 style error responses for command line failures.

Maps the splitter's exception hierarchy onto Problem Details documents so
callers scripting the CLI can tell failure classes apart without parsing
messages.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from .exceptions import (
    ConfigurationError,
    PartitionBoundaryError,
    PartitionError,
    StackWriteError,
    TemplateLoadError,
    TemplateUpdateError,
)


class ErrorDetail(BaseModel):
    """RFC 7807 compliant error detail structure."""

    success: bool = Field(default=False, description="Always False for errors")
    error: str = Field(description="Human-readable error message")
    type: str | None = Field(default=None, description="Problem type URI")
    title: str | None = Field(default=None, description="Problem type summary")
    detail: str | None = Field(default=None, description="Specific problem details")
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())


class StackSplitErrorResponse:
    """Factory for standardized stack splitting error responses."""

    PROBLEM_TYPES: dict[str, dict[str, str]] = {
        "configuration-error": {
            "type": "/problems/configuration-error",
            "title": "Configuration Error",
        },
        "template-load-error": {
            "type": "/problems/template-load-error",
            "title": "Template Could Not Be Loaded",
        },
        "partition-error": {
            "type": "/problems/partition-error",
            "title": "Partition Invariant Violated",
        },
        "partition-boundary-error": {
            "type": "/problems/partition-boundary-error",
            "title": "Reference Into Partition From Outside",
        },
        "template-update-error": {
            "type": "/problems/template-update-error",
            "title": "Template Update Failed",
        },
        "write-error": {
            "type": "/problems/write-error",
            "title": "Nested Stack Write Failed",
        },
    }

    # Most specific class first
    EXCEPTION_PROBLEMS: list[tuple[type[Exception], str]] = [
        (ConfigurationError, "configuration-error"),
        (TemplateLoadError, "template-load-error"),
        (PartitionBoundaryError, "partition-boundary-error"),
        (PartitionError, "partition-error"),
        (TemplateUpdateError, "template-update-error"),
        (StackWriteError, "write-error"),
    ]

    @classmethod
    def create_error(
        cls,
        error_message: str,
        problem_type: str | None = None,
        detail: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a standardized error response.

        Args:
            error_message: Primary error message
            problem_type: Standard problem type key or custom type URI
            detail: Additional problem-specific details
            context: Additional context fields (template path, failed files, ...)

        Returns:
            RFC 7807 compliant error response dictionary
        """
        error_detail = ErrorDetail(error=error_message, detail=detail)

        if problem_type and problem_type in cls.PROBLEM_TYPES:
            problem_info = cls.PROBLEM_TYPES[problem_type]
            error_detail.type = problem_info["type"]
            error_detail.title = problem_info["title"]
        elif problem_type:
            error_detail.type = problem_type

        response = error_detail.model_dump(exclude_none=True)

        if context:
            reserved_fields = set(ErrorDetail.model_fields)
            response.update({k: v for k, v in context.items() if k not in reserved_fields})

        return response

    @classmethod
    def from_exception(
        cls, error: Exception, context: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Build an error response for an exception raised by the pipeline."""
        problem_type = next(
            (key for exc_type, key in cls.EXCEPTION_PROBLEMS if isinstance(error, exc_type)),
            None,
        )
        if isinstance(error, StackWriteError) and error.failures:
            context = {**(context or {}), "failed_files": error.failures}
        return cls.create_error(
            str(error),
            problem_type=problem_type,
            detail=type(error).__name__,
            context=context,
        )
