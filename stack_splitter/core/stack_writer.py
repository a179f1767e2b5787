"""Persistence of generated nested stack templates to local disk."""

import asyncio
from pathlib import Path

import structlog

from ..models.stack import NestedStack
from .exceptions import StackWriteError
from .template_loader import dump_template

logger = structlog.get_logger()


async def write_stacks_to_disk(
    nested_stacks: list[NestedStack], directory: str | Path
) -> list[Path]:
    """Write every nested stack template into ``directory``.

    Files are written concurrently; each write is independent, so one failure
    does not undo the others. Existing files are overwritten.

    Args:
        nested_stacks: Generated nested stacks
        directory: Target directory (created if absent)

    Returns:
        Paths of the files written

    Raises:
        StackWriteError: If the directory cannot be created, or if any file could
            not be written (after all writes ran)
    """
    directory = Path(directory)
    try:
        await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to create output directory", directory=str(directory), error=str(e))
        raise StackWriteError(
            f"Failed to create output directory {directory}: {e}",
            failures={str(directory): str(e)},
        ) from e

    paths = [directory / stack.file_name for stack in nested_stacks]
    results = await asyncio.gather(
        *(
            asyncio.to_thread(_write_file, path, dump_template(stack.stack_template))
            for path, stack in zip(paths, nested_stacks, strict=True)
        ),
        return_exceptions=True,
    )

    failures: dict[str, str] = {}
    for path, result in zip(paths, results, strict=True):
        if isinstance(result, BaseException):
            logger.error("Failed to write nested stack template", path=str(path), error=str(result))
            failures[str(path)] = str(result)
        else:
            logger.debug("Nested stack template written", path=str(path))

    if failures:
        raise StackWriteError(
            f"Failed to write {len(failures)} of {len(paths)} nested stack templates",
            failures=failures,
        )

    logger.info("Nested stack templates written", directory=str(directory), count=len(paths))
    return paths


def _write_file(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")
