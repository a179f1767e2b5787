"""Reference discovery and in-place rewriting for template values.

Template values are JSON-shaped trees: mappings, sequences and scalars.
``find_references`` walks such a tree and returns every reference expression
with the path leading to it, so callers can rewrite it with ``replace_at``.
"""

from collections.abc import Iterator
from typing import Any

from ..constants import DEPENDS_ON, GET_ATT, PSEUDO_PARAMETER_PREFIX, REF
from ..models.references import AttributeReference, PlainReference, ReferenceSite

Path = tuple[str | int, ...]


def parse_reference(value: Any) -> PlainReference | AttributeReference | None:
    """Return the reference expressed by ``value``, or None if it is not one.

    Refs to pseudo parameters (``AWS::Region``, ``AWS::StackName``, ...) resolve
    the same way inside any stack and are not treated as references.
    """
    if not isinstance(value, dict) or len(value) != 1:
        return None

    if REF in value:
        target = value[REF]
        if isinstance(target, str) and not target.startswith(PSEUDO_PARAMETER_PREFIX):
            return PlainReference(target=target)
        return None

    if GET_ATT in value:
        args = value[GET_ATT]
        if isinstance(args, str) and "." in args:
            target, attribute = args.split(".", 1)
            return AttributeReference(target=target, attribute=attribute, dotted=True)
        if (
            isinstance(args, list)
            and len(args) == 2
            and all(isinstance(arg, str) for arg in args)
        ):
            return AttributeReference(target=args[0], attribute=args[1])

    return None


def iter_references(value: Any, path: Path = ()) -> Iterator[ReferenceSite]:
    """Yield every reference inside ``value`` in document order."""
    reference = parse_reference(value)
    if reference is not None:
        yield ReferenceSite(path=path, reference=reference)
        return

    if isinstance(value, dict):
        for key, child in value.items():
            yield from iter_references(child, (*path, key))
    elif isinstance(value, list):
        for index, child in enumerate(value):
            yield from iter_references(child, (*path, index))


def find_references(value: Any) -> list[ReferenceSite]:
    return list(iter_references(value))


def replace_at(root: Any, path: Path, new_value: Any) -> None:
    """Replace the value found at ``path`` inside ``root``."""
    if not path:
        raise ValueError("Cannot replace the root value in place")

    parent = root
    for step in path[:-1]:
        parent = parent[step]
    parent[path[-1]] = new_value


def depends_on(resource: dict[str, Any]) -> list[str]:
    """Explicit ordering list of a resource (``DependsOn`` may be a string or a list)."""
    value = resource.get(DEPENDS_ON)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [entry for entry in value if isinstance(entry, str)]
