"""Loading and saving of CloudFormation templates (JSON or YAML)."""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from ..constants import RESOURCES
from .exceptions import TemplateLoadError

logger = structlog.get_logger()

YAML_SUFFIXES = {".yml", ".yaml"}


class TemplateYamlLoader(yaml.SafeLoader):
    """Safe YAML loader that understands CloudFormation short-form intrinsics."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    """Expand ``!Ref X`` / ``!GetAtt A.B`` / ``!Sub ...`` into their long form."""
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    if tag_suffix in ("Ref", "Condition"):
        return {tag_suffix: value}
    if tag_suffix == "GetAtt" and isinstance(value, str):
        value = value.split(".", 1)
    return {f"Fn::{tag_suffix}": value}


TemplateYamlLoader.add_multi_constructor("!", _construct_intrinsic)


def parse_template(content: str, yaml_format: bool = False) -> dict[str, Any]:
    """Parse template text into a dict.

    Raises:
        TemplateLoadError: If the content is not a mapping with a Resources section
    """
    try:
        if yaml_format:
            # TemplateYamlLoader extends SafeLoader
            template = yaml.load(content, Loader=TemplateYamlLoader)  # noqa: S506
        else:
            template = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TemplateLoadError(f"Failed to parse template: {e}") from e

    if not isinstance(template, dict):
        raise TemplateLoadError("Template must be a mapping")
    if not isinstance(template.get(RESOURCES), dict):
        raise TemplateLoadError(f"Template has no '{RESOURCES}' mapping")
    return template


def load_template(template_path: str | Path) -> dict[str, Any]:
    """Load a template file; ``.yml``/``.yaml`` files are read as YAML, everything else as JSON."""
    template_path = Path(template_path)
    try:
        content = template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateLoadError(f"Failed to read template {template_path}: {e}") from e

    try:
        template = parse_template(content, yaml_format=template_path.suffix in YAML_SUFFIXES)
    except TemplateLoadError as e:
        raise TemplateLoadError(f"{template_path}: {e}") from e

    logger.info(
        "Template loaded",
        path=str(template_path),
        resources=len(template[RESOURCES]),
    )
    return template


def dump_template(template: dict[str, Any] | str) -> str:
    """Serialize a template the way nested stack files are written."""
    if isinstance(template, str):
        return template
    return json.dumps(template, indent=2)


def save_template(template: dict[str, Any], template_path: str | Path) -> Path:
    """Write a template as JSON, creating the parent directory if needed."""
    template_path = Path(template_path)
    template_path.parent.mkdir(parents=True, exist_ok=True)
    template_path.write_text(dump_template(template), encoding="utf-8")
    logger.info("Template saved", path=str(template_path))
    return template_path
