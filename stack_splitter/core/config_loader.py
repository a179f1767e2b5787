"""Configuration management for stack splitting."""

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from ..constants import DEPLOYMENT_BUCKET_PLACEHOLDER, LAMBDA_FUNCTION_TYPE, MAX_TEMPLATE_RESOURCES
from .exceptions import ConfigurationError

logger = structlog.get_logger()

CONFIG_SECTION = "stack_splitting"
_TRUTHY = ("1", "true", "yes", "on")


class StackSplittingConfig(BaseSettings):
    """Configuration threaded into the stack splitting pipeline."""

    use_stack_splitting: bool = Field(default=False, alias="USE_STACK_SPLITTING")
    artifact_directory_name: str = Field(default="", alias="ARTIFACT_DIRECTORY_NAME")
    anchor_types: list[str] = Field(
        default_factory=lambda: [LAMBDA_FUNCTION_TYPE], alias="STACK_SPLITTING_ANCHOR_TYPES"
    )
    output_dir: str = Field(default=".serverless", alias="STACK_SPLITTING_OUTPUT_DIR")
    max_resources: int = Field(default=MAX_TEMPLATE_RESOURCES, alias="MAX_TEMPLATE_RESOURCES")
    bucket_placeholder: str = DEPLOYMENT_BUCKET_PLACEHOLDER

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


def load_config(config_path: str | Path | None = None) -> StackSplittingConfig:
    """Load configuration from the environment and an optional YAML file.

    Args:
        config_path: Optional path to a YAML file with a ``stack_splitting`` section

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If the file cannot be parsed or holds invalid values
    """
    load_dotenv()

    settings: dict[str, Any] = {}
    if config_path is not None:
        settings = _load_yaml_config(Path(config_path))

    try:
        config = StackSplittingConfig(**settings)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    # Environment variables have the highest priority
    _apply_env_overrides(config)

    logger.debug(
        "Configuration loaded",
        config_file=str(config_path) if config_path else None,
        use_stack_splitting=config.use_stack_splitting,
        anchor_types=config.anchor_types,
    )
    return config


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load the stack splitting section of a YAML configuration file."""
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config from {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        return {}
    section = loaded.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{CONFIG_SECTION}' in {config_path} must be a mapping")

    # `enabled` is accepted as shorthand for the switch
    if "enabled" in section:
        section = dict(section)
        section["use_stack_splitting"] = section.pop("enabled")
    return section


def _apply_env_overrides(config: StackSplittingConfig) -> None:
    """Apply environment variable overrides."""
    if switch := os.getenv("USE_STACK_SPLITTING"):
        config.use_stack_splitting = switch.strip().lower() in _TRUTHY
    if artifact_dir := os.getenv("ARTIFACT_DIRECTORY_NAME"):
        config.artifact_directory_name = artifact_dir
