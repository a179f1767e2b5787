"""Shared pytest fixtures for stack splitter tests."""

import logging
from pathlib import Path
from typing import Any

import pytest
import structlog

from stack_splitter.core.config_loader import StackSplittingConfig
from tests.factories import FIXTURES_DIR, load_fixture

SPLITTING_ENV_VARS = [
    "USE_STACK_SPLITTING",
    "ARTIFACT_DIRECTORY_NAME",
    "STACK_SPLITTING_ANCHOR_TYPES",
    "STACK_SPLITTING_OUTPUT_DIR",
    "STACK_SPLITTING_CONFIG",
    "MAX_TEMPLATE_RESOURCES",
    "LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of configuration loading."""
    for var in SPLITTING_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def reset_logging():
    """Restore logging defaults after tests that configure logging globally."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def raw_template() -> dict[str, Any]:
    """Compiled template with two functions, their versions and event source mappings."""
    return load_fixture("two_functions.json")


@pytest.fixture
def single_function_template() -> dict[str, Any]:
    """Template whose only resource is a function without dependencies."""
    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Resources": {
            "HelloLambdaFunction": {
                "Type": "AWS::Lambda::Function",
                "Properties": {"Handler": "handler.hello", "Runtime": "python3.12"},
            }
        },
    }


@pytest.fixture
def config() -> StackSplittingConfig:
    """Configuration with stack splitting enabled."""
    return StackSplittingConfig(
        use_stack_splitting=True, artifact_directory_name="some-directory"
    )
