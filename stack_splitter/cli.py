"""Command line entry point for splitting a compiled template into nested stacks."""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .constants import UPDATED_TEMPLATE_FILE_NAME
from .core.config_loader import StackSplittingConfig, load_config
from .core.error_response import StackSplitErrorResponse
from .core.exceptions import StackSplittingError, StackWriteError
from .core.logging_config import get_logger, setup_logging
from .core.template_loader import load_template, save_template
from .models.enums import SplitState
from .services.split import DependencyGraphBuilder
from .services.stack_splitter import StackSplitService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Split a CloudFormation template into nested stacks"
    )
    parser.add_argument("template", help="Compiled template (JSON or YAML)")
    parser.add_argument(
        "--config",
        default=os.getenv("STACK_SPLITTING_CONFIG"),
        help="YAML configuration file with a 'stack_splitting' section",
    )
    parser.add_argument("--output-dir", help="Directory for the generated templates")
    parser.add_argument(
        "--artifact-directory-name", help="Artifact directory used in nested stack TemplateURLs"
    )
    parser.add_argument(
        "--enable", action="store_true", help="Enable stack splitting regardless of configuration"
    )
    parser.add_argument(
        "--graph-only", action="store_true", help="Print the dependency graph as JSON and exit"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--log-dir", default=os.getenv("LOG_DIR"), help="Write a log file here")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(log_dir=args.log_dir, log_level=args.log_level)
    logger = get_logger("cli")

    try:
        config = _build_config(args)
        template = load_template(args.template)

        if args.graph_only:
            graph = DependencyGraphBuilder().build(template)
            print(json.dumps(graph.to_dict(), indent=2))
            return

        output_dir = Path(config.output_dir)
        result = asyncio.run(StackSplitService(config).run(template, output_dir))
        _save_updated_template(result.template, output_dir / UPDATED_TEMPLATE_FILE_NAME)
    except StackSplittingError as e:
        logger.error("Stack splitting failed", error=str(e), template=args.template)
        error = StackSplitErrorResponse.from_exception(e, context={"template": args.template})
        print(json.dumps(error, indent=2), file=sys.stderr)
        sys.exit(1)

    if result.state is SplitState.DISABLED:
        logger.info(
            "Stack splitting disabled, template copied unchanged", output_dir=str(output_dir)
        )
    else:
        logger.info(
            "Stack splitting complete",
            output_dir=str(output_dir),
            nested_stacks=[stack.file_name for stack in result.nested_stacks],
        )


def _build_config(args: argparse.Namespace) -> StackSplittingConfig:
    """Load configuration and apply command line overrides."""
    config = load_config(args.config)
    if args.enable:
        config.use_stack_splitting = True
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.artifact_directory_name is not None:
        config.artifact_directory_name = args.artifact_directory_name
    return config


def _save_updated_template(template: dict[str, Any], path: Path) -> None:
    """Write the updated compiled template, reporting I/O failures as StackWriteError."""
    try:
        save_template(template, path)
    except OSError as e:
        raise StackWriteError(
            f"Failed to write updated template {path}: {e}", failures={str(path): str(e)}
        ) from e


if __name__ == "__main__":
    main()
