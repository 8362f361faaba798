#!/usr/bin/env python3
"""Command-line interface for stagecopy.

Subcommands:
- rules: print the filter rules for a base directory and include/exclude paths
- plan: print the extract/inject commands and mounts for a build file
- apply: run the extract hops and print the destination image instructions

Example:
    >>> from stagecopy.cli import parse_arguments
    >>> args = parse_arguments(["rules", "--base", "/src", "--include", "app"])
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

import yaml

from stagecopy.core.constants import STAGECOPY_VERSION, ConfigKey
from stagecopy.core.validators import ValidationError, validate_path, validate_patterns
from stagecopy.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from stagecopy.infrastructure.logger import Logger, configure_logger
from stagecopy.rules.filters import build_rules
from stagecopy.transfer.artifacts import load_artifacts
from stagecopy.transfer.image import ImageInstructions
from stagecopy.transfer.orchestrator import (
    ArtifactTransferOrchestrator,
    MissingStagingMountError,
    TransferPlan,
)
from stagecopy.transfer.runner import DockerRunner, ExecutionFailure

DESCRIPTION = "stagecopy - filtered artifact transfer between container build images"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="stagecopy",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the filter rules for an include/exclude combination
  stagecopy rules --base /src --include app/config --exclude app/config/secrets

  # Show both hops of every artifact in a build file
  stagecopy plan --config build.yaml

  # Extract artifacts and print the destination image instructions
  stagecopy apply --config build.yaml --format yaml
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {STAGECOPY_VERSION}",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", metavar="FILE", type=str, help="Also log to FILE")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    rules_parser = subparsers.add_parser("rules", help="Print filter rules")
    rules_parser.add_argument("-b", "--base", metavar="DIR", required=True, help="Base directory")
    rules_parser.add_argument(
        "-i", "--include", metavar="PATH", action="append", default=[], help="Include path (repeatable)"
    )
    rules_parser.add_argument(
        "-e", "--exclude", metavar="PATH", action="append", default=[], help="Exclude path (repeatable)"
    )

    for name, help_text in (
        ("plan", "Print transfer commands without running anything"),
        ("apply", "Run extract hops and print image instructions"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "-c",
            "--config",
            metavar="FILE",
            required=True,
            help="Build file with 'artifacts' and optional 'stagecopy' settings (YAML)",
        )
        sub.add_argument(
            "--format", choices=["text", "yaml"], default="text", help="Output format"
        )
        sub.add_argument("--copy-tool", metavar="BIN", help="Copy tool executable")
        sub.add_argument("--host-tmp-dir", metavar="DIR", help="Host staging root")

    apply_parser = subparsers.choices["apply"]
    apply_parser.add_argument(
        "--dry-run", action="store_true", help="Skip all transfers"
    )
    apply_parser.add_argument("--docker", metavar="BIN", default="docker", help="Docker CLI")

    return parser.parse_args(args)


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the CLI configuration layer from parsed arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    settings: Dict[str, Any] = {}

    if getattr(args, "copy_tool", None):
        settings[ConfigKey.COPY_TOOL] = args.copy_tool
    if getattr(args, "host_tmp_dir", None):
        settings[ConfigKey.HOST_TMP_DIR] = args.host_tmp_dir
    if getattr(args, "dry_run", False):
        settings[ConfigKey.DRY_RUN] = True
    if args.debug:
        settings[ConfigKey.LOGGING] = {"level": "DEBUG"}
    if args.log_file:
        settings.setdefault(ConfigKey.LOGGING, {})["file"] = args.log_file

    return {ConfigKey.ROOT: settings}


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Load layered configuration for a plan/apply run.

    Raises:
        CLIError: If the build file cannot be loaded
    """
    config = ConfigManager()
    try:
        config.load_file(args.config)
    except ConfigError as e:
        raise CLIError(str(e))
    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    return config


def setup_logging(args: argparse.Namespace, config: Optional[ConfigManager] = None) -> Logger:
    """
    Setup logging based on arguments and configuration.

    Args:
        args: Parsed arguments namespace
        config: Configuration manager, if one was loaded

    Returns:
        Configured logger instance
    """
    settings = dict(config.settings().get(ConfigKey.LOGGING) or {}) if config else {}
    if args.debug:
        settings["level"] = "DEBUG"
    if args.log_file:
        settings["file"] = args.log_file
    return configure_logger(settings)


def format_plans(plans: List[TransferPlan], output_format: str = "text") -> str:
    """
    Render transfer plans for display.

    Args:
        plans: Plans to render
        output_format: "text" or "yaml"

    Returns:
        Rendered plans
    """
    if output_format == "yaml":
        return yaml.safe_dump(
            [
                {
                    "artifact": plan.artifact,
                    "extract": plan.extract.to_argv(),
                    "mount": plan.mount.to_volume(),
                    "inject": plan.inject.to_argv(),
                }
                for plan in plans
            ],
            sort_keys=False,
        )

    lines = []
    for plan in plans:
        lines.append(f"artifact {plan.artifact}")
        lines.append(f"  extract: {plan.extract.to_shell()}")
        lines.append(f"  mount:   {plan.mount.to_volume()}")
        lines.append(f"  inject:  {plan.inject.to_shell()}")
    return "\n".join(lines) + ("\n" if lines else "")


def format_image(image: ImageInstructions, output_format: str = "text") -> str:
    """Render destination image instructions for display."""
    if output_format == "yaml":
        return yaml.safe_dump(
            {"volumes": image.volume_args(), "commands": list(image.commands)}, sort_keys=False
        )

    lines = [f"VOLUME {volume}" for volume in image.volume_args()]
    lines.extend(f"RUN {command}" for command in image.commands)
    return "\n".join(lines) + ("\n" if lines else "")


def run_rules(args: argparse.Namespace) -> int:
    """Print the filter rules for --base/--include/--exclude."""
    try:
        validate_path(args.base, absolute=False)
        validate_patterns(args.include, "include")
        validate_patterns(args.exclude, "exclude")
    except ValidationError as e:
        raise CLIError(str(e))

    for rule in build_rules(args.base, args.include, args.exclude):
        print(rule.render())
    return 0


def run_transfers(args: argparse.Namespace) -> int:
    """Plan (and for ``apply``, run) every artifact of the build file."""
    config = load_config(args)
    logger = setup_logging(args, config)

    try:
        descriptors = load_artifacts(config.get(ConfigKey.ARTIFACTS))
    except ValidationError as e:
        raise CLIError(f"Invalid build file {args.config}: {e}")

    try:
        orchestrator = ArtifactTransferOrchestrator.from_config(
            config, DockerRunner(getattr(args, "docker", "docker")), logger=logger
        )

        if args.command == "plan":
            plans = [orchestrator.plan_transfer(d) for d in descriptors]
            sys.stdout.write(format_plans(plans, args.format))
            return 0

        image = ImageInstructions(name=args.config)
        orchestrator.apply_transfers(descriptors, image)
        sys.stdout.write(format_image(image, args.format))
        return 0
    except (ValidationError, ConfigError) as e:
        raise CLIError(str(e))
    except (ExecutionFailure, MissingStagingMountError) as e:
        logger.error(f"Transfer failed: {e}")
        return 2


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code: 0 on success, 1 on usage/configuration errors,
        2 on transfer failures, 130 when interrupted
    """
    try:
        args = parse_arguments(argv)

        if args.command == "rules":
            return run_rules(args)
        return run_transfers(args)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
