"""`config` subcommands: inspect and check the client configuration."""

import json
from dataclasses import dataclass
from pathlib import Path

import yaml

from battle_arena.config import Config, ConfigError, load_config, validate_config

USAGE = """Usage:
    python -m battle_arena.cli config show [path] [--format yaml|json]
    python -m battle_arena.cli config validate [path]

Without a path, defaults plus ARENA_* environment variables are used."""


@dataclass
class ConfigArgs:
    path: Path | None = None
    format: str = "yaml"


def parse_config_args(args: list[str], allow_format: bool) -> ConfigArgs | None:
    """Parse an optional config path and, for `show`, an output format.

    Prints the problem and returns None if the arguments are invalid.
    """
    parsed = ConfigArgs()

    i = 0
    while i < len(args):
        arg = args[i]
        if allow_format and arg in ["--format", "-f"]:
            if i + 1 >= len(args):
                print("Error: --format requires a value")
                return None
            parsed.format = args[i + 1]
            i += 2
            continue
        if allow_format and arg.startswith("--format="):
            parsed.format = arg.split("=", 1)[1]
        elif arg.startswith("-") or parsed.path is not None:
            print(f"Unknown argument: {arg}")
            return None
        else:
            parsed.path = Path(arg)
        i += 1

    if parsed.format not in ["yaml", "json"]:
        print(f"Error: Invalid format '{parsed.format}'. Use 'yaml' or 'json'")
        return None
    return parsed


def describe(config: Config) -> str:
    client = config.client
    deploy_errors = "suppressed" if client.suppress_deploy_errors else "raised"
    return (
        f"  server:   {client.base_url}\n"
        f"  interval: {client.interval_ms:g} ms "
        f"(timeout {client.request_timeout_seconds:g} s)\n"
        f"  deploy failures {deploy_errors}, degraded after "
        f"{client.failure_threshold} failed cycles"
    )


def config_validate_command(args: list[str]) -> int:
    """Load a configuration and check it for consistency.

    Args:
        args: Command line arguments after "validate"

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed = parse_config_args(args, allow_format=False)
    if parsed is None:
        return 1

    source = parsed.path or "defaults and environment"
    print(f"Validating configuration from {source}")

    try:
        config = load_config(parsed.path)
        validate_config(config)
    except ConfigError as e:
        print(f"✗ Configuration validation failed: {e}")
        return 1

    print("✓ Configuration is valid")
    print(describe(config))
    return 0


def config_show_command(args: list[str]) -> int:
    """Print the effective configuration as YAML or JSON."""
    parsed = parse_config_args(args, allow_format=True)
    if parsed is None:
        return 1

    try:
        settings = load_config(parsed.path).model_dump()
    except ConfigError as e:
        print(f"Error loading configuration: {e}")
        return 1

    if parsed.format == "json":
        print(json.dumps(settings, indent=2))
    else:
        print(yaml.safe_dump(settings, default_flow_style=False, sort_keys=True))
    return 0


def run_config_command(args: list[str]) -> int:
    """Dispatch a config subcommand.

    Args:
        args: Command line arguments after "config"

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not args or args[0] in ["-h", "--help"]:
        print(USAGE)
        return 0

    subcommand, rest = args[0], args[1:]
    if subcommand == "show":
        return config_show_command(rest)
    if subcommand == "validate":
        return config_validate_command(rest)

    print(f"Unknown config command: {subcommand}")
    print(USAGE)
    return 1
