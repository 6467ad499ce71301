"""Entry point for `python -m battle_arena.cli` command."""

import sys


def main(args: list[str] | None = None) -> int:
    """Main entry point for the battle_arena CLI."""
    if args is None:
        args = sys.argv[1:]

    if not args or args[0] in ["-h", "--help", "help"]:
        print_help()
        return 0

    command = args[0]

    if command == "version":
        print_version()
        return 0
    elif command == "play":
        return run_play(args[1:])
    elif command == "config":
        return run_config(args[1:])
    else:
        print(f"Unknown command: {command}")
        print_help()
        return 1


def print_help() -> None:
    """Print CLI help message."""
    print(
        """battle_arena - card-battle match client

Usage:
    python -m battle_arena.cli <command> [options]

Commands:
    version     Show version information
    play        Play a headless match against the configured server
    config      Configuration management (show, validate)
    help        Show this help message

Options:
    -h, --help  Show help message
"""
    )


def print_version() -> None:
    """Print version information."""
    from battle_arena import __version__

    print(f"battle_arena {__version__}")


def run_play(args: list[str]) -> int:
    """Run the play command."""
    import asyncio

    from battle_arena.cli.play import run_play_command

    return asyncio.run(run_play_command(args))


def run_config(args: list[str]) -> int:
    """Run the config command."""
    from battle_arena.cli.config import run_config_command

    return run_config_command(args)


if __name__ == "__main__":
    sys.exit(main())
