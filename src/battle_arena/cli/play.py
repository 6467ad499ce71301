"""Headless `play` command: a console render layer for the sync loop."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from battle_arena.config import ConfigError, load_config, validate_config
from battle_arena.core.projector import ArenaView, project
from battle_arena.core.session import MatchSession
from battle_arena.schemas.messages import MatchSnapshot
from battle_arena.utils.errors import SessionError
from battle_arena.utils.telemetry import setup_logging

ARENA_WIDTH = 21
GAUGE_WIDTH = 10


def render_lanes(view: ArenaView, width: int = ARENA_WIDTH) -> list[str]:
    """Draw the three lanes as fixed-width text rows.

    Player towers and units are upper/lower-case "p", everything else "o".
    """
    rows = [["."] * width for _ in range(3)]

    for unit in view.units:
        col = min(width - 1, int(round(unit.x * (width - 1))))
        rows[unit.lane][col] = "p" if unit.owner == "player" else "o"

    for tower in view.towers:
        col = min(width - 1, int(round(tower.x * (width - 1))))
        rows[tower.lane][col] = "P" if tower.side == "player" else "O"

    return ["".join(row) for row in rows]


def render_status(view: ArenaView) -> str:
    filled = int(round(view.elixir_fraction * GAUGE_WIDTH))
    gauge = "#" * filled + "-" * (GAUGE_WIDTH - filled)
    return f"time {view.time_label:>6}  elixir [{gauge}] {view.elixir_label}"


def render(view: ArenaView) -> str:
    return "\n".join([render_status(view), *render_lanes(view)])


@dataclass
class PlayOptions:
    username: str = "Player"
    frames: int = 10
    deploy: list[str] = field(default_factory=list)
    config: Path | None = None


def parse_play_args(args: list[str]) -> PlayOptions | None:
    """Parse `play` arguments, printing an error and returning None if invalid."""
    options = PlayOptions()

    i = 0
    while i < len(args):
        arg = args[i]
        if arg not in ["--username", "--ticks", "--deploy", "--config"]:
            print(f"Unknown argument: {arg}")
            return None
        if i + 1 >= len(args):
            print(f"Error: {arg} requires a value")
            return None

        value = args[i + 1]
        if arg == "--ticks":
            try:
                options.frames = int(value)
            except ValueError:
                print(f"Error: --ticks must be an integer, got {value}")
                return None
        elif arg == "--deploy":
            options.deploy.append(value)
        elif arg == "--config":
            options.config = Path(value)
        else:
            options.username = value
        i += 2

    return options


async def run_play_command(args: list[str]) -> int:
    """Play a match and print one frame per published snapshot.

    Args:
        args: Command line arguments after "play"

    Returns:
        Exit code (0 for success, 1 for error)
    """
    options = parse_play_args(args)
    if options is None:
        return 1

    try:
        config = load_config(options.config)
        validate_config(config)
    except ConfigError as e:
        print(f"Error loading configuration: {e}")
        return 1

    setup_logging(config.logging.level, config.logging.format)

    # No frame within this window means the sync loop is making no progress
    frame_timeout = max(
        5 * config.client.interval_ms / 1000.0,
        2 * config.client.request_timeout_seconds,
    )
    frames: asyncio.Queue[MatchSnapshot] = asyncio.Queue()

    async with MatchSession(config=config.client) as session:
        session.store.subscribe(frames.put_nowait)

        try:
            cards = await session.load_catalog()
            print("Cards: " + ", ".join(f"{c.name} ({c.cost:g})" for c in cards))

            await session.start(options.username)
            for card_id in options.deploy:
                await session.deploy(card_id)

            for _ in range(options.frames):
                snapshot = await asyncio.wait_for(frames.get(), frame_timeout)
                print(render(project(snapshot)))
                print()
        except SessionError as e:
            print(f"Error: {e}")
            return 1
        except asyncio.TimeoutError:
            print(
                f"Error: no match progress for {frame_timeout:.0f}s "
                f"({session.loop.consecutive_failures} failed cycles)"
            )
            return 1
        finally:
            await session.stop()

    return 0
