"""Unit tests for the play command's rendering and argument parsing."""

from pathlib import Path

import pytest

from ..core.projector import project
from ..schemas.messages import MatchSnapshot, Tower, Unit
from .__main__ import main
from .play import (
    ARENA_WIDTH,
    parse_play_args,
    render,
    render_lanes,
    render_status,
    run_play_command,
)


class TestRender:
    """Test the text render layer."""

    def test_status_line(self) -> None:
        view = project(MatchSnapshot(elixir=5.9, time=1))

        status = render_status(view)

        assert status == "time     1s  elixir [######----] 5.9/10"

    def test_lanes_place_towers_and_units(self) -> None:
        """Test towers sit at the edges and units along their lane."""
        view = project(
            MatchSnapshot(
                towers=[
                    Tower(side="player", lane="left", hp=1000),
                    Tower(side="opponent", lane="right", hp=1000),
                ],
                units=[
                    Unit(owner="player", lane=1, x=5),
                    Unit(owner="opponent", lane=2, x=10),
                ],
            )
        )

        top, middle, bottom = render_lanes(view)

        assert len(top) == ARENA_WIDTH
        assert top[0] == "P"
        assert middle == "." * 10 + "p" + "." * 10
        assert bottom[-1] == "O"

    def test_render_frame(self) -> None:
        frame = render(project(MatchSnapshot(elixir=10, time=2)))

        lines = frame.splitlines()
        assert len(lines) == 4
        assert "[##########] 10.0/10" in lines[0]
        assert lines[1:] == ["." * ARENA_WIDTH] * 3


class TestParsePlayArgs:
    """Test `play` argument parsing."""

    def test_defaults(self) -> None:
        options = parse_play_args([])

        assert options is not None
        assert options.username == "Player"
        assert options.frames == 10
        assert options.deploy == []
        assert options.config is None

    def test_all_options(self) -> None:
        options = parse_play_args(
            [
                "--username",
                "Ann",
                "--ticks",
                "3",
                "--deploy",
                "knight",
                "--deploy",
                "archer",
                "--config",
                "arena.yaml",
            ]
        )

        assert options is not None
        assert options.username == "Ann"
        assert options.frames == 3
        assert options.deploy == ["knight", "archer"]
        assert options.config == Path("arena.yaml")

    @pytest.mark.parametrize(
        "args",
        [["--bogus"], ["--ticks"], ["--ticks", "many"]],
    )
    def test_invalid(self, args: list[str], capsys: pytest.CaptureFixture) -> None:
        assert parse_play_args(args) is None
        assert capsys.readouterr().out.startswith(("Unknown", "Error"))

    @pytest.mark.asyncio
    async def test_run_rejects_bad_arguments(self) -> None:
        assert await run_play_command(["--bogus"]) == 1

    @pytest.mark.asyncio
    async def test_run_rejects_missing_config(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.yaml"

        assert await run_play_command(["--config", str(missing)]) == 1


class TestMain:
    """Test top-level command dispatch."""

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["version"]) == 0
        assert "battle_arena 0.1.0" in capsys.readouterr().out

    def test_help(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--help"]) == 0
        assert "play" in capsys.readouterr().out

    def test_unknown_command(self) -> None:
        assert main(["dance"]) == 1
