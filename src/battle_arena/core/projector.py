"""Projection of match snapshots into display-ready quantities.

All functions here are pure: the same snapshot always yields the same
ArenaView, and nothing is mutated. Screen positions are fractions in
[0, 1] of the arena's width and height, so any render layer can scale
them to its own surface.
"""

import math

from pydantic import BaseModel, ConfigDict, Field

from battle_arena.schemas.messages import MatchSnapshot, Tower, Unit

MAX_ELIXIR = 10.0
LANE_LENGTH = 10.0

# Vertical band centers for the three lanes, top to bottom
LANE_BANDS: tuple[float, float, float] = (1 / 6, 1 / 2, 5 / 6)

LANE_NAMES = {"left": 0, "center": 1, "middle": 1, "right": 2}

PLAYER_SIDE = "player"


class TowerView(BaseModel):
    """A tower placed on the arena."""

    side: str
    lane: int = Field(ge=0, le=2)
    hp: float
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)


class UnitView(BaseModel):
    """A unit placed on the arena."""

    owner: str
    lane: int = Field(ge=0, le=2)
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)


class ArenaView(BaseModel):
    """Everything the render layer needs for one frame."""

    elixir_fraction: float = Field(ge=0.0, le=1.0)
    elixir_label: str
    time: float
    time_label: str
    towers: tuple[TowerView, ...] = ()
    units: tuple[UnitView, ...] = ()

    model_config = ConfigDict(frozen=True)


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def elixir_fraction(elixir: float) -> float:
    """Normalize elixir to [0, 1]. Non-finite input counts as empty."""
    if math.isnan(elixir):
        return 0.0
    return clamp(elixir, 0.0, MAX_ELIXIR) / MAX_ELIXIR


def lane_index(lane: str | int) -> int:
    """Resolve a lane given by name or index to 0, 1 or 2.

    Unknown lanes fall back to the center lane.
    """
    if isinstance(lane, int) and not isinstance(lane, bool):
        return lane if 0 <= lane <= 2 else 1
    name = str(lane).strip().lower()
    if name.isdigit():
        return lane_index(int(name))
    return LANE_NAMES.get(name, 1)


def lane_band(lane: str | int) -> float:
    """Vertical screen fraction of a lane's band center."""
    return LANE_BANDS[lane_index(lane)]


def progress_to_screen(progress: float) -> float:
    """Map lane progress (0 = origin, 10 = opposing tower) to a width fraction."""
    return clamp(_finite_or_zero(progress), 0.0, LANE_LENGTH) / LANE_LENGTH


def project_tower(tower: Tower) -> TowerView:
    return TowerView(
        side=tower.side,
        lane=lane_index(tower.lane),
        hp=tower.hp,
        x=0.0 if tower.side == PLAYER_SIDE else 1.0,
        y=lane_band(tower.lane),
    )


def project_unit(unit: Unit) -> UnitView:
    return UnitView(
        owner=unit.owner,
        lane=lane_index(unit.lane),
        x=progress_to_screen(unit.x),
        y=lane_band(unit.lane),
    )


def format_elixir(elixir: float) -> str:
    shown = clamp(_finite_or_zero(elixir), 0.0, MAX_ELIXIR)
    return f"{round(shown, 1):.1f}/{MAX_ELIXIR:.0f}"


def format_time(elapsed: float) -> str:
    if float(elapsed).is_integer():
        return f"{int(elapsed)}s"
    return f"{elapsed:.1f}s"


def project(snapshot: MatchSnapshot) -> ArenaView:
    """Derive the display view of a snapshot.

    Args:
        snapshot: Authoritative match state as published by the sync loop

    Returns:
        Immutable view with normalized elixir, elapsed time, and towers
        and units positioned as screen fractions
    """
    return ArenaView(
        elixir_fraction=elixir_fraction(snapshot.elixir),
        elixir_label=format_elixir(snapshot.elixir),
        time=snapshot.time,
        time_label=format_time(snapshot.time),
        towers=tuple(project_tower(tower) for tower in snapshot.towers),
        units=tuple(project_unit(unit) for unit in snapshot.units),
    )
