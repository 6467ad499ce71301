"""Pydantic models for match service payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Player(BaseModel):
    """Player identity returned by the match service."""

    player_id: str = Field(
        description="Server-assigned player identifier",
        min_length=1,
        json_schema_extra={"example": "p_01"},
    )
    username: str = Field(
        description="Display name chosen by the player",
        json_schema_extra={"example": "Player"},
    )

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )


class Card(BaseModel):
    """A deployable card from the catalog."""

    card_id: str = Field(
        description="Catalog identifier used in deploy requests",
        min_length=1,
        json_schema_extra={"example": "knight"},
    )
    name: str = Field(description="Display name")
    cost: float = Field(ge=0.0, description="Elixir cost")
    role: str = Field(default="", description="Role label (e.g. tank, ranged)")

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )


class CardCatalog(BaseModel):
    """Envelope returned by the card listing endpoint."""

    cards: list[Card] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class Tower(BaseModel):
    """A tower on one side of one lane."""

    side: str = Field(description="Owning side, 'player' or 'opponent'")
    lane: str | int = Field(description="Lane name (left/center/right) or index")
    hp: float = Field(description="Remaining hit points")

    model_config = ConfigDict(frozen=True, extra="ignore")


class Unit(BaseModel):
    """A deployed unit advancing along a lane."""

    owner: str = Field(description="Owning side, 'player' or 'opponent'")
    lane: str | int = Field(description="Lane index (0-2) or name")
    x: float = Field(
        default=0.0,
        description="Progress along the lane: 0 at origin, 10 at the opposing tower",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class MatchSnapshot(BaseModel):
    """Full authoritative state of a match at one point in time.

    Snapshots are immutable. A newer snapshot replaces an older one as a
    whole; fields are never merged across snapshots.
    """

    elixir: float = Field(default=0.0, description="Current player elixir")
    time: float = Field(default=0.0, description="Elapsed match time in seconds")
    towers: tuple[Tower, ...] = Field(default_factory=tuple)
    units: tuple[Unit, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "elixir": 5.0,
                    "time": 0,
                    "towers": [{"side": "player", "lane": "left", "hp": 1000}],
                    "units": [],
                }
            ]
        },
    )


class MatchStart(BaseModel):
    """Response of the start-match endpoint."""

    match_id: str = Field(min_length=1, description="Identifier of the new match")
    state: MatchSnapshot = Field(description="Initial match state")

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )


class DeployRequest(BaseModel):
    """Request to deploy a card into a lane of a running match."""

    match_id: str = Field(min_length=1)
    card_id: str = Field(min_length=1)
    lane: int = Field(default=1, ge=0, le=2, description="Lane index, 1 is center")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON body expected by the deploy endpoint."""
        return self.model_dump()
