"""Shared fixtures: an in-memory match service transport."""

import asyncio
from typing import Any

import pytest

from battle_arena.adapters.http import MatchTransport
from battle_arena.config import ClientConfig
from battle_arena.core.snapshot_store import SnapshotStore
from battle_arena.schemas.messages import (
    Card,
    DeployRequest,
    MatchSnapshot,
    MatchStart,
    Player,
    Tower,
)
from battle_arena.utils.errors import TransportError

INITIAL_TOWERS = (
    Tower(side="player", lane="left", hp=1000),
    Tower(side="player", lane="center", hp=2000),
    Tower(side="player", lane="right", hp=1000),
    Tower(side="opponent", lane="left", hp=1000),
    Tower(side="opponent", lane="center", hp=2000),
    Tower(side="opponent", lane="right", hp=1000),
)


class FakeTransport(MatchTransport):
    """Scriptable MatchTransport that records every call.

    - `queue_state(snapshot)` sets what the next fetch_state returns
    - `fail_next(operation, times)` makes the next calls raise TransportError
    - `hold(match_id)` blocks advance() for that match until `release(match_id)`
    - `start_gate`, when set to an Event, blocks start_match() until it is set
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.initial_state = MatchSnapshot(elixir=5, time=0, towers=INITIAL_TOWERS)
        self.current_state = self.initial_state
        self.cards = [
            Card(card_id="knight", name="Knight", cost=3, role="tank"),
            Card(card_id="archer", name="Archer", cost=3, role="ranged"),
        ]
        self.closed = False
        self._queued: list[MatchSnapshot] = []
        self._failures: dict[str, int] = {}
        self._gates: dict[str, asyncio.Event] = {}
        self._matches = 0
        self.start_gate: asyncio.Event | None = None
        self._players = 0

    def queue_state(self, snapshot: MatchSnapshot) -> None:
        self._queued.append(snapshot)

    def fail_next(self, operation: str, times: int = 1) -> None:
        self._failures[operation] = times

    def hold(self, match_id: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[match_id] = gate
        return gate

    def release(self, match_id: str) -> None:
        self._gates.pop(match_id).set()

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def _record(self, operation: str, argument: Any = None) -> None:
        self.calls.append((operation, argument))
        remaining = self._failures.get(operation, 0)
        if remaining > 0:
            self._failures[operation] = remaining - 1
            raise TransportError(operation, "simulated failure", status_code=503)

    async def seed(self) -> None:
        self._record("seed")

    async def create_player(self, username: str) -> Player:
        self._record("create_player", username)
        self._players += 1
        return Player(player_id=f"p{self._players}", username=username)

    async def list_cards(self) -> list[Card]:
        self._record("list_cards")
        return list(self.cards)

    async def start_match(self, player_id: str) -> MatchStart:
        if self.start_gate is not None:
            await self.start_gate.wait()
        self._record("start_match", player_id)
        self._matches += 1
        return MatchStart(match_id=f"m{self._matches}", state=self.initial_state)

    async def deploy(self, request: DeployRequest) -> dict[str, Any]:
        self._record("deploy", request)
        return {"ok": True}

    async def advance(self, match_id: str) -> dict[str, Any]:
        gate = self._gates.get(match_id)
        self.calls.append(("advance_begin", match_id))
        if gate is not None:
            await gate.wait()
        self._record("advance", match_id)
        return {"ok": True}

    async def fetch_state(self, match_id: str) -> MatchSnapshot:
        self._record("fetch_state", match_id)
        if self._queued:
            self.current_state = self._queued.pop(0)
        return self.current_state

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def client_config() -> ClientConfig:
    # Long interval so only explicit tick() calls run cycles
    return ClientConfig(interval_ms=60_000.0, failure_threshold=2)
