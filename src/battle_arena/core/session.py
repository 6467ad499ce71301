"""Match session: lifecycle owner for one player's matches.

The session creates the player, starts matches, forwards deploys, and
binds the sync loop to the active match. Lifecycle:

    IDLE -> STARTING -> RUNNING -> STOPPED

Starting again from RUNNING or STOPPED begins a new match; the previous
loop is fully stopped before the new one starts.
"""

from typing import Any

from pydantic import ValidationError

from battle_arena.adapters.http import HttpMatchTransport, MatchTransport
from battle_arena.config import ClientConfig
from battle_arena.core.snapshot_store import SnapshotStore
from battle_arena.core.sync_loop import SyncLoop
from battle_arena.schemas.messages import Card, DeployRequest, MatchSnapshot, Player
from battle_arena.schemas.types import LifecycleState
from battle_arena.utils.errors import SessionError, TransportError
from battle_arena.utils.telemetry import get_logger


class MatchSession:
    """Owns the current match id, lifecycle state and sync loop."""

    def __init__(
        self,
        transport: MatchTransport | None = None,
        config: ClientConfig | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport or HttpMatchTransport(self.config)
        self._store = store or SnapshotStore()
        self._loop = SyncLoop.from_config(self._transport, self._store, self.config)

        self._state = LifecycleState.IDLE
        self._player: Player | None = None
        self._match_id: str | None = None
        self._cards: list[Card] = []
        # Bumped by every start() and stop(); a start whose generation is
        # no longer current must not publish
        self._start_generation = 0
        self._logger = get_logger("battle_arena.session")

    async def __aenter__(self) -> "MatchSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def player(self) -> Player | None:
        return self._player

    @property
    def match_id(self) -> str | None:
        return self._match_id

    @property
    def snapshot(self) -> MatchSnapshot | None:
        return self._store.current

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    @property
    def loop(self) -> SyncLoop:
        return self._loop

    async def load_catalog(self) -> list[Card]:
        """Seed the server's data and fetch the card catalog.

        Raises:
            SessionError: If seeding or the catalog fetch fails
        """
        try:
            await self._transport.seed()
            cards = await self._transport.list_cards()
        except TransportError as e:
            raise SessionError(
                f"Failed to load card catalog: {e}", state=self._state.value
            ) from e

        self._cards = cards
        self._logger.info("Card catalog loaded", card_count=len(cards))
        return self.cards

    async def start(self, username: str) -> MatchSnapshot:
        """Start a new match and begin synchronizing it.

        Args:
            username: Name used if a player has to be created

        Returns:
            The initial snapshot, already published as current

        Raises:
            SessionError: If a start is already underway, player or match
                creation fails (the session is left IDLE), or stop() or
                another start superseded this one while it was waiting
        """
        if self._state == LifecycleState.STARTING:
            raise SessionError("Match start already in progress", state="starting")

        if self._loop.running or self._match_id is not None:
            await self._loop.stop(reason="restarted")
            self._match_id = None

        self._state = LifecycleState.STARTING
        self._start_generation += 1
        generation = self._start_generation
        try:
            if self._player is None:
                self._player = await self._transport.create_player(username)
                self._logger.info(
                    "Player created", player_id=self._player.player_id
                )
            started = await self._transport.start_match(self._player.player_id)
        except TransportError as e:
            if generation == self._start_generation:
                self._state = LifecycleState.IDLE
            self._logger.error("Failed to start match", **e.to_dict())
            raise SessionError(
                f"Failed to start match: {e}", state=self._state.value
            ) from e

        if generation != self._start_generation:
            # stop() ran while the start request was outstanding
            self._logger.warning(
                "Abandoned match of interrupted start", match_id=started.match_id
            )
            raise SessionError(
                "Match start interrupted by stop", state=self._state.value
            )

        self._match_id = started.match_id
        self._store.publish(started.state)
        self._state = LifecycleState.RUNNING
        await self._loop.start(started.match_id)

        self._logger.info(
            "Match started",
            match_id=started.match_id,
            player_id=self._player.player_id,
        )
        return started.state

    async def deploy(self, card: Card | str, lane: int | None = None) -> bool:
        """Ask the server to deploy a card into a lane.

        Deploys are advisory: the result is never applied locally, and the
        next published snapshot shows whether the server accepted it.

        Args:
            card: Card or card id to deploy
            lane: Lane index 0-2; defaults to the configured lane

        Returns:
            True if the request was accepted by the transport, False if the
            session is not running or a suppressed failure occurred

        Raises:
            SessionError: If the card id or lane is invalid, or the deploy
                fails and suppression is disabled
        """
        if self._state != LifecycleState.RUNNING or self._match_id is None:
            self._logger.debug("Deploy ignored, no running match", state=self._state)
            return False

        card_id = card.card_id if isinstance(card, Card) else card
        try:
            request = DeployRequest(
                match_id=self._match_id,
                card_id=card_id,
                lane=self.config.default_lane if lane is None else lane,
            )
        except ValidationError as e:
            raise SessionError(
                f"Invalid deploy of {card_id!r} to lane {lane}: "
                f"{e.error_count()} error(s)",
                state=self._state.value,
            ) from e

        try:
            await self._transport.deploy(request)
        except TransportError as e:
            if not self.config.suppress_deploy_errors:
                raise SessionError(
                    f"Failed to deploy {card_id}: {e}", state=self._state.value
                ) from e
            self._logger.warning(
                "Deploy failed",
                match_id=request.match_id,
                card_id=card_id,
                lane=request.lane,
                **e.to_dict(),
            )
            return False

        return True

    async def stop(self) -> None:
        """Stop the active match. Safe to call repeatedly."""
        if self._state == LifecycleState.STOPPED and not self._loop.running:
            return

        match_id = self._match_id
        self._start_generation += 1
        await self._loop.stop(reason="session stopped")
        self._match_id = None
        self._state = LifecycleState.STOPPED
        self._logger.info("Session stopped", match_id=match_id)

    async def aclose(self) -> None:
        """Stop the session and release the transport."""
        await self.stop()
        await self._loop.shutdown()
        await self._transport.aclose()
