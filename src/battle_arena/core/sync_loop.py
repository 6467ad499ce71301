"""Timed driver that keeps a local snapshot in step with the match service.

Each tick runs one cycle: advance the match on the server, fetch its state,
and publish the result to the snapshot store. A tick that fires while the
previous cycle is still waiting on the network is skipped outright, so at
most one cycle per run is ever outstanding and publishes happen in issue
order. Every run is bound to a CancelToken; once the run is stopped, any
cycle that resolves late is discarded instead of published.
"""

import asyncio

from battle_arena.adapters.http import MatchTransport
from battle_arena.config import ClientConfig
from battle_arena.core.snapshot_store import SnapshotStore
from battle_arena.schemas.types import CancelToken
from battle_arena.utils.errors import TransportError
from battle_arena.utils.telemetry import get_logger, record_cycle, record_skipped_tick


class SyncLoop:
    """Periodic advance/fetch/publish driver for a single match at a time."""

    def __init__(
        self,
        transport: MatchTransport,
        store: SnapshotStore,
        interval_ms: float = 1000.0,
        failure_threshold: int = 3,
    ) -> None:
        """Initialize the sync loop.

        Args:
            transport: Match service transport used for advance/fetch
            store: Store that receives published snapshots
            interval_ms: Tick cadence in milliseconds
            failure_threshold: Consecutive failed cycles before `degraded`

        Raises:
            ValueError: If interval_ms is not positive or threshold < 1
        """
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")

        self._transport = transport
        self._store = store
        self.interval_ms = interval_ms
        self.failure_threshold = failure_threshold
        self.consecutive_failures = 0

        self._generation = 0
        self._token: CancelToken | None = None
        self._in_flight: CancelToken | None = None
        self._timer_task: asyncio.Task[None] | None = None
        self._cycle_tasks: set[asyncio.Task[bool]] = set()
        self._logger = get_logger("battle_arena.sync_loop")

    @classmethod
    def from_config(
        cls, transport: MatchTransport, store: SnapshotStore, config: ClientConfig
    ) -> "SyncLoop":
        return cls(
            transport,
            store,
            interval_ms=config.interval_ms,
            failure_threshold=config.failure_threshold,
        )

    @property
    def running(self) -> bool:
        return self._token is not None and not self._token.cancelled

    @property
    def match_id(self) -> str | None:
        """Match the active run is bound to, or None when stopped."""
        return self._token.match_id if self._token else None

    @property
    def generation(self) -> int:
        """Number of runs started so far."""
        return self._generation

    @property
    def in_flight(self) -> bool:
        """Whether a cycle of the active run is awaiting the network."""
        return self._in_flight is not None

    @property
    def degraded(self) -> bool:
        """Whether recent cycles have failed repeatedly."""
        return self.consecutive_failures >= self.failure_threshold

    async def start(self, match_id: str) -> None:
        """Begin ticking for a match, fully stopping any previous run first."""
        if self._token is not None or self._timer_task is not None:
            await self.stop(reason="restarted")

        self._generation += 1
        token = CancelToken(match_id, self._generation)
        self._token = token
        self.consecutive_failures = 0
        self._timer_task = asyncio.create_task(self._run_timer(token))

        self._logger.info(
            "Sync loop started",
            match_id=match_id,
            generation=token.generation,
            interval_ms=self.interval_ms,
        )

    async def stop(self, reason: str = "stopped") -> None:
        """Stop the active run. Safe to call when already stopped.

        The pending timer is cancelled and in-flight bookkeeping is dropped.
        A cycle already waiting on the network is left to settle, but its
        result will not be published.
        """
        token = self._token
        timer_task = self._timer_task
        if token is None and timer_task is None:
            return

        self._token = None
        self._in_flight = None
        self._timer_task = None

        if token is not None:
            token.cancel(reason)

        if timer_task is not None:
            timer_task.cancel()
            try:
                await timer_task
            except asyncio.CancelledError:
                pass

        self._logger.info(
            "Sync loop stopped",
            match_id=token.match_id if token else None,
            reason=reason,
        )

    async def shutdown(self) -> None:
        """Stop the run and cancel any cycles still waiting on the network."""
        await self.stop(reason="shutdown")

        pending = list(self._cycle_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def tick(self) -> bool:
        """Run one advance/fetch cycle for the active run.

        Returns:
            True if a new snapshot was published, False if the tick was
            skipped, failed, or its result was discarded
        """
        token = self._token
        if token is None or token.cancelled:
            return False

        if self._in_flight is not None:
            record_skipped_tick()
            self._logger.debug(
                "Tick skipped, cycle still in flight", match_id=token.match_id
            )
            return False

        self._in_flight = token
        match_id = token.match_id
        try:
            await self._transport.advance(match_id)
            if self._is_stale(token):
                return self._discard(token)
            snapshot = await self._transport.fetch_state(match_id)
        except TransportError as e:
            if self._is_stale(token):
                return self._discard(token)

            self.consecutive_failures += 1
            record_cycle("failed")
            self._logger.warning(
                "Sync cycle failed",
                match_id=match_id,
                **e.to_dict(),
                consecutive_failures=self.consecutive_failures,
                degraded=self.degraded,
            )
            return False
        finally:
            if self._in_flight is token:
                self._in_flight = None

        if self._is_stale(token):
            return self._discard(token)

        self.consecutive_failures = 0
        self._store.publish(snapshot)
        record_cycle("published")
        return True

    def _is_stale(self, token: CancelToken) -> bool:
        return token.cancelled or self._token is not token

    def _discard(self, token: CancelToken) -> bool:
        record_cycle("discarded")
        self._logger.debug(
            "Discarded result of stopped run",
            match_id=token.match_id,
            generation=token.generation,
        )
        return False

    async def _run_timer(self, token: CancelToken) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval_ms / 1000.0
        next_at = loop.time() + interval

        try:
            while not token.cancelled:
                await asyncio.sleep(max(0.0, next_at - loop.time()))
                if token.cancelled:
                    break

                now = loop.time()
                next_at += interval
                if next_at < now:
                    # Fell behind; resume the cadence from now
                    next_at = now + interval

                task = asyncio.create_task(self.tick())
                self._cycle_tasks.add(task)
                task.add_done_callback(self._on_cycle_done)
        except asyncio.CancelledError:
            self._logger.debug("Sync timer cancelled", match_id=token.match_id)
            raise

    def _on_cycle_done(self, task: asyncio.Task[bool]) -> None:
        self._cycle_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error(
                "Unexpected error in sync cycle",
                error=str(error),
                error_type=type(error).__name__,
            )
