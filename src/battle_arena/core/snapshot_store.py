"""Owned holder of the current match snapshot.

Only the sync loop's publish step and session start write here. Readers
receive the immutable MatchSnapshot itself, so a published value can never
change underneath them.
"""

from collections.abc import Callable

from battle_arena.schemas.messages import MatchSnapshot
from battle_arena.utils.telemetry import get_logger

SnapshotCallback = Callable[[MatchSnapshot], None]


class SnapshotStore:
    """Single current snapshot plus ordered subscribers."""

    def __init__(self) -> None:
        self._current: MatchSnapshot | None = None
        self._version = 0
        self._subscribers: list[SnapshotCallback] = []
        self._logger = get_logger("battle_arena.snapshot_store")

    @property
    def current(self) -> MatchSnapshot | None:
        """The most recently published snapshot, or None before the first one."""
        return self._current

    @property
    def version(self) -> int:
        """Number of publishes so far."""
        return self._version

    def publish(self, snapshot: MatchSnapshot) -> None:
        """Replace the current snapshot and notify subscribers.

        A subscriber that raises is logged and skipped; the remaining
        subscribers are still notified.
        """
        self._current = snapshot
        self._version += 1

        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                self._logger.error(
                    "Snapshot subscriber failed",
                    version=self._version,
                    error=str(e),
                    exc_info=True,
                )

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register a callback for future publishes.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
