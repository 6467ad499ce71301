"""Lifecycle and cancellation types shared by the session and sync loop."""

from enum import Enum


class LifecycleState(str, Enum):
    """Coarse status of a match session."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


class CancelToken:
    """Generation token for one run of the sync loop.

    Every run of the loop gets a fresh token bound to its match. Stopping
    the run cancels the token; a cycle that resolves afterwards checks the
    token and discards its result instead of publishing it.
    """

    def __init__(self, match_id: str, generation: int) -> None:
        """Initialize a new cancel token.

        Args:
            match_id: Match the run is bound to
            generation: Monotonic run counter of the owning loop

        Raises:
            ValueError: If match_id is empty
        """
        if not match_id.strip():
            raise ValueError("match_id cannot be empty")

        self.match_id = match_id
        self.generation = generation
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """Check if the token has been cancelled."""
        return self._cancelled

    def cancel(self, reason: str) -> None:
        """Cancel the token with a specific reason.

        Args:
            reason: Human-readable reason for cancellation
        """
        self.reason = reason
        self._cancelled = True

    def __repr__(self) -> str:
        status = "cancelled" if self.cancelled else "active"
        reason_info = f", reason={self.reason}" if self.reason else ""
        return (
            f"CancelToken(match_id={self.match_id}, generation={self.generation}, "
            f"status={status}{reason_info})"
        )
