"""Structured error types for the arena client.

This module provides structured exceptions with recovery actions
for the failure modes of talking to a remote match service.
"""

from enum import Enum
from typing import Any


class RecoveryAction(Enum):
    """Recovery actions for error handling."""

    RETRY = "retry"
    ABORT = "abort"


class ArenaError(Exception):
    """Base exception for arena client errors."""

    def __init__(
        self, message: str, recovery_action: RecoveryAction = RecoveryAction.ABORT
    ):
        """Initialize arena error.

        Args:
            message: Error message
            recovery_action: Suggested recovery action
        """
        super().__init__(message)
        self.message = message
        self.recovery_action = recovery_action

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recovery_action": self.recovery_action.value,
        }


class TransportError(ArenaError):
    """Error raised when a call to the match service fails.

    Covers network failures, non-success HTTP statuses and response
    bodies that cannot be decoded into the expected shape. The next
    call is free to try again, so the suggested action is RETRY.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        """Initialize transport error.

        Args:
            operation: Transport operation that failed (e.g. "advance")
            reason: Human-readable failure description
            endpoint: Request path, if known
            status_code: HTTP status code, if a response was received
        """
        self.operation = operation
        self.reason = reason
        self.endpoint = endpoint
        self.status_code = status_code

        status_info = f" (HTTP {status_code})" if status_code is not None else ""
        message = f"{operation} failed{status_info}: {reason}"

        super().__init__(message, RecoveryAction.RETRY)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "operation": self.operation,
                "endpoint": self.endpoint,
                "status_code": self.status_code,
            }
        )
        return data


class SessionError(ArenaError):
    """Error raised for invalid lifecycle transitions or failed session setup.

    This occurs when starting a match fails (player or match creation),
    when the card catalog cannot be loaded, or when an operation is
    attempted in a lifecycle state that does not permit it.
    """

    def __init__(self, message: str, state: str | None = None):
        """Initialize session error.

        Args:
            message: Error message
            state: Lifecycle state the session was in, if relevant
        """
        self.state = state
        super().__init__(message, RecoveryAction.ABORT)
