# Shared utilities and helpers

from .errors import ArenaError, RecoveryAction, SessionError, TransportError
from .telemetry import get_logger, setup_logging

__all__ = [
    "ArenaError",
    "RecoveryAction",
    "SessionError",
    "TransportError",
    "get_logger",
    "setup_logging",
]
