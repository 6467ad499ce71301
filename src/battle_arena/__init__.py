"""battle_arena - asyncio client for a real-time card-battle server.

battle_arena creates players, loads the card catalog, starts matches,
deploys cards, and keeps a local, render-ready view of the
server-authoritative match state in step through a polling sync loop.
"""

__version__ = "0.1.0"

from .adapters import HttpMatchTransport, MatchTransport
from .config import ClientConfig, Config, ConfigError, load_config
from .core import (
    ArenaView,
    MatchSession,
    SnapshotStore,
    SyncLoop,
    project,
)
from .schemas import (
    Card,
    DeployRequest,
    LifecycleState,
    MatchSnapshot,
    Player,
    Tower,
    Unit,
)
from .utils.errors import ArenaError, SessionError, TransportError

__all__ = [
    "ArenaError",
    "ArenaView",
    "Card",
    "ClientConfig",
    "Config",
    "ConfigError",
    "DeployRequest",
    "HttpMatchTransport",
    "LifecycleState",
    "MatchSession",
    "MatchSnapshot",
    "MatchTransport",
    "Player",
    "SessionError",
    "SnapshotStore",
    "SyncLoop",
    "Tower",
    "TransportError",
    "Unit",
    "__version__",
    "load_config",
    "project",
]
