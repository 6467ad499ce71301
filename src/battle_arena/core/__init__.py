# Core session, synchronization and projection

from .projector import ArenaView, TowerView, UnitView, elixir_fraction, project
from .session import MatchSession
from .snapshot_store import SnapshotStore
from .sync_loop import SyncLoop

__all__ = [
    "ArenaView",
    "MatchSession",
    "SnapshotStore",
    "SyncLoop",
    "TowerView",
    "UnitView",
    "elixir_fraction",
    "project",
]
