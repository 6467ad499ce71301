# Data schemas and types

from .messages import (
    Card,
    CardCatalog,
    DeployRequest,
    MatchSnapshot,
    MatchStart,
    Player,
    Tower,
    Unit,
)
from .types import CancelToken, LifecycleState

__all__ = [
    "CancelToken",
    "Card",
    "CardCatalog",
    "DeployRequest",
    "LifecycleState",
    "MatchSnapshot",
    "MatchStart",
    "Player",
    "Tower",
    "Unit",
]
