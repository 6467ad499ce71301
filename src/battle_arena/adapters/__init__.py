"""Adapters for external match services."""

from .http import HttpMatchTransport, MatchTransport

__all__ = ["HttpMatchTransport", "MatchTransport"]
