"""Command line interface for battle_arena."""
