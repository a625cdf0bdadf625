"""Adapters the engine depends on (document sources)."""
