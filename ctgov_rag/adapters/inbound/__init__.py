"""Adapters that drive the engine (CLI, HTTP API)."""
