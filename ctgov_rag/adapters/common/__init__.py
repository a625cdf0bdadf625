"""Helpers shared by the adapters."""
