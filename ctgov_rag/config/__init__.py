"""Settings and logging configuration."""

from .logging import configure_logging, setup_logging
from .settings import Settings, settings

__all__ = ["Settings", "configure_logging", "settings", "setup_logging"]
