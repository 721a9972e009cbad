"""Configuration exports."""

from .settings import Settings, get_settings, init_settings, reset_settings

__all__ = ["Settings", "get_settings", "init_settings", "reset_settings"]
