"""Configuration package: settings mixins composed into a single ``Settings``."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
