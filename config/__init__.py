"""Application settings."""

from .settings import Settings, get_model_tag, settings

__all__ = ["Settings", "get_model_tag", "settings"]
