"""Configuration package for the pawaPay sandbox tester."""
from .settings import get_settings, Settings

__all__ = ["Settings", "get_settings"]
