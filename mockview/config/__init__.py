"""
Configuration for MockView
"""

from mockview.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
