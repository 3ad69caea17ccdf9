"""
Configuration infrastructure package.
"""

from .manager import ConfigManager
from .repository import ConfigRepository

__all__ = ["ConfigManager", "ConfigRepository"]
