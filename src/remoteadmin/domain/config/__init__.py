"""
Configuration domain package.

Settings and credential models for the configuration system.
"""

from .credential import Credential, SessionCredentials
from .settings import PowerShellSettings, RemoteAdminSettings, WinRMSettings

__all__ = [
    "Credential",
    "PowerShellSettings",
    "RemoteAdminSettings",
    "SessionCredentials",
    "WinRMSettings",
]
