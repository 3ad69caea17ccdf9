"""
Configuration manager.

Caches settings and credentials loaded through the ConfigRepository and
turns credential references into session credentials.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from remoteadmin.domain.config import Credential, RemoteAdminSettings, SessionCredentials
from remoteadmin.infrastructure.config.repository import ConfigRepository

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    High-level access to settings and credentials.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the config manager.

        Args:
            config_dir: Base directory for configuration files.
                       Defaults to 'config' subdirectory of current working directory.
        """
        if config_dir is None:
            config_dir = Path.cwd() / "config"

        self.config_dir = config_dir
        self.repository = ConfigRepository(config_dir)
        self._settings: Optional[RemoteAdminSettings] = None
        self._credentials_cache: Dict[str, Credential] = {}

    def load_settings(self, force_reload: bool = False) -> RemoteAdminSettings:
        if self._settings is None or force_reload:
            self._settings = self.repository.load_settings()
        return self._settings

    def get_credential(self, cred_ref: str) -> Credential:
        if cred_ref not in self._credentials_cache:
            logger.debug("Loading credential: %s", cred_ref)
            self._credentials_cache[cred_ref] = self.repository.load_credential(cred_ref)
        return self._credentials_cache[cred_ref]

    def session_credentials(self, cred_ref: Optional[str] = None) -> SessionCredentials:
        """Ambient identity without a reference, the referenced account otherwise."""
        if not cred_ref:
            return SessionCredentials.ambient()
        return SessionCredentials.supplied(self.get_credential(cred_ref))
