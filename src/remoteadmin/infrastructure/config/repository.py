"""
Configuration repository for loading config files.

This module provides the infrastructure layer for configuration files.
It handles file I/O and validation into domain models.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from remoteadmin.domain.config import Credential, RemoteAdminSettings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "remoteadmin"

_LINE_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*')
_BLOCK_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|/\*.*?\*/', re.DOTALL)


def _strip_comments(jsonc_content: str) -> str:
    """Strip // and /* */ comments from JSONC content, leaving strings intact."""
    def keep_strings(match: "re.Match[str]") -> str:
        return match.group(1) or ""

    without_blocks = _BLOCK_COMMENT.sub(keep_strings, jsonc_content)
    return _LINE_COMMENT.sub(keep_strings, without_blocks)


class ConfigRepository:
    """
    Repository for configuration file operations.

    Reads settings and credential files with support for JSON and JSONC.
    """

    def __init__(self, config_dir: Path):
        """
        Initialize the config repository.

        Args:
            config_dir: Base directory for configuration files
        """
        self.config_dir = config_dir

    def find_json_file(self, filename: str) -> Optional[Path]:
        """Return the .json or .jsonc path for `filename`, if either exists."""
        for suffix in (".json", ".jsonc"):
            path = self.config_dir / f"{filename}{suffix}"
            if path.exists():
                return path
        return None

    def load_json_file(self, path: Path) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Raises:
            ValueError: If file cannot be parsed
        """
        try:
            content = path.read_text(encoding="utf-8")
            if path.suffix == ".jsonc":
                content = _strip_comments(content)
            data = json.loads(content)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to parse config file %s: %s", path, e)
            raise ValueError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return data

    def load_settings(self) -> RemoteAdminSettings:
        """
        Load application settings.

        Returns defaults when no settings file exists.

        Raises:
            ValueError: If the file cannot be parsed or validated
        """
        path = self.find_json_file(SETTINGS_FILENAME)
        if path is None:
            logger.debug("No %s.json in %s, using defaults", SETTINGS_FILENAME, self.config_dir)
            return RemoteAdminSettings()

        data = self.load_json_file(path)
        try:
            settings = RemoteAdminSettings(**data)
        except Exception as e:
            logger.error("Failed to load settings: %s", e)
            raise ValueError(f"Invalid settings in {path}: {e}") from e

        logger.debug("Loaded settings from %s", path)
        return settings

    def load_credential(self, cred_ref: str) -> Credential:
        """
        Load a specific credential file.

        Args:
            cred_ref: Reference name for the credential file

        Returns:
            Parsed Credential domain model

        Raises:
            ValueError: If credential cannot be loaded or validated
        """
        search_paths = [
            self.config_dir / "credentials" / f"{cred_ref}.json",  # config/credentials/
            self.config_dir.parent / "credentials" / f"{cred_ref}.json",  # root/credentials/
        ]

        loaded_path = next((path for path in search_paths if path.exists()), None)
        if loaded_path is None:
            raise ValueError(
                f"Credential file '{cred_ref}' not found in any expected location"
            )

        cred_data = self.load_json_file(loaded_path)

        # Support both formats: direct object or wrapped in "credentials"
        if "credentials" in cred_data:
            cred_data = cred_data["credentials"]

        try:
            credential = Credential(**cred_data)
        except Exception as e:
            logger.error("Failed to load credential '%s': %s", cred_ref, e)
            raise ValueError(f"Invalid credential '{cred_ref}': {e}") from e

        logger.debug("Loaded credential '%s' from %s", cred_ref, loaded_path)
        return credential
