"""
Local PowerShell runner.

Writes the script to a temp file and runs it with ExecutionPolicy Bypass,
mirroring what a remote run_ps does for the local machine.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time

from remoteadmin.domain.config import PowerShellSettings
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import CommandResult

logger = logging.getLogger(__name__)


class LocalPowerShellRunner:
    """Runs PowerShell scripts in a local child process."""

    def __init__(self, settings: PowerShellSettings | None = None) -> None:
        self.settings = settings or PowerShellSettings()

    def run_ps(self, script: str) -> CommandResult:
        """
        Execute a PowerShell script locally.

        Args:
            script: PowerShell script content

        Returns:
            CommandResult with output and status

        Raises:
            AdminError: QUERY kind if PowerShell cannot be started or times out
        """
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".ps1", delete=False, encoding="utf-8"
        ) as f:
            f.write(script)
            script_path = f.name

        cmd = [
            self.settings.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-File",
            script_path,
        ]
        logger.debug("Executing: %s", " ".join(cmd))

        start = time.time()
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.settings.timeout_sec,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise AdminError.query(
                f"PowerShell timed out after {self.settings.timeout_sec}s",
                cause=e,
                step="powershell",
            ) from e
        except OSError as e:
            raise AdminError.query(
                f"Could not start {self.settings.executable}",
                cause=e,
                step="powershell",
            ) from e
        finally:
            try:
                os.unlink(script_path)
            except OSError:
                logger.debug("Could not remove temp script %s", script_path)

        return CommandResult(
            success=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
            duration_ms=int((time.time() - start) * 1000),
        )
