"""
WinRM Session - pywinrm Wrapper.

Opens one session to one host with a single transport/auth combination
taken from settings and verifies it with a probe command. There is no
retry or transport negotiation: a failed probe is a connection failure.

Transport selection:
- Supplied credentials: WinRMSettings.transport (NTLM by default)
- Ambient identity: WinRMSettings.ambient_transport (Kerberos by default)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import winrm  # pywinrm
from requests.exceptions import RequestException
from winrm.exceptions import (
    WinRMError,
    WinRMOperationTimeoutError,
    WinRMTransportError,
)

from remoteadmin.domain.config import SessionCredentials, WinRMSettings
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import CommandResult

logger = logging.getLogger(__name__)

# Errors pywinrm (and requests underneath it) raise for transport/auth problems
WINRM_ERRORS = (
    WinRMError,
    WinRMTransportError,
    WinRMOperationTimeoutError,
    RequestException,
)

SessionFactory = Callable[..., "winrm.Session"]


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class WinRMSession:
    """
    An open WinRM session to one host.

    Owned by a single workflow invocation and never shared.
    """

    def __init__(
        self,
        hostname: str,
        session: winrm.Session,
        credentials: SessionCredentials,
        transport: str = "",
    ) -> None:
        self.hostname = hostname
        self.credentials = credentials
        self.transport = transport
        self._session: Optional[winrm.Session] = session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def _require_session(self) -> winrm.Session:
        if self._session is None:
            raise AdminError.connection(f"Session to {self.hostname} is closed")
        return self._session

    def run_ps(self, script: str) -> CommandResult:
        """
        Execute a PowerShell script on the host.

        Transport errors propagate as pywinrm/requests exceptions so the
        caller can attribute them to its own step.

        Args:
            script: PowerShell script content

        Returns:
            CommandResult with output and status
        """
        session = self._require_session()
        start = time.time()
        response = session.run_ps(script)
        duration_ms = int((time.time() - start) * 1000)

        result = CommandResult(
            success=response.status_code == 0,
            stdout=_decode(response.std_out),
            stderr=_decode(response.std_err),
            exit_code=response.status_code,
            duration_ms=duration_ms,
        )
        logger.debug(
            "run_ps on %s: exit=%s (%d ms)", self.hostname, result.exit_code, duration_ms
        )
        return result

    def close(self) -> None:
        """Close the session."""
        if self._session is not None:
            logger.debug("Closing session to %s", self.hostname)
        self._session = None


def open_session(
    hostname: str,
    credentials: SessionCredentials,
    settings: WinRMSettings,
    session_factory: Optional[SessionFactory] = None,
) -> WinRMSession:
    """
    Open and probe a WinRM session.

    Raises:
        AdminError: CONNECTION kind if the endpoint is unreachable, refuses
            the credentials, or the probe command fails
    """
    factory = session_factory or winrm.Session
    transport = settings.ambient_transport if credentials.is_ambient else settings.transport
    endpoint = settings.endpoint(hostname)

    logger.info(
        "Connecting to %s with %s as %s", endpoint, transport, credentials.describe()
    )

    try:
        session = factory(
            target=endpoint,
            auth=credentials.auth_pair(),
            transport=transport,
            server_cert_validation="validate" if settings.verify_ssl else "ignore",
            operation_timeout_sec=settings.operation_timeout_sec,
            read_timeout_sec=settings.read_timeout_sec,
        )
        probe = session.run_cmd("hostname")
    except WINRM_ERRORS as e:
        logger.debug("Connection to %s failed: %s - %s", hostname, type(e).__name__, e)
        raise AdminError.connection(f"Could not connect to {hostname}", cause=e) from e

    if probe.status_code != 0:
        detail = _decode(probe.std_err).strip() or f"probe exited with {probe.status_code}"
        raise AdminError.connection(f"Connection probe failed on {hostname}", detail=detail)

    logger.info("Connected: %s (%s)", hostname, _decode(probe.std_out).strip())
    return WinRMSession(hostname, session, credentials, transport=transport)
