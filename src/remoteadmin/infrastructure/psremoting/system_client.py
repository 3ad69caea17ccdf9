"""
WinRM System Client - Remote Windows host queries and mutations.

Implements the RemoteSystemClient interface on top of WinRMSession.
Each operation runs one PowerShell script and parses its JSON output;
failures are raised as AdminError tagged with the step that failed:
- connect:          CONNECTION
- reads:            QUERY
- DNS set/register: MUTATION
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from remoteadmin.domain.config import SessionCredentials, WinRMSettings
from remoteadmin.domain.errors import AdminError, ErrorKind
from remoteadmin.domain.models import NetworkInterfaceRef, SystemIdentity
from remoteadmin.infrastructure.psremoting import scripts
from remoteadmin.infrastructure.psremoting.connection_client import (
    WINRM_ERRORS,
    SessionFactory,
    WinRMSession,
    open_session,
)

logger = logging.getLogger(__name__)


class WinRMSystemClient:
    """
    RemoteSystemClient backed by pywinrm.

    Stateless apart from settings; every connect() returns a new session
    owned by the caller.
    """

    def __init__(
        self,
        settings: Optional[WinRMSettings] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self.settings = settings or WinRMSettings()
        self._session_factory = session_factory

    def connect(
        self, target: str, credentials: Optional[SessionCredentials] = None
    ) -> WinRMSession:
        return open_session(
            target,
            credentials or SessionCredentials.ambient(),
            self.settings,
            session_factory=self._session_factory,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_identity(self, session: WinRMSession) -> SystemIdentity:
        data = self._run_json(session, scripts.identity_script(), ErrorKind.QUERY, "get_identity")
        if not isinstance(data, dict) or not data.get("Name"):
            raise AdminError.query(
                f"Identity query on {session.hostname} returned no computer name",
                step="get_identity",
                detail=json.dumps(data),
            )
        return SystemIdentity(
            name=data["Name"],
            primary_user=data.get("UserName") or None,
            domain=data.get("Domain") or None,
        )

    def get_active_address(self, session: WinRMSession) -> str:
        data = self._run_json(
            session, scripts.active_address_script(), ErrorKind.QUERY, "get_active_address"
        )
        address = data.get("Address") if isinstance(data, dict) else None
        if not address:
            raise AdminError.query(
                f"Address query on {session.hostname} returned no address",
                step="get_active_address",
                detail=json.dumps(data),
            )
        logger.debug("Active address of %s: %s", session.hostname, address)
        return address

    def find_interface(self, session: WinRMSession, address: str) -> NetworkInterfaceRef:
        data = self._run_json(
            session, scripts.find_interface_script(address), ErrorKind.QUERY, "find_interface"
        )
        if not isinstance(data, dict) or data.get("Index") is None:
            raise AdminError.query(
                f"No adapter bound to {address} on {session.hostname}",
                step="find_interface",
                detail=json.dumps(data),
            )
        return NetworkInterfaceRef(
            index=int(data["Index"]),
            description=data.get("Description"),
            addresses=_as_list(data.get("Addresses")),
        )

    def get_dns_servers(self, session: WinRMSession, interface: NetworkInterfaceRef) -> list[str]:
        data = self._run_json(
            session,
            scripts.get_dns_servers_script(interface.index),
            ErrorKind.QUERY,
            "get_dns_servers",
        )
        return _as_list(data)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_dns_servers(
        self, session: WinRMSession, interface: NetworkInterfaceRef, addresses: Sequence[str]
    ) -> None:
        logger.info(
            "Setting DNS servers on %s adapter %d: %s",
            session.hostname,
            interface.index,
            ", ".join(addresses),
        )
        data = self._run_json(
            session,
            scripts.set_dns_servers_script(interface.index, addresses),
            ErrorKind.MUTATION,
            "set_dns_servers",
        )
        code = _return_value(data)
        if code not in scripts.SUCCESS_RETURN_CODES:
            raise AdminError.mutation(
                f"SetDNSServerSearchOrder failed on {session.hostname} (ReturnValue {code})",
                step="set_dns_servers",
                detail=scripts.describe_return_code(code),
            )
        if code == 1:
            logger.warning("%s reports a reboot is required for the DNS change", session.hostname)

    def reregister_dns(self, session: WinRMSession) -> None:
        logger.info("Re-registering DNS records for %s", session.hostname)
        self._run_json(
            session, scripts.reregister_dns_script(), ErrorKind.MUTATION, "reregister_dns"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run_json(self, session: WinRMSession, script: str, kind: ErrorKind, step: str) -> Any:
        """Execute script and parse JSON output, raising AdminError of `kind`."""
        try:
            result = session.run_ps(script)
        except WINRM_ERRORS as e:
            raise AdminError(
                kind, f"{step} failed on {session.hostname}", cause=e, step=step
            ) from e

        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.exit_code}"
            logger.warning("%s failed on %s: %s", step, session.hostname, detail)
            raise AdminError(kind, f"{step} failed on {session.hostname}", step=step, detail=detail)

        output = result.stdout.strip()
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse JSON from %s: %s", step, e)
            raise AdminError(
                kind, f"Unexpected output from {step} on {session.hostname}", cause=e, step=step
            ) from e


def _as_list(value: Any) -> list[str]:
    """ConvertTo-Json collapses single-element arrays; normalize to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return [str(value)]


def _return_value(data: Any) -> int:
    if isinstance(data, dict) and data.get("ReturnValue") is not None:
        return int(data["ReturnValue"])
    return 65
