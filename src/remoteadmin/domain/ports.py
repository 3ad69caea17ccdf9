"""
Interfaces the application layer depends on.

Concrete implementations live in remoteadmin.infrastructure; tests supply
in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from remoteadmin.domain.config import SessionCredentials
from remoteadmin.domain.models import NetworkInterfaceRef, SystemIdentity


class _NoInput:
    """Marker for a pipeline stage evaluated without prior input."""

    def __repr__(self) -> str:
        return "NO_INPUT"

    def __bool__(self) -> bool:
        return False


NO_INPUT: Any = _NoInput()


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class RemoteSession(Protocol):
    """An open session to one host, owned by a single invocation."""

    hostname: str

    def close(self) -> None:
        """Release the session."""
        ...


class RemoteSystemClient(Protocol):
    """Query/mutate operations against a remote Windows host."""

    def connect(
        self, target: str, credentials: Optional[SessionCredentials] = None
    ) -> RemoteSession:
        """Open a session; raises a CONNECTION AdminError on failure."""
        ...

    def get_identity(self, session: RemoteSession) -> SystemIdentity:
        """Read computer name and primary user."""
        ...

    def get_active_address(self, session: RemoteSession) -> str:
        """Read the host's active IPv4 address."""
        ...

    def find_interface(self, session: RemoteSession, address: str) -> NetworkInterfaceRef:
        """Locate the adapter bound to an address."""
        ...

    def get_dns_servers(self, session: RemoteSession, interface: NetworkInterfaceRef) -> list[str]:
        """Read the adapter's DNS server search order."""
        ...

    def set_dns_servers(
        self, session: RemoteSession, interface: NetworkInterfaceRef, addresses: Sequence[str]
    ) -> None:
        """Replace the adapter's DNS server search order."""
        ...

    def reregister_dns(self, session: RemoteSession) -> None:
        """Ask the host to re-register its DNS records."""
        ...


class StageEvaluator(Protocol):
    """Evaluates one pipeline stage's text."""

    def evaluate(self, command: str, pipeline_input: Any = NO_INPUT) -> Any:
        """Evaluate `command`, feeding `pipeline_input` unless it is NO_INPUT."""
        ...
