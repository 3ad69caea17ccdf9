"""
DNS Update Workflow - Change a host's static DNS server list.

Linear sequence with a single operator gate:
1. Validate inputs (raises VALIDATION AdminError, no remote call)
2. Connect, read identity and active address
3. Operator confirmation: only exactly "Y" or "y" proceeds
4. Locate the adapter bound to the active address, read its DNS list
5. Apply the requested DNS list
6. Re-read the DNS list as a post-condition check
7. Re-register DNS

Failures up to step 5 leave the host unchanged (FAILED). Failures after
step 5 succeeded leave the new list in place (APPLIED_WITH_ERRORS); there
is no rollback.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Callable, List, Optional, Sequence

from remoteadmin.domain.config import SessionCredentials
from remoteadmin.domain.errors import AdminError, ErrorKind
from remoteadmin.domain.models import (
    DnsChangeRecord,
    DnsUpdateResult,
    DnsUpdateStatus,
    HostIdentity,
)
from remoteadmin.domain.ports import RemoteSession, RemoteSystemClient

logger = logging.getLogger(__name__)

AFFIRMATIVE_RESPONSES = ("Y", "y")

# Receives what is about to change, returns the operator's raw response
ConfirmCallback = Callable[[HostIdentity, Sequence[str]], str]


def is_affirmative(response: Optional[str]) -> bool:
    """Only an exact "Y" or "y" counts; empty or padded input does not."""
    return response in AFFIRMATIVE_RESPONSES


def validate_request(target: str, new_servers: Sequence[str]) -> List[str]:
    """
    Check inputs before any remote call.

    Returns:
        The requested servers in canonical address form

    Raises:
        AdminError: VALIDATION kind for a missing target, an empty list or
            a malformed address
    """
    if not target or not target.strip():
        raise AdminError.validation("Target identifier is required", step="validate")
    if not new_servers:
        raise AdminError.validation("At least one DNS server address is required", step="validate")

    canonical = []
    for server in new_servers:
        try:
            canonical.append(str(ipaddress.ip_address(str(server).strip())))
        except ValueError as e:
            raise AdminError(
                ErrorKind.VALIDATION,
                f"Invalid DNS server address: {server!r}",
                cause=e,
                step="validate",
            ) from e
    return canonical


def _canonical(addresses: Sequence[str]) -> List[str]:
    canonical = []
    for address in addresses:
        try:
            canonical.append(str(ipaddress.ip_address(address)))
        except ValueError:
            canonical.append(address)
    return canonical


class DnsUpdateWorkflow:
    """Confirm-then-mutate-then-verify DNS server list change."""

    def __init__(self, client: RemoteSystemClient, confirm: ConfirmCallback) -> None:
        self.client = client
        self.confirm = confirm

    def run(
        self,
        target: str,
        new_servers: Sequence[str],
        credentials: Optional[SessionCredentials] = None,
    ) -> DnsUpdateResult:
        """
        Change the DNS server list of `target`'s active adapter.

        Args:
            target: Host name or address
            new_servers: Ordered DNS server addresses to apply
            credentials: Session credentials, ambient identity by default

        Returns:
            DnsUpdateResult describing how far the workflow got

        Raises:
            AdminError: VALIDATION kind for invalid inputs
        """
        requested = validate_request(target, new_servers)
        target = target.strip()

        session: Optional[RemoteSession] = None
        try:
            try:
                session = self.client.connect(target, credentials)
                identity = self.client.get_identity(session)
                address = self.client.get_active_address(session)
            except AdminError as e:
                logger.error("Could not read current state of %s: %s", target, e)
                return DnsUpdateResult(status=DnsUpdateStatus.FAILED, error=e.to_record())

            host = HostIdentity.from_system(target, identity, address)
            record = DnsChangeRecord(target=host, requested_servers=requested)

            response = self.confirm(host, requested)
            if not is_affirmative(response):
                logger.info("DNS change on %s aborted by operator", host.resolved_name)
                return DnsUpdateResult(status=DnsUpdateStatus.ABORTED, record=record)

            return self._apply(session, record)
        finally:
            if session is not None:
                session.close()

    def _apply(self, session: RemoteSession, record: DnsChangeRecord) -> DnsUpdateResult:
        host = record.target

        try:
            record.interface = self.client.find_interface(session, host.resolved_address)
            record.original_servers = self.client.get_dns_servers(session, record.interface)
        except AdminError as e:
            return self._finish(record, DnsUpdateStatus.FAILED, e)

        logger.info(
            "%s adapter %d DNS servers: %s",
            host.resolved_name,
            record.interface.index,
            ", ".join(record.original_servers) or "(none)",
        )

        try:
            self.client.set_dns_servers(session, record.interface, record.requested_servers)
        except AdminError as e:
            return self._finish(record, DnsUpdateStatus.FAILED, e)

        # The host is changed from here on
        try:
            confirmed = self.client.get_dns_servers(session, record.interface)
        except AdminError as e:
            return self._finish(record, DnsUpdateStatus.APPLIED_WITH_ERRORS, e)

        record.confirmed_servers = confirmed
        if _canonical(confirmed) != record.requested_servers:
            drift = AdminError.mutation(
                f"DNS servers on {host.resolved_name} do not match the request after the change",
                step="verify_dns_servers",
                detail=f"requested {record.requested_servers}, found {confirmed}",
            )
            return self._finish(record, DnsUpdateStatus.APPLIED_WITH_ERRORS, drift)

        try:
            self.client.reregister_dns(session)
        except AdminError as e:
            return self._finish(record, DnsUpdateStatus.APPLIED_WITH_ERRORS, e)

        logger.info(
            "DNS servers on %s changed: %s -> %s",
            host.resolved_name,
            record.original_servers,
            record.confirmed_servers,
        )
        return DnsUpdateResult(status=DnsUpdateStatus.COMPLETED, record=record)

    def _finish(
        self, record: DnsChangeRecord, status: DnsUpdateStatus, error: AdminError
    ) -> DnsUpdateResult:
        if status == DnsUpdateStatus.APPLIED_WITH_ERRORS:
            logger.error(
                "DNS list on %s WAS changed but a later step failed: %s",
                record.target.resolved_name,
                error,
            )
        else:
            logger.error("DNS change on %s failed: %s", record.target.resolved_name, error)
        error_record = error.to_record()
        record.error = error_record
        return DnsUpdateResult(status=status, record=record, error=error_record)
