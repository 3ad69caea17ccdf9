"""
Identity Confirmer - Is this target really the intended system?

Resolves a target through the host itself (computer name, active address,
logged-on user) and classifies the match. Remote failures are returned as
a failure result, never raised.
"""

from __future__ import annotations

import logging
from typing import Optional

from remoteadmin.domain.config import SessionCredentials
from remoteadmin.domain.errors import AdminError
from remoteadmin.domain.models import ConfirmationResult, HostIdentity, SystemMatch
from remoteadmin.domain.ports import RemoteSystemClient

logger = logging.getLogger(__name__)


def classify_system(target: str, identity: HostIdentity) -> SystemMatch:
    """
    Compare a target identifier against a resolved host.

    A name match confirms the system. An address-only match is ambiguous
    since the address could belong to any host, so it stays unverified.
    Both comparisons ignore case and surrounding whitespace, as Windows
    computer names do.
    """
    wanted = target.strip().casefold()
    if wanted == identity.resolved_name.casefold():
        return SystemMatch.CONFIRMED
    if wanted == identity.resolved_address.casefold():
        return SystemMatch.UNVERIFIED
    return SystemMatch.MISMATCHED


def user_matches(expected_user: str, logged_on_user: Optional[str]) -> bool:
    """Exact match, or DOMAIN\\expected_user suffix match."""
    if not logged_on_user:
        return False
    expected = expected_user.strip().casefold()
    actual = logged_on_user.strip().casefold()
    return actual == expected or actual.endswith("\\" + expected)


class IdentityConfirmer:
    """Confirms target identity against a RemoteSystemClient."""

    def __init__(self, client: RemoteSystemClient) -> None:
        self.client = client

    def confirm(
        self,
        target: str,
        expected_user: Optional[str] = None,
        credentials: Optional[SessionCredentials] = None,
    ) -> ConfirmationResult:
        """
        Confirm that `target` is the intended system.

        Args:
            target: Host name or address
            expected_user: User expected to be logged on, if any
            credentials: Session credentials, ambient identity by default

        Returns:
            ConfirmationResult; on remote failure system_matches is
            MISMATCHED and `error` carries the cause
        """
        if not target or not target.strip():
            return ConfirmationResult.failure(
                AdminError.validation("Target identifier is required", step="validate"),
                expected_user,
            )

        session = None
        try:
            session = self.client.connect(target, credentials)
            identity = self.client.get_identity(session)
            address = self.client.get_active_address(session)
        except AdminError as e:
            logger.warning("Identity confirmation for %s failed: %s", target, e)
            return ConfirmationResult.failure(e, expected_user)
        finally:
            if session is not None:
                session.close()

        host = HostIdentity.from_system(target, identity, address)
        system_match = classify_system(target, host)
        user_match = None
        if expected_user:
            user_match = user_matches(expected_user, host.logged_on_user)

        logger.info(
            "%s resolved to %s (%s): system=%s user=%s",
            target,
            host.resolved_name,
            host.resolved_address,
            system_match.value,
            "n/a" if user_match is None else user_match,
        )

        return ConfirmationResult(
            system_matches=system_match,
            user_matches=user_match,
            identity=host,
        )
