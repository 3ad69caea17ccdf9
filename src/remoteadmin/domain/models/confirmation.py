"""
Identity confirmation result model.

The system match is deliberately three-way: a target that only matched the
host's address is not proof of identity, since an address can move between
hosts.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from remoteadmin.domain.errors import AdminError, ErrorRecord
from .host_identity import HostIdentity


class SystemMatch(Enum):
    """Outcome of comparing a target identifier against a host."""

    CONFIRMED = "True"
    UNVERIFIED = "Unverified"
    MISMATCHED = "False"


class ConfirmationResult(BaseModel):
    """
    Result of an identity confirmation.

    `user_matches` is None when no expected user was requested.
    """

    system_matches: SystemMatch = Field(..., description="Tri-state system classification")
    user_matches: Optional[bool] = Field(None, description="Expected user check, None if not applicable")
    failure_reason: Optional[str] = Field(None, description="Why confirmation could not be completed")
    identity: Optional[HostIdentity] = Field(None, description="Resolved host identity")
    error: Optional[ErrorRecord] = Field(None, description="Underlying error on failure")

    model_config = ConfigDict(frozen=True)

    @property
    def succeeded(self) -> bool:
        """Whether all remote reads completed."""
        return self.error is None

    @classmethod
    def failure(cls, error: AdminError, expected_user: Optional[str] = None) -> "ConfirmationResult":
        return cls(
            system_matches=SystemMatch.MISMATCHED,
            user_matches=False if expected_user else None,
            failure_reason=error.message,
            error=error.to_record(),
        )
