"""
DNS change domain models.

A DnsChangeRecord exists once the target's identity is known; failures
before that point are reported on the DnsUpdateResult alone.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from remoteadmin.domain.errors import ErrorRecord
from .host_identity import HostIdentity
from .network import NetworkInterfaceRef


class DnsUpdateStatus(Enum):
    """Final state of a DNS update invocation."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"
    APPLIED_WITH_ERRORS = "applied_with_errors"


class DnsChangeRecord(BaseModel):
    """
    What was read, requested and confirmed for one DNS change.

    confirmed_servers is only populated after a successful set + re-read;
    when the set fails it stays empty and `error` carries the failure.
    """

    target: HostIdentity = Field(..., description="Host the change was aimed at")
    interface: Optional[NetworkInterfaceRef] = Field(None, description="Adapter bound to the active address")
    original_servers: List[str] = Field(default_factory=list, description="DNS servers before the change")
    requested_servers: List[str] = Field(default_factory=list, description="DNS servers requested")
    confirmed_servers: List[str] = Field(default_factory=list, description="DNS servers read back after the change")
    error: Optional[ErrorRecord] = Field(None, description="Failure during or after the mutation")


class DnsUpdateResult(BaseModel):
    """
    Outcome of DnsUpdateWorkflow.run.
    """

    status: DnsUpdateStatus = Field(..., description="Final workflow state")
    record: Optional[DnsChangeRecord] = Field(None, description="Change record once identity is known")
    error: Optional[ErrorRecord] = Field(None, description="Error that ended or degraded the workflow")

    @property
    def changed(self) -> bool:
        """Whether the host's DNS list was modified."""
        return self.status in (DnsUpdateStatus.COMPLETED, DnsUpdateStatus.APPLIED_WITH_ERRORS)

    @property
    def aborted(self) -> bool:
        return self.status == DnsUpdateStatus.ABORTED
