"""
Domain models package.

Exports the identity, DNS change, pipeline and command result models.
"""

from .command import CommandResult
from .confirmation import ConfirmationResult, SystemMatch
from .dns_change import DnsChangeRecord, DnsUpdateResult, DnsUpdateStatus
from .host_identity import HostIdentity, SystemIdentity
from .network import NetworkInterfaceRef
from .pipeline_stage import PipelineStage

__all__ = [
    "CommandResult",
    "ConfirmationResult",
    "DnsChangeRecord",
    "DnsUpdateResult",
    "DnsUpdateStatus",
    "HostIdentity",
    "NetworkInterfaceRef",
    "PipelineStage",
    "SystemIdentity",
    "SystemMatch",
]
