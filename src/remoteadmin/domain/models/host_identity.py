# pylint: disable=missing-module-docstring,line-too-long
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SystemIdentity(BaseModel):
    """
    Identity reported by the remote host itself (Win32_ComputerSystem).
    """

    name: str = Field(..., description="Computer name")
    primary_user: Optional[str] = Field(None, description="Interactively logged-on user (DOMAIN\\user)")
    domain: Optional[str] = Field(None, description="Domain or workgroup name")

    model_config = ConfigDict(frozen=True)


class HostIdentity(BaseModel):
    """
    What a target identifier resolved to for one invocation.

    Immutable once populated; discarded after the call returns.
    """

    requested_id: str = Field(..., description="Name or address the caller asked for")
    resolved_name: str = Field(..., description="Computer name reported by the host")
    resolved_address: str = Field(..., description="Active IPv4 address of the host")
    logged_on_user: Optional[str] = Field(None, description="Logged-on user, if any")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_system(cls, requested_id: str, identity: SystemIdentity, address: str) -> "HostIdentity":
        return cls(
            requested_id=requested_id,
            resolved_name=identity.name,
            resolved_address=address,
            logged_on_user=identity.primary_user,
        )
