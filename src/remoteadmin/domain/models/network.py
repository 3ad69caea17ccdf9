# pylint: disable=missing-module-docstring,line-too-long
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NetworkInterfaceRef(BaseModel):
    """
    Reference to a network adapter configuration on the remote host.

    `index` is the Win32_NetworkAdapterConfiguration Index used to address
    the adapter in DNS read/write calls.
    """

    index: int = Field(..., description="Win32_NetworkAdapterConfiguration.Index")
    description: Optional[str] = Field(None, description="Adapter description")
    addresses: List[str] = Field(default_factory=list, description="IP addresses bound to the adapter")

    model_config = ConfigDict(frozen=True)
