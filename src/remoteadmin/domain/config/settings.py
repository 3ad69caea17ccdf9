"""
Settings domain model for WinRM and PowerShell execution.

Controls transport, timeouts and the local PowerShell executable.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

WinRMTransport = Literal["ntlm", "kerberos", "negotiate", "credssp", "basic"]


class WinRMSettings(BaseModel):
    """
    WinRM session settings.

    `transport` is used with supplied credentials, `ambient_transport`
    when running as the caller's own identity.
    """

    transport: WinRMTransport = Field(
        default="ntlm",
        description="pywinrm transport for explicit credentials"
    )

    ambient_transport: WinRMTransport = Field(
        default="kerberos",
        description="pywinrm transport for the caller's ambient identity"
    )

    use_ssl: bool = Field(
        default=False,
        description="Connect over HTTPS"
    )

    port: Optional[int] = Field(
        default=None,
        description="WinRM port, defaults to 5985 (HTTP) or 5986 (HTTPS)",
        ge=1,
        le=65535
    )

    verify_ssl: bool = Field(
        default=True,
        description="Validate the server certificate over HTTPS"
    )

    operation_timeout_sec: int = Field(
        default=20,
        description="WS-Management operation timeout",
        ge=1,
        le=600
    )

    read_timeout_sec: int = Field(
        default=30,
        description="HTTP read timeout, must exceed the operation timeout",
        ge=2,
        le=900
    )

    @model_validator(mode="after")
    def validate_timeouts(self) -> "WinRMSettings":
        """pywinrm rejects a read timeout that does not exceed the operation timeout."""
        if self.read_timeout_sec <= self.operation_timeout_sec:
            raise ValueError(
                "read_timeout_sec must be greater than operation_timeout_sec "
                f"({self.read_timeout_sec} <= {self.operation_timeout_sec})"
            )
        return self

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return 5986 if self.use_ssl else 5985

    def endpoint(self, hostname: str) -> str:
        return f"{self.scheme}://{hostname}:{self.effective_port}/wsman"


class PowerShellSettings(BaseModel):
    """Local PowerShell execution settings."""

    executable: str = Field(
        default="powershell",
        description="PowerShell executable (powershell or pwsh)"
    )

    timeout_sec: int = Field(
        default=60,
        description="Timeout in seconds for one local PowerShell invocation",
        ge=1,
        le=3600
    )

    json_depth: int = Field(
        default=4,
        description="ConvertTo-Json depth for stage results",
        ge=1,
        le=100
    )


class RemoteAdminSettings(BaseModel):
    """
    Application settings.

    Loaded from remoteadmin.json in the config directory; every field has
    a default so the file is optional.
    """

    winrm: WinRMSettings = Field(default_factory=WinRMSettings)
    powershell: PowerShellSettings = Field(default_factory=PowerShellSettings)
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path of a DEBUG log file"
    )
